"""
Subscription SDK wrapper.

Configures the purchases SDK with the platform's API key and exposes the
customer/entitlement queries the rest of the app needs.
"""

from typing import Any, Dict, Optional

import structlog

from src.infrastructure.sdk.interfaces import (
    CustomerInfo,
    CustomerInfoListener,
    Package,
    PurchaseResult,
    PurchasesClient
)
from src.shared.exceptions import SDKError
from src.shared.types import AdvertisingID, EntitlementID, Platform

logger = structlog.get_logger(__name__)

SDK_NAME = "revenuecat"


class RevenueCatService:
    """Owns the purchases SDK lifecycle."""

    def __init__(
        self,
        client: PurchasesClient,
        platform: Platform,
        ios_api_key: Optional[str] = None,
        android_api_key: Optional[str] = None,
        log_level: str = "debug"
    ):
        self._client = client
        self.platform = platform
        self._api_keys = {
            Platform.IOS: ios_api_key,
            Platform.ANDROID: android_api_key,
        }
        self.log_level = log_level
        self._is_initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def initialize(self) -> None:
        """Configure the SDK once; later calls are no-ops."""
        if self._is_initialized:
            logger.info("RevenueCat already initialized, skipping")
            return

        logger.info("Initializing RevenueCat", platform=self.platform.value)
        try:
            self._client.set_log_level(self.log_level)

            api_key = self._api_keys.get(self.platform)
            if api_key:
                self._client.configure(api_key)
            else:
                logger.warning("No RevenueCat API key for platform, SDK left unconfigured", platform=self.platform.value)
        except Exception as e:
            logger.error("Failed to initialize RevenueCat", error=str(e))
            raise SDKError(f"RevenueCat initialization failed: {e}", sdk=SDK_NAME) from e

        self._is_initialized = True
        logger.info("RevenueCat initialized")

    def set_adjust_id(self, adjust_id: AdvertisingID) -> None:
        """Attach the attribution identifier to the purchases profile."""
        logger.info("Setting Adjust ID on RevenueCat", adid=adjust_id)
        try:
            self._client.set_adjust_id(adjust_id)
        except Exception as e:
            logger.error("Failed to set Adjust ID", error=str(e))
            raise SDKError(f"Failed to set Adjust ID: {e}", sdk=SDK_NAME) from e

    async def get_customer_info(self) -> CustomerInfo:
        logger.info("Getting customer info")
        try:
            return await self._client.get_customer_info()
        except Exception as e:
            logger.error("Failed to get customer info", error=str(e))
            raise SDKError(f"Failed to get customer info: {e}", sdk=SDK_NAME) from e

    async def restore_purchases(self) -> CustomerInfo:
        logger.info("Restoring purchases")
        try:
            return await self._client.restore_purchases()
        except Exception as e:
            logger.error("Failed to restore purchases", error=str(e))
            raise SDKError(f"Failed to restore purchases: {e}", sdk=SDK_NAME) from e

    async def purchase_package(self, package: Package) -> PurchaseResult:
        """
        Buy an offering package.

        A purchase the user dismisses is not an error: the result is flagged
        as cancelled and carries the current customer info.
        """
        logger.info("Purchasing package", package_id=package.identifier)
        try:
            customer_info = await self._client.purchase_package(package)
        except Exception as e:
            if getattr(e, "user_cancelled", False):
                logger.info("Purchase cancelled by user", package_id=package.identifier)
                return PurchaseResult(await self.get_customer_info(), user_cancelled=True)
            logger.error("Failed to purchase package", package_id=package.identifier, error=str(e))
            raise SDKError(f"Failed to purchase package: {e}", sdk=SDK_NAME) from e

        logger.info("Package purchased", package_id=package.identifier)
        return PurchaseResult(customer_info)

    def add_customer_info_update_listener(self, listener: CustomerInfoListener) -> None:
        self._client.add_customer_info_update_listener(listener)

    def remove_customer_info_update_listener(self, listener: CustomerInfoListener) -> None:
        self._client.remove_customer_info_update_listener(listener)

    @staticmethod
    def has_active_entitlement(customer_info: CustomerInfo, entitlement_id: EntitlementID) -> bool:
        return entitlement_id in customer_info.active_entitlements

    @staticmethod
    def get_entitlement_info(customer_info: CustomerInfo, entitlement_id: EntitlementID) -> Optional[Dict[str, Any]]:
        return customer_info.active_entitlements.get(entitlement_id)

    def reset(self) -> None:
        self._is_initialized = False
        logger.info("RevenueCat service reset")
