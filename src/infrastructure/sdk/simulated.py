"""
Simulated SDK clients.

In-process stand-ins for the vendor bindings. They record every call and
expose knobs for failure injection so start-up can be exercised without a
device.
"""

from typing import Any, Dict, List, Optional, Tuple

from src.infrastructure.sdk.interfaces import (
    AttributionConfig,
    CustomerInfo,
    CustomerInfoListener,
    Package,
    PurchaseCancelledError
)
from src.shared.types import AdvertisingID, TrackingAuthorization


class SimulatedPurchasesClient:
    """
    Purchases SDK stand-in.

    A purchase grants the package's entitlement and notifies the customer info
    listeners, as the store does once a transaction is verified.
    """

    def __init__(
        self,
        fail_on_configure: bool = False,
        entitlements: Optional[Dict[str, Dict[str, Any]]] = None,
        cancel_purchases: bool = False,
        fail_on_purchase: bool = False
    ):
        self.fail_on_configure = fail_on_configure
        self.entitlements = entitlements or {}
        self.cancel_purchases = cancel_purchases
        self.fail_on_purchase = fail_on_purchase
        self.purchased: List[str] = []
        self.listeners: List[CustomerInfoListener] = []
        self.log_level: Optional[str] = None
        self.configured_keys: List[str] = []
        self.adjust_ids: List[str] = []

    def set_log_level(self, level: str) -> None:
        self.log_level = level

    def configure(self, api_key: str) -> None:
        if self.fail_on_configure:
            raise RuntimeError("purchases configure rejected")
        self.configured_keys.append(api_key)

    def set_adjust_id(self, adjust_id: AdvertisingID) -> None:
        self.adjust_ids.append(adjust_id)

    async def get_customer_info(self) -> CustomerInfo:
        return CustomerInfo(app_user_id="$simulated", active_entitlements=dict(self.entitlements))

    async def purchase_package(self, package: Package) -> CustomerInfo:
        if self.cancel_purchases:
            raise PurchaseCancelledError(package.identifier)
        if self.fail_on_purchase:
            raise RuntimeError("store transaction failed")

        self.purchased.append(package.identifier)
        if package.entitlement_id:
            self.entitlements[package.entitlement_id] = {"product_identifier": package.product_id}

        info = await self.get_customer_info()
        for listener in list(self.listeners):
            listener(info)
        return info

    async def restore_purchases(self) -> CustomerInfo:
        return await self.get_customer_info()

    def add_customer_info_update_listener(self, listener: CustomerInfoListener) -> None:
        self.listeners.append(listener)

    def remove_customer_info_update_listener(self, listener: CustomerInfoListener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)


class SimulatedTrackingClient:
    """Tracking consent stand-in; answers the prompt with a fixed response."""

    def __init__(
        self,
        initial_status: TrackingAuthorization = TrackingAuthorization.NOT_DETERMINED,
        response: TrackingAuthorization = TrackingAuthorization.AUTHORIZED
    ):
        self.status = initial_status
        self.response = response
        self.prompts = 0

    async def get_status(self) -> TrackingAuthorization:
        return self.status

    async def request_authorization(self) -> TrackingAuthorization:
        self.prompts += 1
        self.status = self.response
        return self.status


class SimulatedAttributionClient:
    """
    Attribution SDK stand-in.

    ``get_adid`` returns None for the first ``empty_lookups`` calls, mimicking a
    device that has not registered yet, then returns ``adid``.
    """

    def __init__(
        self,
        adid: Optional[str] = "0f6b1a2c3d4e5f60718293a4b5c6d7e8",
        empty_lookups: int = 0,
        fail_on_init: bool = False
    ):
        self.adid = adid
        self.empty_lookups = empty_lookups
        self.fail_on_init = fail_on_init
        self.config: Optional[AttributionConfig] = None
        self.lookups = 0
        self.events: List[Tuple[str, Optional[float], Optional[str]]] = []

    def init_sdk(self, config: AttributionConfig) -> None:
        if self.fail_on_init:
            raise RuntimeError("attribution init rejected")
        self.config = config

    async def get_adid(self) -> Optional[AdvertisingID]:
        self.lookups += 1
        if self.config is None or self.lookups <= self.empty_lookups:
            return None
        return AdvertisingID(self.adid) if self.adid else None

    def track_event(self, event_token: str, revenue: Optional[float] = None, currency: Optional[str] = None) -> None:
        self.events.append((event_token, revenue, currency))


class SimulatedAnalyticsClient:
    """Analytics SDK stand-in."""

    def __init__(self, fail_on_init: bool = False):
        self.fail_on_init = fail_on_init
        self.api_key: Optional[str] = None
        self.adids: List[str] = []
        self.events: List[Tuple[str, Optional[Dict[str, Any]]]] = []

    def init(self, api_key: str) -> None:
        if self.fail_on_init:
            raise RuntimeError("analytics init rejected")
        self.api_key = api_key

    def set_adid(self, adid: AdvertisingID) -> None:
        self.adids.append(adid)

    def track_event(self, name: str, parameters: Optional[Dict[str, Any]] = None) -> None:
        self.events.append((name, parameters))
