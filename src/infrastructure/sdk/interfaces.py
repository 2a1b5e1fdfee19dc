"""
Third-party SDK client interfaces.

This module defines the contracts for the vendor SDK bindings, enabling
seamless switching between the real native bridges and the simulated clients
used in development and tests.
"""

from abc import abstractmethod
from typing import Any, Callable, Dict, Optional, Protocol
from dataclasses import dataclass, field

from src.shared.types import AdvertisingID, SDKEnvironment, TrackingAuthorization


@dataclass(frozen=True)
class AttributionConfig:
    """Settings handed to the attribution SDK on start-up."""
    app_token: str
    environment: SDKEnvironment
    att_consent_waiting_interval: int  # seconds


@dataclass
class CustomerInfo:
    """Subscription state of the current user."""
    app_user_id: str
    active_entitlements: Dict[str, Dict[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class Package:
    """An offering package shown on the paywall."""
    identifier: str
    product_id: str
    entitlement_id: Optional[str] = None


@dataclass
class PurchaseResult:
    """Outcome of a purchase; a cancelled purchase still carries fresh customer info."""
    customer_info: CustomerInfo
    user_cancelled: bool = False


class PurchaseCancelledError(Exception):
    """Raised by a purchases binding when the user dismisses the store sheet."""

    user_cancelled = True


CustomerInfoListener = Callable[[CustomerInfo], None]


class PurchasesClient(Protocol):
    """Protocol for the in-app purchase SDK binding."""

    @abstractmethod
    def set_log_level(self, level: str) -> None:
        ...

    @abstractmethod
    def configure(self, api_key: str) -> None:
        ...

    @abstractmethod
    def set_adjust_id(self, adjust_id: AdvertisingID) -> None:
        ...

    @abstractmethod
    async def get_customer_info(self) -> CustomerInfo:
        ...

    @abstractmethod
    async def purchase_package(self, package: Package) -> CustomerInfo:
        """Buy ``package``; raises PurchaseCancelledError when the user backs out."""
        ...

    @abstractmethod
    async def restore_purchases(self) -> CustomerInfo:
        ...

    @abstractmethod
    def add_customer_info_update_listener(self, listener: CustomerInfoListener) -> None:
        ...

    @abstractmethod
    def remove_customer_info_update_listener(self, listener: CustomerInfoListener) -> None:
        ...


class TrackingTransparencyClient(Protocol):
    """Protocol for the platform tracking consent API."""

    @abstractmethod
    async def get_status(self) -> TrackingAuthorization:
        ...

    @abstractmethod
    async def request_authorization(self) -> TrackingAuthorization:
        ...


class AttributionClient(Protocol):
    """Protocol for the attribution SDK binding."""

    @abstractmethod
    def init_sdk(self, config: AttributionConfig) -> None:
        ...

    @abstractmethod
    async def get_adid(self) -> Optional[AdvertisingID]:
        """Single lookup; None until the SDK has registered the device."""
        ...

    @abstractmethod
    def track_event(self, event_token: str, revenue: Optional[float] = None, currency: Optional[str] = None) -> None:
        ...


class AnalyticsClient(Protocol):
    """Protocol for the analytics SDK binding."""

    @abstractmethod
    def init(self, api_key: str) -> None:
        ...

    @abstractmethod
    def set_adid(self, adid: AdvertisingID) -> None:
        ...

    @abstractmethod
    def track_event(self, name: str, parameters: Optional[Dict[str, Any]] = None) -> None:
        ...
