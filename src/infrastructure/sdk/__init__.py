"""
Third-party SDK integrations.

Wrappers owning the lifecycle of each vendor SDK, the client protocols they
consume, and simulated clients for development.
"""

from .interfaces import (
    AttributionConfig,
    CustomerInfo,
    CustomerInfoListener,
    Package,
    PurchaseCancelledError,
    PurchaseResult,
    PurchasesClient,
    TrackingTransparencyClient,
    AttributionClient,
    AnalyticsClient
)
from .revenuecat import RevenueCatService
from .att import ATTService
from .adjust import AdjustService
from .scate import ScateService
from .simulated import (
    SimulatedPurchasesClient,
    SimulatedTrackingClient,
    SimulatedAttributionClient,
    SimulatedAnalyticsClient
)

__all__ = [
    "AttributionConfig",
    "CustomerInfo",
    "CustomerInfoListener",
    "Package",
    "PurchaseCancelledError",
    "PurchaseResult",
    "PurchasesClient",
    "TrackingTransparencyClient",
    "AttributionClient",
    "AnalyticsClient",
    "RevenueCatService",
    "ATTService",
    "AdjustService",
    "ScateService",
    "SimulatedPurchasesClient",
    "SimulatedTrackingClient",
    "SimulatedAttributionClient",
    "SimulatedAnalyticsClient",
]
