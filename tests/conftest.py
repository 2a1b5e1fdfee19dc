"""
Global pytest configuration and fixtures for SDK bootstrap tests.
"""
import pytest

from src.infrastructure.config import BootstrapConfig
from src.infrastructure.resilience.retry import RetryConfig, RetryableFetcher
from src.infrastructure.sdk import (
    ATTService,
    AdjustService,
    RevenueCatService,
    ScateService,
    SimulatedAnalyticsClient,
    SimulatedAttributionClient,
    SimulatedPurchasesClient,
    SimulatedTrackingClient
)
from src.shared.types import Platform, SDKEnvironment
from tests.fakes import FakeClock


@pytest.fixture
def fake_clock() -> FakeClock:
    """Deterministic clock for backoff schedules."""
    return FakeClock()


@pytest.fixture
def make_fetcher(fake_clock):
    """Factory for fetchers driven by the fake clock."""
    def _make(max_attempts=5, max_total_time_ms=10000, initial_delay_ms=500, **kwargs):
        config = RetryConfig(
            max_attempts=max_attempts,
            max_total_time_ms=max_total_time_ms,
            initial_delay_ms=initial_delay_ms
        )
        return RetryableFetcher("test", config, clock=fake_clock, sleep=fake_clock.sleep, **kwargs)
    return _make


@pytest.fixture
def bootstrap_config() -> BootstrapConfig:
    """Valid iOS sandbox configuration."""
    return BootstrapConfig(
        adjust_app_token="x7d4cl94zgg0",
        scate_api_key="GKqUc",
        platform=Platform.IOS,
        environment=SDKEnvironment.SANDBOX,
        revenuecat_ios_api_key="appl_TestIosKey000000000",
        revenuecat_android_api_key="goog_TestAndroidKey00000",
    )


@pytest.fixture
def purchases_client() -> SimulatedPurchasesClient:
    return SimulatedPurchasesClient()


@pytest.fixture
def tracking_client() -> SimulatedTrackingClient:
    return SimulatedTrackingClient()


@pytest.fixture
def attribution_client() -> SimulatedAttributionClient:
    return SimulatedAttributionClient(adid="adid-1234")


@pytest.fixture
def analytics_client() -> SimulatedAnalyticsClient:
    return SimulatedAnalyticsClient()


@pytest.fixture
def make_services(fake_clock, purchases_client, tracking_client, attribution_client, analytics_client):
    """Build the four SDK services around the simulated clients."""
    def _make(platform=Platform.IOS, retry_config=None):
        fetcher = RetryableFetcher(
            "adjust.adid",
            retry_config or RetryConfig(),
            is_empty=lambda value: not value,
            clock=fake_clock,
            sleep=fake_clock.sleep
        )
        return (
            RevenueCatService(
                purchases_client,
                platform=platform,
                ios_api_key="appl_TestIosKey000000000",
                android_api_key="goog_TestAndroidKey00000"
            ),
            ATTService(tracking_client, platform=platform),
            AdjustService(attribution_client, app_token="x7d4cl94zgg0", fetcher=fetcher),
            ScateService(analytics_client, api_key="GKqUc"),
        )
    return _make
