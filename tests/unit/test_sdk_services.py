"""
Unit tests for the SDK service wrappers.
"""
import pytest

from src.infrastructure.sdk import (
    ATTService,
    AdjustService,
    CustomerInfo,
    Package,
    RevenueCatService,
    ScateService,
    SimulatedAnalyticsClient,
    SimulatedAttributionClient,
    SimulatedPurchasesClient,
    SimulatedTrackingClient
)
from src.infrastructure.resilience.retry import RetryConfig
from src.shared.exceptions import SDKError
from src.shared.types import Platform, SDKEnvironment, TrackingAuthorization


class TestRevenueCatService:
    """Test cases for RevenueCatService."""

    def test_initialize_is_idempotent(self, purchases_client):
        service = RevenueCatService(purchases_client, Platform.IOS, ios_api_key="appl_key")

        service.initialize()
        service.initialize()

        assert purchases_client.configured_keys == ["appl_key"]
        assert purchases_client.log_level == "debug"
        assert service.is_initialized is True

    def test_platform_without_key_stays_unconfigured(self, purchases_client):
        service = RevenueCatService(purchases_client, Platform.WEB, ios_api_key="appl_key")

        service.initialize()

        assert purchases_client.configured_keys == []
        assert service.is_initialized is True

    def test_configure_failure_wrapped(self):
        service = RevenueCatService(SimulatedPurchasesClient(fail_on_configure=True), Platform.IOS, ios_api_key="k")

        with pytest.raises(SDKError) as exc_info:
            service.initialize()

        assert exc_info.value.sdk == "revenuecat"
        assert service.is_initialized is False

    def test_reset_allows_reconfiguration(self, purchases_client):
        service = RevenueCatService(purchases_client, Platform.ANDROID, android_api_key="goog_key")
        service.initialize()

        service.reset()
        service.initialize()

        assert purchases_client.configured_keys == ["goog_key", "goog_key"]

    @pytest.mark.asyncio
    async def test_entitlements(self):
        client = SimulatedPurchasesClient(entitlements={"pro": {"expires": "2027-01-01"}})
        service = RevenueCatService(client, Platform.IOS, ios_api_key="k")

        info = await service.get_customer_info()

        assert service.has_active_entitlement(info, "pro") is True
        assert service.has_active_entitlement(info, "team") is False
        assert service.get_entitlement_info(info, "pro") == {"expires": "2027-01-01"}

    @pytest.mark.asyncio
    async def test_restore_purchases(self, purchases_client):
        service = RevenueCatService(purchases_client, Platform.IOS, ios_api_key="k")

        info = await service.restore_purchases()

        assert isinstance(info, CustomerInfo)

    @pytest.mark.asyncio
    async def test_purchase_grants_entitlement_and_notifies_listener(self, purchases_client):
        service = RevenueCatService(purchases_client, Platform.IOS, ios_api_key="k")
        updates = []
        service.add_customer_info_update_listener(updates.append)

        result = await service.purchase_package(Package("$rc_monthly", "pro_monthly", entitlement_id="pro"))

        assert result.user_cancelled is False
        assert service.has_active_entitlement(result.customer_info, "pro") is True
        assert purchases_client.purchased == ["$rc_monthly"]
        assert updates == [result.customer_info]

    @pytest.mark.asyncio
    async def test_cancelled_purchase_is_not_an_error(self):
        client = SimulatedPurchasesClient(cancel_purchases=True)
        service = RevenueCatService(client, Platform.IOS, ios_api_key="k")

        result = await service.purchase_package(Package("$rc_annual", "pro_annual", entitlement_id="pro"))

        assert result.user_cancelled is True
        assert result.customer_info.active_entitlements == {}
        assert client.purchased == []

    @pytest.mark.asyncio
    async def test_purchase_failure_wrapped(self):
        service = RevenueCatService(SimulatedPurchasesClient(fail_on_purchase=True), Platform.IOS, ios_api_key="k")

        with pytest.raises(SDKError) as exc_info:
            await service.purchase_package(Package("$rc_monthly", "pro_monthly"))

        assert exc_info.value.sdk == "revenuecat"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_removed_listener_not_notified(self, purchases_client):
        service = RevenueCatService(purchases_client, Platform.IOS, ios_api_key="k")
        updates = []
        service.add_customer_info_update_listener(updates.append)
        service.remove_customer_info_update_listener(updates.append)

        await service.purchase_package(Package("$rc_monthly", "pro_monthly", entitlement_id="pro"))

        assert updates == []
        assert purchases_client.listeners == []


class TestATTService:
    """Test cases for ATTService."""

    def test_required_only_on_ios(self, tracking_client):
        assert ATTService(tracking_client, Platform.IOS).is_required is True
        assert ATTService(tracking_client, Platform.ANDROID).is_required is False
        assert ATTService(tracking_client, Platform.WEB).is_required is False

    @pytest.mark.asyncio
    async def test_request_permission_prompts_once(self):
        client = SimulatedTrackingClient(response=TrackingAuthorization.DENIED)
        service = ATTService(client, Platform.IOS)

        assert await service.request_permission() == TrackingAuthorization.DENIED
        assert await service.request_permission() == TrackingAuthorization.DENIED
        assert client.prompts == 1
        assert service.is_authorized is False


class TestAdjustService:
    """Test cases for AdjustService."""

    def make_service(self, client, **kwargs):
        return AdjustService(
            client,
            app_token="token",
            environment=SDKEnvironment.PRODUCTION,
            retry_config=RetryConfig(max_attempts=2, initial_delay_ms=1, max_total_time_ms=100),
            **kwargs
        )

    def test_initialize_passes_config(self):
        client = SimulatedAttributionClient()
        service = self.make_service(client, att_consent_waiting_interval=60)

        service.initialize()
        service.initialize()

        assert client.config.environment == SDKEnvironment.PRODUCTION
        assert client.config.att_consent_waiting_interval == 60
        assert service.is_initialized is True

    def test_initialize_failure_wrapped(self):
        service = self.make_service(SimulatedAttributionClient(fail_on_init=True))

        with pytest.raises(SDKError, match="Adjust initialization failed"):
            service.initialize()

    @pytest.mark.asyncio
    async def test_get_adid_swallows_errors(self):
        class BrokenClient(SimulatedAttributionClient):
            async def get_adid(self):
                raise RuntimeError("bridge down")

        service = self.make_service(BrokenClient())

        assert await service.get_adid() is None

    @pytest.mark.asyncio
    async def test_empty_string_adid_is_not_accepted(self):
        client = SimulatedAttributionClient(adid="")
        service = self.make_service(client)
        service.initialize()

        assert await service.retrieve_adid_with_retry() is None
        assert client.lookups == 2
        assert service.adid is None

    @pytest.mark.asyncio
    async def test_listener_failure_does_not_block_others(self):
        received = []

        def broken(adid):
            raise RuntimeError("listener down")

        service = self.make_service(SimulatedAttributionClient(adid="abc"))
        service.add_adid_listener(broken)
        service.add_adid_listener(received.append)
        service.initialize()

        assert await service.fetch_identifier() == "abc"
        assert received == ["abc"]

    @pytest.mark.asyncio
    async def test_reset_and_clear_identifier(self):
        service = self.make_service(SimulatedAttributionClient(adid="abc"))
        service.initialize()
        await service.retrieve_adid_with_retry()

        service.clear_identifier()
        assert service.adid is None
        assert service.is_initialized is True

        service.reset()
        assert service.is_initialized is False

    def test_track_event_forwards_to_client(self):
        client = SimulatedAttributionClient()
        service = self.make_service(client)

        service.track_event("abc123", revenue=4.99, currency="EUR")

        assert client.events == [("abc123", 4.99, "EUR")]


class TestScateService:
    """Test cases for ScateService."""

    def test_initialize_and_set_adid(self, analytics_client):
        service = ScateService(analytics_client, api_key="GKqUc")

        service.initialize()
        service.set_adid("abc")

        assert analytics_client.api_key == "GKqUc"
        assert analytics_client.adids == ["abc"]

    def test_initialize_failure_wrapped(self):
        service = ScateService(SimulatedAnalyticsClient(fail_on_init=True), api_key="k")

        with pytest.raises(SDKError) as exc_info:
            service.initialize()

        assert exc_info.value.sdk == "scate"

    def test_track_event_failure_is_logged_only(self):
        class BrokenClient(SimulatedAnalyticsClient):
            def track_event(self, name, parameters=None):
                raise RuntimeError("queue full")

        service = ScateService(BrokenClient(), api_key="k")

        service.track_event("paywall_shown", {"variant": "b"})
