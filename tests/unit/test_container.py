"""
Unit tests for the dependency injection container.
"""
import pytest

from src.core.use_cases.initialization import SequentialInitializer
from src.infrastructure.di.container import DIContainer, build_container, container_scope
from src.infrastructure.sdk import (
    AdjustService,
    AttributionClient,
    RevenueCatService,
    SimulatedAttributionClient
)


class Widget:
    pass


class Gadget:
    def __init__(self, widget: Widget, label: str = "default"):
        self.widget = widget
        self.label = label


class TestDIContainer:
    """Test cases for DIContainer."""

    @pytest.mark.asyncio
    async def test_singleton_resolved_once(self):
        container = DIContainer()
        container.register_singleton(Widget, Widget)

        assert await container.resolve(Widget) is await container.resolve(Widget)

    @pytest.mark.asyncio
    async def test_factory_resolved_fresh(self):
        container = DIContainer()
        container.register_factory(Widget, Widget)

        assert await container.resolve(Widget) is not await container.resolve(Widget)

    @pytest.mark.asyncio
    async def test_dependencies_injected_and_defaults_kept(self):
        container = DIContainer()
        container.register_singleton(Widget, Widget)
        container.register_factory(Gadget, Gadget)

        gadget = await container.resolve(Gadget)

        assert gadget.widget is await container.resolve(Widget)
        assert gadget.label == "default"

    @pytest.mark.asyncio
    async def test_singleton_factory_cached(self):
        container = DIContainer()
        container.register_factory(Widget, Widget, singleton=True)

        assert await container.resolve(Widget) is await container.resolve(Widget)

    @pytest.mark.asyncio
    async def test_unregistered_dependency(self):
        with pytest.raises(ValueError, match="Widget is not registered"):
            await DIContainer().resolve(Widget)


class TestSDKContainer:
    """Test cases for the configured SDK container."""

    @pytest.mark.asyncio
    async def test_initializer_shares_service_instances(self, bootstrap_config):
        container = await build_container(bootstrap_config)

        initializer = await container.resolve(SequentialInitializer)
        await initializer.run_all()

        revenuecat = await container.resolve(RevenueCatService)
        adjust = await container.resolve(AdjustService)
        assert initializer is await container.resolve(SequentialInitializer)
        assert revenuecat.is_initialized is True
        assert adjust.adid is not None

    @pytest.mark.asyncio
    async def test_supplied_clients_replace_simulated(self, bootstrap_config):
        client = SimulatedAttributionClient(adid="from-test")
        container = await build_container(bootstrap_config, {AttributionClient: client})

        initializer = await container.resolve(SequentialInitializer)
        await initializer.run_all()

        assert client.lookups == 1
        assert (await container.resolve(AdjustService)).adid == "from-test"

    @pytest.mark.asyncio
    async def test_scope_cleanup_resets_components(self, bootstrap_config):
        async with container_scope(bootstrap_config) as container:
            initializer = await container.resolve(SequentialInitializer)
            revenuecat = await container.resolve(RevenueCatService)
            await initializer.run_all()

        assert revenuecat.is_initialized is False
        assert initializer.status.is_completed is False
