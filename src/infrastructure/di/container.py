"""
Dependency Injection Container.

This module builds every SDK component exactly once at start-up and hands
them by reference to the initializer, so no SDK state lives in module-level
singletons.
"""

from typing import TypeVar, Type, Callable, Dict, Any, Optional, Tuple
from abc import ABC, abstractmethod
import inspect
from contextlib import asynccontextmanager

import structlog

from src.core.use_cases.initialization import SequentialInitializer
from src.core.use_cases.sdk_startup import create_sdk_initializer
from src.infrastructure.config import BootstrapConfig
from src.infrastructure.sdk import (
    AttributionClient,
    AnalyticsClient,
    PurchasesClient,
    TrackingTransparencyClient,
    AdjustService,
    ATTService,
    RevenueCatService,
    ScateService,
    SimulatedAnalyticsClient,
    SimulatedAttributionClient,
    SimulatedPurchasesClient,
    SimulatedTrackingClient
)

logger = structlog.get_logger(__name__)

T = TypeVar('T')


def _name(interface: Any) -> str:
    return getattr(interface, "__name__", repr(interface))


class DIContainer:
    """
    Dependency Injection Container with lifecycle management.

    Provides registration and resolution of dependencies with support for:
    - Singleton lifecycle for registered implementations and instances
    - Factory functions, built per resolve or cached as singletons
    - Interface to implementation mapping
    - Async dependency resolution
    """

    def __init__(self):
        """Initialize container."""
        self._singletons: Dict[Any, Any] = {}
        self._factories: Dict[Any, Tuple[Callable, bool]] = {}
        self._interfaces: Dict[Any, Type] = {}

    def register_singleton(self, interface: Type[T], implementation: Type[T]) -> None:
        """
        Register a singleton dependency.

        Args:
            interface: Abstract interface type
            implementation: Concrete implementation type
        """
        logger.debug("Registering singleton", interface=_name(interface), implementation=_name(implementation))
        self._interfaces[interface] = implementation

    def register_factory(self, interface: Type[T], factory: Callable[..., T], singleton: bool = False) -> None:
        """
        Register a factory function for dependency creation.

        Args:
            interface: Interface type
            factory: Factory function whose annotated parameters are injected
            singleton: Cache the first instance the factory produces
        """
        logger.debug("Registering factory", interface=_name(interface), singleton=singleton)
        self._factories[interface] = (factory, singleton)

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """Register a specific instance as singleton."""
        logger.debug("Registering instance", interface=_name(interface))
        self._singletons[interface] = instance

    def is_registered(self, interface: Any) -> bool:
        return any(
            interface in registry
            for registry in (self._singletons, self._factories, self._interfaces)
        )

    async def resolve(self, interface: Type[T]) -> T:
        """
        Resolve a dependency by interface type.

        Args:
            interface: Interface type to resolve

        Returns:
            Instance of the requested type

        Raises:
            ValueError: If dependency is not registered
        """
        if interface in self._singletons:
            return self._singletons[interface]

        if interface in self._factories:
            factory, singleton = self._factories[interface]
            instance = await self._create_with_dependencies(factory)
            if singleton:
                self._singletons[interface] = instance
            return instance

        if interface in self._interfaces:
            implementation = self._interfaces[interface]
            instance = await self._create_with_dependencies(implementation)
            self._singletons[interface] = instance
            return instance

        raise ValueError(f"Dependency {_name(interface)} is not registered")

    async def _create_with_dependencies(self, cls_or_func: Callable) -> Any:
        """Create instance with automatic dependency injection."""
        sig = inspect.signature(cls_or_func)

        kwargs = {}
        for param_name, param in sig.parameters.items():
            if param.annotation is inspect.Parameter.empty:
                continue
            if not self.is_registered(param.annotation):
                # Unregistered parameters fall back to their defaults
                if param.default is inspect.Parameter.empty:
                    logger.warning(
                        "Cannot resolve required dependency",
                        parameter=param_name,
                        type=_name(param.annotation)
                    )
                continue
            kwargs[param_name] = await self.resolve(param.annotation)

        if inspect.iscoroutinefunction(cls_or_func):
            return await cls_or_func(**kwargs)
        return cls_or_func(**kwargs)

    async def cleanup(self) -> None:
        """Reset every resolved component, then drop all instances."""
        logger.info("Cleaning up DI container")

        for instance in self._singletons.values():
            reset = getattr(instance, "reset", None)
            if callable(reset):
                try:
                    reset()
                except Exception as e:
                    logger.error("Error during cleanup", component=type(instance).__name__, error=str(e))

        self._singletons.clear()


class ServiceProvider(ABC):
    """Abstract base class for service providers."""

    @abstractmethod
    async def configure(self, container: DIContainer) -> None:
        """Configure services in the container."""
        pass


class SimulatedClientProvider(ServiceProvider):
    """Registers in-process SDK clients unless real bindings were supplied."""

    async def configure(self, container: DIContainer) -> None:
        clients = [
            (PurchasesClient, SimulatedPurchasesClient),
            (TrackingTransparencyClient, SimulatedTrackingClient),
            (AttributionClient, SimulatedAttributionClient),
            (AnalyticsClient, SimulatedAnalyticsClient),
        ]
        for interface, implementation in clients:
            if not container.is_registered(interface):
                container.register_singleton(interface, implementation)

        logger.info("SDK clients configured")


def create_revenuecat_service(config: BootstrapConfig, client: PurchasesClient) -> RevenueCatService:
    return RevenueCatService(
        client,
        platform=config.platform,
        ios_api_key=config.revenuecat_ios_api_key,
        android_api_key=config.revenuecat_android_api_key,
        log_level=config.log_level.lower()
    )


def create_att_service(config: BootstrapConfig, client: TrackingTransparencyClient) -> ATTService:
    return ATTService(client, platform=config.platform)


def create_adjust_service(config: BootstrapConfig, client: AttributionClient) -> AdjustService:
    return AdjustService(
        client,
        app_token=config.adjust_app_token,
        environment=config.environment,
        att_consent_waiting_interval=config.att_consent_waiting_interval,
        retry_config=config.adid_retry
    )


def create_scate_service(config: BootstrapConfig, client: AnalyticsClient) -> ScateService:
    return ScateService(client, api_key=config.scate_api_key)


def create_initializer(
    revenuecat: RevenueCatService,
    att: ATTService,
    adjust: AdjustService,
    scate: ScateService
) -> SequentialInitializer:
    """Wire ADID distribution and build the SDK start-up sequence."""
    adjust.add_adid_listener(revenuecat.set_adjust_id)
    adjust.add_adid_listener(scate.set_adid)
    return create_sdk_initializer(revenuecat, att, adjust, scate)


class SDKServiceProvider(ServiceProvider):
    """Service provider for the SDK wrappers and their start-up sequence."""

    async def configure(self, container: DIContainer) -> None:
        container.register_factory(RevenueCatService, create_revenuecat_service, singleton=True)
        container.register_factory(ATTService, create_att_service, singleton=True)
        container.register_factory(AdjustService, create_adjust_service, singleton=True)
        container.register_factory(ScateService, create_scate_service, singleton=True)
        container.register_factory(SequentialInitializer, create_initializer, singleton=True)

        logger.info("SDK services configured")


async def build_container(
    config: BootstrapConfig,
    clients: Optional[Dict[Any, Any]] = None
) -> DIContainer:
    """
    Build a configured container.

    Args:
        config: Validated service configuration
        clients: Client instances keyed by client protocol, replacing the simulated ones

    Returns:
        Container ready to resolve the SDK services and initializer
    """
    container = DIContainer()
    container.register_instance(BootstrapConfig, config)

    for interface, client in (clients or {}).items():
        container.register_instance(interface, client)

    providers = [
        SimulatedClientProvider(),
        SDKServiceProvider(),
    ]
    for provider in providers:
        await provider.configure(container)

    logger.info("DI container initialized")
    return container


@asynccontextmanager
async def container_scope(config: BootstrapConfig, clients: Optional[Dict[Any, Any]] = None):
    """Context manager for container lifecycle."""
    container = await build_container(config, clients)
    try:
        yield container
    finally:
        await container.cleanup()
