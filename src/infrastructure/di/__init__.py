"""
Dependency Injection infrastructure.

This module provides dependency injection capabilities so the SDK wrappers
are constructed once at start-up and passed explicitly to their consumers.
"""

from .container import (
    DIContainer,
    ServiceProvider,
    SimulatedClientProvider,
    SDKServiceProvider,
    build_container,
    container_scope
)

__all__ = [
    "DIContainer",
    "ServiceProvider",
    "SimulatedClientProvider",
    "SDKServiceProvider",
    "build_container",
    "container_scope"
]
