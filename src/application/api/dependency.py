"""
FastAPI dependencies resolving services from the application container.
"""

from fastapi import HTTPException, Request, status

from src.core.use_cases.initialization import SequentialInitializer
from src.infrastructure.config import BootstrapConfig
from src.infrastructure.di.container import DIContainer


def get_container(request: Request) -> DIContainer:
    """Container built by the application lifespan."""
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service container not initialized"
        )
    return container


async def get_initializer(request: Request) -> SequentialInitializer:
    return await get_container(request).resolve(SequentialInitializer)


async def get_config(request: Request) -> BootstrapConfig:
    return await get_container(request).resolve(BootstrapConfig)
