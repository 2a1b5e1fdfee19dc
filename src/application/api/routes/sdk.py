"""
SDK start-up API routes.

Exposes the initialization status record and the run/reset entry points of
the start-up sequence.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import structlog

from src.application.api.dependency import get_initializer
from src.application.models import InitializationStatusResponse
from src.core.use_cases.initialization import SequentialInitializer

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/status", response_model=InitializationStatusResponse)
async def get_status(
    initializer: SequentialInitializer = Depends(get_initializer)
) -> InitializationStatusResponse:
    """Current state of the SDK start-up sequence."""
    return InitializationStatusResponse.from_status(initializer.status)


@router.post("/initialize", response_model=InitializationStatusResponse)
async def initialize(
    initializer: SequentialInitializer = Depends(get_initializer)
) -> InitializationStatusResponse:
    """
    Run the start-up sequence.

    A no-op while a run is in progress or after it completed. A failing
    step is reported through the error handler with the step name.
    """
    logger.info("SDK initialization requested")
    result = await initializer.run_all()
    return InitializationStatusResponse.from_status(result)


@router.post("/reset", response_model=InitializationStatusResponse)
async def reset(
    initializer: SequentialInitializer = Depends(get_initializer)
) -> InitializationStatusResponse:
    """
    Reset every SDK and return the idle status.

    Returns 409 while a start-up run is in progress.
    """
    logger.info("SDK reset requested")
    if not initializer.reset():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"status": "reset refused", "state": initializer.state.value}
        )
    return InitializationStatusResponse.from_status(initializer.status)
