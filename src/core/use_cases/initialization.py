"""
Sequential initialization use case.

Runs a fixed, ordered list of named start-up steps once per lifecycle. The
sequence stops at the first failing step unless that step is best-effort, and
keeps an in-place status record that callers can poll while it runs.
"""

import asyncio
import inspect
from typing import List, Sequence

import structlog

from src.core.domain.entities import (
    InitializationState,
    InitializationStatus,
    InitializationStep
)
from src.shared.exceptions import ConfigurationError, StepInitializationError

logger = structlog.get_logger(__name__)


class SequentialInitializer:
    """Use case driving start-up steps through the initialization state machine."""

    def __init__(self, steps: Sequence[InitializationStep], name: str = "initializer"):
        names = [step.name for step in steps]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(
                f"Duplicate initialization steps: {', '.join(duplicates)}",
                details={"steps": names}
            )

        self.name = name
        self._steps = tuple(steps)
        self._status = InitializationStatus.for_steps(names)

    @property
    def status(self) -> InitializationStatus:
        """Snapshot of the current status."""
        return self._status.snapshot()

    @property
    def state(self) -> InitializationState:
        return self._status.state

    @property
    def steps(self) -> List[str]:
        return [step.name for step in self._steps]

    async def run_all(self) -> InitializationStatus:
        """
        Run every step in order.

        Returns:
            Status after the run, or the current status when a run is already
            in progress or has completed

        Raises:
            StepInitializationError: If a step that is not best-effort fails
        """
        if self._status.is_initializing:
            logger.info("Initialization already in progress, skipping", initializer=self.name)
            return self._status.snapshot()

        if self._status.is_completed:
            logger.info("Initialization already completed, skipping", initializer=self.name)
            return self._status.snapshot()

        status = self._status
        status.state = InitializationState.INITIALIZING
        status.error = None
        status.clear_steps()

        logger.info("Starting initialization sequence", initializer=self.name, steps=self.steps)

        for position, step in enumerate(self._steps, start=1):
            logger.info(
                "Running initialization step",
                initializer=self.name,
                step=step.name,
                position=position,
                total=len(self._steps)
            )
            try:
                await self._run_step(step)
            except asyncio.CancelledError:
                self._fail(status, f"{step.name} initialization cancelled")
                raise
            except Exception as e:
                if step.best_effort:
                    logger.warning(
                        "Best-effort step failed, continuing",
                        initializer=self.name,
                        step=step.name,
                        exception=type(e).__name__,
                        error=str(e)
                    )
                    status.mark(step.name, False)
                    continue

                failure = StepInitializationError(step.name, reason=str(e) or type(e).__name__)
                self._fail(status, failure.message)
                logger.error(
                    "Initialization sequence failed",
                    initializer=self.name,
                    step=step.name,
                    exception=type(e).__name__,
                    error=str(e)
                )
                raise failure from e

            status.mark(step.name, True)
            logger.info("Initialization step completed", initializer=self.name, step=step.name)

        status.state = InitializationState.COMPLETED
        logger.info("Initialization sequence completed", initializer=self.name, steps=status.steps)
        return status.snapshot()

    def reset(self) -> bool:
        """
        Reset every step's component, then return the status to idle.

        Refused while a run is in progress; the status and the components
        are then left untouched.

        Returns:
            True if the reset was performed
        """
        if self._status.is_initializing:
            logger.warning("Reset refused, initialization in progress", initializer=self.name)
            return False

        logger.info("Resetting initialization state", initializer=self.name)

        for step in self._steps:
            try:
                step.reset()
            except Exception as e:
                logger.error(
                    "Failed to reset step",
                    initializer=self.name,
                    step=step.name,
                    error=str(e)
                )

        self._status = InitializationStatus.for_steps(self.steps)
        logger.info("Initialization state reset", initializer=self.name)
        return True

    async def _run_step(self, step: InitializationStep) -> None:
        result = step.initialize()
        if inspect.isawaitable(result):
            await result

    @staticmethod
    def _fail(status: InitializationStatus, message: str) -> None:
        status.state = InitializationState.FAILED
        status.error = message
