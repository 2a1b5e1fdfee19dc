"""
Domain entities for SDK start-up.

These represent the objects the initializer works with: the ordered steps it
runs and the status record it keeps while running them.
"""

from typing import Optional, Dict, Any, Callable, Awaitable, Union
from enum import Enum
from dataclasses import dataclass, field

from src.shared.types import StepName


class InitializationState(str, Enum):
    """Lifecycle of an initialization sequence."""
    IDLE = "idle"
    INITIALIZING = "initializing"
    COMPLETED = "completed"
    FAILED = "failed"


StepAction = Callable[[], Union[None, Awaitable[None]]]
StepReset = Callable[[], None]


@dataclass(frozen=True)
class InitializationStep:
    """
    A named unit of start-up work owned by one component.

    ``initialize`` may be a plain function or a coroutine function. When
    ``best_effort`` is set, a failure of this step is recorded but does not
    abort the sequence.
    """
    name: StepName
    initialize: StepAction
    reset: StepReset
    best_effort: bool = False

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Step name cannot be empty")


@dataclass
class InitializationStatus:
    """Progress record of an initialization sequence."""
    steps: Dict[str, bool] = field(default_factory=dict)
    state: InitializationState = InitializationState.IDLE
    error: Optional[str] = None

    @classmethod
    def for_steps(cls, names) -> "InitializationStatus":
        """Create an idle status with every step flag false."""
        return cls(steps={name: False for name in names})

    @property
    def is_initializing(self) -> bool:
        return self.state == InitializationState.INITIALIZING

    @property
    def is_completed(self) -> bool:
        return self.state == InitializationState.COMPLETED

    def mark(self, step: str, succeeded: bool) -> None:
        self.steps[step] = succeeded

    def clear_steps(self) -> None:
        for name in self.steps:
            self.steps[name] = False

    def snapshot(self) -> "InitializationStatus":
        """Return a detached copy safe to hand to callers."""
        return InitializationStatus(steps=dict(self.steps), state=self.state, error=self.error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "is_initializing": self.is_initializing,
            "is_completed": self.is_completed,
            "steps": dict(self.steps),
            "error": self.error
        }
