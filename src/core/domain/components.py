"""
Component interfaces consumed by the initializer.

These abstract contracts describe what start-up needs from each SDK wrapper,
keeping the use cases independent of the concrete vendor integrations.
"""

from abc import abstractmethod
from typing import Optional, Protocol, Union, Awaitable, runtime_checkable

from src.shared.types import AdvertisingID


@runtime_checkable
class InitializableComponent(Protocol):
    """A component that can be brought up once and torn back down."""

    @abstractmethod
    def initialize(self) -> Union[None, Awaitable[None]]:
        """Initialize the component."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Clear all internal state so the component can be initialized again."""
        ...


@runtime_checkable
class ConsentComponent(InitializableComponent, Protocol):
    """A component gating tracking on a user permission prompt."""

    @property
    @abstractmethod
    def is_required(self) -> bool:
        """Whether the current platform requires the prompt at all."""
        ...

    @abstractmethod
    async def request_permission(self) -> object:
        """Prompt the user and return the resulting authorization."""
        ...


@runtime_checkable
class IdentifierComponent(InitializableComponent, Protocol):
    """A component that produces an advertising identifier asynchronously."""

    @abstractmethod
    async def fetch_identifier(self) -> Optional[AdvertisingID]:
        """Retrieve the identifier, retrying within the component's budget."""
        ...

    @abstractmethod
    def clear_identifier(self) -> None:
        """Forget a previously retrieved identifier."""
        ...
