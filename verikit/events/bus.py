"""Interfaces of the event-bus client the harness consumes.

The bus itself belongs to the platform under test; the harness only needs to
subscribe to topics and pull messages off them.
"""

from contextlib import AbstractAsyncContextManager
from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class BusMessage(Protocol):
    @property
    def topic(self) -> str: ...

    def payload(self) -> bytes:
        """Raw message value."""
        ...


@runtime_checkable
class Subscription(Protocol):
    async def next(self, timeout: float = 0.0) -> BusMessage | None:
        """Return the next available message, or ``None`` if none arrived within ``timeout`` seconds.

        ``timeout=0`` is a non-blocking poll.
        """
        ...


@runtime_checkable
class EventBus(Protocol):
    def subscribe(self, consumer_name: str, topics: Sequence[str]) -> AbstractAsyncContextManager[Subscription]:
        """Open a subscription that is positioned before the caller's next action.

        The subscription is released when the context exits.
        """
        ...
