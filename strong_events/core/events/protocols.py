"""
Subscription Protocols.

Objects that let others subscribe to their events without exposing
emission implement EmitsEvents. EventEmitter satisfies it, so a service can
hand out its emitter typed as EmitsEvents.

Usage:
    class OrderService:
        def __init__(self):
            self._events = EventEmitter()

        @property
        def events(self) -> EmitsEvents:
            return self._events
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .base import BaseEvent


@runtime_checkable
class EmitsEvents(Protocol):
    """Subscription side of an emitter: on, off and once."""

    def on[P](self, event: type[BaseEvent[P]], listener: Callable[..., Any]) -> Any:
        """Register a listener for an event kind."""

    def off[P](self, event: type[BaseEvent[P]], listener: Callable[..., Any]) -> None:
        """Remove a previously registered listener."""

    def once[P](self, event: type[BaseEvent[P]], listener: Callable[..., Any]) -> Any:
        """Register a listener that fires at most once."""


__all__ = ["EmitsEvents"]
