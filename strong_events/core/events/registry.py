"""
Listener Registry - Ordered listeners per event identity.

Entries map an event identity string to the listeners registered on that
kind, in registration order. An entry is removed as soon as its list is
empty.

Thread-safe: every mutation and read holds an RLock, and readers get a
snapshot tuple, so listeners may register or unregister (including
themselves) while a dispatch is iterating.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import inspect
import logging
from threading import RLock
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .base import EventKind

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


def _accepts_emit_info(listener: Listener) -> bool:
    try:
        signature = inspect.signature(listener)
    except (TypeError, ValueError):
        return False

    # Optional parameters are never filled with EmitInfo.
    required = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if (
            param.kind
            in (
                inspect.Parameter.POSITIONAL_ONLY,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
            )
            and param.default is inspect.Parameter.empty
        ):
            required += 1
    return required >= 2


def _listener_name(listener: Listener) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)


@dataclass(frozen=True, eq=False)
class ListenerHandle:
    """
    A registered listener.

    Attributes:
        callback: The callable exactly as it was registered
        event_name: Identity of the kind it was registered on
        wants_info: Whether the callable takes EmitInfo as second argument
    """

    callback: Listener
    event_name: str
    wants_info: bool

    @classmethod
    def create(cls, callback: Listener, event_name: str) -> ListenerHandle:
        return cls(callback=callback, event_name=event_name, wants_info=_accepts_emit_info(callback))

    @property
    def name(self) -> str:
        """Human-readable name for logging/debugging."""
        return _listener_name(self.callback)

    def matches(self, listener: Listener) -> bool:
        """Same reference; bound methods compare by their function and instance."""
        if self.callback is listener:
            return True
        return inspect.ismethod(listener) and self.callback == listener

    def invoke(self, payload: Any, info: Any) -> Any:
        if self.wants_info:
            return self.callback(payload, info)
        return self.callback(payload)


class ListenerRegistry:
    """
    In-memory registry of listeners keyed by event identity.

    Usage:
        registry = ListenerRegistry()
        registry.register(OrderCreatedEvent, on_order)
        for handle in registry.listeners_for(OrderCreatedEvent):
            handle.invoke(payload, info)
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[ListenerHandle]] = {}
        self._lock = RLock()

    def register(self, kind: EventKind, listener: Listener) -> ListenerHandle:
        """
        Append a listener to the kind's entry.

        Args:
            kind: Event kind to listen on
            listener: Callable taking ``(payload)`` or ``(payload, info)``

        Returns:
            The stored handle
        """
        event_name = kind.event_name
        handle = ListenerHandle.create(listener, event_name)
        with self._lock:
            self._entries.setdefault(event_name, []).append(handle)
            total = len(self._entries[event_name])
        logger.debug(f"Registered listener {handle.name} for '{event_name}' (total: {total})")
        return handle

    def unregister(self, kind: EventKind, listener: Listener) -> bool:
        """
        Remove the first handle registered with ``listener``.

        Returns:
            True if a handle was removed, False if none matched
        """
        event_name = kind.event_name
        with self._lock:
            handles = self._entries.get(event_name)
            if not handles:
                return False

            for index, handle in enumerate(handles):
                if handle.matches(listener):
                    del handles[index]
                    break
            else:
                return False

            if not handles:
                del self._entries[event_name]

        logger.debug(f"Unregistered listener {_listener_name(listener)} from '{event_name}'")
        return True

    def register_once(self, kind: EventKind, listener: Listener) -> Listener:
        """
        Register a listener that removes itself after its first call.

        The wrapper, not ``listener``, is what gets stored; pass the returned
        wrapper to ``unregister`` to cancel it before it fires.

        Returns:
            The registered wrapper
        """
        wants_info = _accepts_emit_info(listener)
        fired = False

        def once_wrapper(payload: Any, info: Any) -> Any:
            nonlocal fired
            with self._lock:
                if fired:
                    return None
                fired = True
            try:
                if wants_info:
                    return listener(payload, info)
                return listener(payload)
            finally:
                self.unregister(kind, once_wrapper)

        once_wrapper.__qualname__ = f"once({_listener_name(listener)})"
        self.register(kind, once_wrapper)
        return once_wrapper

    def unregister_all_for(self, kind: EventKind) -> None:
        """Remove every listener registered on ``kind``."""
        with self._lock:
            removed = self._entries.pop(kind.event_name, None)
        if removed:
            logger.debug(f"Removed {len(removed)} listener(s) from '{kind.event_name}'")

    def unregister_all(self) -> None:
        """Remove every listener of every kind."""
        with self._lock:
            self._entries.clear()
        logger.debug("Removed all listeners")

    def listeners_for(self, kind: EventKind) -> tuple[ListenerHandle, ...]:
        """Snapshot of the kind's listeners in registration order."""
        with self._lock:
            return tuple(self._entries.get(kind.event_name, ()))

    def count(self, kind: EventKind | None = None) -> int:
        """Number of listeners on ``kind``, or on all kinds when None."""
        with self._lock:
            if kind is None:
                return sum(len(handles) for handles in self._entries.values())
            return len(self._entries.get(kind.event_name, ()))

    def event_names(self) -> list[str]:
        """Identities that currently have at least one listener."""
        with self._lock:
            return list(self._entries)

    def get_stats(self) -> dict[str, Any]:
        """Get registry statistics for monitoring."""
        with self._lock:
            return {
                "total_event_types": len(self._entries),
                "total_listeners": sum(len(handles) for handles in self._entries.values()),
                "listeners_by_type": {
                    event_name: len(handles) for event_name, handles in self._entries.items()
                },
            }


__all__ = [
    "Listener",
    "ListenerHandle",
    "ListenerRegistry",
]
