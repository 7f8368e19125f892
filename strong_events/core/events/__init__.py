"""
Event System - Class-based, hierarchical publish/subscribe for Strong Events.

Core Components:
- BaseEvent: Root event kind; subclass it to declare kinds
- EventEmitter: Dispatcher with sync (ordered) and async (concurrent) emission
- EmitInfo: Per-emission info with stop_propagation()
- ListenerRegistry: Ordered listeners per event identity

Design Philosophy:
- Kinds = channels (classes, never instantiated)
- Subkinds propagate to their ancestors, BaseEvent receives everything
- Listener failures are isolated and reported, never raised

Quick Start:
    from strong_events.core.events import BaseEvent, EventEmitter

    class UserCreatedEvent(BaseEvent[dict]): ...

    emitter = EventEmitter()

    @emitter.listen(UserCreatedEvent)
    def on_user(user, info):
        print(f"Received: {user}")

    emitter.emit(UserCreatedEvent, {"name": "Alice"})
    await emitter.emit_async(UserCreatedEvent, {"name": "Bob"})
"""

from .base import BaseEvent, EventKind, ensure_event_kind, validate_payload
from .context import EmitInfo
from .emitter import (
    EmitterHandlers,
    ErrorSink,
    EventEmitter,
    get_event_emitter,
    set_event_emitter,
)
from .hierarchy import ancestor_chain, is_subkind, known_kinds
from .identity import compute_hash, event_name_for
from .protocols import EmitsEvents
from .registry import Listener, ListenerHandle, ListenerRegistry

__all__ = [
    "BaseEvent",
    "EmitInfo",
    "EmitsEvents",
    "EmitterHandlers",
    "ErrorSink",
    "EventEmitter",
    "EventKind",
    "Listener",
    "ListenerHandle",
    "ListenerRegistry",
    "ancestor_chain",
    "compute_hash",
    "ensure_event_kind",
    "event_name_for",
    "get_event_emitter",
    "is_subkind",
    "known_kinds",
    "set_event_emitter",
    "validate_payload",
]
