"""
Strong Events - Strongly typed, hierarchical event emitter.

Main Features:
- Event kinds are classes, identified by type rather than by string
- Listening on a base kind receives every subkind (BaseEvent = wildcard)
- Ordered synchronous emit() with stop_propagation()
- Concurrent emit_async() on asyncio
- Listener failures isolated and reported, emission returns success as bool

Quick Start:
    >>> from strong_events import BaseEvent, EventEmitter
    >>> class OrderEvent(BaseEvent[dict]): ...
    >>> class OrderCreatedEvent(OrderEvent): ...
    >>> emitter = EventEmitter()
    >>> emitter.on(OrderEvent, lambda order: print("order", order))
    >>> emitter.emit(OrderCreatedEvent, {"order_id": "123"})

Architecture:
    emit(kind) → ancestor chain (kind → ... → BaseEvent) → listeners per level
"""

__version__ = "0.1.0"

from strong_events.core.config import EmitterConfig
from strong_events.core.events import (
    BaseEvent,
    EmitInfo,
    EmitsEvents,
    EmitterHandlers,
    EventEmitter,
    get_event_emitter,
    set_event_emitter,
)
from strong_events.core.exceptions import (
    AsyncListenerError,
    ConfigurationError,
    EventDefinitionError,
    InvalidEventKindError,
    PayloadValidationError,
    StrongEventsError,
)

__all__ = [
    "AsyncListenerError",
    "BaseEvent",
    "ConfigurationError",
    "EmitInfo",
    "EmitsEvents",
    "EmitterConfig",
    "EmitterHandlers",
    "EventDefinitionError",
    "EventEmitter",
    "InvalidEventKindError",
    "PayloadValidationError",
    "StrongEventsError",
    "__version__",
    "get_event_emitter",
    "set_event_emitter",
]
