"""
Base Event - Foundation for class-based event kinds.

Core Concepts:
- Event kind: a subclass of BaseEvent, declared once with a class statement
- Payload type: the type argument given to BaseEvent[...]
- Hierarchy: a kind's single event-kind base is its parent; BaseEvent is the root

Design Principles:
- Kinds are channels, not messages (they are never instantiated)
- Kinds are immutable after declaration
- Payload types are checked at the emit boundary via pydantic

Example:
    class UserData(TypedDict):
        name: str
        age: int

    class UserEvent(BaseEvent[UserData]): ...
    class UserCreatedEvent(UserEvent): ...

    UserCreatedEvent.event_name   # "UserCreatedEvent(....)"
    UserCreatedEvent.parent       # UserEvent
    UserCreatedEvent.payload_type # UserData
"""

from __future__ import annotations

from functools import cache
import types
from typing import Any, TypeVar, get_args, get_origin, is_typeddict

from pydantic import PydanticSchemaGenerationError, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from strong_events.core.exceptions import (
    EventDefinitionError,
    InvalidEventKindError,
    PayloadValidationError,
)

from .hierarchy import ancestor_chain, parent_of, register_kind
from .identity import event_name_for


class EventKind(type):
    """Metaclass of event kinds; exposes identity and hierarchy on the class itself."""

    @property
    def event_name(cls) -> str:
        """Unique identity string, e.g. ``OrderCreatedEvent(6f1a)``."""
        return event_name_for(cls)

    @property
    def parent(cls) -> EventKind | None:
        """Parent kind, or None for the root."""
        return parent_of(cls)

    @property
    def payload_type(cls) -> Any:
        """Declared payload type (``Any`` when the kind does not declare one)."""
        return cls._payload_type

    def ancestors(cls) -> list[EventKind]:
        """The kind followed by every ancestor up to the root."""
        return list(ancestor_chain(cls))

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        raise EventDefinitionError(
            f"{cls.__name__} is an event kind and cannot be instantiated; "
            f"emit a payload with emitter.emit({cls.__name__}, payload)"
        )

    def __repr__(cls) -> str:
        return f"<event {event_name_for(cls)}>"


class BaseEvent[PayloadT](metaclass=EventKind):
    """
    Root of every event kind hierarchy.

    Listening on BaseEvent itself receives every emission (wildcard).

    Subclasses declare their payload type with a type argument and may
    extend exactly one other event kind:

        class BaseOrderEvent(BaseEvent[OrderData]): ...
        class OrderCreatedEvent(BaseOrderEvent): ...
    """

    _payload_type: Any = Any

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        parents = [base for base in cls.__bases__ if isinstance(base, EventKind)]
        if len(parents) != 1:
            names = ", ".join(base.__name__ for base in parents)
            raise EventDefinitionError(
                f"Event kind {cls.__name__} must extend exactly one event kind, got: {names}"
            )

        declared = _declared_payload_type(cls)
        if declared is not None:
            cls._payload_type = declared

        register_kind(cls, parents[0])


register_kind(BaseEvent, None)


def _declared_payload_type(cls: type) -> Any | None:
    for base in types.get_original_bases(cls):
        origin = get_origin(base)
        if not isinstance(origin, EventKind):
            continue
        args = get_args(base)
        if args and not isinstance(args[0], TypeVar):
            return args[0]
    return None


def ensure_event_kind(obj: Any) -> EventKind:
    """
    Return ``obj`` if it is an event kind.

    Raises:
        InvalidEventKindError: For anything else (including parameterized
            aliases such as ``BaseEvent[int]``)
    """
    if not isinstance(obj, EventKind):
        raise InvalidEventKindError(
            f"Expected an event kind (subclass of BaseEvent), got {obj!r}"
        )
    return obj


@cache
def _adapter_for(payload_type: Any) -> TypeAdapter | None:
    try:
        return TypeAdapter(payload_type)
    except PydanticSchemaGenerationError:
        return None


def _requires_instance(payload_type: Any) -> bool:
    # User-defined classes (models, dataclasses, plain classes) must be
    # emitted as instances; builtins and typing forms are left to pydantic.
    return (
        isinstance(payload_type, type)
        and get_origin(payload_type) is None
        and payload_type.__module__ != "builtins"
        and not is_typeddict(payload_type)
        and not getattr(payload_type, "_is_protocol", False)
    )


def _mismatch(kind: EventKind, payload_type: type, payload: Any) -> PayloadValidationError:
    return PayloadValidationError(
        f"Payload for {kind.event_name} must be {payload_type.__name__}, "
        f"got {type(payload).__name__}",
        event_name=kind.event_name,
    )


def validate_payload(kind: EventKind, payload: Any) -> None:
    """
    Check ``payload`` against the kind's declared payload type.

    The payload itself is not replaced: handlers receive exactly what was
    emitted, so nothing is coerced. Pydantic validates in strict mode
    (``"5"`` is not an ``int``), and payloads declared as a user-defined
    class must be instances of it (a dict is not a ``User`` model). Kinds
    without a declared type accept anything.

    Raises:
        PayloadValidationError: If the payload does not match
    """
    payload_type = kind.payload_type
    if payload_type is Any:
        return

    if _requires_instance(payload_type) and not isinstance(payload, payload_type):
        raise _mismatch(kind, payload_type, payload)

    adapter = _adapter_for(payload_type)
    if adapter is None:
        return

    try:
        adapter.validate_python(payload, strict=True)
    except PydanticValidationError as e:
        raise PayloadValidationError(
            f"Invalid payload for {kind.event_name}: {e.error_count()} error(s)",
            event_name=kind.event_name,
            errors=e.errors(),
        ) from e


__all__ = [
    "BaseEvent",
    "EventKind",
    "ensure_event_kind",
    "validate_payload",
]
