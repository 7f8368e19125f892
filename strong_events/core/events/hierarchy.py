"""
Event Hierarchy - Parent links between event kinds.

Kinds form a single-rooted tree. Each kind records its one parent here when
its class statement runs; dispatch walks this table instead of the class MRO.

    BaseEvent                  (root, wildcard)
      └── BaseOrderEvent
            ├── OrderCreatedEvent
            └── OrderCancelledEvent

ancestor_chain(OrderCreatedEvent) yields:
    OrderCreatedEvent → BaseOrderEvent → BaseEvent
"""

from __future__ import annotations

from collections.abc import Iterator
import logging
from threading import RLock

from .identity import event_name_for

logger = logging.getLogger(__name__)

_lock = RLock()
_root: type | None = None
_parents: dict[type, type] = {}
_kinds_by_name: dict[str, list[type]] = {}


def register_kind(kind: type, parent: type | None) -> None:
    """
    Record a newly declared event kind.

    Args:
        kind: The event kind class
        parent: Its single parent kind, or None for the universal root
    """
    global _root

    event_name = event_name_for(kind)
    with _lock:
        if parent is None:
            _root = kind
        else:
            _parents[kind] = parent

        same_name = _kinds_by_name.setdefault(event_name, [])
        if same_name:
            logger.warning(
                f"Event identity collision: {kind.__module__}.{kind.__qualname__} shares "
                f"'{event_name}' with {len(same_name)} other kind(s); "
                f"they will share listeners"
            )
        same_name.append(kind)

    logger.debug(f"Declared event kind '{event_name}' (parent={getattr(parent, '__name__', None)})")


def parent_of(kind: type) -> type | None:
    """Get the parent of a kind (None for the root or an unknown kind)."""
    return _parents.get(kind)


def ancestor_chain(kind: type) -> Iterator[type]:
    """
    Walk from ``kind`` up to the root, inclusive at both ends.

    Each call returns a fresh generator. A non-root kind without a recorded
    parent ends the chain early instead of raising.
    """
    current: type | None = kind
    while current is not None:
        yield current
        if current is _root:
            return
        current = _parents.get(current)


def is_subkind(kind: type, ancestor: type) -> bool:
    """Check whether ``ancestor`` appears in the ancestor chain of ``kind``."""
    return any(level is ancestor for level in ancestor_chain(kind))


def known_kinds() -> list[type]:
    """List every declared kind, root first."""
    with _lock:
        kinds = [_root] if _root is not None else []
        kinds.extend(_parents)
        return kinds


__all__ = [
    "ancestor_chain",
    "is_subkind",
    "known_kinds",
    "parent_of",
    "register_kind",
]
