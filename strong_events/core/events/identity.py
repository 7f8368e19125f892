"""
Event Identity - Stable names for event kinds.

Every event kind is identified by its declared class name plus a short
checksum of that name, e.g. ``OrderCreatedEvent(6f1a)``. The checksum is
four hex digits at most, so two different names can still produce the same
identity; this is an accepted limitation and is reported (not resolved) by
the hierarchy when it happens.

Identities are computed once per kind and kept for the life of the process.
"""

from __future__ import annotations

from functools import cache

_INT32 = 1 << 32
_INT32_MAX = (1 << 31) - 1
_HASH_DIGITS = 4


def _to_int32(value: int) -> int:
    value %= _INT32
    return value - _INT32 if value > _INT32_MAX else value


def compute_hash(name: str) -> str:
    """
    Compute the short checksum used to disambiguate event identities.

    Rolling ``h * 31 + c`` over the UTF-16 code units of ``name``, wrapped
    to a signed 32-bit integer at every step, then ``abs`` rendered in
    base 16 and truncated to four digits.

    Args:
        name: Declared name of the event kind (may be empty)

    Returns:
        One to four lowercase hex digits
    """
    encoded = name.encode("utf-16-le", errors="surrogatepass")
    value = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        value = _to_int32((value << 5) - value + unit)
    return format(abs(value), "x")[:_HASH_DIGITS]


def format_event_name(name: str) -> str:
    """Build the identity string ``"<name>(<hash>)"`` for a declared name."""
    return f"{name}({compute_hash(name)})"


@cache
def event_name_for(kind: type) -> str:
    """
    Get the identity string of an event kind.

    Memoized per kind object; concurrent first calls compute the same value,
    so the cache needs no extra locking.
    """
    return format_event_name(kind.__name__)


__all__ = [
    "compute_hash",
    "event_name_for",
    "format_event_name",
]
