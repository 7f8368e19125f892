"""
Emission Tracing - Records what the dispatcher did, for tests and debugging.

Trace points are markers dropped by the emitter at key moments:
- emit.started: an emission began (event, mode, listener count for async)
- emit.stopped: a listener stopped propagation (sync only)
- listener.failed: a listener raised
- emit.completed: an emission finished (ok, failed count)

Disabled recorders cost one attribute check per marker.

Usage:
    >>> recorder = TraceRecorder(enabled=True)
    >>> emitter = EventEmitter(tracer=recorder)
    >>> emitter.emit(OrderCreatedEvent, payload)
    >>> assert recorder.has_point("emit.completed")
    >>> recorder.get_points("emit.*")
"""

from __future__ import annotations

from collections import defaultdict
from datetime import UTC, datetime
import logging
from typing import Any

logger = logging.getLogger(__name__)


class TracePoint:
    """
    Single trace marker.

    Attributes:
        name: Marker name (e.g., "emit.started")
        data: Context attached to the marker
        timestamp: When the marker was recorded
    """

    def __init__(self, name: str, data: dict[str, Any] | None = None):
        self.name = name
        self.data = data or {}
        self.timestamp = datetime.now(UTC)

    def __repr__(self) -> str:
        return f"TracePoint(name={self.name!r}, timestamp={self.timestamp.isoformat()}, data={self.data})"


class TraceRecorder:
    """
    Collects trace points from one or more emitters.

    Args:
        enabled: Whether to record anything
        max_points: Keep at most this many points, dropping the oldest (0 = unlimited)
    """

    def __init__(self, enabled: bool = False, max_points: int = 0):
        self.enabled = enabled
        self.max_points = max_points
        self._points: list[TracePoint] = []
        self._points_by_name: dict[str, list[TracePoint]] = defaultdict(list)

    def record(self, name: str, **data: Any) -> TracePoint | None:
        """
        Record a trace point.

        Returns:
            The TracePoint if enabled, None otherwise
        """
        if not self.enabled:
            return None

        point = TracePoint(name=name, data=data)
        self._points.append(point)
        self._points_by_name[name].append(point)

        if self.max_points and len(self._points) > self.max_points:
            dropped = self._points.pop(0)
            self._points_by_name[dropped.name].remove(dropped)
            if not self._points_by_name[dropped.name]:
                del self._points_by_name[dropped.name]

        logger.debug(f"TRACE[{name}] {data if data else ''}")
        return point

    def has_point(self, name: str) -> bool:
        """Check if a marker with this exact name was recorded."""
        return name in self._points_by_name

    def get_points(self, pattern: str | None = None) -> list[TracePoint]:
        """
        Get recorded points, optionally filtered.

        Args:
            pattern: Exact name, or a prefix ending in "*" (e.g., "emit.*")
        """
        if pattern is None:
            return self._points.copy()

        if pattern.endswith("*"):
            return [point for point in self._points if point.name.startswith(pattern[:-1])]
        return self._points_by_name.get(pattern, []).copy()

    def count_points(self, pattern: str | None = None) -> int:
        return len(self.get_points(pattern))

    def clear(self) -> None:
        self._points.clear()
        self._points_by_name.clear()

    def __repr__(self) -> str:
        return f"TraceRecorder(enabled={self.enabled}, points={len(self._points)})"


class TraceContext:
    """
    Context manager that enables and clears a recorder for a block.

    Usage:
        >>> with TraceContext(emitter.tracer) as recorder:
        ...     emitter.emit(OrderCreatedEvent, payload)
        ...     assert recorder.has_point("emit.completed")
    """

    def __init__(self, recorder: TraceRecorder, enabled: bool = True):
        self.recorder = recorder
        self.enabled = enabled
        self._old_enabled = recorder.enabled

    def __enter__(self) -> TraceRecorder:
        self.recorder.enabled = self.enabled
        self.recorder.clear()
        return self.recorder

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.recorder.enabled = self._old_enabled
        return False


__all__ = [
    "TraceContext",
    "TracePoint",
    "TraceRecorder",
]
