"""Emission info passed to listeners alongside the payload."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import EventKind


class EmitInfo:
    """
    Information about the current emission.

    One instance is created per ``emit``/``emit_async`` call and shared by
    every listener of that call.

    Attributes:
        event: The kind that was emitted (not the ancestor being visited)
    """

    __slots__ = ("_continue_propagation", "_event")

    def __init__(self, event: EventKind):
        self._event = event
        self._continue_propagation = True

    @property
    def event(self) -> EventKind:
        return self._event

    @property
    def should_continue_propagation(self) -> bool:
        """Whether the next ancestor level will be visited."""
        return self._continue_propagation

    def stop_propagation(self) -> None:
        """
        Stop dispatch to parent kinds once the current level finishes.

        Only honored by ``emit()``. During ``emit_async()`` every listener
        in the ancestor chain has already been scheduled, so this is a no-op
        as far as dispatch is concerned.
        """
        self._continue_propagation = False

    def __repr__(self) -> str:
        return (
            f"EmitInfo(event={self._event.event_name!r}, "
            f"continue_propagation={self._continue_propagation})"
        )


__all__ = ["EmitInfo"]
