"""Custom exceptions for Strong Events."""

from __future__ import annotations

from typing import Any


class StrongEventsError(Exception):
    """Base exception for all Strong Events errors."""


class ConfigurationError(StrongEventsError):
    """Raised when configuration is invalid."""


class EventDefinitionError(StrongEventsError):
    """Raised when an event kind is declared or used illegally."""


class InvalidEventKindError(StrongEventsError, TypeError):
    """Raised when something other than an event kind is passed as one."""


class PayloadValidationError(StrongEventsError):
    """Raised when a payload does not match the declared payload type of its kind."""

    def __init__(
        self, message: str, event_name: str | None = None, errors: list[Any] | None = None
    ) -> None:
        super().__init__(message)
        self.event_name = event_name
        self.errors = errors or []


class AsyncListenerError(StrongEventsError):
    """Reported when a listener returns an awaitable during synchronous emit."""
