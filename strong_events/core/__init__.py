"""Core module for Strong Events - dispatcher, configuration and errors."""

from strong_events.core.config import EmitterConfig
from strong_events.core.exceptions import (
    AsyncListenerError,
    ConfigurationError,
    EventDefinitionError,
    InvalidEventKindError,
    PayloadValidationError,
    StrongEventsError,
)
from strong_events.core.tracing import TraceContext, TracePoint, TraceRecorder

__all__ = [
    "AsyncListenerError",
    "ConfigurationError",
    "EmitterConfig",
    "EventDefinitionError",
    "InvalidEventKindError",
    "PayloadValidationError",
    "StrongEventsError",
    "TraceContext",
    "TracePoint",
    "TraceRecorder",
]
