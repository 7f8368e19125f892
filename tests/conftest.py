"""Shared fixtures for the Strong Events test suite."""

import pytest

from strong_events import EmitterConfig, EventEmitter, set_event_emitter
from strong_events.core.tracing import TraceRecorder


@pytest.fixture
def config():
    return EmitterConfig(validate_payloads=True, trace_enabled=False, log_listener_errors=True)


@pytest.fixture
def failures():
    """Collects (event kind, error) pairs reported by the emitter."""
    return []


@pytest.fixture
def emitter(config, failures):
    return EventEmitter(config=config, error_sink=lambda kind, error: failures.append((kind, error)))


@pytest.fixture
def recorder():
    return TraceRecorder(enabled=True)


@pytest.fixture
def traced_emitter(config, recorder):
    return EventEmitter(config=config, tracer=recorder)


@pytest.fixture(autouse=True)
def _reset_global_emitter():
    """Drop the process-wide emitter between tests."""
    set_event_emitter(None)
    yield
    set_event_emitter(None)
