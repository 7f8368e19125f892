"""
EventEmitter - Dispatches payloads along the event kind hierarchy.

Responsibilities:
- Register/unregister listeners per event kind
- Walk the ancestor chain of the emitted kind (leaf → root)
- Isolate listener failures and report them to an error sink
- Honor stop_propagation() in synchronous dispatch

Dispatch modes:
- emit(): sequential, registration order within a level, levels leaf → root,
  propagation can be stopped after any level
- emit_async(): every listener of every level is collected first, then all
  run concurrently on the running event loop; stop_propagation() changes nothing

Both return True only if no listener failed. Emitting with no listeners
anywhere in the chain is not a failure.

A listener failure is an Exception. Any other BaseException (e.g. cancellation)
is not isolated and propagates to the caller;
emit_async() raises it after every collected listener has finished.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import inspect
import logging
from typing import Any, NamedTuple

from strong_events.core.config import EmitterConfig
from strong_events.core.exceptions import AsyncListenerError
from strong_events.core.tracing import TraceRecorder

from .base import BaseEvent, EventKind, ensure_event_kind, validate_payload
from .context import EmitInfo
from .hierarchy import ancestor_chain
from .registry import Listener, ListenerHandle, ListenerRegistry

logger = logging.getLogger(__name__)

ErrorSink = Callable[[EventKind, BaseException], None]


class EmitterHandlers(NamedTuple):
    """
    Bound emitter methods, for handing a subset of an emitter to other code.

    Usage:
        on, off, *_ = emitter.handlers
        emitter.handlers.emit(UserCreatedEvent, user)
    """

    on: Callable[..., Any]
    off: Callable[..., Any]
    once: Callable[..., Any]
    emit: Callable[..., bool]
    emit_async: Callable[..., Awaitable[bool]]
    remove_all_listeners: Callable[..., None]


class EventEmitter:
    """
    Strongly typed event emitter keyed by event kind.

    Features:
    - Hierarchical subscription (listening on a base kind receives subkinds)
    - Wildcard listening via BaseEvent
    - Per-listener error isolation
    - Payload validation against the kind's declared payload type
    - Optional emission tracing

    Usage:
        class UserCreatedEvent(BaseEvent[User]): ...

        emitter = EventEmitter()
        emitter.on(UserCreatedEvent, lambda user: print(user.name))
        emitter.emit(UserCreatedEvent, User(name="Alice", age=30))
        await emitter.emit_async(UserCreatedEvent, User(name="Bob", age=25))
    """

    def __init__(
        self,
        config: EmitterConfig | None = None,
        error_sink: ErrorSink | None = None,
        tracer: TraceRecorder | None = None,
    ):
        """
        Initialize EventEmitter.

        Args:
            config: Emitter configuration (defaults from environment)
            error_sink: Called once per failing listener with (event kind, error).
                Defaults to logging the failure.
            tracer: Trace recorder (defaults to one built from config)
        """
        self.config = config or EmitterConfig()
        self._registry = ListenerRegistry()
        self._error_sink = error_sink or self._log_listener_error
        self.tracer = tracer or TraceRecorder(
            enabled=self.config.trace_enabled,
            max_points=self.config.max_trace_points,
        )
        self.handlers = EmitterHandlers(
            on=self.on,
            off=self.off,
            once=self.once,
            emit=self.emit,
            emit_async=self.emit_async,
            remove_all_listeners=self.remove_all_listeners,
        )

    def on[P](self, event: type[BaseEvent[P]], listener: Callable[..., Any]) -> Listener:
        """
        Register a listener for an event kind.

        Args:
            event: Event kind class
            listener: Callable taking ``(payload)`` or ``(payload, info)``

        Returns:
            ``listener`` itself, for use with ``off``
        """
        self._registry.register(ensure_event_kind(event), listener)
        return listener

    def off[P](self, event: type[BaseEvent[P]], listener: Callable[..., Any]) -> None:
        """
        Remove a listener. Does nothing if it was never registered.

        Args:
            event: Event kind class
            listener: The exact callable passed to ``on`` (or returned by ``once``)
        """
        self._registry.unregister(ensure_event_kind(event), listener)

    def once[P](self, event: type[BaseEvent[P]], listener: Callable[..., Any]) -> Listener:
        """
        Register a listener that is removed after its first call.

        Returns:
            The registered wrapper; pass it to ``off`` to cancel
        """
        return self._registry.register_once(ensure_event_kind(event), listener)

    def listen[P](
        self, event: type[BaseEvent[P]], *, once: bool = False
    ) -> Callable[[Listener], Listener]:
        """
        Decorator form of ``on``/``once``.

        Usage:
            @emitter.listen(OrderCreatedEvent)
            def on_order(order, info):
                ...

        The decorated function is returned unchanged. With ``once=True``
        the stored wrapper is not the decorated function, so ``off`` cannot
        cancel it.
        """

        def decorator(func: Listener) -> Listener:
            if once:
                self.once(event, func)
            else:
                self.on(event, func)
            return func

        return decorator

    def remove_all_listeners[P](self, event: type[BaseEvent[P]] | None = None) -> None:
        """Remove every listener of ``event``, or of every kind when None."""
        if event is None:
            self._registry.unregister_all()
        else:
            self._registry.unregister_all_for(ensure_event_kind(event))

    def emit[P](self, event: type[BaseEvent[P]], payload: P) -> bool:
        """
        Synchronously emit a payload to the kind and its ancestors.

        Listeners at each level run in registration order; a level always
        completes before propagation is checked. Listener errors are
        reported to the error sink and never raised. A listener returning a
        coroutine fails (the coroutine is closed); other awaitables, such as
        a Task the listener scheduled itself, are left alone.

        Args:
            event: Event kind class
            payload: Event payload

        Returns:
            True if no listener raised (including when there were none)

        Raises:
            PayloadValidationError: If the payload does not match the kind's payload type
        """
        kind = ensure_event_kind(event)
        self._validate(kind, payload)

        info = EmitInfo(kind)
        invoked = 0
        failed = 0
        self.tracer.record("emit.started", event=kind.event_name, mode="sync")

        for level in ancestor_chain(kind):
            for handle in self._registry.listeners_for(level):
                invoked += 1
                try:
                    result = handle.invoke(payload, info)
                except Exception as e:
                    failed += 1
                    self._report(kind, handle, e)
                    continue

                if inspect.iscoroutine(result):
                    result.close()
                    failed += 1
                    self._report(
                        kind,
                        handle,
                        AsyncListenerError(
                            f"Listener {handle.name} returned a coroutine during emit(); "
                            f"use emit_async() for async listeners"
                        ),
                    )

            if not info.should_continue_propagation:
                self.tracer.record("emit.stopped", event=kind.event_name, level=level.event_name)
                logger.debug(f"Propagation of '{kind.event_name}' stopped at '{level.event_name}'")
                break

        return self._finish(kind, invoked, failed)

    async def emit_async[P](self, event: type[BaseEvent[P]], payload: P) -> bool:
        """
        Emit a payload to the kind and its ancestors concurrently.

        All listeners of the whole ancestor chain are collected before any
        of them runs, then run as concurrent tasks. Sync listeners are
        called inside their task; awaitables they return are awaited.
        ``stop_propagation()`` has no effect here.

        A listener that never completes keeps this call pending; no
        timeout is applied.

        Returns:
            True if every listener completed without error (True when there were none)

        Raises:
            PayloadValidationError: If the payload does not match the kind's payload type
        """
        kind = ensure_event_kind(event)
        self._validate(kind, payload)

        info = EmitInfo(kind)
        handles = [
            handle
            for level in ancestor_chain(kind)
            for handle in self._registry.listeners_for(level)
        ]
        self.tracer.record(
            "emit.started", event=kind.event_name, mode="async", listener_count=len(handles)
        )

        if not handles:
            return self._finish(kind, 0, 0)

        tasks = [self._run_listener(handle, payload, info) for handle in handles]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        failed = 0
        escaped: BaseException | None = None
        for handle, result in zip(handles, results, strict=True):
            if isinstance(result, Exception):
                failed += 1
                self._report(kind, handle, result)
            elif isinstance(result, BaseException) and escaped is None:
                escaped = result

        if escaped is not None:
            raise escaped
        return self._finish(kind, len(handles), failed)

    def listener_count[P](self, event: type[BaseEvent[P]] | None = None) -> int:
        """Number of listeners registered directly on ``event`` (all kinds when None)."""
        if event is None:
            return self._registry.count()
        return self._registry.count(ensure_event_kind(event))

    def get_stats(self) -> dict[str, Any]:
        """Get emitter statistics for monitoring."""
        return self._registry.get_stats()

    async def _run_listener(self, handle: ListenerHandle, payload: Any, info: EmitInfo) -> Any:
        result = handle.invoke(payload, info)
        if inspect.isawaitable(result):
            return await result
        return result

    def _validate(self, kind: EventKind, payload: Any) -> None:
        if self.config.validate_payloads:
            validate_payload(kind, payload)

    def _report(self, kind: EventKind, handle: ListenerHandle, error: BaseException) -> None:
        self.tracer.record(
            "listener.failed",
            event=kind.event_name,
            listener=handle.name,
            error=f"{type(error).__name__}: {error}",
        )
        try:
            self._error_sink(kind, error)
        except Exception:
            logger.exception(f"Error sink raised while reporting a failure of '{kind.event_name}'")

    def _finish(self, kind: EventKind, invoked: int, failed: int) -> bool:
        if invoked == 0:
            logger.debug(f"No listeners registered for '{kind.event_name}' or its ancestors")
        elif failed:
            logger.warning(f"Event {kind.event_name}: {failed}/{invoked} listeners failed")

        self.tracer.record(
            "emit.completed",
            event=kind.event_name,
            ok=failed == 0,
            invoked=invoked,
            failed=failed,
        )
        return failed == 0

    def _log_listener_error(self, event: EventKind, error: BaseException) -> None:
        if not self.config.log_listener_errors:
            return
        logger.error(
            f"Error occurred while emitting event {event.event_name}: {error}",
            exc_info=error,
        )


_global_emitter: EventEmitter | None = None


def get_event_emitter() -> EventEmitter:
    """
    Get the global EventEmitter instance.

    Creates a singleton instance on first call.
    Can be overridden for testing via set_event_emitter().
    """
    global _global_emitter
    if _global_emitter is None:
        _global_emitter = EventEmitter()
    return _global_emitter


def set_event_emitter(emitter: EventEmitter | None) -> None:
    """
    Set the global EventEmitter instance.

    Passing None drops the current instance; the next
    get_event_emitter() call creates a fresh one.
    """
    global _global_emitter
    _global_emitter = emitter


__all__ = [
    "EmitterHandlers",
    "ErrorSink",
    "EventEmitter",
    "get_event_emitter",
    "set_event_emitter",
]
