"""Tests for EventEmitter.emit_async()."""

import asyncio
from unittest.mock import ANY, AsyncMock, Mock

import pytest

from strong_events import AsyncListenerError, BaseEvent, PayloadValidationError

from tests.kinds import BaseOrderEvent, ExpressOrderCreatedEvent, OrderCreatedEvent

ORDER = {"orderId": "123"}


class TestEmitAsync:
    @pytest.mark.asyncio
    async def test_async_listener_awaited(self, emitter):
        listener = AsyncMock()
        emitter.on(OrderCreatedEvent, listener)

        assert await emitter.emit_async(OrderCreatedEvent, ORDER) is True
        listener.assert_awaited_once()
        assert listener.await_args.args[0] is ORDER

    @pytest.mark.asyncio
    async def test_sync_listener_called(self, emitter):
        listener = Mock()
        emitter.on(OrderCreatedEvent, listener)

        assert await emitter.emit_async(OrderCreatedEvent, ORDER) is True
        listener.assert_called_once_with(ORDER, ANY)

    @pytest.mark.asyncio
    async def test_no_listeners_is_success(self, emitter):
        assert await emitter.emit_async(OrderCreatedEvent, ORDER) is True

    @pytest.mark.asyncio
    async def test_whole_chain_receives_once(self, emitter):
        leaf, mid, base, root = AsyncMock(), AsyncMock(), Mock(), AsyncMock()
        emitter.on(ExpressOrderCreatedEvent, leaf)
        emitter.on(OrderCreatedEvent, mid)
        emitter.on(BaseOrderEvent, base)
        emitter.on(BaseEvent, root)

        assert await emitter.emit_async(ExpressOrderCreatedEvent, ORDER)
        for listener in (leaf, mid, base, root):
            assert listener.call_count == 1

    @pytest.mark.asyncio
    async def test_listeners_run_concurrently(self, emitter):
        leaf_started = asyncio.Event()
        base_started = asyncio.Event()

        async def leaf_listener(order):
            leaf_started.set()
            await base_started.wait()

        async def base_listener(order):
            base_started.set()
            await leaf_started.wait()

        emitter.on(OrderCreatedEvent, leaf_listener)
        emitter.on(BaseOrderEvent, base_listener)

        result = await asyncio.wait_for(emitter.emit_async(OrderCreatedEvent, ORDER), timeout=2)
        assert result is True

    @pytest.mark.asyncio
    async def test_stop_propagation_has_no_effect(self, emitter):
        analytics = AsyncMock()

        async def fulfillment(order, info):
            info.stop_propagation()

        emitter.on(BaseOrderEvent, analytics)
        emitter.on(OrderCreatedEvent, fulfillment)

        assert await emitter.emit_async(OrderCreatedEvent, ORDER) is True
        analytics.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_isolated(self, emitter, failures):
        error = RuntimeError("async boom")
        other, sync_other = AsyncMock(), Mock()
        emitter.on(OrderCreatedEvent, AsyncMock(side_effect=error))
        emitter.on(OrderCreatedEvent, other)
        emitter.on(BaseOrderEvent, sync_other)

        assert await emitter.emit_async(OrderCreatedEvent, ORDER) is False
        other.assert_awaited_once()
        sync_other.assert_called_once()
        assert failures == [(OrderCreatedEvent, error)]

    @pytest.mark.asyncio
    async def test_sync_listener_failure_captured(self, emitter, failures):
        emitter.on(OrderCreatedEvent, Mock(side_effect=ValueError("sync boom")))
        emitter.on(OrderCreatedEvent, AsyncMock())

        assert await emitter.emit_async(OrderCreatedEvent, ORDER) is False
        assert isinstance(failures[0][1], ValueError)

    @pytest.mark.asyncio
    async def test_once_fires_once(self, emitter):
        once, regular = AsyncMock(), AsyncMock()
        emitter.once(OrderCreatedEvent, once)
        emitter.on(OrderCreatedEvent, regular)

        await emitter.emit_async(OrderCreatedEvent, ORDER)
        await emitter.emit_async(OrderCreatedEvent, ORDER)

        assert once.await_count == 1
        assert regular.await_count == 2

    @pytest.mark.asyncio
    async def test_once_across_concurrent_emissions(self, emitter):
        once = AsyncMock()
        emitter.once(OrderCreatedEvent, once)

        results = await asyncio.gather(
            emitter.emit_async(OrderCreatedEvent, ORDER),
            emitter.emit_async(OrderCreatedEvent, ORDER),
        )

        assert results == [True, True]
        assert once.await_count == 1

    @pytest.mark.asyncio
    async def test_listeners_collected_before_running(self, emitter):
        late = AsyncMock()

        async def registers_late(order):
            emitter.on(BaseOrderEvent, late)

        emitter.on(OrderCreatedEvent, registers_late)

        await emitter.emit_async(OrderCreatedEvent, ORDER)
        late.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remove_all_during_emission_uses_snapshot(self, emitter):
        base = AsyncMock()

        async def clears_everything(order):
            emitter.remove_all_listeners()

        emitter.on(OrderCreatedEvent, clears_everything)
        emitter.on(BaseOrderEvent, base)

        assert await emitter.emit_async(OrderCreatedEvent, ORDER)
        base.assert_awaited_once()
        assert emitter.listener_count() == 0

    @pytest.mark.asyncio
    async def test_invalid_payload_raises(self, emitter):
        listener = AsyncMock()
        emitter.on(OrderCreatedEvent, listener)

        with pytest.raises(PayloadValidationError):
            await emitter.emit_async(OrderCreatedEvent, {"orderId": None})
        listener.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_traced(self, traced_emitter, recorder):
        traced_emitter.on(OrderCreatedEvent, AsyncMock(side_effect=ValueError("boom")))
        traced_emitter.on(BaseOrderEvent, AsyncMock())

        assert await traced_emitter.emit_async(OrderCreatedEvent, ORDER) is False

        started = recorder.get_points("emit.started")[0]
        assert started.data["mode"] == "async"
        assert started.data["listener_count"] == 2
        assert recorder.count_points("listener.failed") == 1
        assert not recorder.has_point("emit.stopped")

    @pytest.mark.asyncio
    async def test_coercible_payload_rejected(self, emitter):
        class StockLevelEvent(BaseEvent[int]):
            pass

        listener = AsyncMock()
        emitter.on(StockLevelEvent, listener)

        with pytest.raises(PayloadValidationError):
            await emitter.emit_async(StockLevelEvent, "5")
        listener.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancellation_propagates_after_others_finish(self, emitter, failures):
        other = AsyncMock()
        emitter.on(OrderCreatedEvent, AsyncMock(side_effect=asyncio.CancelledError()))
        emitter.on(OrderCreatedEvent, AsyncMock(side_effect=ValueError("boom")))
        emitter.on(BaseOrderEvent, other)

        with pytest.raises(asyncio.CancelledError):
            await emitter.emit_async(OrderCreatedEvent, ORDER)

        other.assert_awaited_once()
        assert [type(error) for _, error in failures] == [ValueError]


class TestSyncEmitInsideLoop:
    @pytest.mark.asyncio
    async def test_scheduled_task_is_not_a_failure(self, emitter, failures):
        done = asyncio.Event()
        scheduled = []

        async def deliver(order):
            done.set()

        def schedules_delivery(order):
            task = asyncio.get_running_loop().create_task(deliver(order))
            scheduled.append(task)
            return task

        emitter.on(OrderCreatedEvent, schedules_delivery)

        assert emitter.emit(OrderCreatedEvent, ORDER) is True
        assert failures == []

        await scheduled[0]
        assert done.is_set()

    @pytest.mark.asyncio
    async def test_coroutine_is_a_failure(self, emitter, failures):
        async def deliver(order):
            pass

        emitter.on(OrderCreatedEvent, deliver)

        assert emitter.emit(OrderCreatedEvent, ORDER) is False
        assert isinstance(failures[0][1], AsyncListenerError)
