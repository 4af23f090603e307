"""Tests for mailroom.strategies and mailroom.handle."""

from __future__ import annotations

import asyncio

import pytest

from mailroom.config import MailerConfig
from mailroom.errors import TransportError
from mailroom.handle import DeliveryHandle
from mailroom.models import DeliveryResult, DeliveryStatus
from mailroom.normalizer import normalize_addresses
from mailroom.strategies import ImmediateStrategy, RetryingStrategy, TaskSupervisorStrategy
from mailroom.supervisor import TaskSupervisor


@pytest.fixture
def prepared(email):
    return normalize_addresses(email)


class TestImmediateStrategy:
    @pytest.mark.asyncio
    async def test_delivers_before_returning(self, recording_transport, prepared, mailer_config):
        handle = await ImmediateStrategy().run(recording_transport, prepared, mailer_config)

        assert handle.done()
        assert len(recording_transport.deliveries) == 1
        result = await handle
        assert result.status is DeliveryStatus.DELIVERED
        assert result.response == "ok"

    @pytest.mark.asyncio
    async def test_error_propagates_to_caller(self, failing_transport, prepared, mailer_config):
        with pytest.raises(TransportError):
            await ImmediateStrategy().run(failing_transport, prepared, mailer_config)


class TestTaskSupervisorStrategy:
    @pytest.mark.asyncio
    async def test_returns_before_delivery(self, recording_transport, prepared, mailer_config):
        supervisor = TaskSupervisor()
        strategy = TaskSupervisorStrategy(supervisor)

        handle = await strategy.run(recording_transport, prepared, mailer_config)

        assert not handle.done()
        assert recording_transport.deliveries == []
        assert (await handle).delivered
        assert len(recording_transport.deliveries) == 1

    @pytest.mark.asyncio
    async def test_task_named_after_transport(self, recording_transport, prepared, mailer_config):
        supervisor = TaskSupervisor()
        await TaskSupervisorStrategy(supervisor).run(recording_transport, prepared, mailer_config)
        [task] = list(supervisor._tasks)
        assert task.get_name() == "deliver:RecordingTransport"
        await supervisor.join()

    @pytest.mark.asyncio
    async def test_failure_counted_not_raised(self, failing_transport, prepared, mailer_config):
        supervisor = TaskSupervisor()
        await TaskSupervisorStrategy(supervisor).run(failing_transport, prepared, mailer_config)
        await supervisor.join()
        assert supervisor.failed_count == 1


class TestRetryingStrategy:
    @pytest.mark.asyncio
    async def test_retries_transport_errors(self, failing_transport, prepared, mailer_config, retry_config):
        strategy = RetryingStrategy(ImmediateStrategy(), retry_config)

        with pytest.raises(TransportError):
            await strategy.run(failing_transport, prepared, mailer_config)

        assert failing_transport.attempts == retry_config.max_attempts

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(self, recording_transport, prepared, retry_config):
        attempts = 0
        original = recording_transport.deliver

        async def flaky(email, config):
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise TransportError("temporary")
            return await original(email, config)

        recording_transport.deliver = flaky
        strategy = RetryingStrategy(ImmediateStrategy(), retry_config)

        result = await (await strategy.run(recording_transport, prepared, MailerConfig()))

        assert result.delivered
        assert attempts == 2

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self, recording_transport, prepared, mailer_config, retry_config):
        attempts = 0

        async def broken(email, config):
            nonlocal attempts
            attempts += 1
            raise KeyError("bug")

        recording_transport.deliver = broken
        strategy = RetryingStrategy(ImmediateStrategy(), retry_config)

        with pytest.raises(KeyError):
            await strategy.run(recording_transport, prepared, mailer_config)
        assert attempts == 1


class TestDeliveryHandle:
    @pytest.mark.asyncio
    async def test_completed(self, prepared):
        result = DeliveryResult(status=DeliveryStatus.SKIPPED, email=prepared)
        handle = DeliveryHandle.completed(result)
        assert handle.done()
        assert await handle is result
        assert repr(handle) == "<DeliveryHandle done>"

    @pytest.mark.asyncio
    async def test_cancelling_waiter_leaves_delivery_running(self, recording_transport, prepared, mailer_config):
        supervisor = TaskSupervisor()
        gate = asyncio.Event()
        original = recording_transport.deliver

        async def slow(email, config):
            await gate.wait()
            return await original(email, config)

        recording_transport.deliver = slow
        handle = await TaskSupervisorStrategy(supervisor).run(recording_transport, prepared, mailer_config)

        waiter = asyncio.ensure_future(handle.wait())
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        gate.set()
        await supervisor.join()
        assert (await handle).delivered
        assert supervisor.completed_count == 1
