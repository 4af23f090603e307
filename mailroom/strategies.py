"""Delivery strategies: when and where the transport call runs."""

from __future__ import annotations

import abc
from typing import Any

import structlog

from .config import MailerConfig, RetryConfig
from .email import Email
from .errors import TransportError
from .handle import DeliveryHandle
from .models import DeliveryResult, DeliveryStatus
from .retry import with_retry
from .supervisor import TaskSupervisor
from .transports.base import Transport

logger = structlog.get_logger()


async def _deliver(transport: Transport, email: Email, config: MailerConfig) -> DeliveryResult:
    recipients = len(email.all_recipients())
    response = await transport.deliver(email, config)
    logger.info(
        "email_delivered",
        transport=transport.name,
        subject=email.subject,
        recipients=recipients,
    )
    return DeliveryResult(status=DeliveryStatus.DELIVERED, email=email, response=response)


class DeliveryStrategy(abc.ABC):
    """Decides how a prepared envelope reaches the transport."""

    @abc.abstractmethod
    async def run(self, transport: Transport, email: Email, config: MailerConfig) -> DeliveryHandle:
        """Start delivering *email* and return a handle to the outcome."""


class ImmediateStrategy(DeliveryStrategy):
    """Calls the transport in the caller's own task and waits for it.

    Transport errors propagate straight to the caller.  Suited to tests and
    to local transports where there is nothing to wait for.
    """

    async def run(self, transport: Transport, email: Email, config: MailerConfig) -> DeliveryHandle:
        result = await _deliver(transport, email, config)
        return DeliveryHandle.completed(result)


class TaskSupervisorStrategy(DeliveryStrategy):
    """Runs the transport call as a child of a :class:`TaskSupervisor`.

    Returns as soon as the child is scheduled.  A failing delivery ends only
    its own task; the caller sees the error only by awaiting the handle.
    """

    def __init__(self, supervisor: TaskSupervisor) -> None:
        self.supervisor = supervisor

    async def run(self, transport: Transport, email: Email, config: MailerConfig) -> DeliveryHandle:
        task = self.supervisor.start_child(
            _deliver(transport, email, config),
            name=f"deliver:{transport.name}",
        )
        return DeliveryHandle(task)


class _RetryingTransport(Transport):
    def __init__(self, inner: Transport, retry: RetryConfig) -> None:
        self.inner = inner
        self._retry = with_retry(
            retry,
            retryable_exceptions=(TransportError,),
            operation=f"deliver:{inner.name}",
        )

    @property
    def name(self) -> str:
        return self.inner.name

    async def deliver(self, email: Email, config: MailerConfig) -> Any:
        @self._retry
        async def _attempt() -> Any:
            return await self.inner.deliver(email, config)

        return await _attempt()


class RetryingStrategy(DeliveryStrategy):
    """Wraps another strategy so ``TransportError`` is retried with backoff.

    Only errors of type :class:`TransportError` are retried; once attempts
    are exhausted the last error is raised as usual.
    """

    def __init__(self, inner: DeliveryStrategy, retry: RetryConfig) -> None:
        self.inner = inner
        self.retry = retry

    async def run(self, transport: Transport, email: Email, config: MailerConfig) -> DeliveryHandle:
        return await self.inner.run(_RetryingTransport(transport, self.retry), email, config)
