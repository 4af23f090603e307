"""Mailer: normalizes, intercepts and dispatches emails to a transport."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from .config import DeliverLaterStrategyName, MailerConfig
from .email import Email
from .errors import AttachmentsNotSupportedError, ConfigurationError, NotNormalizedError
from .handle import DeliveryHandle
from .interceptor import InterceptorChain
from .models import DeliveryResult, DeliveryStatus
from .normalizer import normalize_addresses
from .strategies import (
    DeliveryStrategy,
    ImmediateStrategy,
    RetryingStrategy,
    TaskSupervisorStrategy,
)
from .supervisor import TaskSupervisor
from .transports.base import Transport

logger = structlog.get_logger()


def _coerce_config(config: MailerConfig | Mapping[str, Any] | None) -> MailerConfig:
    if isinstance(config, MailerConfig):
        return config
    try:
        return MailerConfig(**dict(config or {}))
    except ValidationError as exc:
        raise ConfigurationError(f"invalid mailer config: {exc}") from exc


class Mailer:
    """The library's entry point.

    Every delivery runs the same steps in order: address normalization,
    the interceptor chain, then the strategy.  ``deliver_now`` always calls
    the transport in the caller's task; ``deliver_later`` uses the
    configured deliver-later strategy::

        supervisor = TaskSupervisor()
        mailer = Mailer(
            LocalTransport(),
            {"deliver_later_strategy": "task_supervisor"},
            interceptors=[strip_internal_headers],
            supervisor=supervisor,
        )
        result = await mailer.deliver_now(email)
        handle = await mailer.deliver_later(email)

    The config is validated by the transport here, once, so a missing
    credential fails at construction rather than on the first send.
    """

    def __init__(
        self,
        transport: Transport,
        config: MailerConfig | Mapping[str, Any] | None = None,
        *,
        interceptors: Iterable[Any] = (),
        deliver_later_strategy: DeliveryStrategy | None = None,
        supervisor: TaskSupervisor | None = None,
    ) -> None:
        self.transport = transport
        self.config = transport.validate_config(_coerce_config(config))
        self.interceptors = InterceptorChain(interceptors)
        self._immediate = ImmediateStrategy()
        self.deliver_later_strategy = deliver_later_strategy or self._strategy_from_config(supervisor)
        logger.debug(
            "mailer_configured",
            transport=transport.name,
            interceptors=self.interceptors.names,
            deliver_later_strategy=type(self.deliver_later_strategy).__name__,
        )

    def _strategy_from_config(self, supervisor: TaskSupervisor | None) -> DeliveryStrategy:
        name = self.config.deliver_later_strategy or DeliverLaterStrategyName.TASK_SUPERVISOR
        strategy: DeliveryStrategy
        if name is DeliverLaterStrategyName.IMMEDIATE:
            strategy = self._immediate
        else:
            strategy = TaskSupervisorStrategy(
                supervisor or TaskSupervisor(max_concurrency=self.config.max_background_tasks)
            )
        if self.config.retry_enabled:
            strategy = RetryingStrategy(strategy, self.config.retry)
        return strategy

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _prepare(self, email: Email) -> Email | DeliveryResult:
        """Normalize and intercept.  Returns a final result if nothing should be sent."""
        email = normalize_addresses(email)

        if not email.all_recipients():
            logger.debug("email_skipped_no_recipients", subject=email.subject)
            return DeliveryResult(status=DeliveryStatus.SKIPPED, email=email)

        if email.attachments and not self.transport.supports_attachments:
            raise AttachmentsNotSupportedError(
                f"the email has attachments, but {self.transport.name} does not support them"
            )

        result, dropped_by = self.interceptors.run(email)
        if isinstance(result, Email):
            if not result.is_normalized:
                raise NotNormalizedError(
                    "an interceptor returned an envelope with non-normalized addresses: "
                    f"from={result.from_!r} to={result.to!r} cc={result.cc!r} bcc={result.bcc!r}"
                )
            return result
        return DeliveryResult(
            status=DeliveryStatus.INTERCEPTED,
            email=email,
            intercepted_by=dropped_by,
        )

    async def deliver_now(self, email: Email) -> DeliveryResult:
        """Deliver *email* and wait for the transport.

        Raises the transport's error if delivery fails.
        """
        prepared = self._prepare(email)
        if isinstance(prepared, DeliveryResult):
            return prepared
        return await (await self._immediate.run(self.transport, prepared, self.config))

    async def deliver_later(self, email: Email) -> DeliveryHandle:
        """Hand *email* to the deliver-later strategy and return a handle.

        Normalization, configuration and interception errors are raised
        here; transport errors only surface when the handle is awaited.
        """
        prepared = self._prepare(email)
        if isinstance(prepared, DeliveryResult):
            return DeliveryHandle.completed(prepared)
        return await self.deliver_later_strategy.run(self.transport, prepared, self.config)
