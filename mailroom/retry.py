"""Exponential-backoff retries for transport calls, built on tenacity."""

from __future__ import annotations

from collections.abc import Callable

import structlog
import tenacity

from .config import RetryConfig

logger = structlog.get_logger()


def _log_before_sleep(operation: str) -> Callable[[tenacity.RetryCallState], None]:
    def _log(state: tenacity.RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        logger.warning(
            "delivery_retry_scheduled",
            operation=operation,
            attempt=state.attempt_number,
            sleep_seconds=state.next_action.sleep if state.next_action else None,
            error=str(error) if error else None,
        )

    return _log


def with_retry(
    config: RetryConfig,
    *,
    retryable_exceptions: tuple[type[BaseException], ...] = (Exception,),
    operation: str = "delivery",
) -> Callable:
    """Build a tenacity decorator from *config*.

    Only *retryable_exceptions* trigger another attempt.  When attempts run
    out the last exception is re-raised unchanged::

        @with_retry(config.retry, retryable_exceptions=(TransportError,), operation="deliver:SMTP")
        async def send() -> str: ...
    """
    return tenacity.retry(
        retry=tenacity.retry_if_exception_type(retryable_exceptions),
        stop=tenacity.stop_after_attempt(config.max_attempts),
        wait=tenacity.wait_exponential(
            multiplier=config.multiplier,
            min=config.initial_wait_seconds,
            max=config.max_wait_seconds,
        ),
        before_sleep=_log_before_sleep(operation),
        reraise=True,
    )
