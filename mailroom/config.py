"""Mailer configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars
(``MAILER_DELIVER_LATER_STRATEGY=immediate``, ``MAILER_RETRY_MAX_ATTEMPTS=5``...).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class DeliverLaterStrategyName(str, Enum):
    """Built-in strategies selectable from configuration."""

    TASK_SUPERVISOR = "task_supervisor"
    IMMEDIATE = "immediate"


class RetryConfig(BaseSettings):
    """Retry / backoff settings driven by Tenacity."""

    model_config = {"env_prefix": "MAILER_RETRY_"}

    max_attempts: int = Field(default=3, ge=1, description="Maximum delivery attempts per message")
    initial_wait_seconds: float = Field(
        default=1.0,
        description="Initial backoff wait in seconds",
    )
    max_wait_seconds: float = Field(
        default=30.0,
        description="Maximum backoff wait in seconds",
    )
    multiplier: float = Field(default=2.0, description="Exponential backoff multiplier")


class MailerConfig(BaseSettings):
    """Root configuration for a :class:`~mailroom.mailer.Mailer`.

    Transports read the settings they need and declare required ones via
    ``Transport.required_settings``.
    """

    model_config = {"env_prefix": "MAILER_"}

    deliver_later_strategy: DeliverLaterStrategyName | None = Field(
        default=None,
        description="Strategy used by deliver_later (defaults to task_supervisor)",
    )
    max_background_tasks: int | None = Field(
        default=None,
        gt=0,
        description="Upper bound on concurrently running background deliveries",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Provider API credential",
    )
    open_email_in_browser_url: str | None = Field(
        default=None,
        description="Preview URL prefix; LocalTransport opens <url>/<id> after each delivery",
    )
    recipient_replacements: list[str] = Field(
        default_factory=list,
        description="Addresses that replace every recipient (RecipientReplacerTransport)",
    )
    retry_enabled: bool = Field(
        default=False,
        description="Retry failed background deliveries with exponential backoff",
    )
    retry: RetryConfig = Field(default_factory=RetryConfig)
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Transport-specific parameters",
    )
