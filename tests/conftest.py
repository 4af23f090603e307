"""Shared test fixtures for the mailroom test suite."""

from __future__ import annotations

from typing import Any

import pytest

from mailroom.config import MailerConfig, RetryConfig
from mailroom.email import Email
from mailroom.errors import TransportError
from mailroom.sent_messages import SentMessageStore
from mailroom.transports.base import Transport


class RecordingTransport(Transport):
    """Transport that records every delivery and returns a canned response."""

    supports_attachments = True

    def __init__(self, response: Any = "ok") -> None:
        self.response = response
        self.deliveries: list[tuple[Email, MailerConfig]] = []

    async def deliver(self, email: Email, config: MailerConfig) -> Any:
        self.deliveries.append((email, config))
        return self.response


class FailingTransport(Transport):
    """Transport whose every delivery is rejected by the provider."""

    supports_attachments = True

    def __init__(self) -> None:
        self.attempts = 0

    async def deliver(self, email: Email, config: MailerConfig) -> Any:
        self.attempts += 1
        raise TransportError(
            "provider rejected the message",
            response={"status": 422, "body": "invalid"},
            params={"subject": email.subject},
        )


@pytest.fixture
def retry_config() -> RetryConfig:
    return RetryConfig(
        max_attempts=3,
        initial_wait_seconds=0.01,
        max_wait_seconds=0.1,
        multiplier=2.0,
    )


@pytest.fixture
def mailer_config() -> MailerConfig:
    return MailerConfig()


@pytest.fixture
def store() -> SentMessageStore:
    return SentMessageStore()


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def failing_transport() -> FailingTransport:
    return FailingTransport()


@pytest.fixture
def email() -> Email:
    return Email.new(
        from_=("Acme", "noreply@acme.test"),
        to="alice@example.com",
        subject="Welcome",
        text_body="Hello Alice",
    )


@pytest.fixture
def email_factory():
    """Factory to create Email instances with overrides."""

    def _make(**overrides: Any) -> Email:
        defaults: dict[str, Any] = dict(
            from_="sender@acme.test",
            to="recipient@example.com",
            subject="test",
        )
        defaults.update(overrides)
        return Email.new(**defaults)

    return _make
