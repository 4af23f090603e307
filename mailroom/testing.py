"""Helpers for asserting on emails in an application's test suite.

Configure the mailer with a :class:`TestTransport`; nothing is sent, and
every delivered email is recorded for the assertion helpers::

    transport = TestTransport()
    mailer = Mailer(transport)

    await mailer.deliver_now(welcome_email(user))

    assert_delivered_email(transport, welcome_email(user))
    assert_email_delivered_with(transport, subject="Welcome!")
"""

from __future__ import annotations

from typing import Any

from .config import DeliverLaterStrategyName, MailerConfig
from .email import Email
from .errors import ConfigurationError, ConstructionError, FormatError
from .normalizer import normalize_addresses, normalize_recipients, normalize_sender
from .sent_messages import SentMessageStore
from .transports.base import Transport


class TestTransport(Transport):
    """Records deliveries in its own :class:`SentMessageStore`.

    Deliveries made with ``deliver_later`` must be observable as soon as the
    call returns, so this transport forces the immediate deliver-later
    strategy and rejects any other.
    """

    __test__ = False
    supports_attachments = True

    def __init__(self, store: SentMessageStore | None = None) -> None:
        self.store = store if store is not None else SentMessageStore()

    def validate_config(self, config: MailerConfig) -> MailerConfig:
        strategy = config.deliver_later_strategy
        if strategy is None:
            return config.model_copy(
                update={"deliver_later_strategy": DeliverLaterStrategyName.IMMEDIATE}
            )
        if strategy is not DeliverLaterStrategyName.IMMEDIATE:
            raise ConfigurationError(
                "TestTransport requires the deliver_later_strategy to be 'immediate', "
                f"instead it got {strategy.value!r}. Remove deliver_later_strategy from "
                "the config or set it to 'immediate'."
            )
        return config

    async def deliver(self, email: Email, config: MailerConfig) -> str:
        return self.store.push(email)

    @property
    def deliveries(self) -> list[Email]:
        """Delivered emails, newest first."""
        return self.store.all()

    def reset(self) -> None:
        self.store.reset()


def _normalized(email: Email) -> Email:
    return email if email.is_normalized else normalize_addresses(email)


def _describe(emails: list[Email]) -> str:
    return "\n".join(f"  {email!r}" for email in emails)


def assert_delivered_email(transport: TestTransport, email: Email) -> None:
    """Fail unless *email* (after normalization) was delivered."""
    expected = _normalized(email)
    delivered = transport.deliveries
    if expected not in delivered:
        raise AssertionError(
            f"There were {len(delivered)} emails delivered, but none matched.\n"
            f"Expected:\n  {expected!r}\n"
            f"Delivered:\n{_describe(delivered)}"
        )


def refute_delivered_email(transport: TestTransport, email: Email) -> None:
    """Fail if *email* (after normalization) was delivered."""
    try:
        expected = _normalized(email)
    except (ConstructionError, FormatError):
        return
    if expected in transport.deliveries:
        raise AssertionError(f"Unexpectedly delivered a matching email:\n  {expected!r}")


def _expected_value(field: str, value: Any) -> Any:
    if field in ("from_", "from"):
        return normalize_sender(value)
    if field in ("to", "cc", "bcc"):
        return normalize_recipients(value)
    return value


def assert_email_delivered_with(transport: TestTransport, **fields: Any) -> None:
    """Fail unless some delivered email has every given field value.

    Address fields are normalized before comparing, so
    ``to="a@example.com"`` matches ``[EmailAddress(None, "a@example.com")]``.
    """
    expected = {
        ("from_" if field == "from" else field): _expected_value(field, value)
        for field, value in fields.items()
    }
    delivered = transport.deliveries
    for email in delivered:
        if all(getattr(email, field) == value for field, value in expected.items()):
            return
    raise AssertionError(
        f"There were {len(delivered)} emails delivered, but none had {expected!r}.\n"
        f"Delivered:\n{_describe(delivered)}"
    )


def assert_no_emails_delivered(transport: TestTransport) -> None:
    delivered = transport.deliveries
    if delivered:
        raise AssertionError(
            f"Expected no emails to be delivered, but {len(delivered)} were:\n{_describe(delivered)}"
        )
