"""RecipientReplacerTransport: redirects every message to fixed addresses."""

from __future__ import annotations

from typing import Any

import structlog

from ..address import EmailAddress
from ..config import MailerConfig
from ..email import Email
from ..errors import ConfigurationError
from .base import Transport

logger = structlog.get_logger()


def _join(addresses: list[EmailAddress]) -> str:
    return ",".join(str(address) for address in addresses)


class RecipientReplacerTransport(Transport):
    """Wraps another transport, replacing the recipients on the way through.

    Meant for staging machines that hold real addresses: ``to`` becomes
    ``config.recipient_replacements``, ``cc``/``bcc`` are cleared, and the
    original recipients are kept in the ``X-Real-To``, ``X-Real-Cc`` and
    ``X-Real-Bcc`` headers.
    """

    supports_attachments = True

    def __init__(self, inner: Transport) -> None:
        self.inner = inner

    def validate_config(self, config: MailerConfig) -> MailerConfig:
        if not config.recipient_replacements:
            raise ConfigurationError(
                "RecipientReplacerTransport requires recipient_replacements to be set"
            )
        if not self.inner.supports_attachments:
            raise ConfigurationError(
                "RecipientReplacerTransport supports only transports that support attachments"
            )
        return self.inner.validate_config(config)

    async def deliver(self, email: Email, config: MailerConfig) -> Any:
        replaced = (
            email.model_copy(
                update={
                    "to": [EmailAddress(None, address) for address in config.recipient_replacements],
                    "cc": [],
                    "bcc": [],
                }
            )
            .put_header("X-Real-To", _join(email.to))
            .put_header("X-Real-Cc", _join(email.cc))
            .put_header("X-Real-Bcc", _join(email.bcc))
        )
        logger.debug(
            "recipients_replaced",
            original_count=len(email.all_recipients()),
            replacements=config.recipient_replacements,
        )
        return await self.inner.deliver(replaced, config)
