"""LocalTransport: keeps delivered emails in memory instead of sending them."""

from __future__ import annotations

import webbrowser

import structlog

from ..config import MailerConfig
from ..email import Email
from ..sent_messages import SentMessageStore, get_default_store
from .base import Transport

logger = structlog.get_logger()


class LocalTransport(Transport):
    """Stores every delivered email in a :class:`SentMessageStore`.

    Typically configured in development so that nothing reaches real
    inboxes; the stored messages can be browsed through
    :func:`mailroom.api.create_sent_messages_app`.  When
    ``open_email_in_browser_url`` is set, each new message is opened at
    ``<url>/<id>``.
    """

    supports_attachments = True

    def __init__(self, store: SentMessageStore | None = None) -> None:
        self.store = store if store is not None else get_default_store()

    async def deliver(self, email: Email, config: MailerConfig) -> str:
        """Store *email* and return its sent-message id."""
        message_id = self.store.push(email)
        if config.open_email_in_browser_url:
            url = f"{config.open_email_in_browser_url.rstrip('/')}/{message_id}"
            webbrowser.open(url, new=2)
            logger.debug("sent_message_opened", url=url)
        return message_id
