"""In-memory registry of delivered emails.

Used by :class:`~mailroom.transports.LocalTransport` in development and by
:class:`~mailroom.testing.TestTransport` in test suites.  Nothing is
persisted; the store lives as long as the process.

Listings are always **newest first**.
"""

from __future__ import annotations

import secrets
import threading
from datetime import UTC, datetime

import structlog
from pydantic import BaseModel, Field

from .email import Email
from .errors import DeliveriesError, NoDeliveriesError

logger = structlog.get_logger()

ID_BYTES = 8  # 16 hex characters


class SentMessage(BaseModel):
    """A stored email together with its identifier."""

    id: str = Field(description="16-character hex identifier assigned on push")
    email: Email = Field(description="The envelope as delivered")
    sent_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the message was stored (UTC)",
    )


class SentMessageStore:
    """Thread-safe, insertion-ordered store of sent emails.

    Every read and write goes through one lock, so a listing never shows a
    half-applied push and ids stay unique under concurrent producers.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._messages: dict[str, SentMessage] = {}

    def _new_id(self) -> str:
        message_id = secrets.token_hex(ID_BYTES)
        while message_id in self._messages:
            message_id = secrets.token_hex(ID_BYTES)
        return message_id

    def push(self, email: Email) -> str:
        """Store a copy of *email* and return its new id."""
        stored = email.model_copy(deep=True)
        with self._lock:
            message_id = self._new_id()
            self._messages[message_id] = SentMessage(id=message_id, email=stored)
        logger.debug("sent_message_stored", id=message_id, subject=email.subject)
        return message_id

    def get_message(self, message_id: str) -> SentMessage | None:
        """Return the stored entry for *message_id* (case-insensitive), or ``None``."""
        with self._lock:
            return self._messages.get(message_id.lower())

    def get(self, message_id: str) -> Email | None:
        """Return the email stored under *message_id*, or ``None``."""
        message = self.get_message(message_id)
        return message.email if message is not None else None

    def get_or_raise(self, message_id: str) -> Email:
        email = self.get(message_id)
        if email is None:
            raise NoDeliveriesError(f"no sent message with id {message_id!r}")
        return email

    def entries(self) -> list[SentMessage]:
        """Snapshot of every stored message, newest first."""
        with self._lock:
            snapshot = list(self._messages.values())
        snapshot.reverse()
        return snapshot

    def all(self) -> list[Email]:
        """Snapshot of every stored email, newest first."""
        return [message.email for message in self.entries()]

    def one(self) -> Email:
        """Return the only stored email.

        Raises :class:`NoDeliveriesError` if there is none and
        :class:`DeliveriesError` if there are several.
        """
        emails = self.all()
        if not emails:
            raise NoDeliveriesError("expected to find one sent message, but got none")
        if len(emails) > 1:
            raise DeliveriesError(len(emails))
        return emails[0]

    def reset(self) -> None:
        """Remove every stored email."""
        with self._lock:
            self._messages.clear()
        logger.debug("sent_messages_reset")

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)


_default_store: SentMessageStore | None = None
_default_store_lock = threading.Lock()


def get_default_store() -> SentMessageStore:
    """Return the process-wide store, creating it on first use."""
    global _default_store
    with _default_store_lock:
        if _default_store is None:
            _default_store = SentMessageStore()
        return _default_store
