"""Exception hierarchy for the mailroom library."""

from __future__ import annotations

from typing import Any


class MailroomError(Exception):
    """Base class for every error raised by mailroom."""


class FormatError(MailroomError):
    """An address value could not be resolved to a canonical ``(name, address)`` pair."""


class ConfigurationError(MailroomError):
    """Delivery configuration is missing or structurally invalid."""


class AttachmentsNotSupportedError(ConfigurationError):
    """The configured transport cannot deliver attachments."""


class ConstructionError(MailroomError):
    """An envelope invariant was violated while building the message."""


class EmptyFromAddressError(ConstructionError):
    """The envelope has no ``from`` address."""


class NilRecipientsError(ConstructionError):
    """``to``, ``cc`` and ``bcc`` are all unset."""


class NotNormalizedError(MailroomError):
    """A recipient query was made on an envelope whose addresses are not normalized."""


class TransportError(MailroomError):
    """The transport rejected or failed to process a message.

    ``response`` carries whatever the provider answered and ``params`` the
    request parameters that were sent, for diagnostics.
    """

    def __init__(
        self,
        message: str,
        *,
        response: Any = None,
        params: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.response = response
        self.params = params or {}

    def __str__(self) -> str:
        if self.response is None and not self.params:
            return self.message
        return f"{self.message} (response={self.response!r}, params={self.params!r})"


class NoDeliveriesError(MailroomError):
    """A sent message was expected but none was found."""


class DeliveriesError(MailroomError):
    """Exactly one sent message was expected but several were found."""

    def __init__(self, count: int) -> None:
        super().__init__(
            f"expected to find one sent message, got {count}. "
            "Use SentMessageStore.all() if more than one message is expected."
        )
        self.count = count
