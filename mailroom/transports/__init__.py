"""Built-in transports."""

from .base import Transport
from .local import LocalTransport
from .recipient_replacer import RecipientReplacerTransport

__all__ = ["LocalTransport", "RecipientReplacerTransport", "Transport"]
