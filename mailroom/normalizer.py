"""Address normalization: the first stage of every delivery."""

from __future__ import annotations

from typing import Any

from .address import EmailAddress, format_address, is_address_sequence
from .email import Email
from .errors import ConstructionError, EmptyFromAddressError, NilRecipientsError


def normalize_sender(value: Any) -> EmailAddress:
    """Normalize the ``from`` field to a single address."""
    if value is None:
        raise EmptyFromAddressError("the email has no from address")
    if is_address_sequence(value):
        raise ConstructionError(
            f"the from field must hold a single address, got a sequence: {value!r}"
        )
    return format_address(value)


def normalize_recipients(value: Any) -> list[EmailAddress]:
    """Normalize a ``to``/``cc``/``bcc`` field to an ordered list of addresses."""
    if value is None:
        return []
    if is_address_sequence(value):
        return [format_address(item) for item in value]
    return [format_address(value)]


def normalize_addresses(email: Email) -> Email:
    """Return a copy of *email* with every address field in canonical form.

    ``from_`` is resolved first, so an invalid sender fails before any
    recipient is looked at.  Raises :class:`NilRecipientsError` when ``to``,
    ``cc`` and ``bcc`` are all ``None``.
    """
    sender = normalize_sender(email.from_)
    if email.to is None and email.cc is None and email.bcc is None:
        raise NilRecipientsError(
            "all recipients were set to None; set at least one of to, cc or bcc"
        )
    return email.model_copy(
        update={
            "from_": sender,
            "to": normalize_recipients(email.to),
            "cc": normalize_recipients(email.cc),
            "bcc": normalize_recipients(email.bcc),
        }
    )
