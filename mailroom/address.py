"""Canonical email addresses and coercion of caller-supplied address values."""

from __future__ import annotations

import email.utils
from collections.abc import Sequence
from typing import Any, NamedTuple, Protocol, runtime_checkable

from .errors import FormatError


class EmailAddress(NamedTuple):
    """Canonical ``(name, address)`` pair.

    Being a tuple, it compares equal to a plain ``(name, address)`` tuple.
    """

    name: str | None
    address: str

    def __str__(self) -> str:
        if self.name:
            return email.utils.formataddr((self.name, self.address))
        return self.address


@runtime_checkable
class Formattable(Protocol):
    """Anything that knows how to present itself as an email address.

    ``to_address`` returns either a bare address string or a
    ``(name, address)`` pair::

        class User:
            def to_address(self):
                return (self.full_name, self.email)
    """

    def to_address(self) -> tuple[str | None, str] | str: ...


def _from_pair(value: tuple[Any, ...]) -> EmailAddress:
    if len(value) != 2:
        raise FormatError(f"expected a (name, address) pair, got {value!r}")
    name, address = value
    if name is not None and not isinstance(name, str):
        raise FormatError(f"address name must be a string or None, got {name!r}")
    if not isinstance(address, str):
        raise FormatError(f"address must be a string, got {address!r}")
    return EmailAddress(name, address)


def format_address(value: Any) -> EmailAddress:
    """Resolve a single address value to an :class:`EmailAddress`.

    Accepts a bare string, a ``(name, address)`` tuple, an existing
    :class:`EmailAddress`, or a :class:`Formattable`.  Anything else raises
    :class:`FormatError`.
    """
    if isinstance(value, EmailAddress):
        return value
    if isinstance(value, str):
        return EmailAddress(None, value)
    if isinstance(value, tuple):
        return _from_pair(value)
    if isinstance(value, Formattable):
        formatted = value.to_address()
        if isinstance(formatted, str):
            return EmailAddress(None, formatted)
        if isinstance(formatted, tuple):
            return _from_pair(formatted)
        raise FormatError(
            f"{type(value).__name__}.to_address() must return a string or a "
            f"(name, address) pair, got {formatted!r}"
        )
    raise FormatError(
        f"The format of the address was invalid. Got {value!r}. Expected a string, "
        'e.g. "foo@bar.com", a (name, address) pair, or an object with a '
        "to_address() method."
    )


def is_address_sequence(value: Any) -> bool:
    """True for list-like containers of addresses (tuples are pairs, not sequences)."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, tuple))
