"""The ``Email`` envelope and its builder operations.

Envelopes are immutable; every ``put_*`` builder returns a new envelope::

    email = (
        Email.new(subject="Welcome")
        .put_from(("Acme", "noreply@acme.test"))
        .put_to(["a@example.com", ("Bob", "bob@example.com")])
        .put_text_body("Hello!")
        .put_header("Reply-To", "support@acme.test")
    )

Address fields accept raw values until the envelope is normalized by
:func:`mailroom.normalizer.normalize_addresses`, after which ``from_`` holds
one :class:`~mailroom.address.EmailAddress` and ``to``/``cc``/``bcc`` hold
lists of them.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .address import EmailAddress
from .attachment import Attachment
from .errors import ConstructionError, NotNormalizedError


class Email(BaseModel):
    """One outbound email message."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: Any = Field(default=None, alias="from", description="Sender address")
    to: Any = Field(default=None, description="Primary recipient(s)")
    cc: Any = Field(default=None, description="Carbon-copy recipient(s)")
    bcc: Any = Field(default=None, description="Blind carbon-copy recipient(s)")
    subject: str | None = None
    html_body: str | None = None
    text_body: str | None = None
    headers: dict[str, str | list[str]] = Field(default_factory=dict)
    attachments: list[Attachment] = Field(default_factory=list)
    private: dict[str, Any] = Field(
        default_factory=dict,
        description="Out-of-band parameters for transports and extensions",
    )
    assigns: dict[str, Any] = Field(
        default_factory=dict,
        description="Values made available to template renderers",
    )

    @classmethod
    def new(cls, **fields: Any) -> Email:
        """Build an envelope; ``from`` may be passed as ``from_``."""
        attachments = fields.pop("attachments", [])
        email = cls(**fields)
        for attachment in attachments:
            email = email.put_attachment(attachment)
        return email

    def _replace(self, **changes: Any) -> Email:
        return self.model_copy(update=changes)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def put_from(self, address: Any) -> Email:
        return self._replace(from_=address)

    def put_to(self, addresses: Any) -> Email:
        return self._replace(to=addresses)

    def put_cc(self, addresses: Any) -> Email:
        return self._replace(cc=addresses)

    def put_bcc(self, addresses: Any) -> Email:
        return self._replace(bcc=addresses)

    def put_subject(self, subject: str | None) -> Email:
        return self._replace(subject=subject)

    def put_html_body(self, html_body: str | None) -> Email:
        return self._replace(html_body=html_body)

    def put_text_body(self, text_body: str | None) -> Email:
        return self._replace(text_body=text_body)

    def put_header(self, name: str, value: Any, *, combine: bool = False) -> Email:
        """Set header *name* to a string or list of strings.

        Values of any other type (including ``None``) are ignored.  With
        ``combine=True`` the new value(s) are placed in front of any existing
        ones and the header becomes a list.
        """
        if isinstance(value, list):
            if not all(isinstance(item, str) for item in value):
                return self
            new_values = list(value)
        elif isinstance(value, str):
            new_values = [value]
        else:
            return self

        headers = dict(self.headers)
        existing = headers.get(name)
        if combine and existing is not None:
            previous = existing if isinstance(existing, list) else [existing]
            headers[name] = new_values + previous
        else:
            headers[name] = value if isinstance(value, str) else new_values
        return self._replace(headers=headers)

    def put_private(self, key: str, value: Any) -> Email:
        return self._replace(private={**self.private, key: value})

    def assign(self, key: str, value: Any) -> Email:
        return self._replace(assigns={**self.assigns, key: value})

    def put_attachment(
        self,
        attachment: Attachment | str | os.PathLike[str],
        **opts: Any,
    ) -> Email:
        """Append an attachment, or read one from a path.

        Raises :class:`ConstructionError` if the attachment lacks a filename
        or data.
        """
        if not isinstance(attachment, Attachment):
            attachment = Attachment.from_path(attachment, **opts)
        if not attachment.filename:
            raise ConstructionError(
                f"You must provide a filename for the attachment, instead got {attachment!r}"
            )
        if attachment.data is None:
            raise ConstructionError(
                f"The attachment must contain data, instead got {attachment!r}"
            )
        return self._replace(attachments=[*self.attachments, attachment])

    # ------------------------------------------------------------------
    # Queries on normalized envelopes
    # ------------------------------------------------------------------

    @property
    def is_normalized(self) -> bool:
        """True once every address field holds canonical pairs."""
        if not isinstance(self.from_, EmailAddress):
            return False
        return all(
            isinstance(field, list) and all(isinstance(a, EmailAddress) for a in field)
            for field in (self.to, self.cc, self.bcc)
        )

    def all_recipients(self) -> list[EmailAddress]:
        """Return ``to + cc + bcc`` in that order."""
        if not self.is_normalized:
            raise NotNormalizedError(
                "all_recipients() requires an envelope whose addresses have been "
                f"normalized, got to={self.to!r} cc={self.cc!r} bcc={self.bcc!r}"
            )
        return [*self.to, *self.cc, *self.bcc]


def get_address(value: Any) -> str:
    """Return the address string of a canonical ``(name, address)`` pair."""
    if isinstance(value, tuple) and len(value) == 2 and isinstance(value[1], str):
        return value[1]
    raise NotNormalizedError(f"expected an address as a (name, address) pair, got {value!r}")
