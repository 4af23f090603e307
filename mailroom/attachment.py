"""File attachments carried by an :class:`~mailroom.email.Email`."""

from __future__ import annotations

import mimetypes
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(filename: str) -> str:
    """Infer a MIME type from *filename*'s extension."""
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or DEFAULT_CONTENT_TYPE


class Attachment(BaseModel):
    """A file attached to an email.

    ``content_id`` lets an HTML body reference the attachment inline,
    e.g. ``<img src="cid:logo-1234">``.
    """

    model_config = ConfigDict(frozen=True)

    filename: str | None = Field(default=None, description="Name shown to the recipient")
    content_type: str | None = Field(
        default=None,
        description="MIME type; inferred from the filename extension when omitted",
    )
    data: bytes | None = Field(default=None, description="Raw attachment bytes")
    path: str | None = Field(default=None, description="Where the data was read from, if a file")
    content_id: str | None = Field(default=None, description="Content-ID for inline references")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra MIME headers for this part (e.g. Content-Disposition)",
    )

    @model_validator(mode="before")
    @classmethod
    def _infer_content_type(cls, values: Any) -> Any:
        if isinstance(values, dict) and not values.get("content_type") and values.get("filename"):
            values = {**values, "content_type": guess_content_type(values["filename"])}
        return values

    @classmethod
    def from_path(
        cls,
        path: str | os.PathLike[str],
        *,
        filename: str | None = None,
        content_type: str | None = None,
        content_id: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> Attachment:
        """Read *path* from disk and build an attachment for it."""
        file_path = Path(path)
        return cls(
            filename=filename or file_path.name,
            content_type=content_type,
            data=file_path.read_bytes(),
            path=str(file_path),
            content_id=content_id,
            headers=headers or {},
        )

    @property
    def size(self) -> int:
        return len(self.data) if self.data is not None else 0
