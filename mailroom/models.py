"""Delivery outcome models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .email import Email


class DeliveryStatus(str, Enum):
    """What happened to a message handed to the mailer."""

    DELIVERED = "delivered"
    INTERCEPTED = "intercepted"
    SKIPPED = "skipped"


class DeliveryResult(BaseModel):
    """Outcome of ``deliver_now`` or of an awaited ``deliver_later`` handle."""

    status: DeliveryStatus = Field(description="Delivered, intercepted, or skipped")
    email: Email = Field(
        description=(
            "The envelope after normalization. For delivered results this is the "
            "interceptor chain's output; for intercepted results it is the envelope "
            "as it was before the chain ran"
        ),
    )
    response: Any = Field(default=None, description="Whatever the transport returned")
    intercepted_by: str | None = Field(
        default=None,
        description="Name of the interceptor that dropped the message",
    )

    @property
    def delivered(self) -> bool:
        return self.status is DeliveryStatus.DELIVERED

    @property
    def intercepted(self) -> bool:
        return self.status is DeliveryStatus.INTERCEPTED
