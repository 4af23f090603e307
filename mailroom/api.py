"""JSON API over a :class:`SentMessageStore`.

Useful to integration test runners that cannot use :mod:`mailroom.testing`
directly.  Endpoints:

* ``GET /emails.json``: every stored email, newest first
* ``GET /emails/{id}.json``: one stored email
* ``POST /reset.json``: empty the store

Addresses are rendered as ``[name, address]`` arrays; ``to``, ``cc`` and
``bcc`` are arrays of those.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from .address import EmailAddress
from .email import Email
from .sent_messages import SentMessage, SentMessageStore, get_default_store


def _address_json(value: Any) -> Any:
    if isinstance(value, EmailAddress):
        return [value.name, value.address]
    return value


def email_to_json(email: Email) -> dict[str, Any]:
    """Render *email* as a JSON-compatible dict."""

    def _many(value: Any) -> Any:
        return [_address_json(a) for a in value] if isinstance(value, list) else _address_json(value)

    return {
        "from": _address_json(email.from_),
        "to": _many(email.to),
        "cc": _many(email.cc),
        "bcc": _many(email.bcc),
        "subject": email.subject,
        "text_body": email.text_body,
        "html_body": email.html_body,
        "headers": email.headers,
        "attachments": [
            {
                "filename": attachment.filename,
                "content_type": attachment.content_type,
                "content_id": attachment.content_id,
                "size": attachment.size,
            }
            for attachment in email.attachments
        ],
    }


def _message_json(message: SentMessage) -> dict[str, Any]:
    return {
        "id": message.id,
        "sent_at": message.sent_at.isoformat(),
        **email_to_json(message.email),
    }


def create_sent_messages_app(store: SentMessageStore | None = None) -> FastAPI:
    """Build a FastAPI app exposing *store* (the process-wide store by default)."""
    store = store if store is not None else get_default_store()
    app = FastAPI(title="sent emails", docs_url=None, redoc_url=None)

    @app.get("/emails.json")
    async def list_emails() -> JSONResponse:
        return JSONResponse([_message_json(message) for message in store.entries()])

    @app.get("/emails/{message_id}.json")
    async def get_email(message_id: str) -> JSONResponse:
        message = store.get_message(message_id)
        if message is not None:
            return JSONResponse(_message_json(message))
        return JSONResponse({"error": f"no sent email with id {message_id}"}, status_code=404)

    @app.post("/reset.json")
    async def reset() -> JSONResponse:
        store.reset()
        return JSONResponse({"ok": True})

    return app
