"""structlog configuration for applications that send mail.

mailroom itself only calls ``structlog.get_logger()``; applications call
:func:`setup_logging` once at startup to decide how those events render.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import IO, Any

import structlog
from pydantic import SecretStr

REDACTED = "**********"

SENSITIVE_KEYS = frozenset({"api_key", "password", "token", "authorization"})


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential values so they never reach a log sink."""
    for key, value in event_dict.items():
        if key in SENSITIVE_KEYS or isinstance(value, SecretStr):
            event_dict[key] = REDACTED
    return event_dict


def setup_logging(
    *,
    json: bool = True,
    level: str = "INFO",
    stream: IO[str] | None = None,
) -> None:
    """Route structlog and stdlib logging through one handler.

    Parameters
    ----------
    json:
        Emit JSON lines when *True*; otherwise use the console renderer,
        which reads better next to ``LocalTransport`` in development.
    level:
        Root log level name, case-insensitive.
    stream:
        Where to write; ``sys.stdout`` by default.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: structlog.types.Processor
    if json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # module-level loggers must follow later reconfiguration
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
