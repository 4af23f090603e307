"""Pre-send interceptors and the chain that runs them.

An interceptor receives the envelope and its configured options and returns
either an envelope (possibly modified) or :data:`DROP` to suppress delivery::

    class BlockInternal(Interceptor):
        def call(self, email, options):
            domain = options.get("domain", "internal.test")
            if any(r.address.endswith(domain) for r in email.all_recipients()):
                return Drop(reason="internal recipient")
            return email

Plain callables work too.  Configure a chain with a list whose entries are an
``Interceptor``, a one-argument callable, or an ``(interceptor, options)``
tuple (the callable form then receives ``(email, options)``).
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from .email import Email

logger = structlog.get_logger()


@dataclass(frozen=True)
class Drop:
    """Returned by an interceptor to suppress delivery.  Not an error."""

    reason: str | None = None


DROP = Drop()


class Interceptor(abc.ABC):
    """Base class for class-based interceptors."""

    @abc.abstractmethod
    def call(self, email: Email, options: Mapping[str, Any]) -> Email | Drop:
        """Return the (possibly modified) envelope, or a :class:`Drop`."""

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class _Link:
    name: str
    invoke: Callable[[Email, Mapping[str, Any]], Email | Drop]
    options: Mapping[str, Any]


def _callable_name(fn: Any) -> str:
    return getattr(fn, "__name__", None) or type(fn).__name__


def _resolve(spec: Any) -> _Link:
    if isinstance(spec, tuple):
        if len(spec) != 2 or not isinstance(spec[1], Mapping):
            raise TypeError(f"interceptor with options must be (interceptor, options), got {spec!r}")
        target, options = spec
        if isinstance(target, Interceptor):
            return _Link(target.name, target.call, dict(options))
        if callable(target):
            return _Link(_callable_name(target), target, dict(options))
        raise TypeError(f"not an interceptor: {target!r}")
    if isinstance(spec, Interceptor):
        return _Link(spec.name, spec.call, {})
    if callable(spec):
        return _Link(_callable_name(spec), lambda email, _options: spec(email), {})
    raise TypeError(f"not an interceptor: {spec!r}")


class InterceptorChain:
    """An ordered, resolved-once sequence of interceptors."""

    def __init__(self, interceptors: Iterable[Any] = ()) -> None:
        self._links: tuple[_Link, ...] = tuple(_resolve(spec) for spec in interceptors)

    def __len__(self) -> int:
        return len(self._links)

    @property
    def names(self) -> list[str]:
        return [link.name for link in self._links]

    def run(self, email: Email) -> tuple[Email | Drop, str | None]:
        """Run every interceptor in order, stopping at the first drop.

        Returns ``(result, interceptor_name)`` where the name identifies the
        interceptor that dropped the message (``None`` if none did).
        """
        for link in self._links:
            result = link.invoke(email, link.options)
            if isinstance(result, Drop):
                logger.info(
                    "email_intercepted",
                    interceptor=link.name,
                    reason=result.reason,
                    subject=email.subject,
                )
                return result, link.name
            if not isinstance(result, Email):
                raise TypeError(
                    f"interceptor {link.name} must return an Email or Drop, got {result!r}"
                )
            email = result
        return email, None
