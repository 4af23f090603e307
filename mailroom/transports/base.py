"""Transport: the interface every delivery backend implements."""

from __future__ import annotations

import abc
from typing import Any, ClassVar

from pydantic import SecretStr

from ..config import MailerConfig
from ..email import Email
from ..errors import ConfigurationError


def _is_blank(value: Any) -> bool:
    if isinstance(value, SecretStr):
        value = value.get_secret_value()
    return value is None or (hasattr(value, "__len__") and len(value) == 0)


class Transport(abc.ABC):
    """Abstract delivery backend.

    Concrete transports implement :meth:`deliver`, which receives an envelope
    whose addresses are already normalized.  A failed delivery raises
    :class:`~mailroom.errors.TransportError`; whatever :meth:`deliver`
    returns is passed back to the caller as ``DeliveryResult.response``.

    ``required_settings`` names :class:`MailerConfig` fields (or keys of
    ``MailerConfig.options``) that must be non-empty; the default
    :meth:`validate_config` enforces them.
    """

    required_settings: ClassVar[tuple[str, ...]] = ()
    supports_attachments: ClassVar[bool] = False

    @property
    def name(self) -> str:
        return type(self).__name__

    @abc.abstractmethod
    async def deliver(self, email: Email, config: MailerConfig) -> Any:
        """Send *email*.  Raise ``TransportError`` on failure."""

    def validate_config(self, config: MailerConfig) -> MailerConfig:
        """Check *config* once, before the first delivery.

        Override to add checks or to return an adjusted copy; raise
        :class:`ConfigurationError` when the config is unusable.
        """
        missing = [
            setting
            for setting in self.required_settings
            if _is_blank(getattr(config, setting, config.options.get(setting)))
        ]
        if missing:
            raise ConfigurationError(
                f"{self.name} requires {', '.join(missing)} to be set in the mailer config"
            )
        return config
