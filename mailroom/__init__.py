"""mailroom: compose, intercept and deliver outbound email.

Public API re-exported here for convenience::

    from mailroom import Email, Mailer, LocalTransport, TaskSupervisor
"""

from .address import EmailAddress, Formattable
from .attachment import Attachment
from .config import DeliverLaterStrategyName, MailerConfig, RetryConfig
from .email import Email, get_address
from .errors import (
    AttachmentsNotSupportedError,
    ConfigurationError,
    ConstructionError,
    DeliveriesError,
    EmptyFromAddressError,
    FormatError,
    MailroomError,
    NilRecipientsError,
    NoDeliveriesError,
    NotNormalizedError,
    TransportError,
)
from .handle import DeliveryHandle
from .interceptor import DROP, Drop, Interceptor, InterceptorChain
from .logging import setup_logging
from .mailer import Mailer
from .models import DeliveryResult, DeliveryStatus
from .normalizer import normalize_addresses
from .sent_messages import SentMessage, SentMessageStore, get_default_store
from .strategies import (
    DeliveryStrategy,
    ImmediateStrategy,
    RetryingStrategy,
    TaskSupervisorStrategy,
)
from .supervisor import TaskSupervisor
from .transports import LocalTransport, RecipientReplacerTransport, Transport

__all__ = [
    "DROP",
    "Attachment",
    "AttachmentsNotSupportedError",
    "ConfigurationError",
    "ConstructionError",
    "DeliverLaterStrategyName",
    "DeliveriesError",
    "DeliveryHandle",
    "DeliveryResult",
    "DeliveryStatus",
    "DeliveryStrategy",
    "Drop",
    "Email",
    "EmailAddress",
    "EmptyFromAddressError",
    "FormatError",
    "Formattable",
    "ImmediateStrategy",
    "Interceptor",
    "InterceptorChain",
    "LocalTransport",
    "Mailer",
    "MailerConfig",
    "MailroomError",
    "NilRecipientsError",
    "NoDeliveriesError",
    "NotNormalizedError",
    "RecipientReplacerTransport",
    "RetryConfig",
    "RetryingStrategy",
    "SentMessage",
    "SentMessageStore",
    "TaskSupervisor",
    "TaskSupervisorStrategy",
    "Transport",
    "TransportError",
    "get_address",
    "get_default_store",
    "normalize_addresses",
    "setup_logging",
]
