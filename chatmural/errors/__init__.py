"""Error hierarchy and structured error logging."""

from .handling import classify_error, log_error  # noqa: F401
from .internal import (  # noqa: F401
    ChatMuralError,
    ConfigurationError,
    EventTimeoutError,
    NoChannelJoinedError,
    NotLoggedInError,
    PayloadError,
    ProtocolDecodeError,
    TransportError,
)

__all__ = [
    "ChatMuralError",
    "ConfigurationError",
    "EventTimeoutError",
    "NoChannelJoinedError",
    "NotLoggedInError",
    "PayloadError",
    "ProtocolDecodeError",
    "TransportError",
    "classify_error",
    "log_error",
]
