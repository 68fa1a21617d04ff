from __future__ import annotations

from ..logging_config import log_structured_error
from .internal import (
    ChatMuralError,
    ConfigurationError,
    EventTimeoutError,
    PayloadError,
    ProtocolDecodeError,
    TransportError,
)


def classify_error(error: BaseException) -> str:
    """Return the structured error type used for ``error``."""
    if isinstance(error, EventTimeoutError | TimeoutError):
        return "timeout"
    if isinstance(error, TransportError | OSError | ConnectionError):
        return "network"
    if isinstance(error, ProtocolDecodeError):
        return "protocol"
    if isinstance(error, PayloadError):
        return "payload"
    if isinstance(error, ConfigurationError):
        return "config"
    if isinstance(error, ChatMuralError):
        return "internal"
    return "unknown"


def log_error(message: str, error: Exception, context: dict | None = None) -> None:
    """Logs an error message with the associated exception details.

    Session context carried by :class:`ChatMuralError` (nickname, operation)
    is merged into ``context``.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    merged: dict[str, object] = dict(context or {})
    if isinstance(error, ChatMuralError):
        if error.nickname:
            merged.setdefault("nickname", error.nickname)
        if error.operation_type:
            merged.setdefault("operation", error.operation_type)

    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=merged or None,
    )
