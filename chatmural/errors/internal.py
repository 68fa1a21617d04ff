"""Centralized error hierarchy.

Classes:
  ChatMuralError        – Base for all application errors.
  TransportError        – Connect/send/drain failures and peer closes.
  EventTimeoutError     – An expected protocol event did not arrive in time.
  ProtocolDecodeError   – Server bytes that are not valid UTF-8.
  NotLoggedInError      – Channel operation attempted before registration.
  NoChannelJoinedError  – Message sent before a channel was joined.
  PayloadError          – A payload locator could not be loaded.
  ConfigurationError    – Invalid bot configuration.

Only the session and sequencer layers raise these; raw ``OSError`` and
``UnicodeDecodeError`` are wrapped at the connection boundary.
"""

from __future__ import annotations


class ChatMuralError(Exception):
    """Base exception for all chatmural errors.

    Args:
        message (str): Error message.
        nickname (str | None): Optional nickname of the session involved.
        operation_type (str | None): Optional operation type (e.g., 'connect', 'join').

    Example:
        >>> raise ChatMuralError("Generic error", nickname="mural0", operation_type="connect")
    """

    def __init__(
        self,
        message: str,
        nickname: str | None = None,
        operation_type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.nickname = nickname
        self.operation_type = operation_type


class TransportError(ChatMuralError):
    """Raised when the underlying stream fails to connect, write or drain,
    or when the server closes the connection.

    These are fatal during startup; no retry is ever attempted.
    """


class EventTimeoutError(ChatMuralError):
    """Raised when an awaited protocol event is not observed before its deadline.

    Args:
        message (str): Error message.
        target (str | None): Name of the awaited event class.
        timeout (float | None): The timeout that elapsed, in seconds.
        nickname (str | None): Optional nickname of the session involved.
        operation_type (str | None): Optional operation type.
    """

    def __init__(
        self,
        message: str,
        target: str | None = None,
        timeout: float | None = None,
        nickname: str | None = None,
        operation_type: str | None = None,
    ) -> None:
        super().__init__(message, nickname=nickname, operation_type=operation_type)
        self.target = target
        self.timeout = timeout


class ProtocolDecodeError(ChatMuralError):
    """Raised when a server line is not valid UTF-8. Aborts the current read."""


class NotLoggedInError(ChatMuralError):
    """Raised when joining or sending before the login confirmation arrived."""


class NoChannelJoinedError(ChatMuralError):
    """Raised when sending text before a channel join was confirmed."""


class PayloadError(ChatMuralError):
    """Raised when a payload locator cannot be read.

    Args:
        message (str): Error message.
        locator (str | None): The locator that failed to load.
    """

    def __init__(self, message: str, locator: str | None = None) -> None:
        super().__init__(message, operation_type="load_payload")
        self.locator = locator


class ConfigurationError(ChatMuralError):
    """Raised when command line or file configuration fails validation."""


__all__ = [
    "ChatMuralError",
    "TransportError",
    "EventTimeoutError",
    "ProtocolDecodeError",
    "NotLoggedInError",
    "NoChannelJoinedError",
    "PayloadError",
    "ConfigurationError",
]
