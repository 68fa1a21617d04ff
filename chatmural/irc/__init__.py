"""IRC subsystem package.

Contains the stream connection, the line parser and the per-connection
session state machine.
"""

from .connection import IRCConnection  # noqa: F401
from .models import (  # noqa: F401
    ChannelJoined,
    Event,
    LoggedIn,
    Message,
    Notice,
    SessionState,
)
from .parser import format_line, keepalive_reply, parse_event  # noqa: F401
from .session import IRCSession, normalize_channel  # noqa: F401

__all__ = [
    "ChannelJoined",
    "Event",
    "IRCConnection",
    "IRCSession",
    "LoggedIn",
    "Message",
    "Notice",
    "SessionState",
    "format_line",
    "keepalive_reply",
    "normalize_channel",
    "parse_event",
]
