"""IRC line classification.

``parse_event`` is total: every line maps to an :class:`Event` or ``None``.
Malformed lines and unknown commands are ``None``, never an exception.
"""

from __future__ import annotations

from .models import ChannelJoined, Event, LoggedIn, Message, Notice

PING = "PING"
PONG = "PONG"
RPL_WELCOME = "001"


def keepalive_reply(line: str) -> str | None:
    """Return the ``PONG`` line answering ``line`` if it is a ``PING`` probe."""
    token, sep, argument = line.partition(" ")
    if token != PING or not sep:
        return None
    return f"{PONG} {argument}"


def parse_event(line: str) -> Event | None:
    prefix, sep, remainder = line.partition(" ")
    if not sep:
        return None
    command, sep, params = remainder.partition(" ")
    if not sep:
        return None

    if command == RPL_WELCOME:
        return LoggedIn()
    if command == "JOIN":
        return ChannelJoined(channel=params.lstrip(":").lstrip("#"))
    if command == "NOTICE":
        return Notice(text=params)
    if command == "PRIVMSG":
        return _build_message(prefix, params)
    return None


def _build_message(prefix: str, params: str) -> Message | None:
    # prefix is ":nick!user@host"; params is "<target> :<text>"
    _target, sep, trailing = params.partition(" ")
    if not sep:
        return None
    nick, sep, _ = prefix.partition("!")
    if not sep:
        return None
    content = trailing[1:] if trailing.startswith(":") else trailing
    return Message(source=nick[1:], content=content)


def format_line(command: str, *params: str, trailing: str | None = None) -> str:
    """Build an outbound line without its terminator."""
    parts = [command, *params]
    if trailing is not None:
        parts.append(f":{trailing}")
    return " ".join(parts)
