"""Shared IRC data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class SessionState(Enum):
    UNREGISTERED = auto()
    LOGGED_IN = auto()
    JOINED = auto()


@dataclass(frozen=True, slots=True)
class Event:
    """Base class of every classified inbound protocol event."""


@dataclass(frozen=True, slots=True)
class Notice(Event):
    text: str


@dataclass(frozen=True, slots=True)
class LoggedIn(Event):
    pass


@dataclass(frozen=True, slots=True)
class ChannelJoined(Event):
    channel: str


@dataclass(frozen=True, slots=True)
class Message(Event):
    source: str
    content: str
