from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from ..constants import (
    DEFAULT_CLIENT_COUNT,
    DEFAULT_IRC_PORT,
    DEFAULT_LINE_TIMEOUT_MS,
    DEFAULT_REALNAME,
)


MAX_NICKNAME_LENGTH = 16


class BotConfig(BaseModel):
    """Configuration of one running bot.

    Attributes:
        server: IRC endpoint as ``host`` or ``host:port``.
        nickname: Nickname base; session ``i`` registers as ``nickname + str(i)``.
        channel: Channel to join, stored without the leading ``#``.
        clients: Number of connections in the pool.
        owners: Nicknames allowed to trigger a dispatch.
        line_timeout_ms: Longest wait for the previous line before sending anyway.
        pacing: ``echo`` waits for a session's own previous line, ``relay``
            for the line sent just before by its neighbour.
        rotate_listener: Poll every session in turn for commands instead of
            session 0 only.
        await_greeting: Wait for the server's first NOTICE after connecting.
        realname: Real name sent with ``USER``.
    """

    server: str = Field(min_length=1)
    nickname: str = Field(min_length=1)
    channel: str
    clients: int = Field(default=DEFAULT_CLIENT_COUNT, ge=1)
    owners: list[str] = Field(min_length=1)
    line_timeout_ms: int = Field(default=DEFAULT_LINE_TIMEOUT_MS, ge=0)
    pacing: Literal["echo", "relay"] = "echo"
    rotate_listener: bool = False
    await_greeting: bool = True
    realname: str = DEFAULT_REALNAME

    @field_validator("server")
    @classmethod
    def validate_server(cls, v: str) -> str:
        v = v.strip()
        host, sep, port = v.rpartition(":")
        if sep:
            if not host or not port.isdigit() or not 0 < int(port) < 65536:
                raise ValueError("server must be host or host:port")
        return v

    @field_validator("nickname")
    @classmethod
    def validate_nickname(cls, v: str) -> str:
        v = v.strip()
        if not v or any(c in v for c in " ,*?!@#:"):
            raise ValueError("nickname contains characters IRC does not allow")
        return v

    @field_validator("channel")
    @classmethod
    def validate_channel(cls, v: str) -> str:
        """Strip whitespace and leading '#', lowercase."""
        stripped = v.strip().lstrip("#").lower()
        if not stripped or " " in stripped or "," in stripped:
            raise ValueError("channel must be a single channel name")
        return stripped

    @field_validator("owners", mode="before")
    @classmethod
    def validate_owners(cls, v: Any) -> list[str]:
        """Accept a list or a comma separated string; dedup keeping order."""
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, list | tuple):
            raise ValueError("owners must be a list")
        owners = [o.strip() for o in v if isinstance(o, str) and o.strip()]
        return list(dict.fromkeys(owners))

    @model_validator(mode="after")
    def validate_suffixed_nicknames(self) -> BotConfig:
        """Every per-session nickname must fit, including the index suffix."""
        longest = self.nickname_for(self.clients - 1)
        if len(longest) > MAX_NICKNAME_LENGTH:
            raise ValueError(
                f"nickname {longest!r} exceeds {MAX_NICKNAME_LENGTH} characters; "
                "shorten the nickname or use fewer clients"
            )
        return self

    @property
    def host(self) -> str:
        host, sep, _ = self.server.rpartition(":")
        return host if sep else self.server

    @property
    def port(self) -> int:
        _, sep, port = self.server.rpartition(":")
        return int(port) if sep else DEFAULT_IRC_PORT

    @property
    def line_timeout(self) -> float:
        """Per-line timeout in seconds."""
        return self.line_timeout_ms / 1000

    def nickname_for(self, index: int) -> str:
        return f"{self.nickname}{index}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BotConfig:
        return cls.model_validate(dict(data))
