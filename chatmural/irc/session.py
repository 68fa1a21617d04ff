"""Per-connection IRC session: registration, channel join and chat I/O."""

from __future__ import annotations

import asyncio
import logging

from ..constants import (
    DEFAULT_REALNAME,
    DRAIN_IDLE_TIMEOUT,
    GREETING_TIMEOUT,
    JOIN_TIMEOUT,
    LOGIN_TIMEOUT,
)
from ..errors import EventTimeoutError, NoChannelJoinedError, NotLoggedInError
from ..logs.logger import logger
from .connection import IRCConnection
from .models import (
    ChannelJoined,
    Event,
    LoggedIn,
    Message,
    Notice,
    SessionState,
)
from .parser import format_line, parse_event


def normalize_channel(channel: str) -> str:
    return channel.strip().lstrip("#").lower()


class IRCSession:  # pylint: disable=too-many-instance-attributes
    """One connection moving through ``UNREGISTERED -> LOGGED_IN -> JOINED``.

    Every event read from the connection updates the session immediately:
    ``LoggedIn`` sets ``logged_in``, the ``ChannelJoined`` matching a pending
    join sets ``joined_channel`` and ``Message`` events are appended to
    ``inbox`` in arrival order. Only the coroutine currently awaiting the
    session touches this state.
    """

    def __init__(self, connection: IRCConnection, nickname: str | None = None):
        self.connection = connection
        self.nickname = nickname
        self.logged_in = False
        self.joined_channel: str | None = None
        self.inbox: list[Message] = []
        self.state = SessionState.UNREGISTERED
        self._pending_join: str | None = None

    @classmethod
    async def connect(
        cls,
        host: str,
        port: int,
        *,
        nickname: str | None = None,
        await_greeting: bool = True,
    ) -> IRCSession:
        """Open a connection and optionally wait for the server's first NOTICE."""
        connection = await IRCConnection.open(host, port, label=nickname)
        session = cls(connection, nickname=nickname)
        if await_greeting:
            try:
                await session.wait_for(Notice, GREETING_TIMEOUT)
            except BaseException:
                await connection.close()
                raise
            logger.log_event("irc", "greeting", level=logging.DEBUG, user=nickname)
        return session

    def _set_state(self, new_state: SessionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                user=self.nickname,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    def _apply(self, event: Event) -> None:
        match event:
            case LoggedIn():
                if not self.logged_in:
                    self.logged_in = True
                    self._set_state(SessionState.LOGGED_IN)
            case ChannelJoined(channel=channel):
                if self._pending_join and normalize_channel(channel) == self._pending_join:
                    self.joined_channel = self._pending_join
                    self._pending_join = None
                    self._set_state(SessionState.JOINED)
            case Notice(text=text):
                logger.log_event("irc", "notice", user=self.nickname, text=text)
            case Message(source=source, content=content):
                self.inbox.append(event)
                logger.log_event(
                    "irc",
                    "privmsg",
                    level=logging.DEBUG,
                    user=self.nickname,
                    channel=self.joined_channel,
                    author=source,
                    content=content,
                )

    async def wait_for(
        self, target: type[Event] | None = None, timeout: float = DRAIN_IDLE_TIMEOUT
    ) -> Event | None:
        """Pump the connection until an event of class ``target`` arrives.

        Every event seen on the way is applied to the session, whether it
        matches ``target`` or not. With ``target=None`` the call drains what
        the server has sent and returns ``None`` once no line arrives within
        ``timeout``.

        Raises:
            EventTimeoutError: ``target`` was not observed within ``timeout``.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            try:
                line = await self.connection.read_line(max(deadline - loop.time(), 0))
            except TimeoutError:
                if target is None:
                    return None
                logger.log_event(
                    "irc",
                    "wait_timeout",
                    level=logging.DEBUG,
                    user=self.nickname,
                    target=target.__name__,
                    timeout=timeout,
                )
                raise EventTimeoutError(
                    f"Timed out waiting for {target.__name__}",
                    target=target.__name__,
                    timeout=timeout,
                    nickname=self.nickname,
                    operation_type="wait_for",
                ) from None
            logger.log_event(
                "irc", "raw", level=logging.DEBUG, user=self.nickname, raw=line
            )
            event = parse_event(line)
            if event is None:
                continue
            self._apply(event)
            if target is not None and isinstance(event, target):
                return event

    async def send_command(self, line: str) -> None:
        logger.log_event(
            "irc",
            "send",
            level=logging.DEBUG,
            user=self.nickname,
            command=line.split(" ", 1)[0],
        )
        await self.connection.send_line(line)

    async def login(
        self,
        nickname: str,
        *,
        realname: str = DEFAULT_REALNAME,
        timeout: float = LOGIN_TIMEOUT,
    ) -> None:
        """Register with ``nickname`` and wait for the welcome numeric."""
        self.nickname = nickname
        self.connection.label = nickname
        await self.send_command(
            format_line("USER", nickname, nickname, nickname, trailing=realname)
        )
        await self.send_command(format_line("NICK", nickname))
        logger.log_event("irc", "registration_sent", level=logging.DEBUG, user=nickname)
        if not self.logged_in:
            await self.wait_for(LoggedIn, timeout)
        logger.log_event("irc", "login_success", user=nickname)

    async def join(self, channel: str, *, timeout: float = JOIN_TIMEOUT) -> None:
        """Join ``channel`` and wait for the server to confirm it."""
        if not self.logged_in:
            raise NotLoggedInError(
                "Cannot join a channel before logging in",
                nickname=self.nickname,
                operation_type="join",
            )
        channel = normalize_channel(channel)
        logger.log_event("irc", "join_start", user=self.nickname, target=channel)
        self._pending_join = channel
        await self.send_command(format_line("JOIN", f"#{channel}"))

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while self.joined_channel != channel:
            try:
                await self.wait_for(ChannelJoined, max(deadline - loop.time(), 0))
            except EventTimeoutError:
                self._pending_join = None
                raise
        logger.log_event("irc", "join_success", user=self.nickname, channel=channel)

    async def send_text(self, text: str) -> None:
        """Send ``text`` to the joined channel and flush it to the socket."""
        if not self.logged_in:
            raise NotLoggedInError(
                "Cannot send a message before logging in",
                nickname=self.nickname,
                operation_type="send_text",
            )
        if self.joined_channel is None:
            raise NoChannelJoinedError(
                "Cannot send a message before joining a channel",
                nickname=self.nickname,
                operation_type="send_text",
            )
        await self.send_command(
            format_line("PRIVMSG", f"#{self.joined_channel}", trailing=text)
        )

    def pop_message(self) -> Message | None:
        """Remove and return the most recently received message."""
        return self.inbox.pop() if self.inbox else None

    async def close(self) -> None:
        await self.connection.close()
