"""Fixed-size pool of joined IRC sessions."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from .config.model import BotConfig
from .irc.session import IRCSession
from .logs.logger import logger


class SessionPool:
    """Ordered, fixed set of sessions indexed ``0..N-1``.

    Built once at startup and never resized; line ``i`` of a dispatch belongs
    to the session at ``i % len(pool)``.
    """

    def __init__(self, sessions: Sequence[IRCSession]):
        if not sessions:
            raise ValueError("a session pool needs at least one session")
        self._sessions: tuple[IRCSession, ...] = tuple(sessions)

    @classmethod
    async def open(cls, config: BotConfig) -> SessionPool:
        """Connect, register and join ``config.clients`` sessions in order.

        Any failure closes the sessions opened so far and propagates.
        """
        sessions: list[IRCSession] = []
        index = 0
        try:
            for index in range(config.clients):
                nickname = config.nickname_for(index)
                logger.log_event(
                    "pool", "session_opening", index=index, nickname=nickname
                )
                session = await IRCSession.connect(
                    config.host,
                    config.port,
                    nickname=nickname,
                    await_greeting=config.await_greeting,
                )
                sessions.append(session)
                await session.login(nickname, realname=config.realname)
                await session.join(config.channel)
        except BaseException as e:
            logger.log_event(
                "pool",
                "open_failed",
                level=logging.ERROR,
                index=index,
                error=str(e) or type(e).__name__,
            )
            await cls._close_all(sessions)
            raise
        pool = cls(sessions)
        logger.log_event("pool", "ready", size=len(pool))
        return pool

    def __len__(self) -> int:
        return len(self._sessions)

    def __getitem__(self, index: int) -> IRCSession:
        return self._sessions[index]

    def __iter__(self) -> Iterator[IRCSession]:
        return iter(self._sessions)

    def index_for_line(self, line_index: int) -> int:
        return line_index % len(self._sessions)

    def session_for_line(self, line_index: int) -> IRCSession:
        return self._sessions[self.index_for_line(line_index)]

    @staticmethod
    async def _close_all(sessions: Sequence[IRCSession]) -> None:
        for session in sessions:
            await session.close()

    async def close(self) -> None:
        await self._close_all(self._sessions)
        logger.log_event("pool", "closed", level=logging.DEBUG)
