"""Cross-connection line dispatch with per-line pacing."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Literal

from ..errors import EventTimeoutError, ProtocolDecodeError, log_error
from ..irc.models import Message
from ..irc.session import IRCSession
from ..logs.logger import logger
from ..payload import Payload
from ..pool import SessionPool

Pacing = Literal["echo", "relay"]


@dataclass(slots=True)
class DispatchReport:
    lines_sent: int = 0
    echo_timeouts: int = 0
    senders: list[int] = field(default_factory=list)


class LineDispatcher:
    """Send payload lines round-robin across a pool.

    Line ``i`` goes to session ``i % N``. Lines are walked in chunks of width
    ``N``, sessions left to right. Before a session sends, it waits until the
    gating line shows up in its inbox or ``line_timeout`` passes:

    * ``echo`` pacing gates on the line this same session sent last
      (line ``i - N``), seen as an echo from the server;
    * ``relay`` pacing gates on line ``i - 1``, sent by the neighbouring
      session and received as ordinary channel traffic.

    Blank lines go out as a single space and never gate the next send, and a
    single-session pool never waits.
    """

    def __init__(
        self,
        pool: SessionPool,
        line_timeout: float,
        pacing: Pacing = "echo",
    ) -> None:
        if pacing not in ("echo", "relay"):
            raise ValueError(f"unknown pacing {pacing!r}")
        self.pool = pool
        self.line_timeout = line_timeout
        self.pacing = pacing

    async def dispatch(self, payload: Payload) -> DispatchReport:
        size = len(self.pool)
        lines = payload.lines
        report = DispatchReport()
        last_sent: list[str | None] = [None] * size
        previous: str | None = None
        logger.log_event(
            "dispatch",
            "start",
            lines=len(lines),
            sessions=size,
            locator=payload.locator,
            pacing=self.pacing,
        )

        for chunk_start in range(0, len(lines), size):
            chunk = lines[chunk_start : chunk_start + size]
            for offset, line in enumerate(chunk):
                index = self.pool.index_for_line(chunk_start + offset)
                session = self.pool.session_for_line(chunk_start + offset)
                gate = last_sent[index] if self.pacing == "echo" else previous
                if size > 1 and gate is not None:
                    if not await self.await_line(session, gate):
                        report.echo_timeouts += 1

                await session.send_text(line if line else " ")
                report.lines_sent += 1
                report.senders.append(index)

                marker = line if line else None
                last_sent[index] = marker
                previous = marker

        logger.log_event(
            "dispatch",
            "complete",
            lines_sent=report.lines_sent,
            echo_timeouts=report.echo_timeouts,
        )
        return report

    async def await_line(self, session: IRCSession, text: str) -> bool:
        """Wait for ``text`` to arrive in ``session``'s inbox.

        The inbox is scanned newest first and every scanned entry is
        discarded. Returns ``False`` after logging a warning when
        ``line_timeout`` passes first.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.line_timeout
        while True:
            while (message := session.pop_message()) is not None:
                if message.content == text:
                    return True
            try:
                await session.wait_for(Message, max(deadline - loop.time(), 0))
            except EventTimeoutError:
                logger.log_event(
                    "dispatch",
                    "echo_timeout",
                    level=logging.WARNING,
                    user=session.nickname,
                    channel=session.joined_channel,
                    timeout=self.line_timeout,
                )
                return False
            except ProtocolDecodeError as e:
                log_error("Discarded undecodable line while pacing", e)
