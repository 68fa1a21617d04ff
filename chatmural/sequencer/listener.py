"""Owner command listener."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Collection

from ..constants import DRAIN_IDLE_TIMEOUT, LISTEN_POLL_TIMEOUT
from ..errors import EventTimeoutError, PayloadError, ProtocolDecodeError, log_error
from ..irc.models import Message
from ..irc.session import IRCSession
from ..logs.logger import logger
from ..payload import Payload, load_payload
from ..pool import SessionPool
from .dispatch import DispatchReport, LineDispatcher

PayloadLoader = Callable[[str], Awaitable[Payload]]


class CommandListener:  # pylint: disable=too-many-instance-attributes
    """Turn owner messages into dispatched payloads.

    One poll waits up to ``poll_timeout`` for a message on the listening
    session, then takes the newest inbox entry. Messages from non-owners and
    locators that fail to load are dropped; older inbox entries are left
    behind, so a burst of commands keeps only the latest.

    Without ``rotate`` the other sessions are drained before each poll so
    their keepalives are answered; what they received is discarded.

    With ``rotate`` the listening session advances round-robin on every poll.
    Each session sees the same owner message, so a locator equal to the last
    dispatched one is then skipped.
    """

    def __init__(
        self,
        pool: SessionPool,
        owners: Collection[str],
        dispatcher: LineDispatcher,
        *,
        poll_timeout: float = LISTEN_POLL_TIMEOUT,
        drain_timeout: float = DRAIN_IDLE_TIMEOUT,
        listener_index: int = 0,
        rotate: bool = False,
        loader: PayloadLoader = load_payload,
    ) -> None:
        if not owners:
            raise ValueError("at least one owner is required")
        self.pool = pool
        self.owners = frozenset(owners)
        self.dispatcher = dispatcher
        self.poll_timeout = poll_timeout
        self.drain_timeout = drain_timeout
        self.listener_index = listener_index % len(pool)
        self.rotate = rotate
        self.loader = loader
        self._polls = 0
        self._last_locator: str | None = None

    def listening_session(self) -> IRCSession:
        if self.rotate:
            return self.pool[self._polls % len(self.pool)]
        return self.pool[self.listener_index]

    async def drain_idle(self) -> None:
        """Pump every session other than the listening one."""
        listening = self.listening_session()
        for session in self.pool:
            if session is listening:
                continue
            try:
                await session.wait_for(None, self.drain_timeout)
            except ProtocolDecodeError as e:
                log_error("Discarded undecodable line on idle session", e)
            session.inbox.clear()

    async def poll_once(self) -> Payload | None:
        """Run one poll; return the payload of an accepted command, if any."""
        if not self.rotate:
            await self.drain_idle()
        session = self.listening_session()
        self._polls += 1
        try:
            await session.wait_for(Message, self.poll_timeout)
        except EventTimeoutError:
            return None
        except ProtocolDecodeError as e:
            log_error("Discarded undecodable line while listening", e)
            return None

        message = session.pop_message()
        if message is None:
            return None
        return await self.accept(message)

    async def accept(self, message: Message) -> Payload | None:
        if message.source not in self.owners:
            logger.log_event(
                "listener",
                "command_ignored",
                level=logging.DEBUG,
                source=message.source,
            )
            return None
        locator = message.content
        if self.rotate and locator == self._last_locator:
            logger.log_event(
                "listener", "repeat_ignored", level=logging.DEBUG, locator=locator
            )
            return None
        try:
            payload = await self.loader(locator)
        except PayloadError as e:
            logger.log_event(
                "listener",
                "payload_unavailable",
                level=logging.WARNING,
                locator=locator,
                error=str(e),
            )
            return None
        self._last_locator = locator
        logger.log_event(
            "listener",
            "command_accepted",
            user=message.source,
            locator=locator,
            lines=len(payload),
        )
        return payload

    async def next_payload(self) -> Payload:
        while True:
            payload = await self.poll_once()
            if payload is not None:
                return payload

    async def run(self, max_dispatches: int | None = None) -> list[DispatchReport]:
        """Listen and dispatch until ``max_dispatches`` is reached (forever if None)."""
        reports: list[DispatchReport] = []
        while max_dispatches is None or len(reports) < max_dispatches:
            payload = await self.next_payload()
            report = await self.dispatcher.dispatch(payload)
            if max_dispatches is not None:
                reports.append(report)
        return reports
