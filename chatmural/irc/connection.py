"""Line framing over one asyncio stream pair."""

from __future__ import annotations

import asyncio
import logging

from ..constants import CONNECT_TIMEOUT, READ_CHUNK_SIZE
from ..errors import ProtocolDecodeError, TransportError
from ..logs.logger import logger
from .parser import keepalive_reply


class IRCConnection:
    """Owns one reader/writer pair and turns the byte stream into text lines.

    Partial lines are buffered across reads. Keepalive probes are answered as
    soon as their line is framed and are never returned to the caller.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        *,
        label: str | None = None,
        chunk_size: int = READ_CHUNK_SIZE,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.label = label
        self.chunk_size = chunk_size
        self._buffer = bytearray()
        self._writer_closed = False
        self.closed = False

    @classmethod
    async def open(
        cls,
        host: str,
        port: int,
        *,
        label: str | None = None,
        timeout: float = CONNECT_TIMEOUT,
    ) -> IRCConnection:
        logger.log_event(
            "irc",
            "open_connection",
            level=logging.DEBUG,
            user=label,
            host=host,
            port=port,
            timeout=timeout,
        )
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout=timeout
            )
        except TimeoutError as e:
            raise TransportError(
                f"Timed out connecting to {host}:{port}",
                nickname=label,
                operation_type="connect",
            ) from e
        except OSError as e:
            raise TransportError(
                f"Could not connect to {host}:{port}: {e}",
                nickname=label,
                operation_type="connect",
            ) from e
        logger.log_event(
            "irc", "connection_established", user=label, host=host, port=port
        )
        return cls(reader, writer, label=label)

    async def send_line(self, line: str) -> None:
        """Write ``line`` plus CRLF and drain the writer."""
        if self.closed:
            raise TransportError(
                "Connection is closed", nickname=self.label, operation_type="send"
            )
        try:
            self.writer.write(f"{line}\r\n".encode("utf-8"))
            await self.writer.drain()
        except (OSError, ConnectionError) as e:
            raise TransportError(
                f"Failed to send line: {e}", nickname=self.label, operation_type="send"
            ) from e

    def _pop_buffered_line(self) -> bytes | None:
        index = self._buffer.find(b"\n")
        if index < 0:
            return None
        raw = bytes(self._buffer[:index])
        del self._buffer[: index + 1]
        return raw.removesuffix(b"\r")

    async def _fill(self, timeout: float) -> None:
        if timeout <= 0:
            raise TimeoutError
        try:
            data = await asyncio.wait_for(
                self.reader.read(self.chunk_size), timeout=timeout
            )
        except TimeoutError:
            # TimeoutError subclasses OSError; it must reach the caller unwrapped
            raise
        except (OSError, ConnectionError) as e:
            raise TransportError(
                f"Failed to read from server: {e}",
                nickname=self.label,
                operation_type="read",
            ) from e
        if not data:
            self.closed = True
            raise TransportError(
                "Connection closed by server", nickname=self.label, operation_type="read"
            )
        self._buffer += data

    async def read_line(self, timeout: float) -> str:
        """Return the next non-keepalive line.

        Already-buffered lines are returned without waiting. Raises
        ``TimeoutError`` when no complete line arrives within ``timeout``
        seconds, :class:`ProtocolDecodeError` for non UTF-8 lines and
        :class:`TransportError` when the server goes away.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            raw = self._pop_buffered_line()
            if raw is None:
                await self._fill(deadline - loop.time())
                continue
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.log_event(
                    "irc", "decode_error", level=logging.WARNING, user=self.label
                )
                raise ProtocolDecodeError(
                    f"Invalid UTF-8 from server: {e}",
                    nickname=self.label,
                    operation_type="read",
                ) from e
            reply = keepalive_reply(line)
            if reply is not None:
                await self.send_line(reply)
                logger.log_event(
                    "irc", "keepalive_reply", level=logging.DEBUG, user=self.label
                )
                continue
            return line

    async def close(self) -> None:
        if self._writer_closed:
            return
        self._writer_closed = True
        self.closed = True
        try:
            self.writer.close()
            await self.writer.wait_closed()
        except (OSError, ConnectionError) as e:
            logger.log_event(
                "irc",
                "connection_closed",
                level=logging.DEBUG,
                user=self.label,
                error=str(e),
            )
            return
        logger.log_event("irc", "connection_closed", level=logging.DEBUG, user=self.label)
