"""Test doubles: recording writers, pre-built sessions and an in-process IRC server."""

import asyncio

from chatmural.irc.connection import IRCConnection
from chatmural.irc.models import SessionState
from chatmural.irc.session import IRCSession

SERVER_NAME = "irc.test"


class RecordingWriter:
    """Stand-in for ``asyncio.StreamWriter`` that keeps every byte written."""

    def __init__(self, on_line=None):
        self.buffer = bytearray()
        self.closed = False
        self.fail_with: BaseException | None = None
        self._on_line = on_line
        self._pending = bytearray()

    def write(self, data: bytes) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.buffer += data
        self._pending += data
        while b"\r\n" in self._pending:
            raw, _, rest = bytes(self._pending).partition(b"\r\n")
            self._pending = bytearray(rest)
            if self._on_line is not None:
                self._on_line(raw.decode("utf-8"))

    async def drain(self) -> None:
        await asyncio.sleep(0)

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        return None

    def is_closing(self) -> bool:
        return self.closed

    @property
    def lines(self) -> list[str]:
        text = self.buffer.decode("utf-8")
        return text.split("\r\n")[:-1] if text else []


def make_connection(label: str | None = "mural0"):
    """Build a connection over a real StreamReader; call inside a running loop."""
    reader = asyncio.StreamReader()
    writer = RecordingWriter()
    return IRCConnection(reader, writer, label=label), reader, writer


def make_session(nickname: str = "mural0", *, channel: str | None = None):
    """Build a session, optionally already logged in and joined to ``channel``."""
    connection, reader, writer = make_connection(nickname)
    session = IRCSession(connection, nickname=nickname)
    if channel is not None:
        session.logged_in = True
        session.joined_channel = channel
        session.state = SessionState.JOINED
    return session, reader, writer


def privmsg(source: str, channel: str, text: str) -> bytes:
    return f":{source}!{source}@test PRIVMSG #{channel} :{text}\r\n".encode()


class FakeClient:
    def __init__(self, server: "FakeIRCServer"):
        self.server = server
        self.reader = asyncio.StreamReader()
        self.writer = RecordingWriter(on_line=self.handle)
        self.nickname: str | None = None
        self.channel: str | None = None

    def feed(self, line: str) -> None:
        self.reader.feed_data(f"{line}\r\n".encode())

    def handle(self, line: str) -> None:
        command, _, params = line.partition(" ")
        if command == "NICK":
            self.nickname = params
            self.feed(f":{SERVER_NAME} 001 {params} :Welcome {params}")
        elif command == "JOIN" and not self.server.refuse_join:
            self.channel = params.lstrip("#")
            for client in self.server.members(self.channel):
                client.feed(f":{self.nickname}!{self.nickname}@test JOIN {params}")
        elif command == "PRIVMSG":
            target, _, text = params.partition(" :")
            self.server.sent.append((self.nickname, text))
            for client in self.server.members(target.lstrip("#")):
                if client is self and not self.server.echo_message:
                    continue
                if client in self.server.deaf:
                    continue
                client.feed(f":{self.nickname}!{self.nickname}@test PRIVMSG {target} :{text}")


class FakeIRCServer:
    """In-process IRC server reached through a patched ``asyncio.open_connection``.

    Delivers channel messages to every other member and, with
    ``echo_message``, back to the sender too.
    """

    def __init__(self, *, echo_message: bool = True, greeting: bool = True):
        self.echo_message = echo_message
        self.greeting = greeting
        self.refuse_join = False
        self.refuse_connections_after: int | None = None
        self.clients: list[FakeClient] = []
        self.deaf: set[FakeClient] = set()
        self.sent: list[tuple[str | None, str]] = []

    def members(self, channel: str) -> list[FakeClient]:
        return [c for c in self.clients if c.channel == channel]

    def say(self, source: str, channel: str, text: str) -> None:
        for client in self.members(channel):
            client.reader.feed_data(privmsg(source, channel, text))

    async def open_connection(self, host, port):
        await asyncio.sleep(0)
        if (
            self.refuse_connections_after is not None
            and len(self.clients) >= self.refuse_connections_after
        ):
            raise ConnectionRefusedError(111, "Connection refused")
        client = FakeClient(self)
        self.clients.append(client)
        if self.greeting:
            client.feed(f":{SERVER_NAME} NOTICE * :*** Looking up your hostname...")
        return client.reader, client.writer

