import asyncio
import logging

import pytest

from tests.fakes import FakeIRCServer


@pytest.fixture
def irc_server(monkeypatch):
    server = FakeIRCServer()
    monkeypatch.setattr(asyncio, "open_connection", server.open_connection)
    return server


@pytest.fixture
def chat_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="chatmural")
    return caplog
