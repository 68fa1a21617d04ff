"""
Tests for the structured event logger, template catalog and root configuration.
"""

import io
import json
import logging

import pytest

from chatmural.logging_config import LoggerConfigurator, log_structured_error
from chatmural.logs.event_catalog import EVENT_TEMPLATES, reload_event_templates
from chatmural.logs.logger import BotLogger


@pytest.fixture
def event_logger(caplog, monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    bot_logger = BotLogger("chatmural.test")
    caplog.set_level(logging.DEBUG, logger="chatmural.test")
    return bot_logger


@pytest.fixture
def restore_templates():
    yield
    reload_event_templates()


class TestLogEvent:
    def test_template_is_formatted_with_context(self, event_logger, caplog):
        event_logger.log_event("pool", "session_opening", index=2, nickname="mural2")

        assert caplog.records[-1].getMessage() == (
            f"[{'system'.ljust(20)}] 🧩 Opening session 2 as mural2"
        )

    def test_user_and_channel_become_prefix(self, event_logger, caplog):
        event_logger.log_event("irc", "join_success", user="mural0", channel="art")

        assert caplog.records[-1].getMessage().startswith(f"[{'mural0#art'.ljust(20)}]")

    def test_missing_template_field_keeps_raw_template(self, event_logger, caplog):
        event_logger.log_event("pool", "session_opening")

        assert "{index}" in caplog.records[-1].getMessage()

    def test_unknown_event_derives_text(self, event_logger, caplog):
        event_logger.log_event("some_domain", "did_thing")

        assert caplog.records[-1].getMessage().endswith("some domain: did thing")

    def test_human_override(self, event_logger, caplog):
        event_logger.log_event("app", "start", human="custom text")

        assert caplog.records[-1].getMessage().endswith("custom text")

    def test_level_is_respected(self, event_logger, caplog):
        event_logger.log_event("dispatch", "echo_timeout", level=logging.WARNING)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "Timed out waiting for previous line" in record.getMessage()

    def test_disabled_level_is_skipped(self, event_logger, caplog):
        event_logger.set_level(logging.WARNING)

        event_logger.log_event("app", "start")

        assert caplog.records == []

    def test_debug_mode_adds_event_name_and_context(self, event_logger, caplog, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")

        event_logger.log_event("listener", "command_accepted", user="alice", locator="a.txt", lines=3)

        message = caplog.records[-1].getMessage()
        assert message.startswith("listener_command_accepted")
        assert "[alice" in message
        assert "(locator=a.txt, lines=3)" in message


class TestEventCatalog:
    def test_bundled_catalog_loaded(self):
        assert ("dispatch", "echo_timeout") in EVENT_TEMPLATES
        assert ("irc", "keepalive_reply") in EVENT_TEMPLATES

    def test_reload_from_custom_file(self, tmp_path, restore_templates):
        path = tmp_path / "templates.json"
        path.write_text(json.dumps({"demo": {"hello": "hi {name}", "bad": 3}}), encoding="utf-8")

        reload_event_templates(path)

        assert EVENT_TEMPLATES == {("demo", "hello"): "hi {name}"}

    def test_missing_file_yields_load_error(self, tmp_path, restore_templates):
        reload_event_templates(tmp_path / "missing.json")

        assert list(EVENT_TEMPLATES) == [("app", "load_error")]


class TestStructuredError:
    def test_message_layout(self, caplog):
        caplog.set_level(logging.DEBUG, logger="chatmural")

        log_structured_error(
            "network",
            "Send failed",
            exception=OSError("broken pipe"),
            context={"nickname": "mural1"},
        )

        assert caplog.records[-1].getMessage() == (
            "[NETWORK] Send failed | Exception: OSError: broken pipe | Context: nickname=mural1"
        )


class TestLoggerConfigurator:
    def setup_method(self):
        self.root = logging.getLogger()
        self.saved_handlers = list(self.root.handlers)
        self.saved_level = self.root.level

    def teardown_method(self):
        for handler in list(self.root.handlers):
            self.root.removeHandler(handler)
        for handler in self.saved_handlers:
            self.root.addHandler(handler)
        self.root.setLevel(self.saved_level)

    def test_installs_single_colored_handler(self, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        stream = io.StringIO()

        handler = LoggerConfigurator({"stream": stream}).configure()
        logging.getLogger("chatmural").info("hello")

        assert self.root.handlers == [handler]
        assert self.root.level == logging.INFO
        assert "hello" in stream.getvalue()
        assert logging.getLogger("asyncio").level == logging.WARNING

    def test_debug_environment(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "1")

        LoggerConfigurator({"stream": io.StringIO()}).configure()

        assert self.root.level == logging.DEBUG
