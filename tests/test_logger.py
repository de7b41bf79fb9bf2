"""Tests for puntes/utils/logger.py module."""

import json
import logging
from pathlib import Path

import pytest

from puntes.utils.logger import (
    MAX_FIELD_LENGTH,
    JsonLinesFormatter,
    configure_logging,
)


def make_record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("puntes.test", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonLinesFormatter:
    """Tests for JsonLinesFormatter."""

    def test_event_and_extras(self):
        line = JsonLinesFormatter("session-1").format(
            make_record("state_transition", from_state="browsing", to_state="viewing")
        )

        event = json.loads(line)
        assert event["event"] == "state_transition"
        assert event["session_id"] == "session-1"
        assert event["level"] == "INFO"
        assert event["from_state"] == "browsing"
        assert event["to_state"] == "viewing"
        assert "timestamp" in event

    def test_long_fields_are_truncated(self):
        line = JsonLinesFormatter("s").format(make_record("note_read", path="x" * 500))
        assert len(json.loads(line)["path"]) == MAX_FIELD_LENGTH

    def test_non_json_values_become_strings(self):
        line = JsonLinesFormatter("s").format(make_record("e", where=Path("/a/b")))
        assert json.loads(line)["where"] == "/a/b"


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_writes_jsonl_file(self, tmp_path, restore_root_logger):
        log_path = tmp_path / "state" / "session.jsonl"

        listener = configure_logging(log_path, "DEBUG", session_id="abc")
        logging.getLogger("puntes.tui.machine").info(
            "state_transition", extra={"from_state": "a", "to_state": "b"}
        )
        listener.stop()

        events = [json.loads(line) for line in log_path.read_text().splitlines()]
        assert [e["event"] for e in events] == ["session_started", "state_transition"]
        assert all(e["session_id"] == "abc" for e in events)
        assert events[1]["to_state"] == "b"

    def test_level_filters_records(self, tmp_path, restore_root_logger):
        log_path = tmp_path / "session.jsonl"

        listener = configure_logging(log_path, "WARNING")
        logging.getLogger("puntes").info("quiet")
        logging.getLogger("puntes").warning("loud")
        listener.stop()

        events = [json.loads(line)["event"] for line in log_path.read_text().splitlines()]
        assert events == ["loud"]

    def test_exception_traceback_is_kept(self, tmp_path, restore_root_logger):
        log_path = tmp_path / "session.jsonl"

        listener = configure_logging(log_path, "INFO")
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logging.getLogger("puntes").exception("command_crashed")
        listener.stop()

        event = json.loads(log_path.read_text().splitlines()[-1])
        assert event["event"] == "command_crashed"
        assert "RuntimeError: boom" in event["exc_info"]
