"""Structured JSONL logging for puntes sessions.

curses owns the terminal while the app runs, so records go to a file only.
The root logger gets a QueueHandler; a QueueListener thread does the file
writes, which keeps the UI update loop free of file I/O.
"""

import copy
import json
import logging
import logging.handlers
import queue
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

# Max length of a single string field in a log line
MAX_FIELD_LENGTH = 200

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

# Attributes every LogRecord has; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
    | {"message", "asctime", "taskName"}
)


def _truncate(value: Any) -> Any:
    if isinstance(value, str) and len(value) > MAX_FIELD_LENGTH:
        return value[:MAX_FIELD_LENGTH]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return _truncate(str(value))


class JsonLinesFormatter(logging.Formatter):
    """Format each record as one JSON object per line."""

    def __init__(self, session_id: str) -> None:
        super().__init__()
        self.session_id = session_id

    def format(self, record: logging.LogRecord) -> str:
        event = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "session_id": self.session_id,
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in event:
                event[key] = _truncate(value)
        if record.exc_info:
            event["exc_info"] = self.formatException(record.exc_info)
        elif record.exc_text:
            event["exc_info"] = record.exc_text
        return json.dumps(event, ensure_ascii=False)


class _RecordQueueHandler(logging.handlers.QueueHandler):
    """QueueHandler that keeps the bare message and extras intact.

    The stock ``prepare`` folds the traceback into ``msg``; here it moves to
    ``exc_text`` so the event name stays clean.
    """

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        record = copy.copy(record)
        record.msg = record.getMessage()
        record.args = None
        if record.exc_info:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
            record.exc_info = None
        return record


def configure_logging(
    log_path: Path, level: str = "INFO", session_id: str | None = None
) -> logging.handlers.QueueListener:
    """Route all logging to a JSONL file through a background listener.

    Args:
        log_path: File to append records to. Parent directories are created.
        level: One of LOG_LEVELS.
        session_id: Identifier written on every line. Generated if omitted.

    Returns:
        The started QueueListener. Call ``stop()`` on exit to flush it.
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)
    session_id = session_id or str(uuid.uuid4())

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(JsonLinesFormatter(session_id))

    records: queue.Queue = queue.Queue()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.addHandler(_RecordQueueHandler(records))
    root.setLevel(LOG_LEVELS.get(level.upper(), logging.INFO))

    listener = logging.handlers.QueueListener(
        records, file_handler, respect_handler_level=True
    )
    listener.start()
    logging.getLogger(__name__).info(
        "session_started", extra={"log_path": str(log_path)}
    )
    return listener
