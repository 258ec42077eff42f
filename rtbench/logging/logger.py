# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for rtbench.

Every log entry is a single JSON line that is timestamped, leveled and tagged
with the source module. Progress, skip notices and measurement failures all go
through here.

How this works:
  - We use Python's standard `logging` module under the hood, but replace the
    default formatter with JsonFormatter, which serializes every log record
    into a single JSON line.
  - Standard output belongs to the comparison table, so the console handler
    writes to stderr. A file handler is attached when a log file is given.
  - The factory function `get_logger` is the only way to create loggers.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "rtbench.runner.matrix", "msg": "Runtime measured", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO

_STANDARD_ATTRS: frozenset[str] = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "relativeCreated",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "pathname",
    "filename",
    "module",
    "levelno",
    "levelname",
    "processName",
    "process",
    "threadName",
    "thread",
    "message",
    "msecs",
    "taskName",
})


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Each log entry contains four mandatory fields:
      ts: ISO 8601 UTC timestamp
      level: log level name
      module: the logger name (usually the Python module path)
      msg: the formatted message string

    Fields passed through `extra` are merged into the object, which is how the
    harness attaches benchmark names, runtime ids, exit codes and timings.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


# Process-wide defaults, set by configure_logging. Loggers created later
# (modules the CLI imports lazily) pick these up.
_default_level: str = "INFO"
_default_log_file: Optional[Path] = None


def _attach_file_handler(logger: logging.Logger, log_file: Path, level: int) -> None:
    if any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        return
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Create a structured JSON logger.

    Every module calls this once at the top and uses the returned logger
    instance. Calling it again for the same name only updates the level, so
    the CLI can raise or lower verbosity after modules have been imported.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL. Defaults to
                   the level last given to configure_logging (INFO at start).
        log_file: Optional path to a log file. If provided, logs go to both
                  the console stream and the file. Defaults to the file last
                  given to configure_logging.
        stream: Console stream, stderr when omitted.

    Returns:
        A configured logging.Logger that outputs structured JSON.
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level if log_level is not None else _default_level)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    console_handler = logging.StreamHandler(stream=stream if stream is not None else sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(JsonFormatter())
    logger.addHandler(console_handler)

    target_file = log_file if log_file is not None else _default_log_file
    if target_file is not None:
        _attach_file_handler(logger, target_file, level)

    logger.propagate = False

    return logger


def configure_logging(log_level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """
    Apply one level (and optional log file) to every rtbench logger.

    Loggers that already exist are re-levelled and get the file handler;
    the values are also kept as defaults for loggers created afterwards, so
    modules imported late in a run log the same way.
    """
    global _default_level, _default_log_file

    level = _resolve_log_level(log_level)
    _default_level = log_level.upper()
    _default_log_file = log_file

    for name in list(logging.Logger.manager.loggerDict):
        if not name.startswith("rtbench"):
            continue
        logger = logging.getLogger(name)
        if not logger.handlers:
            continue
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        if log_file is not None:
            _attach_file_handler(logger, log_file, level)
