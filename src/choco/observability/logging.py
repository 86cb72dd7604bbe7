"""Structured logging for choco.

Two independent sinks share one structlog pipeline:

- the console, a rich handler on stderr whose level follows ``-v``;
- an optional JSON-lines file, ``{log_dir}/debug.jsonl``, enabled by
  ``--log``, which records every event at DEBUG.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 - Used at runtime for path operations
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger, Processor

LOG_FILE_NAME = "debug.jsonl"

# -v count to console level; anything above the table means DEBUG.
_CONSOLE_LEVELS = {0: logging.WARNING, 1: logging.INFO}

_configured = False
_file_handler: logging.FileHandler | None = None
_logs_dir: Path | None = None


def _record_entry(record: logging.LogRecord) -> dict[str, Any]:
    """Flatten a log record, and the structlog event dict it carries, into one mapping."""
    entry: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "level": record.levelname,
        "logger": record.name,
    }
    if not isinstance(record.msg, dict):
        entry["message"] = record.getMessage()
        return entry

    fields = {k: v for k, v in record.msg.items() if k not in ("level", "timestamp")}
    entry["message"] = fields.pop("event", "")
    entry.update(fields)
    return entry


class JSONLFileHandler(logging.FileHandler):
    """Append one JSON object per record."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = json.dumps(_record_entry(record), default=str, ensure_ascii=False)
            if self.stream:
                self.stream.write(line + "\n")
                self.stream.flush()
        except Exception:
            self.handleError(record)


def _console_handler(verbosity: int) -> RichHandler:
    # More detail per line as verbosity grows.
    return RichHandler(
        console=Console(stderr=True),
        level=_CONSOLE_LEVELS.get(verbosity, logging.DEBUG),
        markup=False,
        rich_tracebacks=True,
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        tracebacks_show_locals=verbosity >= 2,
    )


def _open_log_file(log_dir: Path) -> JSONLFileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = JSONLFileHandler(str(log_dir / LOG_FILE_NAME), mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    return handler


def configure_logging(
    verbosity: int = 0,
    log_to_file: bool = False,
    log_dir: Path | None = None,
) -> None:
    """Set up the console sink and, optionally, the JSONL file sink.

    Calling it again replaces the previous configuration and closes any file
    opened by the earlier call.

    Args:
        verbosity: Console level: 0 is WARNING, 1 is INFO, 2 or more is DEBUG.
        log_to_file: Also append every event to ``{log_dir}/debug.jsonl``.
        log_dir: Where the log file goes. Required with ``log_to_file``.

    Raises:
        ValueError: ``log_to_file`` was requested without a ``log_dir``.
    """
    global _configured, _file_handler, _logs_dir

    if log_to_file and log_dir is None:
        raise ValueError("log_dir is required when log_to_file=True")

    close_file_logging()
    _logs_dir = None

    handlers: list[logging.Handler] = [_console_handler(verbosity)]
    if log_to_file and log_dir is not None:
        _file_handler = _open_log_file(log_dir)
        _logs_dir = log_dir
        handlers.append(_file_handler)

    # The root level gates what reaches any handler; the file wants everything.
    if verbosity > 0 or log_to_file:
        root_level = logging.DEBUG
    else:
        root_level = logging.WARNING
    logging.basicConfig(level=root_level, format="%(message)s", handlers=handlers, force=True)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Return a structlog logger, configuring defaults on first use."""
    if not _configured:
        configure_logging()
    logger: FilteringBoundLogger = structlog.get_logger(name)
    return logger


def get_logs_dir() -> Path | None:
    """Directory receiving ``debug.jsonl``, or None while file logging is off."""
    return _logs_dir


def close_file_logging() -> None:
    """Flush and close the JSONL file, if one is open."""
    global _file_handler
    if _file_handler is not None:
        _file_handler.close()
        _file_handler = None
