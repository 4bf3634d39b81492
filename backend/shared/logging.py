"""Structured logging for the scorer, built on structlog over stdlib logging.

Environment variables:
- LOG_FORMAT: "json" writes one JSON object per line, "console" or unset
  writes human-readable lines.
- LOG_LEVEL: "DEBUG", "INFO" (default), "WARNING", "ERROR", or "CRITICAL".

Log files are named ``scorer_<UTC timestamp>.log``; one is created per call to
``setup_logging`` with a log directory. No file is written under pytest.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FILE_PREFIX = "scorer"
LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

_LOG_FORMATS = ("json", "console", "")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_SHARED_PROCESSORS = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
)


class LogOptions(NamedTuple):
    json: bool
    level: int


def _plain(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _plain_enum_values(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Render levels, actions and other enums by value, including inside containers."""
    for key, value in event_dict.items():
        event_dict[key] = _plain(value)
    return event_dict


def _is_test() -> bool:
    return "pytest" in sys.modules


def resolve_log_options(level: int | None = None) -> LogOptions:
    """Read LOG_FORMAT and LOG_LEVEL; an explicit ``level`` wins over the env."""
    log_format = os.environ.get("LOG_FORMAT", "").lower()
    if log_format not in _LOG_FORMATS:
        msg = f"Invalid LOG_FORMAT={log_format!r}. Must be 'json', 'console', or unset."
        raise ValueError(msg)

    if level is None:
        level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
        if level_name not in _LOG_LEVELS:
            msg = f"Invalid LOG_LEVEL={level_name!r}. Must be one of {', '.join(_LOG_LEVELS)}."
            raise ValueError(msg)
        level = getattr(logging, level_name)

    return LogOptions(json=log_format == "json", level=level)


def _formatter(options: LogOptions, *, colors: bool) -> logging.Formatter:
    if options.json:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _log_file_path(log_dir: Path | str) -> Path:
    dir_path = Path(log_dir)
    dir_path.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)
    return dir_path / f"{LOG_FILE_PREFIX}_{timestamp}.log"


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | None = None,
) -> Path | None:
    """
    Route structlog through the root logger to stdout and, optionally, a file.

    Replaces any handlers already on the root logger, so calling it again
    reconfigures rather than duplicates output. Returns the log file path,
    or None when no file was opened.
    """
    options = resolve_log_options(level)

    # tracebacks are rendered by the handler formatters only
    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            _plain_enum_values,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(options.level)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(_formatter(options, colors=sys.stdout.isatty()))
    root_logger.addHandler(stdout_handler)

    if log_dir is None or _is_test():
        return None

    file_path = _log_file_path(log_dir)
    file_handler = logging.FileHandler(file_path, encoding="utf-8")
    file_handler.setFormatter(_formatter(options, colors=False))
    root_logger.addHandler(file_handler)
    return file_path
