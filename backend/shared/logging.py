"""Structured logging for tracker sessions.

Events go to stdout and, when a log directory is given, to one
timestamped file per session. Level and format normally come from
TrackerSettings (TRACKER_LOG_LEVEL, TRACKER_LOG_FORMAT).
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def _serialize_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Replace Enum instances (phases, kan types, operation families) with their .value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def _is_test() -> bool:
    return "pytest" in sys.modules


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level {level!r}")
    return resolved


def _build_formatter(*, json_mode: bool) -> logging.Formatter:
    renderer = structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer(colors=False)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _session_log_path(log_dir: Path | str) -> Path:
    dir_path = Path(log_dir)
    dir_path.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)
    return dir_path / f"{timestamp}.log"


def setup_logging(
    log_dir: Path | str | None = None,
    *,
    level: int | str = logging.INFO,
    json_mode: bool = False,
    **session: object,
) -> Path | None:
    """Route structlog through the stdlib root logger for one session.

    ``session`` key/values (e.g. player_count) are bound to every event of
    the session. Outside pytest, a log_dir gets a new timestamped log file
    whose path is returned; otherwise returns None.
    """
    root_level = _resolve_level(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _serialize_enums,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    structlog.contextvars.clear_contextvars()
    if session:
        structlog.contextvars.bind_contextvars(**session)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers.clear()

    formatter = _build_formatter(json_mode=json_mode)
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    if log_dir is None or _is_test():
        return None

    file_path = _session_log_path(log_dir)
    file_handler = logging.FileHandler(file_path)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
    return file_path
