"""Logging bootstrap utilities with optional structured output."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
import json
import logging
import os
from pathlib import Path
from typing import Any

APP_LOGGER_PREFIX = "study_buddy"

# Epoch used to convert LogRecord.created (POSIX float) to UTC datetime.
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_STANDARD_LOG_ATTRS = set(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class JsonFormatter(logging.Formatter):
    """Emit JSON lines for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        ts = (_EPOCH + timedelta(seconds=record.created)).isoformat()
        data: dict[str, Any] = {
            "ts": ts,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _STANDARD_LOG_ATTRS:
                continue
            data[key] = value
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(
            data, ensure_ascii=False, separators=(",", ":"), default=_json_default
        )


def log_event(
    logger: logging.Logger, level: int, event: str, **fields: Any
) -> None:
    """Log ``event`` as the message and attach it plus ``fields`` as extras."""
    logger.log(level, event, extra={"event": event, **fields})


def _best_effort_private_permissions(path: Path) -> None:
    if os.name != "posix":
        return
    try:
        path.chmod(0o600)
    except OSError:
        logging.getLogger(__name__).warning(
            "Unable to enforce 0600 permissions for %s", path
        )


def _build_formatter(structured: bool) -> logging.Formatter:
    if structured:
        return JsonFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")


def configure_logging(logging_config: dict[str, Any]) -> None:
    """Configure root logging according to the ``[logging]`` config section.

    Console output is limited to WARNING and above from this package so the
    terminal UI is not overdrawn; the optional log file receives everything
    at the configured level.
    """
    level_name = str(logging_config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    formatter = _build_formatter(bool(logging_config.get("structured", True)))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    for logger_name in ("httpx", "httpcore"):
        library_logger = logging.getLogger(logger_name)
        library_logger.setLevel(logging.WARNING)
        library_logger.propagate = True

    def app_only_filter(record: logging.LogRecord) -> bool:
        return record.name.startswith(APP_LOGGER_PREFIX)

    stderr_handler = logging.StreamHandler()
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(max(level, logging.WARNING))
    stderr_handler.addFilter(app_only_filter)
    root.addHandler(stderr_handler)

    if bool(logging_config.get("log_to_file", False)):
        target = Path(
            str(logging_config.get("log_file_path", "~/.local/state/study-buddy/app.log"))
        ).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(target, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root.addHandler(file_handler)
        _best_effort_private_permissions(target)
