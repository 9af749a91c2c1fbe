"""
Logging setup shared by the engine, the API and the launcher.

Modules grab a logger with ``get_logger(__name__)`` at import time; nothing
is emitted until ``configure_logging`` installs handlers (the launcher does it
once at startup). Records go to the console and to a rotating file under
``storage/logs``, optionally as one JSON object per line.
"""

from __future__ import annotations

import json as _json
import logging
import logging.handlers
import time
from typing import Any, Dict

from infra.paths import LOG_DIR, STORAGE_DIR

__all__ = ["STORAGE_DIR", "LOG_DIR", "configure_logging", "get_logger", "JsonFormatter"]

_ROOT_LOGGER_NAME = "ctf"
_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Attributes present on every LogRecord; anything else came in via `extra=`.
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line, carrying `extra=` fields along."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return _json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(level: str = "INFO", json: bool = False, log_to_file: bool = True) -> None:
    """
    Install console (and optionally file) handlers on the project loggers.

    Safe to call more than once: previously installed handlers are replaced.

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO")
        json: Emit JSON lines instead of plain text
        log_to_file: Also write to storage/logs/ctf.log (rotated at 1 MB)
    """
    formatter: logging.Formatter = JsonFormatter() if json else logging.Formatter(_TEXT_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                LOG_DIR / "ctf.log", maxBytes=1_000_000, backupCount=3, encoding="utf-8"
            )
        )

    for name in (_ROOT_LOGGER_NAME, "agents", "api", "game_runner", "__main__"):
        target = logging.getLogger(name)
        for handler in list(target.handlers):
            target.removeHandler(handler)
            handler.close()
        for handler in handlers:
            handler.setFormatter(formatter)
            target.addHandler(handler)
        target.setLevel(level.upper())
        target.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger for the given module name."""
    return logging.getLogger(name)
