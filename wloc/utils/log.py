"""
Logging utilities for the wloc toolkit.

- Rich console output on stderr (stdout is reserved for `wloc lookup` JSON)
- JSON-lines file output when WLOC_LOG_FILE is set, or to `serve.log` for
  `wloc serve`
- level from WLOC_LOG_LEVEL (default INFO)
"""

import logging
import os
import sys
import json
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# attributes a caller may attach with `extra=` that belong in the JSON record
EXTRA_FIELDS = ("bssid", "upstream_status", "reason")


class JSONFormatter(logging.Formatter):
    """
    Formatter that serializes log records to JSON.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level":     record.levelname,
            "logger":    record.name,
            "message":   record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log_record[key] = getattr(record, key)
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def _log_file() -> Path | None:
    configured = os.environ.get("WLOC_LOG_FILE")
    if configured:
        return Path(configured)
    if len(sys.argv) > 1 and sys.argv[1] == "serve":
        return Path.cwd() / "serve.log"
    return None


def _env_level() -> int:
    """WLOC_LOG_LEVEL as a level number; unknown names fall back to INFO."""
    name = os.environ.get("WLOC_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO

def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """
    Return a configured logger for the given name.

    Parameters
    ----------
    name
        Logger name (typically __name__).
    level
        Log level (int or string); falls back to WLOC_LOG_LEVEL, then INFO.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    if level is None:
        level = _env_level()
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

        log_path = _log_file()
        if log_path is not None:
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)

    return logger
