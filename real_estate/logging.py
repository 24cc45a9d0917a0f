"""Logging setup for the lot inventory.

Modules log through ``logging.getLogger(__name__)``; this module only decides
where records go and how they look.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# LogRecord attributes copied into JSON output when a caller passes them via ``extra``
CONTEXT_FIELDS = ("lot_id", "status", "feature", "path")


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    log_file: str | Path | None = None,
) -> None:
    """Configure the root logger for real_estate.

    Replaces any handlers already on the root logger.

    Parameters
    ----------
    level : str
        Log level name; unknown names fall back to INFO.
    format_type : str
        ``"standard"`` for pipe-separated text or ``"json"`` for one JSON
        object per line.
    log_file : str | Path | None
        Also append records to this file.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = _build_formatter(format_type)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger("real_estate").setLevel(log_level)

    # Faker logs locale lookups at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return JsonFormatter()
    return logging.Formatter(fmt=STANDARD_FORMAT, datefmt=DATE_FORMAT)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with lot context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = str(value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Parameters
    ----------
    name : str
        Logger name (usually __name__).

    Returns
    -------
    logging.Logger
        Configured logger.
    """
    return logging.getLogger(name)
