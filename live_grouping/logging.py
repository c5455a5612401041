"""Logging setup for live-grouping: text or JSON lines on stdout."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

PACKAGE_LOGGER = "live_grouping"
TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Faker logs every provider lookup at DEBUG
NOISY_LOGGERS = ("faker",)


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Route all records to one stdout handler.

    Parameters
    ----------
    level : str
        Level name for the root and package loggers; unknown names
        fall back to INFO.
    format_type : str
        "json" for one JSON object per line, anything else for text.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(_build_formatter(format_type))
    root_logger.addHandler(console_handler)

    logging.getLogger(PACKAGE_LOGGER).setLevel(log_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return JsonFormatter()
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt=DATE_FORMAT)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, merging any ``log_context`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "extra"):
            log_data.update(record.extra)

        # Decimals and enums are written as strings
        return json.dumps(log_data, default=str)


def log_context(**fields: Any) -> dict[str, Any]:
    """Build the ``extra`` argument for a record with structured fields.

    ``logger.info("...", extra=log_context(project_id=pid))`` shows
    ``project_id`` as a top-level key in JSON output.
    """
    return {"extra": fields}


def get_logger(name: str) -> logging.Logger:
    """Logger for a module or script, under the package hierarchy.

    Names outside the package (``__main__`` from a script) are nested
    under ``live_grouping`` so that ``setup_logging`` levels apply.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
