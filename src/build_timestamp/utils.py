"""Shared helpers: instant normalization and logger setup."""

from datetime import datetime, timezone
import json
import logging

__all__ = ["ensure_aware", "JsonLineFormatter", "configure_logger"]


def ensure_aware(instant: datetime) -> datetime:
    """Return an aware datetime, reading naive values as UTC.

    Raises:
        TypeError: If instant is not a datetime
    """
    if not isinstance(instant, datetime):
        raise TypeError(f"Expected datetime instant, got {type(instant).__name__}")
    if instant.tzinfo is None or instant.utcoffset() is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, with the message escaped by json.dumps."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logger(name: str = "build_timestamp", level: str = "INFO", structured: bool = False) -> logging.Logger:
    """Install a single stream handler on the package logger.

    Args:
        name: Logger name, the package root by default
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Emit JSON lines instead of plain text

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLineFormatter() if structured else logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))
    logger.addHandler(handler)

    return logger
