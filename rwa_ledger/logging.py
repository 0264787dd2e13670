"""Logging setup for rwa-ledger.

Two output styles are supported: a pipe-separated line format for
terminals and a one-object-per-line JSON format for log shippers. Ledger
code attaches ``property_id`` and ``caller`` to records through
``extra=``; the JSON formatter lifts them to top-level keys.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, MutableMapping

LINE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Record attributes promoted into the JSON payload
LEDGER_FIELDS = ("property_id", "caller")

QUIET_LOGGERS = ("confluent_kafka", "faker")


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    log_file: Path | None = None,
) -> None:
    """Configure the root logger for rwa-ledger.

    Parameters
    ----------
    level : str
        Log level name. Unknown names fall back to INFO.
    format_type : str
        ``"standard"`` or ``"json"``.
    log_file : Path, optional
        Also write records to this file, using the same formatter.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    formatter: logging.Formatter
    if format_type == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=LINE_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger("rwa_ledger").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in LEDGER_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Free-form fields passed as extra={"extra": {...}}
        if isinstance(getattr(record, "extra", None), dict):
            payload.update(record.extra)

        return json.dumps(payload, default=str)


class LedgerLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps every record with fixed ledger fields."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str, **fields: Any) -> logging.Logger | LedgerLoggerAdapter:
    """Return the logger ``name``, bound to ``fields`` when any are given.

    >>> log = get_logger("rwa_ledger.escrow", caller="0xowner")
    >>> log.info("Settling")  # record carries caller="0xowner"
    """
    logger = logging.getLogger(name)
    if fields:
        return LedgerLoggerAdapter(logger, fields)
    return logger
