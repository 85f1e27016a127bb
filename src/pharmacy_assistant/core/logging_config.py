"""Logging setup: plain-text or one-JSON-object-per-line output, tagged by caller."""
from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict

from pharmacy_assistant.core.utils import utcnow

TEXT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic")


class JSONFormatter(logging.Formatter):
    """Render a record as a JSON line, with the caller's phone number when the record has one."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        phone_number = getattr(record, "phone_number", None)
        if phone_number is not None:
            entry["phone_number"] = phone_number
        if hasattr(record, "extra_data"):
            entry["extra"] = record.extra_data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Adapter that merges fixed fields (e.g. ``phone_number``) into every record."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **self.extra}
        return msg, kwargs


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Route all logging to stdout; called by the API lifespan and the CLI callback."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_LOG_FORMAT, DATE_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_context_logger(name: str, **context: Any) -> ContextLogger:
    """Logger whose records all carry ``context``; the orchestrator passes ``phone_number``."""
    return ContextLogger(logging.getLogger(name), context)


def log_external_call(
    logger: logging.Logger,
    service: str,
    operation: str,
    success: bool,
    duration_ms: float,
    **extra: Any,
) -> None:
    """
    Record one call to the pharmacy directory or an LLM provider.

    Successes go out at INFO, failures at WARNING; the timing and any ``extra``
    fields ride along as ``extra_data`` so the JSON formatter keeps them.
    """
    outcome = "completed in" if success else "failed after"
    logger.log(
        logging.INFO if success else logging.WARNING,
        f"{service}.{operation} {outcome} {duration_ms:.0f}ms",
        extra={"extra_data": {
            "service": service,
            "operation": operation,
            "success": success,
            "duration_ms": round(duration_ms, 2),
            **extra,
        }},
    )


__all__ = [
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "log_external_call",
    "JSONFormatter",
    "ContextLogger",
]
