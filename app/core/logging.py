"""
app/core/logging.py

Purpose: Logging configuration

- JSON lines in production, coloured lines in development
- Per-request context (user_id, site_id, slug, phone, context) attached
  to every record through a contextvar
- Phone numbers masked before they reach a handler
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from app.core.config import settings


CONTEXT_FIELDS = ("user_id", "site_id", "slug", "phone", "context")

NOISY_LOGGERS = ("httpx", "httpcore", "motor", "pymongo", "openai", "uvicorn.access")

_log_context: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def mask_phone(phone: str) -> str:
    """Keep the country code and last 4 digits of a phone number."""
    if not phone or len(phone) < 8:
        return phone
    return f"{phone[:3]}{'*' * (len(phone) - 7)}{phone[-4:]}"


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        field: getattr(record, field)
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class ContextFilter(logging.Filter):
    """
    Copies the active LogContext onto each record. Values passed through
    `extra` win over the context.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)

        phone = getattr(record, "phone", None)
        if isinstance(phone, str):
            record.phone = mask_phone(phone)
        return True


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line for log shippers.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        log_data.update(_record_context(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        line = f"{color}[{timestamp}] {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"

        context = _record_context(record)
        if context:
            line += " [" + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def setup_logging() -> logging.Logger:
    """
    Configures the root logger once at startup.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if settings.is_production else DevelopmentFormatter())
    handler.addFilter(ContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Set third-party loggers to WARNING to reduce noise
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger("voicesite")
    logger.info(f"Logging configured (environment={settings.ENVIRONMENT}, level={settings.LOG_LEVEL})")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger namespaced under "voicesite".

    Args:
        name: Logger name (usually __name__)
    """
    return logging.getLogger(f"voicesite.{name}")


class LogContext:
    """
    Adds structured context to every record logged inside the block.
    Nested contexts merge; the inner value wins.

    Usage:
        with LogContext(user_id="123", site_id="abc"):
            logger.info("Creating site")
    """

    def __init__(self, **kwargs):
        self.context = {k: v for k, v in kwargs.items() if v is not None}
        self._token = None

    def __enter__(self):
        self._token = _log_context.set({**_log_context.get(), **self.context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _log_context.reset(self._token)
