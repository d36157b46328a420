"""
Budget Alerts — Structured Logging

JSON log formatting and logger setup for the budget_alerts package.
The owning stack id is carried in a context variable and stamped on every record.
"""

import contextvars
import json
import logging
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime

from ..config.schemas import LogFormat, LogLevel

ROOT_LOGGER = "budget_alerts"

_stack_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar("stack_id", default=None)

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset(
    (
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


@contextmanager
def stack_context(stack_id: str) -> Generator[None, None, None]:
    """
    Stamp log records emitted inside the block with stack_id.

    Example:
        with stack_context("prod-account"):
            strategy.create_alerts()
    """
    token = _stack_id_ctx.set(stack_id)
    try:
        yield
    finally:
        _stack_id_ctx.reset(token)


def get_stack_id() -> str | None:
    return _stack_id_ctx.get()


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        stack_id = _stack_id_ctx.get()
        if stack_id:
            log_data["stack_id"] = stack_id

        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    fmt: LogFormat | str = LogFormat.JSON,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Log level name
        fmt: "json" for structured output, "text" for plain lines

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if LogFormat(fmt) == LogFormat.JSON:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(LogLevel(level).value)
    logger.propagate = False

    return logger
