"""
Log sinks and per-request log context.

Every request runs under a correlation id stored in a ContextVar, so log
lines and error envelopes produced while serving it can be tied together.
"""

import sys
import uuid
from contextvars import ContextVar
from typing import Any, Optional
from loguru import logger
from fastapi import Request

MAX_CORRELATION_ID_LENGTH = 128

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Install the application log sinks.

    Args:
        level: Minimum level for every sink
        log_file: Optional path of a rotating file sink
    """
    logger.remove()  # Remove default handler
    if log_file:
        logger.add(
            log_file,
            level=level,
            rotation="10 MB",
            retention="30 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[correlation_id]} | {name}:{line} | {message}"
        )
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> | {message}"
    )
    logger.configure(patcher=_add_correlation_id)


def current_correlation_id() -> Optional[str]:
    return _correlation_id.get()


def _add_correlation_id(record) -> None:
    record["extra"].setdefault("correlation_id", _correlation_id.get() or "-")


def bind_correlation_id(incoming: Optional[str] = None) -> str:
    """
    Make ``incoming`` the correlation id of the current request.

    Blank or oversized values are replaced by a fresh id.
    """
    value = (incoming or "").strip()
    if not value or len(value) > MAX_CORRELATION_ID_LENGTH:
        value = uuid.uuid4().hex
    _correlation_id.set(value)
    return value


def log_request(request: Request) -> None:
    client = request.client.host if request.client else None
    logger.bind(client=client).info(f"{request.method} {request.url.path}")


def log_response(request: Request, status_code: int, elapsed_ms: float) -> None:
    """Log the outcome; 4xx at warning and 5xx at error level."""
    if status_code >= 500:
        level = "ERROR"
    elif status_code >= 400:
        level = "WARNING"
    else:
        level = "INFO"
    logger.log(level, f"{request.method} {request.url.path} -> {status_code} ({elapsed_ms:.1f}ms)")


def log_error(error: Exception, **context: Any) -> None:
    """Log an exception with its traceback and any extra context fields."""
    name = type(error).__name__
    logger.bind(error_type=name, **context).opt(exception=error).error(f"{name}: {error}")
