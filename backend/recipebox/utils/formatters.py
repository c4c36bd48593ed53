"""
Data formatting utilities.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


def format_timestamp(dt: Optional[datetime] = None) -> str:
    """
    Format a datetime as an ISO-8601 UTC string.

    Args:
        dt: Datetime object, now if omitted

    Returns:
        ISO formatted string
    """
    if dt is None:
        dt = datetime.now(timezone.utc)
    elif dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def format_error_response(
    error: Exception,
    status_code: int = 500,
    correlation_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Format error response for API.

    Args:
        error: Exception object
        status_code: HTTP status code
        correlation_id: Request correlation ID, if any

    Returns:
        Formatted error response dictionary
    """
    response = {
        "error": error.__class__.__name__,
        "detail": str(error),
        "status_code": status_code,
        "correlation_id": correlation_id,
        "timestamp": format_timestamp(),
    }

    # Add additional details for custom exceptions
    if getattr(error, "detail", None):
        response["detail"] = error.detail

    if getattr(error, "field", None):
        response["field"] = error.field

    return response
