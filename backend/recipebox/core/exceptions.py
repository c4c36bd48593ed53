"""
Global exception handlers for FastAPI application.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from loguru import logger
from sqlalchemy.exc import TimeoutError as SQLAlchemyTimeoutError

from recipebox.core.logging import current_correlation_id, log_error
from recipebox.utils.exceptions import (
    RecipeAppException,
    RecipeNotFoundError,
    TagNotFoundError,
    IngredientNotFoundError,
    CollectionNotFoundError,
    SearchQueryError,
    AuthenticationError,
    PermissionDeniedError,
    ValidationError as CustomValidationError,
)
from recipebox.utils.formatters import format_error_response, format_timestamp


async def recipe_app_exception_handler(request: Request, exc: RecipeAppException) -> JSONResponse:
    """Handle custom recipe application exceptions."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    # Map exception types to status codes
    if isinstance(
        exc, (RecipeNotFoundError, TagNotFoundError, IngredientNotFoundError, CollectionNotFoundError)
    ):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, AuthenticationError):
        status_code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, PermissionDeniedError):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, CustomValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, SearchQueryError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    error_response = format_error_response(exc, status_code, current_correlation_id())

    if status_code >= 500:
        log_error(exc, path=request.url.path)
    else:
        logger.info(f"Recipe app exception: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content=error_response,
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", []))
        errors.append({
            "field": field,
            "message": error.get("msg"),
            "type": error.get("type")
        })

    error_response = {
        "error": "ValidationError",
        "detail": "Request validation failed",
        "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
        "errors": errors,
        "correlation_id": current_correlation_id(),
        "timestamp": format_timestamp(),
    }

    logger.warning(f"Validation error: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle generic exceptions."""
    if isinstance(exc, SQLAlchemyTimeoutError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": "ServiceUnavailable",
                "detail": "Database is busy (connection pool exhausted). Please retry in a moment.",
                "status_code": status.HTTP_503_SERVICE_UNAVAILABLE,
            },
            headers={"Retry-After": "3"},
        )

    error_response = format_error_response(
        exc, status.HTTP_500_INTERNAL_SERVER_ERROR, current_correlation_id()
    )
    error_response["detail"] = "Internal server error"

    log_error(exc, path=request.url.path, method=request.method)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response
    )
