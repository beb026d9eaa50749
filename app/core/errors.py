"""
app/core/errors.py

Purpose: Render every failure as {"error", "code", "details"}

- Application errors keep their own status code and code
- Framework 404/405 errors become HTTP_ERROR
- Body / query validation failures become VALIDATION_ERROR (422)
- Anything unhandled becomes INTERNAL_ERROR (500)
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import RateLimitError, VoiceSiteError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."


def error_response(
    status_code: int,
    error: str,
    code: str,
    details: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    body = ErrorResponse(error=error, code=code, details=details)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers
    )


def _validation_details(errors) -> List[Dict[str, Any]]:
    """
    Pydantic errors with their ctx values stringified. A field_validator
    that raises ValueError leaves the exception object in ctx.
    """
    details = []
    for error in errors:
        error = dict(error)
        if isinstance(error.get("ctx"), dict):
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        details.append(error)
    return jsonable_encoder(details)


def _retry_after(exc: RateLimitError) -> Optional[Dict[str, str]]:
    details = exc.details if isinstance(exc.details, dict) else {}
    seconds = details.get("retry_after_seconds")
    return {"Retry-After": str(int(seconds))} if seconds else None


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(VoiceSiteError)
    async def voicesite_exception_handler(request: Request, exc: VoiceSiteError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")

        headers = _retry_after(exc) if isinstance(exc, RateLimitError) else None
        return error_response(exc.status_code, exc.message, exc.code, exc.details, headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(
            exc.status_code,
            str(exc.detail),
            "HTTP_ERROR",
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(
            422,
            "Input validation failed",
            "VALIDATION_ERROR",
            _validation_details(exc.errors())
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=True
        )
        message = INTERNAL_ERROR_MESSAGE if settings.is_production else str(exc)
        return error_response(500, message, "INTERNAL_ERROR")
