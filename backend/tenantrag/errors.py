"""Application error taxonomy and its HTTP rendering."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors rendered as a JSON ``{message}`` body."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {"message": self.message}


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated"


class TenantContextRequired(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Tenant context is required for this operation"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ValidationFailed(AppError):
    """Input rejected; the offending field is reported alongside the message."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input"

    def __init__(self, message: str | None = None, field: str | None = None):
        super().__init__(message)
        self.field = field

    def to_payload(self) -> dict:
        payload = {"message": self.message}
        if self.field is not None:
            payload["field"] = self.field
        return payload


class GenerationError(AppError):
    """The language-model provider call failed."""
    message = "Failed to generate a response"


class TenantServiceError(AppError):
    """The remote tenant directory returned an error or was unreachable."""
    message = "Tenant service request failed"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    # Drop the leading "body"/"query"/"path" segment
    loc = [str(part) for part in first.get("loc", ())][1:]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": first.get("msg", "Invalid input"),
            "field": ".".join(loc),
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
