"""
Global exception handlers.

- HTTPException (404/409/401/403 raised by routes) -> logged, default ``{"detail"}`` body
- RequestValidationError, UnprocessableEntity -> 422 with a readable message plus field errors
- psycopg2 IntegrityError -> 409, DataError -> 422
- anything else -> 500 without internal details
"""
import logging

import psycopg2
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class UnprocessableEntity(HTTPException):
    """422 raised by route code; rendered with the same body as request validation errors."""

    def __init__(self, message: str, field: str = "body", error_type: str = "value_error"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=message)
        self.field = field
        self.error_type = error_type


def _field_name(loc) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in ("body", "query", "path"):
        parts = parts[1:]
    return ".".join(parts) or "body"


# PUBLIC_INTERFACE
def validation_error_content(exc: RequestValidationError) -> dict:
    """Body of a 422 response: one joined message and per-field details."""
    errors = [
        {"field": _field_name(e.get("loc", ())), "message": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    message = ". ".join(f'"{e["field"]}" {e["message"]}' for e in errors)
    return {"message": message, "errors": errors}


# PUBLIC_INTERFACE
def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def logged_http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error("HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail)
        else:
            logger.info(
                "HTTP %s on %s: %s",
                exc.status_code,
                request.url.path,
                exc.detail,
                extra={"path": request.url.path, "method": request.method, "status_code": exc.status_code},
            )
        return await http_exception_handler(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        content = validation_error_content(exc)
        logger.warning(
            "Validation error on %s: %s",
            request.url.path,
            content["message"],
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=content)

    @app.exception_handler(UnprocessableEntity)
    async def unprocessable_entity_handler(request: Request, exc: UnprocessableEntity):
        logger.warning(
            "Rejected input on %s: %s",
            request.url.path,
            exc.detail,
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "message": exc.detail,
                "errors": [{"field": exc.field, "message": exc.detail, "type": exc.error_type}],
            },
        )

    @app.exception_handler(psycopg2.IntegrityError)
    async def integrity_error_handler(request: Request, exc: psycopg2.IntegrityError):
        logger.warning("Integrity error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": "The request conflicts with existing data"},
        )

    @app.exception_handler(psycopg2.DataError)
    async def data_error_handler(request: Request, exc: psycopg2.DataError):
        logger.warning("Data error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"message": "Invalid value for this resource", "errors": []},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=True,
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
