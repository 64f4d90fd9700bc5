"""
Request middleware and exception handlers for the prediction API.

Stack, outermost first: CORS, correlation ID, database connection.
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging import get_logger, set_correlation_id
from db.base import db
from schemas.common import error_response, ApiStatus

log = get_logger("middleware")

HTTP_ERROR_STATUSES = {
    401: ApiStatus.AUTHENTICATION_ERROR,
    403: ApiStatus.AUTHENTICATION_ERROR,
    404: ApiStatus.NOT_FOUND,
    500: ApiStatus.SERVER_ERROR,
}


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Echo X-Correlation-ID, minting one when the caller sent none, and tag logs with it."""

    HEADER_NAME = "X-Correlation-ID"

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(self.HEADER_NAME) or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        response = await call_next(request)
        response.headers[self.HEADER_NAME] = correlation_id
        return response


class DatabaseMiddleware(BaseHTTPMiddleware):
    """
    Hold a connection open for the request.

    Peewee connections are per thread. The prediction routes are async and
    hit the cache from the event loop thread, so every in-flight request
    shares that one connection. It is opened by the first request and closed
    when the last in-flight request finishes. A connection opened elsewhere
    (e.g. by init_db) is left alone.
    """

    def __init__(self, app):
        super().__init__(app)
        self._in_flight = 0
        self._owns_connection = False

    async def dispatch(self, request: Request, call_next):
        if db.is_closed():
            db.connect(reuse_if_open=True)
            self._owns_connection = True
        self._in_flight += 1

        try:
            return await call_next(request)
        finally:
            self._in_flight -= 1
            if self._in_flight == 0 and self._owns_connection:
                self._owns_connection = False
                if not db.is_closed():
                    db.close()


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors with only JSON-safe fields."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def setup_middleware(app: FastAPI):
    """Install the middleware stack and the ApiStatus error handlers."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = jsonable_errors(exc)
        log.warning("request_validation_failed", url=str(request.url), errors=errors)
        return JSONResponse(
            status_code=422,
            content=error_response(
                message="Request validation failed",
                status=ApiStatus.VALIDATION_ERROR,
                error_code="VALIDATION_ERROR",
                data={"errors": errors},
            )
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(
                message=str(exc.detail),
                status=HTTP_ERROR_STATUSES.get(exc.status_code, ApiStatus.ERROR),
            ),
            headers=getattr(exc, "headers", None),
        )

    # Added innermost first
    app.add_middleware(DatabaseMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Prediction data is public and read-mostly
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
