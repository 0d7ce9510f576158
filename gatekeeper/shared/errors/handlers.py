"""
Centralized error handlers for FastAPI.

Every error escaping request handling is funneled into the
ErrorClassifier, which logs it once and decides what the client sees.
All error responses use the {status, message, stack?} shape.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from gatekeeper.domain.resilience.entities import RequestContext
from gatekeeper.domain.resilience.error_classifier import ErrorClassifier
from gatekeeper.domain.resilience.errors import (
    AppError,
    FieldValidationError,
    ValidationEntry,
)

# Location prefixes FastAPI puts in front of the field path.
_LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})


def _field_name(location: tuple) -> str:
    parts = [str(part) for part in location]
    if len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def validation_entries(exc: RequestValidationError) -> list[ValidationEntry]:
    """Convert FastAPI validation errors into field-level entries."""
    return [
        ValidationEntry(
            param=_field_name(tuple(error.get("loc", ()))),
            msg=str(error.get("msg", "")),
        )
        for error in exc.errors()
    ]


def classified_response(
    classifier: ErrorClassifier, request: Request, err: object
) -> JSONResponse:
    """Classify an error and render the response for it."""
    context = RequestContext(path=request.url.path, method=request.method)
    result = classifier.classify(err, context)
    return JSONResponse(status_code=result.status_code, content=result.to_payload())


class UnexpectedErrorMiddleware(BaseHTTPMiddleware):
    """Innermost middleware classifying errors no exception handler claimed.

    Starlette hands such errors to its outermost server-error layer, past
    every other middleware. Answering them here keeps the rate limit and
    security headers on 500 responses.
    """

    def __init__(self, app: ASGIApp, classifier: ErrorClassifier) -> None:
        super().__init__(app)
        self._classifier = classifier

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return classified_response(self._classifier, request, exc)


def register_error_handlers(app: FastAPI, classifier: ErrorClassifier) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
        classifier: The classifier every handler funnels into.
    """

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        """Handle deliberately raised operational errors."""
        return classified_response(classifier, request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle framework HTTP errors (405, explicit HTTPException)."""
        response = classified_response(
            classifier, request, AppError(str(exc.detail), exc.status_code)
        )
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation failures with field-level detail."""
        return classified_response(
            classifier, request, FieldValidationError(validation_entries(exc))
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for errors raised outside UnexpectedErrorMiddleware."""
        return classified_response(classifier, request, exc)
