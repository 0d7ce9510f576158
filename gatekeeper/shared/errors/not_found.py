"""
Not-found translation for unmatched routes.

Installed as the router's default handler: a request that matches no
route becomes an operational AppError(404), which the error handlers
funnel into the classifier like any other error.
"""

from fastapi import FastAPI
from starlette.requests import Request
from starlette.types import Receive, Scope, Send

from gatekeeper.domain.resilience.errors import AppError

HTTP_404 = 404


def original_url(request: Request) -> str:
    """Path plus query string, as the client sent it."""
    if request.url.query:
        return f"{request.url.path}?{request.url.query}"
    return request.url.path


def not_found_error(request: Request) -> AppError:
    return AppError(f"Not found - {original_url(request)}", HTTP_404)


def install_not_found_translator(app: FastAPI) -> None:
    """Route unmatched HTTP requests to a 404 AppError.

    Args:
        app: The FastAPI application whose router gets the default.
    """
    fallback = app.router.default

    async def translate_not_found(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await fallback(scope, receive, send)
            return
        raise not_found_error(Request(scope, receive))

    app.router.default = translate_not_found
