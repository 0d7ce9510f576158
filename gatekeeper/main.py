"""
Application entry point.

Creates the FastAPI application and wires together:
- Error funnel (classifier, exception handlers, not-found translation)
- Rate limiting (default policy middleware, auth policy dependency)
- Security headers middleware
- Logging configuration
- Routers

No business logic belongs here.
"""

import time
from typing import Callable, Optional, Sequence

from fastapi import APIRouter, Depends, FastAPI

from gatekeeper.core.config import Settings, settings
from gatekeeper.domain.resilience.errors import RateLimitExceededError
from gatekeeper.domain.resilience.ports import LogSink
from gatekeeper.interfaces.dependencies import (
    auth_rate_limit,
    get_error_classifier,
    get_log_sink,
    get_rate_limit_store,
    get_rate_limiter,
)
from gatekeeper.interfaces.health import router as health_router
from gatekeeper.shared.errors.handlers import (
    UnexpectedErrorMiddleware,
    register_error_handlers,
)
from gatekeeper.shared.errors.not_found import install_not_found_translator
from gatekeeper.shared.logging import configure_logging
from gatekeeper.shared.security.headers import SecurityHeadersMiddleware
from gatekeeper.shared.security.rate_limiting import (
    DEFAULT_POLICY,
    RateLimitMiddleware,
    build_policies,
    rate_limit_exceeded_handler,
)

API_PREFIX = "/api/v1"
AUTH_PREFIX = f"{API_PREFIX}/auth"


def create_app(
    app_settings: Optional[Settings] = None,
    *,
    routers: Sequence[APIRouter] = (),
    auth_routers: Sequence[APIRouter] = (),
    log_sink: Optional[LogSink] = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Args:
        app_settings: Settings to use instead of the environment-loaded ones.
        routers: Application routers mounted under /api/v1.
        auth_routers: Authentication routers mounted under /api/v1/auth,
            additionally guarded by the auth rate limit policy.
        log_sink: Sink for error records; defaults to the logging adapter.
        clock: Time source for rate limit windows (epoch seconds).

    Returns:
        A fully configured FastAPI application instance.
    """
    app_settings = app_settings or settings
    configure_logging(
        level=app_settings.log_level, error_log_file=app_settings.error_log_file
    )

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
    )

    classifier = get_error_classifier(app_settings, log_sink or get_log_sink())
    limiter = get_rate_limiter(get_rate_limit_store(app_settings), clock=clock)
    policies = build_policies(app_settings)

    app.state.error_classifier = classifier
    app.state.rate_limiter = limiter
    app.state.rate_limit_policies = policies

    # --- Error Funnel (innermost middleware) ---
    app.add_middleware(UnexpectedErrorMiddleware, classifier=classifier)

    # --- Rate Limiting ---
    app.add_exception_handler(RateLimitExceededError, rate_limit_exceeded_handler)
    app.add_middleware(
        RateLimitMiddleware, limiter=limiter, policy=policies[DEFAULT_POLICY]
    )

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app, classifier)
    install_not_found_translator(app)

    # --- Routers ---
    app.include_router(health_router, prefix=API_PREFIX)
    for router in routers:
        app.include_router(router, prefix=API_PREFIX)
    for router in auth_routers:
        app.include_router(
            router, prefix=AUTH_PREFIX, dependencies=[Depends(auth_rate_limit)]
        )

    return app


app = create_app()
