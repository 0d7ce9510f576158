"""
Rate limiting configuration and setup.

Enforces fixed-window admission policies before handler logic runs:
- default policy: every request, through RateLimitMiddleware
- route-class policies (auth): through a RateLimitDependency

Protects against denial-of-service and resource abuse.
Rejections are rendered here and never reach the error classifier.
"""

import logging

from fastapi import Request, Response
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from gatekeeper.core.config import Settings
from gatekeeper.domain.resilience.entities import AdmissionDecision, RateLimitPolicy
from gatekeeper.domain.resilience.errors import RateLimitExceededError
from gatekeeper.domain.resilience.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

DEFAULT_POLICY = "default"
AUTH_POLICY = "auth"

HTTP_429 = 429
FORWARDED_FOR_HEADER = "x-forwarded-for"


def build_policies(app_settings: Settings) -> dict[str, RateLimitPolicy]:
    """Build the named policy table from settings.

    Args:
        app_settings: Application settings.

    Returns:
        Policies keyed by name.
    """
    return {
        DEFAULT_POLICY: RateLimitPolicy(
            name=DEFAULT_POLICY,
            window_ms=app_settings.default_rate_limit_window_ms,
            max_requests=app_settings.default_rate_limit_max,
            trust_proxy=app_settings.trust_proxy,
            rejection_message=app_settings.default_rate_limit_message,
        ),
        AUTH_POLICY: RateLimitPolicy(
            name=AUTH_POLICY,
            window_ms=app_settings.auth_rate_limit_window_ms,
            max_requests=app_settings.auth_rate_limit_max,
            trust_proxy=app_settings.trust_proxy,
            rejection_message=app_settings.auth_rate_limit_message,
        ),
    }


def client_key(request: Request, policy: RateLimitPolicy) -> str:
    """Resolve the client identity a policy is keyed on.

    Behind a trusted proxy the first X-Forwarded-For hop is the client;
    otherwise the direct connection address is used.
    """
    if policy.trust_proxy:
        forwarded = request.headers.get(FORWARDED_FOR_HEADER, "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return get_remote_address(request)


def rejection_response(request: Request, decision: AdmissionDecision) -> JSONResponse:
    """Log a rejected admission and build its 429 response."""
    logger.warning(
        "Rate limit exceeded on %s under policy %s",
        request.url.path,
        decision.policy.name,
    )
    return JSONResponse(
        status_code=HTTP_429,
        content=decision.rejection_payload(),
        headers=decision.headers(),
    )


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceededError
) -> JSONResponse:
    """Handle route-class rate limit rejections with a clean JSON response.

    Args:
        request: The incoming HTTP request.
        exc: The rejection carrying its admission decision.

    Returns:
        A 429 JSON response with the policy's message and quota headers.
    """
    return rejection_response(request, exc.decision)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware applying one policy to every incoming request.

    Rejected requests are answered here, so routing and handlers never run.
    Quota headers of a more specific route-class policy take precedence.
    """

    def __init__(
        self, app: ASGIApp, limiter: FixedWindowRateLimiter, policy: RateLimitPolicy
    ) -> None:
        super().__init__(app)
        self._limiter = limiter
        self._policy = policy

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Admit or reject the request before it reaches the router."""
        decision = self._limiter.admit(self._policy, client_key(request, self._policy))
        if not decision.allowed:
            return rejection_response(request, decision)

        response = await call_next(request)
        for header_name, header_value in decision.headers().items():
            response.headers.setdefault(header_name, header_value)
        return response


class RateLimitDependency:
    """FastAPI dependency enforcing a named policy on a route class.

    Reads the limiter and policy table from ``app.state`` so the same
    dependency object works with any application built by create_app.
    """

    def __init__(self, policy_name: str) -> None:
        self.policy_name = policy_name

    async def __call__(self, request: Request, response: Response) -> None:
        limiter: FixedWindowRateLimiter = request.app.state.rate_limiter
        policy: RateLimitPolicy = request.app.state.rate_limit_policies[self.policy_name]
        decision = limiter.admit(policy, client_key(request, policy))
        if not decision.allowed:
            raise RateLimitExceededError(decision)
        for header_name, header_value in decision.headers().items():
            response.headers[header_name] = header_value
