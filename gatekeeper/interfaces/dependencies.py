"""
Dependency wiring for the resilience bounded context.

Builds the log sink, counter store, limiter and classifier from
settings. These are the composition root for the resilience context;
route-class rate limit dependencies are exposed for routers to use.
"""

import time
from typing import Callable

from gatekeeper.core.config import Settings
from gatekeeper.domain.resilience.error_classifier import ErrorClassifier
from gatekeeper.domain.resilience.ports import LogSink, RateLimitStore
from gatekeeper.domain.resilience.rate_limiter import FixedWindowRateLimiter
from gatekeeper.infrastructure.resilience.limits_store import LimitsRateLimitStore
from gatekeeper.infrastructure.resilience.log_sink import LoggingLogSink
from gatekeeper.infrastructure.resilience.memory_store import InMemoryRateLimitStore
from gatekeeper.shared.security.rate_limiting import (
    AUTH_POLICY,
    RateLimitDependency,
)

# Use as `dependencies=[Depends(auth_rate_limit)]` on authentication routes.
auth_rate_limit = RateLimitDependency(AUTH_POLICY)


def get_log_sink() -> LogSink:
    """Build the process-wide log sink."""
    return LoggingLogSink()


def get_error_classifier(app_settings: Settings, log_sink: LogSink) -> ErrorClassifier:
    """Build the ErrorClassifier for the configured disclosure mode."""
    return ErrorClassifier(log_sink=log_sink, production=app_settings.is_production)


def get_rate_limit_store(app_settings: Settings) -> RateLimitStore:
    """Build the counter store: shared when a storage URI is configured."""
    if app_settings.rate_limit_storage_uri:
        return LimitsRateLimitStore.from_uri(app_settings.rate_limit_storage_uri)
    return InMemoryRateLimitStore()


def get_rate_limiter(
    store: RateLimitStore, clock: Callable[[], float] = time.time
) -> FixedWindowRateLimiter:
    """Build the fixed-window limiter over the given store."""
    return FixedWindowRateLimiter(store=store, clock=clock)
