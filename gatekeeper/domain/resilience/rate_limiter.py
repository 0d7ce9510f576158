"""
Fixed-window rate limiter.

Admits or rejects a request for a (policy, client key) pair. A window opens
at the first request seen for the key and admits up to max_requests until
it elapses; the next request after that opens a fresh window.

Rejected requests are not counted, so a bucket only overshoots its quota
by requests that raced past the check on a shared store.
"""

import logging
import time
from typing import Callable

from gatekeeper.domain.resilience.entities import (
    AdmissionDecision,
    RateLimitBucket,
    RateLimitPolicy,
)
from gatekeeper.domain.resilience.ports import RateLimitStore

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class FixedWindowRateLimiter:
    """Keyed fixed-window admission gate over a RateLimitStore.

    Policies are independent: counters are namespaced by policy name,
    so one store can back every policy.

    Args:
        store: Counter storage (in-process or shared).
        clock: Returns the current time in epoch seconds.
    """

    def __init__(self, store: RateLimitStore, clock: Clock = time.time) -> None:
        self._store = store
        self._clock = clock

    def admit(self, policy: RateLimitPolicy, client_key: str) -> AdmissionDecision:
        """Decide whether one request from client_key may proceed.

        Args:
            policy: The route class policy to enforce.
            client_key: Identity of the client (usually an IP address).

        Returns:
            The admission decision with remaining quota and reset time.
        """
        now = self._clock()
        key = self.bucket_key(policy, client_key)
        bucket = self._store.get(key, policy.window_ms)

        if bucket is None or self._window_elapsed(bucket, policy, now):
            bucket = self._store.reset(key, now, policy.window_ms)
        elif bucket.count >= policy.max_requests:
            logger.debug("Rejecting %s under policy %s", client_key, policy.name)
            return self._decision(False, policy, bucket, now)
        else:
            bucket = self._store.increment(key, policy.window_ms)

        return self._decision(bucket.count <= policy.max_requests, policy, bucket, now)

    @staticmethod
    def bucket_key(policy: RateLimitPolicy, client_key: str) -> str:
        return f"{policy.name}:{client_key}"

    @staticmethod
    def _window_elapsed(
        bucket: RateLimitBucket, policy: RateLimitPolicy, now: float
    ) -> bool:
        return now >= bucket.window_started_at + policy.window_seconds

    @staticmethod
    def _decision(
        allowed: bool, policy: RateLimitPolicy, bucket: RateLimitBucket, now: float
    ) -> AdmissionDecision:
        return AdmissionDecision(
            allowed=allowed,
            policy=policy,
            remaining=max(0, policy.max_requests - bucket.count),
            reset_at=bucket.window_started_at + policy.window_seconds,
            decided_at=now,
        )
