"""
In-process rate limit store.

Implements the RateLimitStore port with a plain dict. Suitable for a
single process only: request handling runs on one event loop, so the
read-compare-increment in the limiter is not interleaved.
"""

from dataclasses import replace
from typing import Optional

from gatekeeper.domain.resilience.entities import RateLimitBucket
from gatekeeper.domain.resilience.ports import RateLimitStore


class InMemoryRateLimitStore(RateLimitStore):
    """Buckets kept in process memory, replaced on window rollover."""

    def __init__(self) -> None:
        self._buckets: dict[str, RateLimitBucket] = {}

    def get(self, key: str, window_ms: int) -> Optional[RateLimitBucket]:
        return self._buckets.get(key)

    def increment(self, key: str, window_ms: int) -> RateLimitBucket:
        bucket = replace(self._buckets[key], count=self._buckets[key].count + 1)
        self._buckets[key] = bucket
        return bucket

    def reset(self, key: str, now: float, window_ms: int) -> RateLimitBucket:
        bucket = RateLimitBucket(key=key, count=1, window_started_at=now)
        self._buckets[key] = bucket
        return bucket

    def __len__(self) -> int:
        return len(self._buckets)
