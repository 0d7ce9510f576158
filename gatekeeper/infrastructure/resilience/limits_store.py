"""
Shared rate limit store backed by the ``limits`` storage backends.

Implements the RateLimitStore port on top of a limits Storage
(memory://, redis://, memcached://, mongodb://). Counters live in the
backend with a TTL equal to the window, so every process pointed at the
same URI enforces one quota per client. Increments are atomic in the
backend; the window start is derived from the key's expiry.
"""

import logging
import math
from typing import Optional

from limits.storage import Storage, storage_from_string

from gatekeeper.domain.resilience.entities import RateLimitBucket
from gatekeeper.domain.resilience.ports import RateLimitStore

logger = logging.getLogger(__name__)

KEY_PREFIX = "gatekeeper"


def _expiry_seconds(window_ms: int) -> int:
    return max(1, math.ceil(window_ms / 1000))


class LimitsRateLimitStore(RateLimitStore):
    """Adapter over a limits Storage instance.

    Args:
        storage: A limits storage, e.g. from ``storage_from_string``.
        prefix: Namespace prepended to every counter key.
    """

    def __init__(self, storage: Storage, prefix: str = KEY_PREFIX) -> None:
        self._storage = storage
        self._prefix = prefix

    @classmethod
    def from_uri(cls, uri: str) -> "LimitsRateLimitStore":
        """Build a store from a limits storage URI."""
        logger.info("Using shared rate limit storage: %s", uri.split("://", 1)[0])
        return cls(storage_from_string(uri))

    def get(self, key: str, window_ms: int) -> Optional[RateLimitBucket]:
        storage_key = self._key(key)
        count = self._storage.get(storage_key)
        if not count:
            return None
        expires_at = self._storage.get_expiry(storage_key)
        return RateLimitBucket(
            key=key,
            count=int(count),
            window_started_at=expires_at - _expiry_seconds(window_ms),
        )

    def increment(self, key: str, window_ms: int) -> RateLimitBucket:
        storage_key = self._key(key)
        count = self._storage.incr(storage_key, _expiry_seconds(window_ms))
        expires_at = self._storage.get_expiry(storage_key)
        return RateLimitBucket(
            key=key,
            count=int(count),
            window_started_at=expires_at - _expiry_seconds(window_ms),
        )

    def reset(self, key: str, now: float, window_ms: int) -> RateLimitBucket:
        """Open a window by incrementing the expired key.

        The backend drops the counter when its TTL runs out, so a plain
        increment starts the new window. Processes racing to open the same
        window share its counter instead of clearing each other's counts.
        """
        return self.increment(key, window_ms)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

