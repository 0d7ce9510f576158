"""
Port interfaces (ABCs) for the resilience bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from gatekeeper.domain.resilience.entities import ErrorLogRecord, RateLimitBucket


class LogSink(ABC):
    """Port for recording failed requests.

    Constructed once at process start and handed to the classifier.
    Storage format and retention belong to the adapter.
    """

    @abstractmethod
    def write(self, record: ErrorLogRecord) -> None:
        """Accept one error record."""
        raise NotImplementedError


class RateLimitStore(ABC):
    """Port for keyed fixed-window request counters.

    Single-instance deployments can keep buckets in process memory.
    Horizontally scaled deployments must use a shared store whose
    increment is atomic, otherwise each instance enforces its own quota.
    """

    @abstractmethod
    def get(self, key: str, window_ms: int) -> Optional[RateLimitBucket]:
        """Return the bucket for key, or None if no window is open.

        Args:
            key: Namespaced client key.
            window_ms: Window length of the owning policy.
        """
        raise NotImplementedError

    @abstractmethod
    def increment(self, key: str, window_ms: int) -> RateLimitBucket:
        """Count one more request in the open window for key.

        Returns:
            The bucket after the increment.
        """
        raise NotImplementedError

    @abstractmethod
    def reset(self, key: str, now: float, window_ms: int) -> RateLimitBucket:
        """Open a new window at now, counting the current request.

        Returns:
            A bucket with count 1 started at now. A shared store may
            report a higher count when processes open the window together.
        """
        raise NotImplementedError
