"""
Shared test doubles for the resilience tests.

No network, no real clock: sinks record in memory and clocks
advance only when told to.
"""

import pytest

from gatekeeper.domain.resilience.entities import ErrorLogRecord
from gatekeeper.domain.resilience.ports import LogSink


class RecordingLogSink(LogSink):
    """LogSink that keeps every record it receives."""

    def __init__(self) -> None:
        self.records: list[ErrorLogRecord] = []

    def write(self, record: ErrorLogRecord) -> None:
        self.records.append(record)


class FailingLogSink(LogSink):
    """LogSink whose storage is unavailable."""

    def write(self, record: ErrorLogRecord) -> None:
        raise OSError("disk full")


class FakeClock:
    """Manually advanced time source (epoch seconds)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def log_sink() -> RecordingLogSink:
    return RecordingLogSink()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def failing_log_sink() -> FailingLogSink:
    return FailingLogSink()
