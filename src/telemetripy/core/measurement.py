"""Measure the duration of an operation for dependency and request tracking."""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta


class DurationMeasurement:
    """Stopwatch capturing the start time and elapsed duration of an operation.

    Use it as a context manager; the clock stops on every exit path, also
    when the body raises.

    Example:
        ```python
        with DurationMeasurement.start() as measurement:
            response = client.get(url)
        log_http_dependency(logger, ..., measurement=measurement)
        ```
    """

    def __init__(self) -> None:
        self.start_time: datetime = datetime.now(UTC)
        self._started = time.perf_counter()
        self._stopped: float | None = None

    @classmethod
    def start(cls) -> "DurationMeasurement":
        """Start a new measurement."""
        return cls()

    @property
    def elapsed(self) -> timedelta:
        """Time passed since the start, frozen once stopped."""
        end = self._stopped if self._stopped is not None else time.perf_counter()
        return timedelta(seconds=end - self._started)

    @property
    def is_running(self) -> bool:
        return self._stopped is None

    def stop(self) -> None:
        """Stop the clock. Stopping twice keeps the first reading."""
        if self._stopped is None:
            self._stopped = time.perf_counter()

    def __enter__(self) -> "DurationMeasurement":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


@contextmanager
def measure() -> Iterator[DurationMeasurement]:
    """Context manager yielding a running ``DurationMeasurement``."""
    measurement = DurationMeasurement.start()
    try:
        yield measurement
    finally:
        measurement.stop()
