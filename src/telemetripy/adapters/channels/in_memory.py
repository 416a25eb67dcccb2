"""In-memory telemetry channel adapter."""

import threading
from typing import TypeVar

from telemetripy.core.telemetry import (
    DependencyTelemetry,
    EventTelemetry,
    ExceptionTelemetry,
    MetricTelemetry,
    RequestTelemetry,
    Telemetry,
    TraceTelemetry,
)

T = TypeVar("T", bound=Telemetry)


class InMemoryTelemetryChannel:
    """In-memory implementation of TelemetryChannelPort.

    Stores telemetry records in a list. Suitable for testing and local
    inspection where nothing needs to reach a backend.
    """

    def __init__(self) -> None:
        self._items: list[Telemetry] = []
        self._lock = threading.Lock()

    def send(self, telemetry: Telemetry) -> None:
        """Store a telemetry record."""
        with self._lock:
            self._items.append(telemetry)

    @property
    def items(self) -> list[Telemetry]:
        """All received telemetry, in arrival order."""
        with self._lock:
            return list(self._items)

    def of_type(self, telemetry_type: type[T]) -> list[T]:
        return [item for item in self.items if isinstance(item, telemetry_type)]

    @property
    def requests(self) -> list[RequestTelemetry]:
        return self.of_type(RequestTelemetry)

    @property
    def dependencies(self) -> list[DependencyTelemetry]:
        return self.of_type(DependencyTelemetry)

    @property
    def events(self) -> list[EventTelemetry]:
        return self.of_type(EventTelemetry)

    @property
    def metrics(self) -> list[MetricTelemetry]:
        return self.of_type(MetricTelemetry)

    @property
    def traces(self) -> list[TraceTelemetry]:
        return self.of_type(TraceTelemetry)

    @property
    def exceptions(self) -> list[ExceptionTelemetry]:
        return self.of_type(ExceptionTelemetry)

    def clear(self) -> None:
        """Remove all stored telemetry."""
        with self._lock:
            self._items.clear()
