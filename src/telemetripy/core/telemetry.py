"""Typed telemetry records produced by the converters.

These mirror the shape of an observability backend that distinguishes
telemetry kinds: each record carries a timestamp, a cloud/operation
context and a flat ``str -> str`` property map.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta


@dataclass
class CloudContext:
    """Deployment identity of the emitting application."""

    role_name: str | None = None
    role_instance: str | None = None


@dataclass
class OperationContext:
    """Correlation identifiers of the logical operation."""

    id: str | None = None
    parent_id: str | None = None
    name: str | None = None


@dataclass
class TelemetryContext:
    cloud: CloudContext = field(default_factory=CloudContext)
    operation: OperationContext = field(default_factory=OperationContext)


@dataclass(kw_only=True)
class Telemetry:
    """Base class of all telemetry records."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    context: TelemetryContext = field(default_factory=TelemetryContext)
    properties: dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str | None:
        """Name used for the operation name; None for unnamed telemetry."""
        return None


@dataclass(kw_only=True)
class TraceTelemetry(Telemetry):
    message: str
    severity_level: str | None = None


@dataclass(kw_only=True)
class DependencyTelemetry(Telemetry):
    type: str
    target: str | None = None
    dependency_name: str | None = None
    data: str | None = None
    duration: timedelta = timedelta(0)
    result_code: str | None = None
    success: bool = False
    id: str | None = None

    @property
    def name(self) -> str | None:
        return self.dependency_name


@dataclass(kw_only=True)
class RequestTelemetry(Telemetry):
    request_name: str | None = None
    duration: timedelta = timedelta(0)
    response_code: str | None = None
    success: bool = False
    id: str | None = None
    url: str | None = None
    source: str | None = None

    @property
    def name(self) -> str | None:
        return self.request_name


@dataclass(kw_only=True)
class EventTelemetry(Telemetry):
    event_name: str

    @property
    def name(self) -> str | None:
        return self.event_name


@dataclass(kw_only=True)
class MetricTelemetry(Telemetry):
    metric_name: str
    value: float

    @property
    def name(self) -> str | None:
        return self.metric_name


@dataclass(kw_only=True)
class ExceptionTelemetry(Telemetry):
    exception: BaseException
    message: str | None = None
    severity_level: str | None = None
