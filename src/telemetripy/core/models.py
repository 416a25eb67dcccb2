"""Core domain models: telemetry log entries and the generic log event.

Entries are immutable value records that validate their arguments on
construction. Each entry copies the caller's context and stamps its
telemetry kind into the copy under ``TelemetryType``.
"""

from dataclasses import InitVar, dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, ClassVar

from telemetripy.core.context import ContextProperties, MessageFormats
from telemetripy.core.exceptions import UnknownRequestSourceError, ValidationError
from telemetripy.core.formats import format_duration, format_timestamp

NOT_APPLICABLE = "<not-applicable>"

_Dependency = ContextProperties.DependencyTracking
_Request = ContextProperties.RequestTracking


class TelemetryKind(str, Enum):
    """Discriminator for the kind of telemetry an entry represents."""

    TRACE = "Trace"
    DEPENDENCY = "Dependency"
    REQUEST = "Request"
    EVENT = "Event"
    METRIC = "Metric"

    @classmethod
    def _missing_(cls, value: object) -> "TelemetryKind | None":
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        # Older producers wrote the plural forms
        normalized = {"events": "event", "metrics": "metric"}.get(
            normalized, normalized
        )
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None


class RequestSourceSystem(str, Enum):
    """The system a request came from."""

    HTTP = "Http"
    AZURE_SERVICE_BUS = "AzureServiceBus"
    AZURE_EVENT_HUBS = "AzureEventHubs"
    CUSTOM = "Custom"

    @classmethod
    def parse(cls, raw: Any) -> "RequestSourceSystem":
        """Read a source system from its wire value.

        Accepts members, their values (case-insensitive) and the legacy
        numeric values ``1``, ``2``, ``4`` and ``8``.

        Args:
            raw: The raw value.

        Returns:
            The matching member.

        Raises:
            UnknownRequestSourceError: If the value matches no member.
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, int) and not isinstance(raw, bool):
            if raw in _LEGACY_SOURCE_VALUES:
                return _LEGACY_SOURCE_VALUES[raw]
        elif isinstance(raw, str):
            text = raw.strip()
            if text.isdigit() and int(text) in _LEGACY_SOURCE_VALUES:
                return _LEGACY_SOURCE_VALUES[int(text)]
            for member in cls:
                if text.lower() in (member.value.lower(), member.name.lower()):
                    return member
        raise UnknownRequestSourceError(
            f"'{raw}' does not represent a known request source system"
        )


class ServiceBusEntityType(str, Enum):
    """Kind of Azure Service Bus entity a message was sent to or read from."""

    QUEUE = "Queue"
    TOPIC = "Topic"
    UNKNOWN = "Unknown"


_LEGACY_SOURCE_VALUES = {
    1: RequestSourceSystem.AZURE_SERVICE_BUS,
    2: RequestSourceSystem.HTTP,
    4: RequestSourceSystem.AZURE_EVENT_HUBS,
    8: RequestSourceSystem.CUSTOM,
}


def determine_request_source(
    source_system: RequestSourceSystem, custom_request_source: str | None = None
) -> str:
    """Return the human readable label of a request source system.

    Raises:
        UnknownRequestSourceError: If the source is outside the known set.
    """
    match source_system:
        case RequestSourceSystem.HTTP:
            return "HTTP"
        case RequestSourceSystem.AZURE_SERVICE_BUS:
            return "Azure Service Bus"
        case RequestSourceSystem.AZURE_EVENT_HUBS:
            return "Azure EventHubs"
        case RequestSourceSystem.CUSTOM:
            return f"Custom {custom_request_source}"
    raise UnknownRequestSourceError(
        "Cannot determine request source as it represents something outside"
        " the bounds of the enumeration"
    )


def _require_not_blank(param: str, value: str | None, message: str) -> None:
    if value is None or not str(value).strip():
        raise ValidationError(param, message)


def _require_non_negative(param: str, duration: timedelta, message: str) -> None:
    if duration < timedelta(0):
        raise ValidationError(param, message)


def _stamp_context(
    context: dict[str, Any] | None, kind: TelemetryKind
) -> dict[str, Any]:
    stamped = dict(context or {})
    stamped[ContextProperties.General.TELEMETRY_TYPE] = kind.value
    return stamped


def _format_context(context: dict[str, Any]) -> str:
    return "{" + "; ".join(f"[{key}, {value}]" for key, value in context.items()) + "}"


@dataclass(frozen=True)
class DependencyLogEntry:
    """A call from the application to an external system.

    Attributes:
        dependency_type: Kind of dependency (e.g. Http, Sql, Azure blob).
        dependency_name: Name of the dependency call.
        dependency_data: Command or payload sent to the dependency.
        target_name: Name of the dependency target (host, server, entity).
        duration: How long the call took.
        start_time: When the call started.
        result_code: Result code returned by the dependency.
        is_successful: Whether the call succeeded.
        context: Additional properties, stamped with the telemetry kind.
        dependency_id: Optional identifier correlating the call.
    """

    kind: ClassVar[TelemetryKind] = TelemetryKind.DEPENDENCY
    message_template: ClassVar[str] = MessageFormats.DEPENDENCY

    dependency_type: str
    dependency_name: str | None
    dependency_data: Any
    target_name: str | None
    duration: timedelta
    start_time: datetime
    result_code: int | None
    is_successful: bool
    context: dict[str, Any] = field(default_factory=dict)
    dependency_id: str | None = None

    def __post_init__(self) -> None:
        _require_not_blank(
            "dependency_type",
            self.dependency_type,
            "Requires a non-blank custom dependency type when tracking the custom dependency",
        )
        _require_non_negative(
            "duration",
            self.duration,
            "Requires a positive time duration of the dependency operation",
        )
        object.__setattr__(self, "context", _stamp_context(self.context, self.kind))

    def to_properties(self) -> dict[str, Any]:
        """Flatten the entry into a property bag."""
        return {
            _Dependency.DEPENDENCY_TYPE: self.dependency_type,
            _Dependency.DEPENDENCY_NAME: self.dependency_name,
            _Dependency.DEPENDENCY_DATA: self.dependency_data,
            _Dependency.TARGET_NAME: self.target_name,
            _Dependency.DEPENDENCY_ID: self.dependency_id,
            _Dependency.DURATION: format_duration(self.duration),
            _Dependency.START_TIME: format_timestamp(self.start_time),
            _Dependency.RESULT_CODE: self.result_code,
            _Dependency.IS_SUCCESSFUL: self.is_successful,
            ContextProperties.TELEMETRY_CONTEXT: dict(self.context),
            ContextProperties.General.TELEMETRY_TYPE: self.kind.value,
        }

    def __str__(self) -> str:
        return (
            f"{self.dependency_type} {self.dependency_name} {self.dependency_data}"
            f" named {self.target_name} with ID {self.dependency_id}"
            f" in {format_duration(self.duration)}"
            f" at {format_timestamp(self.start_time)}"
            f" (IsSuccessful: {self.is_successful} - ResultCode: {self.result_code}"
            f" - Context: {_format_context(self.context)})"
        )


@dataclass(frozen=True)
class RequestLogEntry:
    """A request handled by the application.

    HTTP requests carry method, host and URI. Requests from other systems
    use the ``<not-applicable>`` sentinel for those and a synthesized status
    code of 200 or 500. Use the ``create_for_*`` factories rather than the
    constructor.
    """

    kind: ClassVar[TelemetryKind] = TelemetryKind.REQUEST
    message_template: ClassVar[str] = MessageFormats.REQUEST

    request_method: str | None
    request_host: str | None
    request_uri: str | None
    operation_name: str
    response_status_code: int
    request_time: datetime
    request_duration: timedelta
    context: dict[str, Any] = field(default_factory=dict)
    source_system: RequestSourceSystem = RequestSourceSystem.HTTP
    custom_request_source: str | None = None
    _status_code_range: InitVar[tuple[int, int]] = (100, 599)

    def __post_init__(self, _status_code_range: tuple[int, int]) -> None:
        if self.request_host is not None and any(
            char.isspace() for char in self.request_host
        ):
            raise ValidationError(
                "request_host", "Requires a HTTP request host name without whitespace"
            )
        _require_not_blank(
            "operation_name", self.operation_name, "Requires a non-blank operation name"
        )
        low, high = _status_code_range
        if not low <= self.response_status_code <= high:
            raise ValidationError(
                "response_status_code",
                f"Requires a HTTP response status code that's within the {low}-{high}"
                " range to track a HTTP request",
            )
        _require_non_negative(
            "request_duration",
            self.request_duration,
            "Requires a positive time duration of the request operation",
        )
        if self.source_system is RequestSourceSystem.CUSTOM:
            _require_not_blank(
                "custom_request_source",
                self.custom_request_source,
                "Requires a non-blank request source to identify the caller",
            )
        object.__setattr__(self, "context", _stamp_context(self.context, self.kind))

    @classmethod
    def create_for_http_request(
        cls,
        request_method: str,
        request_scheme: str,
        request_host: str,
        request_uri: str,
        operation_name: str | None,
        response_status_code: int,
        start_time: datetime,
        duration: timedelta,
        context: dict[str, Any] | None = None,
    ) -> "RequestLogEntry":
        """Create an entry for an incoming HTTP request.

        Args:
            request_method: HTTP method, e.g. ``GET``.
            request_scheme: URL scheme, e.g. ``https``.
            request_host: Host name, without whitespace.
            request_uri: Path of the request.
            operation_name: Operation name; defaults to ``"{method} {uri}"``.
            response_status_code: Status code in the 0-999 range.
            start_time: When the request was received.
            duration: How long processing took.
            context: Additional properties.

        Returns:
            The request entry.
        """
        if not 0 <= response_status_code <= 999:
            raise ValidationError(
                "response_status_code",
                "Requires a valid HTTP response status code that's within the"
                " 0-999 range",
            )
        if operation_name is None or not operation_name.strip():
            operation_name = f"{request_method} {request_uri}"
        return cls(
            request_method=request_method,
            request_host=f"{request_scheme}://{request_host}",
            request_uri=request_uri,
            operation_name=operation_name,
            response_status_code=response_status_code,
            request_time=start_time,
            request_duration=duration,
            context=context or {},
            source_system=RequestSourceSystem.HTTP,
            _status_code_range=(0, 999),
        )

    @classmethod
    def create_for_service_bus(
        cls,
        operation_name: str,
        is_successful: bool,
        duration: timedelta,
        start_time: datetime,
        context: dict[str, Any] | None = None,
    ) -> "RequestLogEntry":
        """Create an entry for a message processed from Azure Service Bus."""
        return cls._create_without_http_request(
            RequestSourceSystem.AZURE_SERVICE_BUS,
            None,
            operation_name,
            is_successful,
            duration,
            start_time,
            context,
        )

    @classmethod
    def create_for_event_hubs(
        cls,
        operation_name: str,
        is_successful: bool,
        duration: timedelta,
        start_time: datetime,
        context: dict[str, Any] | None = None,
    ) -> "RequestLogEntry":
        """Create an entry for an event processed from Azure Event Hubs."""
        return cls._create_without_http_request(
            RequestSourceSystem.AZURE_EVENT_HUBS,
            None,
            operation_name,
            is_successful,
            duration,
            start_time,
            context,
        )

    @classmethod
    def create_for_custom_request(
        cls,
        request_source: str,
        operation_name: str,
        is_successful: bool,
        duration: timedelta,
        start_time: datetime,
        context: dict[str, Any] | None = None,
    ) -> "RequestLogEntry":
        """Create an entry for a request coming from a custom system.

        Args:
            request_source: Non-blank name identifying the caller.
            operation_name: Non-blank operation name.
            is_successful: Whether processing succeeded.
            duration: How long processing took.
            start_time: When the request was received.
            context: Additional properties.

        Returns:
            The request entry.
        """
        _require_not_blank(
            "request_source",
            request_source,
            "Requires a non-blank request source to identify the caller",
        )
        return cls._create_without_http_request(
            RequestSourceSystem.CUSTOM,
            request_source,
            operation_name,
            is_successful,
            duration,
            start_time,
            context,
        )

    @classmethod
    def _create_without_http_request(
        cls,
        source_system: RequestSourceSystem,
        request_source: str | None,
        operation_name: str,
        is_successful: bool,
        duration: timedelta,
        start_time: datetime,
        context: dict[str, Any] | None,
    ) -> "RequestLogEntry":
        return cls(
            request_method=NOT_APPLICABLE,
            request_host=NOT_APPLICABLE,
            request_uri=NOT_APPLICABLE,
            operation_name=operation_name,
            response_status_code=200 if is_successful else 500,
            request_time=start_time,
            request_duration=duration,
            context=context or {},
            source_system=source_system,
            custom_request_source=request_source,
        )

    def determine_source(self) -> str:
        """Return the human readable label of the request's source system.

        Raises:
            UnknownRequestSourceError: If the entry carries a source outside
                the known set.
        """
        return determine_request_source(self.source_system, self.custom_request_source)

    def to_properties(self) -> dict[str, Any]:
        """Flatten the entry into a property bag."""
        return {
            _Request.REQUEST_METHOD: self.request_method,
            _Request.REQUEST_HOST: self.request_host,
            _Request.REQUEST_URI: self.request_uri,
            _Request.OPERATION_NAME: self.operation_name,
            _Request.RESPONSE_STATUS_CODE: self.response_status_code,
            _Request.REQUEST_DURATION: format_duration(self.request_duration),
            _Request.REQUEST_TIME: format_timestamp(self.request_time),
            _Request.SOURCE_SYSTEM: getattr(
                self.source_system, "value", self.source_system
            ),
            _Request.CUSTOM_SOURCE: self.custom_request_source,
            ContextProperties.TELEMETRY_CONTEXT: dict(self.context),
            ContextProperties.General.TELEMETRY_TYPE: self.kind.value,
        }

    def __str__(self) -> str:
        context = _format_context(self.context)
        duration = format_duration(self.request_duration)
        request_time = format_timestamp(self.request_time)
        if self.source_system == RequestSourceSystem.HTTP:
            return (
                f"{self.request_method} {self.request_host}/{self.request_uri}"
                f" from {self.operation_name} completed with"
                f" {self.response_status_code} in {duration} at {request_time}"
                f" - (Context: {context})"
            )
        is_successful = self.response_status_code == 200
        return (
            f"{self.determine_source()} from {self.operation_name} completed"
            f" in {duration} at {request_time}"
            f" - (IsSuccessful: {is_successful}, Context: {context})"
        )


@dataclass(frozen=True)
class EventLogEntry:
    """A named custom event."""

    kind: ClassVar[TelemetryKind] = TelemetryKind.EVENT
    message_template: ClassVar[str] = MessageFormats.EVENT

    event_name: str
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _require_not_blank(
            "event_name",
            self.event_name,
            "Requires a non-blank event name to track an custom event",
        )
        object.__setattr__(self, "context", _stamp_context(self.context, self.kind))

    def to_properties(self) -> dict[str, Any]:
        """Flatten the entry into a property bag."""
        return {
            ContextProperties.EventTracking.EVENT_NAME: self.event_name,
            ContextProperties.TELEMETRY_CONTEXT: dict(self.context),
            ContextProperties.General.TELEMETRY_TYPE: self.kind.value,
        }

    def __str__(self) -> str:
        return f"{self.event_name} (Context: {_format_context(self.context)})"


@dataclass(frozen=True)
class MetricLogEntry:
    """A single named metric value at a point in time."""

    kind: ClassVar[TelemetryKind] = TelemetryKind.METRIC
    message_template: ClassVar[str] = MessageFormats.METRIC

    metric_name: str
    metric_value: float
    timestamp: datetime
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _require_not_blank(
            "metric_name", self.metric_name, "Requires a non-blank name to track a metric"
        )
        object.__setattr__(self, "context", _stamp_context(self.context, self.kind))

    def to_properties(self) -> dict[str, Any]:
        """Flatten the entry into a property bag."""
        return {
            ContextProperties.MetricTracking.METRIC_NAME: self.metric_name,
            ContextProperties.MetricTracking.METRIC_VALUE: self.metric_value,
            ContextProperties.MetricTracking.TIMESTAMP: format_timestamp(
                self.timestamp
            ),
            ContextProperties.TELEMETRY_CONTEXT: dict(self.context),
            ContextProperties.General.TELEMETRY_TYPE: self.kind.value,
        }

    def __str__(self) -> str:
        return (
            f"{self.metric_name}: {self.metric_value}"
            f" at {format_timestamp(self.timestamp)}"
            f" (Context: {_format_context(self.context)})"
        )


@dataclass
class LogEvent:
    """A generic structured log record handed to the telemetry converters.

    Converters remove the properties they consume, so instances are
    mutable.

    Attributes:
        timestamp: When the record was created.
        level: Level name (e.g. INFO, WARNING).
        message_template: The unrendered message template.
        message: The rendered message.
        properties: Ordered property bag.
        exception: Exception attached to the record, if any.
    """

    timestamp: datetime
    level: str
    message_template: str
    message: str
    properties: dict[str, Any] = field(default_factory=dict)
    exception: BaseException | None = None
