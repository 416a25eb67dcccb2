"""Trace telemetry converter, the fallback for plain log records."""

from telemetripy.core.converters.base import CustomTelemetryConverter
from telemetripy.core.models import LogEvent
from telemetripy.core.telemetry import TraceTelemetry


class TraceTelemetryConverter(CustomTelemetryConverter[TraceTelemetry]):
    """Convert a log event into a trace carrying its rendered message."""

    def create_telemetry_entry(self, log_event: LogEvent) -> TraceTelemetry:
        return TraceTelemetry(
            message=log_event.message,
            severity_level=log_event.level,
            timestamp=log_event.timestamp,
        )
