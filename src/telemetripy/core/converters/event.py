"""Custom event telemetry converter."""

from telemetripy.core.context import ContextProperties
from telemetripy.core.converters.base import CustomTelemetryConverter
from telemetripy.core.models import LogEvent
from telemetripy.core.properties import get_as_raw_string
from telemetripy.core.telemetry import EventTelemetry


class EventTelemetryConverter(CustomTelemetryConverter[EventTelemetry]):
    consumed_properties = (ContextProperties.EventTracking.EVENT_NAME,)

    def create_telemetry_entry(self, log_event: LogEvent) -> EventTelemetry:
        event_name = get_as_raw_string(
            log_event.properties, ContextProperties.EventTracking.EVENT_NAME
        )
        return EventTelemetry(event_name=event_name or "", timestamp=log_event.timestamp)
