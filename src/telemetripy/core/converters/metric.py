"""Metric telemetry converter."""

from telemetripy.core.context import ContextProperties
from telemetripy.core.converters.base import CustomTelemetryConverter
from telemetripy.core.models import LogEvent
from telemetripy.core.properties import (
    get_as_datetime,
    get_as_double,
    get_as_raw_string,
)
from telemetripy.core.telemetry import MetricTelemetry

_Metric = ContextProperties.MetricTracking


class MetricTelemetryConverter(CustomTelemetryConverter[MetricTelemetry]):
    """Convert metric log events; the value is NaN when missing or not numeric."""

    consumed_properties = (_Metric.METRIC_NAME, _Metric.METRIC_VALUE, _Metric.TIMESTAMP)

    def create_telemetry_entry(self, log_event: LogEvent) -> MetricTelemetry:
        properties = log_event.properties
        telemetry = MetricTelemetry(
            metric_name=get_as_raw_string(properties, _Metric.METRIC_NAME) or "",
            value=get_as_double(properties, _Metric.METRIC_VALUE),
            timestamp=log_event.timestamp,
        )
        if _Metric.TIMESTAMP in properties:
            telemetry.timestamp = get_as_datetime(properties, _Metric.TIMESTAMP)
        return telemetry
