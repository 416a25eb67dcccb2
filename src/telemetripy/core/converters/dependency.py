"""Dependency telemetry converters."""

from telemetripy.core.context import ContextProperties
from telemetripy.core.converters.base import CustomTelemetryConverter
from telemetripy.core.models import LogEvent
from telemetripy.core.properties import (
    get_as_bool,
    get_as_datetime,
    get_as_raw_string,
    get_as_timedelta,
)
from telemetripy.core.telemetry import DependencyTelemetry

_Dependency = ContextProperties.DependencyTracking


class DependencyTelemetryConverter(CustomTelemetryConverter[DependencyTelemetry]):
    """Convert dependency log events into dependency telemetry."""

    consumed_properties = (
        _Dependency.DEPENDENCY_ID,
        _Dependency.DEPENDENCY_TYPE,
        _Dependency.TARGET_NAME,
        _Dependency.DEPENDENCY_NAME,
        _Dependency.DEPENDENCY_DATA,
        _Dependency.START_TIME,
        _Dependency.RESULT_CODE,
        _Dependency.DURATION,
        _Dependency.IS_SUCCESSFUL,
    )

    def _dependency_type(self, log_event: LogEvent) -> str:
        return get_as_raw_string(log_event.properties, _Dependency.DEPENDENCY_TYPE) or ""

    def create_telemetry_entry(self, log_event: LogEvent) -> DependencyTelemetry:
        properties = log_event.properties
        return DependencyTelemetry(
            type=self._dependency_type(log_event),
            target=get_as_raw_string(properties, _Dependency.TARGET_NAME),
            dependency_name=get_as_raw_string(properties, _Dependency.DEPENDENCY_NAME),
            data=get_as_raw_string(properties, _Dependency.DEPENDENCY_DATA),
            timestamp=get_as_datetime(properties, _Dependency.START_TIME),
            duration=get_as_timedelta(properties, _Dependency.DURATION),
            result_code=get_as_raw_string(properties, _Dependency.RESULT_CODE),
            success=get_as_bool(properties, _Dependency.IS_SUCCESSFUL),
            id=get_as_raw_string(properties, _Dependency.DEPENDENCY_ID),
        )


class HttpDependencyTelemetryConverter(DependencyTelemetryConverter):
    """Convert legacy ``HTTP Dependency`` records; the type is always Http."""

    def _dependency_type(self, log_event: LogEvent) -> str:
        return "Http"


class SqlDependencyTelemetryConverter(DependencyTelemetryConverter):
    """Convert legacy ``SQL Dependency`` records; the type is always Sql."""

    def _dependency_type(self, log_event: LogEvent) -> str:
        return "Sql"
