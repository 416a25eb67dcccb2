"""Converters from generic log events to typed telemetry."""

from telemetripy.core.converters.base import CustomTelemetryConverter
from telemetripy.core.converters.dependency import (
    DependencyTelemetryConverter,
    HttpDependencyTelemetryConverter,
    SqlDependencyTelemetryConverter,
)
from telemetripy.core.converters.dispatcher import (
    TelemetryConverter,
    read_telemetry_kind,
)
from telemetripy.core.converters.enrichment import (
    CloudContextConverter,
    OperationContextConverter,
)
from telemetripy.core.converters.event import EventTelemetryConverter
from telemetripy.core.converters.exception import ExceptionTelemetryConverter
from telemetripy.core.converters.metric import MetricTelemetryConverter
from telemetripy.core.converters.request import RequestTelemetryConverter
from telemetripy.core.converters.trace import TraceTelemetryConverter

__all__ = [
    "CloudContextConverter",
    "CustomTelemetryConverter",
    "DependencyTelemetryConverter",
    "EventTelemetryConverter",
    "ExceptionTelemetryConverter",
    "HttpDependencyTelemetryConverter",
    "MetricTelemetryConverter",
    "OperationContextConverter",
    "RequestTelemetryConverter",
    "SqlDependencyTelemetryConverter",
    "TelemetryConverter",
    "TraceTelemetryConverter",
    "read_telemetry_kind",
]
