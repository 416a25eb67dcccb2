"""telemetripy: turn structured log records into typed telemetry.

Example:
    ```python
    import logging

    from telemetripy import (
        InMemoryTelemetryChannel,
        TelemetryHandler,
        log_dependency,
    )

    channel = InMemoryTelemetryChannel()
    logger = logging.getLogger("orders")
    logger.addHandler(TelemetryHandler(channel))

    log_dependency(logger, "Arcus", "some-data", True, start, duration)
    ```
"""

from telemetripy.adapters.channels.in_memory import InMemoryTelemetryChannel
from telemetripy.adapters.enrichers import (
    ApplicationEnricher,
    CorrelationInfoEnricher,
    KubernetesEnricher,
    VersionEnricher,
)
from telemetripy.adapters.filters import TelemetryTypeFilter
from telemetripy.adapters.frameworks.asgi import ASGIRequestTrackingMiddleware
from telemetripy.adapters.logging import TelemetryHandler
from telemetripy.adapters.logging_context import (
    CorrelationInfo,
    clear_correlation_info,
    correlation_scope,
    get_correlation_info,
    set_correlation_info,
)
from telemetripy.adapters.tracking import (
    log_azure_search_dependency,
    log_blob_storage_dependency,
    log_cosmos_sql_dependency,
    log_custom_request,
    log_dependency,
    log_event,
    log_event_hubs_dependency,
    log_event_hubs_request,
    log_http_dependency,
    log_iot_hub_dependency,
    log_iot_hub_dependency_with_connection_string,
    log_key_vault_dependency,
    log_metric,
    log_request,
    log_service_bus_dependency,
    log_service_bus_queue_dependency,
    log_service_bus_request,
    log_service_bus_topic_dependency,
    log_sql_dependency,
    log_sql_dependency_with_connection_string,
    log_table_storage_dependency,
)
from telemetripy.core.context import ContextProperties, MessageFormats, MessagePrefixes
from telemetripy.core.converters import TelemetryConverter
from telemetripy.core.exceptions import (
    ConfigurationError,
    PropertyFormatError,
    TelemetryError,
    UnknownRequestSourceError,
    ValidationError,
)
from telemetripy.core.measurement import DurationMeasurement, measure
from telemetripy.core.models import (
    DependencyLogEntry,
    EventLogEntry,
    LogEvent,
    MetricLogEntry,
    RequestLogEntry,
    RequestSourceSystem,
    ServiceBusEntityType,
    TelemetryKind,
)
from telemetripy.core.options import (
    CorrelationOptions,
    ExceptionOptions,
    RequestOptions,
    TelemetryConverterOptions,
)
from telemetripy.core.ports import HasStructuredFields, TelemetryChannelPort

__all__ = [
    # Entries
    "DependencyLogEntry",
    "EventLogEntry",
    "LogEvent",
    "MetricLogEntry",
    "RequestLogEntry",
    "RequestSourceSystem",
    "ServiceBusEntityType",
    "TelemetryKind",
    # Context keys
    "ContextProperties",
    "MessageFormats",
    "MessagePrefixes",
    # Conversion
    "CorrelationOptions",
    "ExceptionOptions",
    "RequestOptions",
    "TelemetryConverter",
    "TelemetryConverterOptions",
    # Errors
    "ConfigurationError",
    "PropertyFormatError",
    "TelemetryError",
    "UnknownRequestSourceError",
    "ValidationError",
    # Ports
    "HasStructuredFields",
    "TelemetryChannelPort",
    # Logging integration
    "ApplicationEnricher",
    "CorrelationInfo",
    "CorrelationInfoEnricher",
    "InMemoryTelemetryChannel",
    "KubernetesEnricher",
    "TelemetryHandler",
    "TelemetryTypeFilter",
    "VersionEnricher",
    "clear_correlation_info",
    "correlation_scope",
    "get_correlation_info",
    "set_correlation_info",
    # Measurement
    "DurationMeasurement",
    "measure",
    # Tracking
    "log_azure_search_dependency",
    "log_blob_storage_dependency",
    "log_cosmos_sql_dependency",
    "log_custom_request",
    "log_dependency",
    "log_event",
    "log_event_hubs_dependency",
    "log_event_hubs_request",
    "log_http_dependency",
    "log_iot_hub_dependency",
    "log_iot_hub_dependency_with_connection_string",
    "log_key_vault_dependency",
    "log_metric",
    "log_request",
    "log_service_bus_dependency",
    "log_service_bus_queue_dependency",
    "log_service_bus_request",
    "log_service_bus_topic_dependency",
    "log_sql_dependency",
    "log_sql_dependency_with_connection_string",
    "log_table_storage_dependency",
    # Frameworks
    "ASGIRequestTrackingMiddleware",
]
