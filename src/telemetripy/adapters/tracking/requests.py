"""Track requests handled by the application through a logger."""

import logging
from datetime import datetime, timedelta
from typing import Any

from telemetripy.adapters.tracking._common import (
    DEFAULT_TRACKING_LEVEL,
    resolve_timing,
    write_entry,
)
from telemetripy.core.context import ContextProperties
from telemetripy.core.measurement import DurationMeasurement
from telemetripy.core.models import RequestLogEntry, ServiceBusEntityType

# Operation name used when a message handler does not pass one
DEFAULT_OPERATION_NAME = "Process"

_ServiceBus = ContextProperties.RequestTracking.ServiceBus
_EventHubs = ContextProperties.RequestTracking.EventHubs


def _operation_name_or_default(operation_name: str | None) -> str:
    if operation_name is None or not operation_name.strip():
        return DEFAULT_OPERATION_NAME
    return operation_name


def log_request(
    logger: logging.Logger,
    request_method: str,
    request_scheme: str,
    request_host: str,
    request_uri: str,
    response_status_code: int,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    operation_name: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> RequestLogEntry:
    """Track an incoming HTTP request.

    Args:
        logger: Logger to write the request to.
        request_method: HTTP method.
        request_scheme: URL scheme, e.g. ``https``.
        request_host: Host the request was sent to.
        request_uri: Path of the request.
        response_status_code: Status code of the response.
        start_time: When the request was received.
        duration: How long processing took.
        operation_name: Name of the operation; defaults to method and path.
        measurement: Measurement providing start time and duration instead.
        context: Additional properties.
        level: Level to log at.

    Returns:
        The logged entry.
    """
    start_time, duration = resolve_timing(start_time, duration, measurement)
    entry = RequestLogEntry.create_for_http_request(
        request_method,
        request_scheme,
        request_host,
        request_uri,
        operation_name,
        response_status_code,
        start_time,
        duration,
        context,
    )
    write_entry(logger, entry, level)
    return entry


def log_service_bus_request(
    logger: logging.Logger,
    service_bus_namespace_endpoint: str | None,
    entity_name: str | None,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    operation_name: str | None = None,
    entity_type: ServiceBusEntityType = ServiceBusEntityType.UNKNOWN,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> RequestLogEntry:
    """Track processing of a message from an Azure Service Bus queue or topic.

    Endpoint, entity name and entity type are added to the context.
    """
    start_time, duration = resolve_timing(start_time, duration, measurement)
    context = dict(context or {})
    context[_ServiceBus.ENDPOINT] = service_bus_namespace_endpoint
    context[_ServiceBus.ENTITY_NAME] = entity_name
    context[_ServiceBus.ENTITY_TYPE] = entity_type.value
    entry = RequestLogEntry.create_for_service_bus(
        _operation_name_or_default(operation_name),
        is_successful,
        duration,
        start_time,
        context,
    )
    write_entry(logger, entry, level)
    return entry


def log_event_hubs_request(
    logger: logging.Logger,
    event_hubs_namespace: str | None,
    event_hubs_name: str | None,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    consumer_group: str = "$Default",
    operation_name: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> RequestLogEntry:
    """Track processing of events from Azure Event Hubs.

    Namespace, consumer group and event hub name are added to the context.
    """
    start_time, duration = resolve_timing(start_time, duration, measurement)
    context = dict(context or {})
    context[_EventHubs.NAMESPACE] = event_hubs_namespace
    context[_EventHubs.CONSUMER_GROUP] = consumer_group
    context[_EventHubs.NAME] = event_hubs_name
    entry = RequestLogEntry.create_for_event_hubs(
        _operation_name_or_default(operation_name),
        is_successful,
        duration,
        start_time,
        context,
    )
    write_entry(logger, entry, level)
    return entry


def log_custom_request(
    logger: logging.Logger,
    request_source: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    operation_name: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> RequestLogEntry:
    """Track a request coming from a custom system.

    Raises:
        ValidationError: If ``request_source`` is blank.
    """
    start_time, duration = resolve_timing(start_time, duration, measurement)
    entry = RequestLogEntry.create_for_custom_request(
        request_source,
        _operation_name_or_default(operation_name),
        is_successful,
        duration,
        start_time,
        context,
    )
    write_entry(logger, entry, level)
    return entry
