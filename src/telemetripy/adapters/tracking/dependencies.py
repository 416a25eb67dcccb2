"""Track calls to external dependencies through a logger.

Every function builds a DependencyLogEntry, logs it and returns it. Timing
comes either from ``start_time`` and ``duration`` or from a
``DurationMeasurement``.
"""

import logging
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import urlsplit

from telemetripy.adapters.tracking._common import (
    DEFAULT_TRACKING_LEVEL,
    resolve_timing,
    write_entry,
)
from telemetripy.core.connection_strings import (
    parse_iot_hub_host_name,
    parse_sql_connection_string,
)
from telemetripy.core.context import ContextProperties
from telemetripy.core.exceptions import ValidationError
from telemetripy.core.measurement import DurationMeasurement
from telemetripy.core.models import DependencyLogEntry, ServiceBusEntityType

# Database name used when a connection string does not name one
NOT_AVAILABLE = "<not-available>"


def _require_not_blank(param: str, value: str | None) -> None:
    if value is None or not value.strip():
        raise ValidationError(param, f"Requires a non-blank {param.replace('_', ' ')}")


def log_dependency(
    logger: logging.Logger,
    dependency_type: str,
    dependency_data: Any,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    target_name: str | None = None,
    dependency_name: str | None = None,
    dependency_id: str | None = None,
    result_code: int | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track a call to a dependency of any type.

    Args:
        logger: Logger to write the dependency to.
        dependency_type: Kind of dependency, e.g. ``"Arcus"``.
        dependency_data: Command or payload sent to the dependency.
        is_successful: Whether the call succeeded.
        start_time: When the call started.
        duration: How long the call took.
        target_name: Name of the dependency target.
        dependency_name: Name of the dependency call.
        dependency_id: Id correlating the call.
        result_code: Result code of the call.
        measurement: Measurement providing start time and duration instead.
        context: Additional properties.
        level: Level to log at.

    Returns:
        The logged entry.
    """
    start_time, duration = resolve_timing(start_time, duration, measurement)
    entry = DependencyLogEntry(
        dependency_type=dependency_type,
        dependency_name=dependency_name,
        dependency_data=dependency_data,
        target_name=target_name,
        duration=duration,
        start_time=start_time,
        result_code=result_code,
        is_successful=is_successful,
        context=context or {},
        dependency_id=dependency_id,
    )
    write_entry(logger, entry, level)
    return entry


def log_http_dependency(
    logger: logging.Logger,
    request_method: str,
    request_url: str,
    status_code: int,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track an outgoing HTTP call.

    The dependency is named ``"{METHOD} {path}"``, targets the URL's host
    and is successful for 2xx status codes.

    Raises:
        ValidationError: If the URL has no host or the status code is
            outside the 100-599 range.
    """
    _require_not_blank("request_method", request_method)
    url = urlsplit(request_url)
    if not url.hostname:
        raise ValidationError(
            "request_url", "Requires an absolute request URL to track a HTTP dependency"
        )
    if not 100 <= status_code <= 599:
        raise ValidationError(
            "status_code",
            "Requires a HTTP response status code that's within the 100-599 range",
        )
    return log_dependency(
        logger,
        dependency_type="Http",
        dependency_data=None,
        is_successful=200 <= status_code < 300,
        start_time=start_time,
        duration=duration,
        target_name=url.hostname,
        dependency_name=f"{request_method.upper()} {url.path or '/'}",
        dependency_id=dependency_id,
        result_code=status_code,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_sql_dependency(
    logger: logging.Logger,
    server_name: str,
    database_name: str,
    sql_command: str,
    operation_name: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track a SQL command, named ``"{database}/{operation}"``."""
    _require_not_blank("server_name", server_name)
    _require_not_blank("database_name", database_name)
    return log_dependency(
        logger,
        dependency_type="Sql",
        dependency_data=sql_command,
        is_successful=is_successful,
        start_time=start_time,
        duration=duration,
        target_name=server_name,
        dependency_name=f"{database_name}/{operation_name}",
        dependency_id=dependency_id,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_sql_dependency_with_connection_string(
    logger: logging.Logger,
    connection_string: str,
    sql_command: str,
    operation_name: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track a SQL command, reading server and database from a connection string.

    Raises:
        ValidationError: If the connection string names no server.
    """
    info = parse_sql_connection_string(connection_string)
    if not info.data_source:
        raise ValidationError(
            "connection_string",
            "Requires a SQL connection string with a data source to track a SQL dependency",
        )
    return log_sql_dependency(
        logger,
        server_name=info.data_source,
        database_name=info.initial_catalog or NOT_AVAILABLE,
        sql_command=sql_command,
        operation_name=operation_name,
        is_successful=is_successful,
        start_time=start_time,
        duration=duration,
        dependency_id=dependency_id,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_service_bus_dependency(
    logger: logging.Logger,
    entity_name: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    entity_type: ServiceBusEntityType = ServiceBusEntityType.UNKNOWN,
    namespace_endpoint: str | None = None,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track sending to an Azure Service Bus queue or topic.

    The entity type, and the namespace endpoint when given, are added to the
    context.
    """
    _require_not_blank("entity_name", entity_name)
    context = dict(context or {})
    context[ContextProperties.DependencyTracking.ServiceBus.ENTITY_TYPE] = entity_type.value
    if namespace_endpoint:
        context[ContextProperties.DependencyTracking.ServiceBus.ENDPOINT] = (
            namespace_endpoint
        )
    return log_dependency(
        logger,
        dependency_type="Azure Service Bus",
        dependency_data=None,
        is_successful=is_successful,
        start_time=start_time,
        duration=duration,
        target_name=entity_name,
        dependency_name=entity_name,
        dependency_id=dependency_id,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_service_bus_queue_dependency(
    logger: logging.Logger, queue_name: str, is_successful: bool, *args: Any, **kwargs: Any
) -> DependencyLogEntry:
    """Track sending to an Azure Service Bus queue."""
    return log_service_bus_dependency(
        logger,
        queue_name,
        is_successful,
        *args,
        entity_type=ServiceBusEntityType.QUEUE,
        **kwargs,
    )


def log_service_bus_topic_dependency(
    logger: logging.Logger, topic_name: str, is_successful: bool, *args: Any, **kwargs: Any
) -> DependencyLogEntry:
    """Track sending to an Azure Service Bus topic."""
    return log_service_bus_dependency(
        logger,
        topic_name,
        is_successful,
        *args,
        entity_type=ServiceBusEntityType.TOPIC,
        **kwargs,
    )


def log_event_hubs_dependency(
    logger: logging.Logger,
    namespace_name: str,
    event_hub_name: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track sending events to Azure Event Hubs."""
    _require_not_blank("namespace_name", namespace_name)
    _require_not_blank("event_hub_name", event_hub_name)
    return log_dependency(
        logger,
        dependency_type="Azure Event Hubs",
        dependency_data=namespace_name,
        is_successful=is_successful,
        start_time=start_time,
        duration=duration,
        target_name=event_hub_name,
        dependency_name=event_hub_name,
        dependency_id=dependency_id,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_blob_storage_dependency(
    logger: logging.Logger,
    account_name: str,
    container_name: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track an Azure Blob Storage container interaction."""
    _require_not_blank("account_name", account_name)
    _require_not_blank("container_name", container_name)
    return log_dependency(
        logger,
        dependency_type="Azure blob",
        dependency_data=container_name,
        is_successful=is_successful,
        start_time=start_time,
        duration=duration,
        target_name=account_name,
        dependency_name=f"{account_name}/{container_name}",
        dependency_id=dependency_id,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_table_storage_dependency(
    logger: logging.Logger,
    account_name: str,
    table_name: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track an Azure Table Storage interaction."""
    _require_not_blank("account_name", account_name)
    _require_not_blank("table_name", table_name)
    return log_dependency(
        logger,
        dependency_type="Azure table",
        dependency_data=table_name,
        is_successful=is_successful,
        start_time=start_time,
        duration=duration,
        target_name=account_name,
        dependency_name=f"{account_name}/{table_name}",
        dependency_id=dependency_id,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_cosmos_sql_dependency(
    logger: logging.Logger,
    account_name: str,
    database: str,
    container: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track an Azure Cosmos DB (SQL API) interaction."""
    _require_not_blank("account_name", account_name)
    _require_not_blank("database", database)
    _require_not_blank("container", container)
    data = f"{database}/{container}"
    return log_dependency(
        logger,
        dependency_type="Azure DocumentDB",
        dependency_data=data,
        is_successful=is_successful,
        start_time=start_time,
        duration=duration,
        target_name=account_name,
        dependency_name=data,
        dependency_id=dependency_id,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_key_vault_dependency(
    logger: logging.Logger,
    vault_uri: str,
    secret_name: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track reading a secret from Azure Key Vault."""
    _require_not_blank("vault_uri", vault_uri)
    _require_not_blank("secret_name", secret_name)
    return log_dependency(
        logger,
        dependency_type="Azure key vault",
        dependency_data=secret_name,
        is_successful=is_successful,
        start_time=start_time,
        duration=duration,
        target_name=vault_uri,
        dependency_name=vault_uri,
        dependency_id=dependency_id,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_azure_search_dependency(
    logger: logging.Logger,
    search_service_name: str,
    operation_name: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track an Azure Search operation."""
    _require_not_blank("search_service_name", search_service_name)
    _require_not_blank("operation_name", operation_name)
    return log_dependency(
        logger,
        dependency_type="Azure Search",
        dependency_data=operation_name,
        is_successful=is_successful,
        start_time=start_time,
        duration=duration,
        target_name=search_service_name,
        dependency_name=search_service_name,
        dependency_id=dependency_id,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_iot_hub_dependency(
    logger: logging.Logger,
    iot_hub_name: str,
    is_successful: bool,
    start_time: datetime | None = None,
    duration: timedelta | None = None,
    *,
    dependency_id: str | None = None,
    measurement: DurationMeasurement | None = None,
    context: dict[str, Any] | None = None,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> DependencyLogEntry:
    """Track an Azure IoT Hub interaction."""
    _require_not_blank("iot_hub_name", iot_hub_name)
    return log_dependency(
        logger,
        dependency_type="Azure IoT Hub",
        dependency_data=None,
        is_successful=is_successful,
        start_time=start_time,
        duration=duration,
        target_name=iot_hub_name,
        dependency_name=iot_hub_name,
        dependency_id=dependency_id,
        measurement=measurement,
        context=context,
        level=level,
    )


def log_iot_hub_dependency_with_connection_string(
    logger: logging.Logger,
    iot_hub_connection_string: str,
    is_successful: bool,
    *args: Any,
    **kwargs: Any,
) -> DependencyLogEntry:
    """Track an Azure IoT Hub interaction named after the connection's host."""
    host_name = parse_iot_hub_host_name(iot_hub_connection_string)
    return log_iot_hub_dependency(logger, host_name, is_successful, *args, **kwargs)
