"""Functions tracking dependencies, requests, events and metrics via logging."""

from telemetripy.adapters.tracking.dependencies import (
    log_azure_search_dependency,
    log_blob_storage_dependency,
    log_cosmos_sql_dependency,
    log_dependency,
    log_event_hubs_dependency,
    log_http_dependency,
    log_iot_hub_dependency,
    log_iot_hub_dependency_with_connection_string,
    log_key_vault_dependency,
    log_service_bus_dependency,
    log_service_bus_queue_dependency,
    log_service_bus_topic_dependency,
    log_sql_dependency,
    log_sql_dependency_with_connection_string,
    log_table_storage_dependency,
)
from telemetripy.adapters.tracking.events import log_event, log_metric
from telemetripy.adapters.tracking.requests import (
    log_custom_request,
    log_event_hubs_request,
    log_request,
    log_service_bus_request,
)

__all__ = [
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
]
