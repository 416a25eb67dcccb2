"""Correlation and deployment-context enrichment of telemetry records.

Enrichment is best effort: when the information is missing the telemetry
is left as it is.
"""

import logging

from telemetripy.core.context import ContextProperties
from telemetripy.core.models import LogEvent
from telemetripy.core.options import TelemetryConverterOptions
from telemetripy.core.properties import get_as_raw_string
from telemetripy.core.telemetry import (
    DependencyTelemetry,
    EventTelemetry,
    MetricTelemetry,
    RequestTelemetry,
    Telemetry,
)

logger = logging.getLogger(__name__)

# Value written by some producers for a missing operation id
_NULL_ID = "null"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _is_missing_id(value: str | None) -> bool:
    return _is_blank(value) or value == _NULL_ID


class CloudContextConverter:
    """Set the cloud role name and instance from the log event."""

    def enrich_with_app_info(self, log_event: LogEvent, telemetry: Telemetry) -> None:
        """Copy component name and pod (else machine) name into the cloud context.

        Args:
            log_event: Source of the ComponentName, PodName and MachineName.
            telemetry: The record to enrich.
        """
        properties = log_event.properties
        component_name = get_as_raw_string(
            properties, ContextProperties.General.COMPONENT_NAME
        )
        machine_name = get_as_raw_string(
            properties, ContextProperties.General.MACHINE_NAME
        )
        pod_name = get_as_raw_string(properties, ContextProperties.Kubernetes.POD_NAME)

        if not _is_blank(component_name):
            telemetry.context.cloud.role_name = component_name
        role_instance = machine_name if _is_blank(pod_name) else pod_name
        if not _is_blank(role_instance):
            telemetry.context.cloud.role_instance = role_instance


class OperationContextConverter:
    """Set the operation ids and name of a telemetry record.

    Requests are the root of an operation: their own id is the operation id
    property, the transaction id becomes the operation id and the parent id
    is taken as is. Every other kind hangs below a request, so the
    transaction id becomes its operation id and the operation id its parent.
    """

    def __init__(self, options: TelemetryConverterOptions | None = None) -> None:
        self._options = options or TelemetryConverterOptions()

    def enrich_with_correlation_info(self, telemetry: Telemetry) -> None:
        """Read the correlation ids from the telemetry's properties."""
        names = self._options.correlation
        properties = telemetry.properties
        operation_id = properties.get(names.operation_id_property_name)
        transaction_id = properties.get(names.transaction_id_property_name)
        operation = telemetry.context.operation

        if isinstance(telemetry, RequestTelemetry):
            if _is_missing_id(operation_id):
                operation_id = self._options.request.generate_id()
                logger.debug("Generated request id %s", operation_id)
            telemetry.id = operation_id
            if not _is_missing_id(transaction_id):
                operation.id = transaction_id
            parent_id = properties.get(names.operation_parent_id_property_name)
            if not _is_missing_id(parent_id):
                operation.parent_id = parent_id
            return

        if not _is_missing_id(transaction_id):
            operation.id = transaction_id
        if not _is_missing_id(operation_id):
            operation.parent_id = operation_id

    def enrich_with_operation_name(self, telemetry: Telemetry) -> None:
        """Name the operation after the telemetry itself."""
        operation = telemetry.context.operation
        if isinstance(telemetry, RequestTelemetry):
            if _is_blank(operation.name) and not _is_blank(telemetry.name):
                operation.name = telemetry.name
        elif isinstance(telemetry, DependencyTelemetry | EventTelemetry | MetricTelemetry):
            if not _is_blank(telemetry.name):
                operation.name = telemetry.name
