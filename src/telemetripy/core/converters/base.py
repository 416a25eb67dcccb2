"""Shared conversion pipeline for all telemetry converters."""

from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar

from telemetripy.core.context import ContextProperties
from telemetripy.core.converters.enrichment import (
    CloudContextConverter,
    OperationContextConverter,
)
from telemetripy.core.models import LogEvent
from telemetripy.core.options import TelemetryConverterOptions
from telemetripy.core.properties import get_as_dictionary, get_as_raw_string
from telemetripy.core.telemetry import Telemetry

TTelemetry = TypeVar("TTelemetry", bound=Telemetry)

# Properties removed from every record after conversion
_ALWAYS_CONSUMED = (
    ContextProperties.TELEMETRY_CONTEXT,
    ContextProperties.EventTracking.EVENT_DESCRIPTION,
    ContextProperties.General.TELEMETRY_TYPE,
)


class CustomTelemetryConverter(ABC, Generic[TTelemetry]):
    """Convert a log event into one telemetry record of a single kind.

    Subclasses build the record in ``create_telemetry_entry`` and list the
    property keys they read in ``consumed_properties``; those keys are
    stripped from the log event so they are not forwarded a second time.
    """

    consumed_properties: ClassVar[tuple[str, ...]] = ()

    def __init__(self, options: TelemetryConverterOptions | None = None) -> None:
        self.options = options or TelemetryConverterOptions()
        self._cloud_context = CloudContextConverter()
        self._operation_context = OperationContextConverter(self.options)

    def convert(self, log_event: LogEvent) -> list[Telemetry]:
        """Convert the log event, consuming the properties it was built from.

        Args:
            log_event: The record to convert. Consumed properties are removed.

        Returns:
            A list holding the single converted telemetry record.
        """
        telemetry = self.create_telemetry_entry(log_event)

        self._assign_context_properties(log_event, telemetry)
        self._cloud_context.enrich_with_app_info(log_event, telemetry)

        self._remove_intermediary_properties(log_event)
        self._forward_properties(log_event, telemetry)

        self._operation_context.enrich_with_correlation_info(telemetry)
        self._operation_context.enrich_with_operation_name(telemetry)
        return [telemetry]

    @abstractmethod
    def create_telemetry_entry(self, log_event: LogEvent) -> TTelemetry:
        """Build the telemetry record from the log event's properties."""

    def _assign_context_properties(
        self, log_event: LogEvent, telemetry: Telemetry
    ) -> None:
        for key in (
            ContextProperties.TELEMETRY_CONTEXT,
            ContextProperties.EventTracking.EVENT_DESCRIPTION,
        ):
            context = get_as_dictionary(log_event.properties, key)
            context.pop(ContextProperties.General.TELEMETRY_TYPE, None)
            telemetry.properties.update(context)

    def _remove_intermediary_properties(self, log_event: LogEvent) -> None:
        for key in (*self.consumed_properties, *_ALWAYS_CONSUMED):
            log_event.properties.pop(key, None)

    def _forward_properties(self, log_event: LogEvent, telemetry: Telemetry) -> None:
        for key in log_event.properties:
            if key in telemetry.properties:
                continue
            value = get_as_raw_string(log_event.properties, key)
            if value is not None:
                telemetry.properties[key] = value
