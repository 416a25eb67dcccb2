"""Route each log event to the converter for its telemetry kind."""

import logging
from collections.abc import Mapping

from telemetripy.core.context import ContextProperties, MessagePrefixes
from telemetripy.core.converters.base import CustomTelemetryConverter
from telemetripy.core.converters.dependency import (
    DependencyTelemetryConverter,
    HttpDependencyTelemetryConverter,
    SqlDependencyTelemetryConverter,
)
from telemetripy.core.converters.event import EventTelemetryConverter
from telemetripy.core.converters.exception import ExceptionTelemetryConverter
from telemetripy.core.converters.metric import MetricTelemetryConverter
from telemetripy.core.converters.request import RequestTelemetryConverter
from telemetripy.core.converters.trace import TraceTelemetryConverter
from telemetripy.core.models import LogEvent, TelemetryKind
from telemetripy.core.options import TelemetryConverterOptions
from telemetripy.core.telemetry import Telemetry

logger = logging.getLogger(__name__)


def read_telemetry_kind(log_event: LogEvent) -> TelemetryKind | None:
    """Read the telemetry kind stamped on a log event.

    Looks at the top level ``TelemetryType`` property first and then inside
    the nested ``Context`` map.

    Returns:
        The kind, or None when the event carries no recognizable kind.
    """
    key = ContextProperties.General.TELEMETRY_TYPE
    raw = log_event.properties.get(key)
    if raw is None:
        context = log_event.properties.get(ContextProperties.TELEMETRY_CONTEXT)
        if isinstance(context, Mapping):
            raw = context.get(key)
    if raw is None:
        return None
    try:
        return TelemetryKind(raw)
    except ValueError:
        logger.debug("Ignoring unknown telemetry type %r", raw)
        return None


class TelemetryConverter:
    """Convert log events into typed telemetry.

    Events carrying an exception become exception telemetry. Otherwise the
    stamped telemetry kind decides the converter. Records without a kind
    (written by older producers) are routed by their message template
    prefix and end up as traces when nothing matches.

    Example:
        ```python
        converter = TelemetryConverter()
        for telemetry in converter.convert(log_event):
            channel.send(telemetry)
        ```
    """

    def __init__(self, options: TelemetryConverterOptions | None = None) -> None:
        """Initialize the per-kind converters.

        Args:
            options: Converter options shared by all converters.
        """
        self.options = options or TelemetryConverterOptions()
        self._exception = ExceptionTelemetryConverter(self.options)
        self._trace = TraceTelemetryConverter(self.options)
        request = RequestTelemetryConverter(self.options)
        dependency = DependencyTelemetryConverter(self.options)
        event = EventTelemetryConverter(self.options)
        metric = MetricTelemetryConverter(self.options)

        self._by_kind: dict[TelemetryKind, CustomTelemetryConverter] = {
            TelemetryKind.TRACE: self._trace,
            TelemetryKind.DEPENDENCY: dependency,
            TelemetryKind.REQUEST: request,
            TelemetryKind.EVENT: event,
            TelemetryKind.METRIC: metric,
        }
        # Order matters: first matching prefix wins
        self._by_prefix: list[tuple[str, CustomTelemetryConverter]] = [
            (MessagePrefixes.REQUEST_VIA_HTTP, request),
            (MessagePrefixes.DEPENDENCY, dependency),
            (
                MessagePrefixes.DEPENDENCY_VIA_HTTP,
                HttpDependencyTelemetryConverter(self.options),
            ),
            (
                MessagePrefixes.DEPENDENCY_VIA_SQL,
                SqlDependencyTelemetryConverter(self.options),
            ),
            (MessagePrefixes.EVENT, event),
            (MessagePrefixes.METRIC, metric),
        ]

    def convert(self, log_event: LogEvent) -> list[Telemetry]:
        """Convert a log event into telemetry records.

        Args:
            log_event: The record to convert. Consumed properties are removed.

        Returns:
            The converted telemetry records.
        """
        if log_event.exception is not None:
            return self._exception.convert(log_event)

        kind = read_telemetry_kind(log_event)
        if kind is not None:
            return self._by_kind[kind].convert(log_event)

        for prefix, converter in self._by_prefix:
            if log_event.message_template.startswith(prefix):
                logger.debug("Converting untyped record by message prefix %r", prefix)
                return converter.convert(log_event)
        return self._trace.convert(log_event)
