"""Python logging handler adapter for telemetripy.

This adapter bridges Python's standard library logging module to a
TelemetryChannelPort: every record is turned into a LogEvent, converted
into typed telemetry and handed to the channel.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from telemetripy.core.converters.dispatcher import TelemetryConverter
from telemetripy.core.models import LogEvent
from telemetripy.core.ports import TelemetryChannelPort

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


def record_properties(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the property bag of a log record.

    The record's mapping argument comes first, followed by attributes added
    through ``extra`` or by filters that the mapping does not already hold.

    Args:
        record: The log record.

    Returns:
        A new property dict.
    """
    properties: dict[str, Any] = {}
    if isinstance(record.args, Mapping):
        properties.update(record.args)
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOGRECORD_ATTRS or key.startswith("_"):
            continue
        properties.setdefault(key, value)
    return properties


class TelemetryHandler(logging.Handler):
    """Logging handler that converts log records into telemetry.

    Example:
        ```python
        from telemetripy import InMemoryTelemetryChannel, TelemetryHandler

        channel = InMemoryTelemetryChannel()
        logging.getLogger().addHandler(TelemetryHandler(channel))
        ```
    """

    def __init__(
        self,
        channel: TelemetryChannelPort,
        converter: TelemetryConverter | None = None,
        context_provider: Callable[[], Mapping[str, Any]] | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler with a telemetry channel.

        Args:
            channel: Channel implementing TelemetryChannelPort.
            converter: Converter to use. Defaults to a TelemetryConverter
                with default options.
            context_provider: Returns extra properties added to every
                record; record properties take precedence.
            level: Minimum level handled.
        """
        super().__init__(level)
        self._channel = channel
        self._converter = converter or TelemetryConverter()
        self._context_provider = context_provider

    def to_log_event(self, record: logging.LogRecord) -> LogEvent:
        """Build the LogEvent for a log record.

        Args:
            record: The log record.

        Returns:
            The log event with the record's property bag.
        """
        properties: dict[str, Any] = {}
        if self._context_provider is not None:
            properties.update(self._context_provider())
        properties.update(record_properties(record))

        exception = None
        if record.exc_info and record.exc_info[1] is not None:
            exception = record.exc_info[1]

        return LogEvent(
            timestamp=datetime.fromtimestamp(record.created, UTC),
            level=record.levelname,
            message_template=str(record.msg),
            message=record.getMessage(),
            properties=properties,
            exception=exception,
        )

    def emit(self, record: logging.LogRecord) -> None:
        """Convert the record and send the telemetry to the channel.

        Args:
            record: The log record to emit.
        """
        try:
            log_event = self.to_log_event(record)
            for telemetry in self._converter.convert(log_event):
                self._channel.send(telemetry)
        except Exception:
            self.handleError(record)
