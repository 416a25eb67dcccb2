"""Logging filter dropping records of a telemetry kind that is not tracked."""

import logging
from collections.abc import Mapping

from telemetripy.core.context import ContextProperties
from telemetripy.core.models import TelemetryKind


def record_telemetry_kind(record: logging.LogRecord) -> TelemetryKind | None:
    """Read the telemetry kind a record was written with, if any."""
    key = ContextProperties.General.TELEMETRY_TYPE
    raw = None
    if isinstance(record.args, Mapping):
        raw = record.args.get(key)
        if raw is None:
            context = record.args.get(ContextProperties.TELEMETRY_CONTEXT)
            if isinstance(context, Mapping):
                raw = context.get(key)
    if raw is None:
        raw = getattr(record, key, None)
    if raw is None:
        return None
    try:
        return TelemetryKind(raw)
    except ValueError:
        return None


class TelemetryTypeFilter(logging.Filter):
    """Drop records of one telemetry kind unless tracking it is enabled.

    Example:
        ```python
        handler.addFilter(TelemetryTypeFilter(TelemetryKind.METRIC))
        ```
    """

    def __init__(self, telemetry_kind: TelemetryKind, track_enabled: bool = False) -> None:
        """Initialize the filter.

        Args:
            telemetry_kind: The kind to filter.
            track_enabled: Let records of the kind pass anyway.
        """
        super().__init__()
        self.telemetry_kind = telemetry_kind
        self.track_enabled = track_enabled

    def filter(self, record: logging.LogRecord) -> bool:
        if self.track_enabled:
            return True
        return record_telemetry_kind(record) is not self.telemetry_kind
