"""Track custom events and metrics through a logger."""

import logging
from datetime import UTC, datetime
from typing import Any

from telemetripy.adapters.tracking._common import DEFAULT_TRACKING_LEVEL, write_entry
from telemetripy.core.models import EventLogEntry, MetricLogEntry


def log_event(
    logger: logging.Logger,
    name: str,
    context: dict[str, Any] | None = None,
    *,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> EventLogEntry:
    """Track a named custom event.

    Args:
        logger: Logger to write the event to.
        name: Non-blank event name.
        context: Additional properties.
        level: Level to log at.

    Returns:
        The logged entry.
    """
    entry = EventLogEntry(event_name=name, context=context or {})
    write_entry(logger, entry, level)
    return entry


def log_metric(
    logger: logging.Logger,
    name: str,
    value: float,
    timestamp: datetime | None = None,
    context: dict[str, Any] | None = None,
    *,
    level: int = DEFAULT_TRACKING_LEVEL,
) -> MetricLogEntry:
    """Track a metric value; the timestamp defaults to now."""
    entry = MetricLogEntry(
        metric_name=name,
        metric_value=value,
        timestamp=timestamp or datetime.now(UTC),
        context=context or {},
    )
    write_entry(logger, entry, level)
    return entry
