"""Helpers shared by the tracking functions."""

import logging
from datetime import datetime, timedelta
from typing import Protocol

from telemetripy.core.measurement import DurationMeasurement

# Telemetry is logged at WARNING so default logger configurations keep it
DEFAULT_TRACKING_LEVEL = logging.WARNING


class TrackableEntry(Protocol):
    message_template: str

    def to_properties(self) -> dict: ...


def resolve_timing(
    start_time: datetime | None,
    duration: timedelta | None,
    measurement: DurationMeasurement | None,
) -> tuple[datetime, timedelta]:
    """Pick start time and duration from explicit values or a measurement.

    Raises:
        ValueError: If neither a measurement nor both values are given.
    """
    if measurement is not None:
        return measurement.start_time, measurement.elapsed
    if start_time is None or duration is None:
        raise ValueError(
            "Requires either a duration measurement or both a start time and a duration"
        )
    return start_time, duration


def write_entry(logger: logging.Logger, entry: TrackableEntry, level: int) -> None:
    """Log the entry's template with its property bag as the single argument."""
    logger.log(level, entry.message_template, entry.to_properties())
