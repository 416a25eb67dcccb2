"""Canonical text formats for timestamps and durations.

Timestamps travel through the property bag as
``yyyy-MM-ddTHH:mm:ss.fffffff zzz`` (seven fractional digits and an explicit
``+HH:MM`` offset). Durations use the constant ``[-][d.]hh:mm:ss[.fffffff]``
form. Both parsers are lenient enough to also read ISO 8601 input.
"""

import re
from datetime import UTC, datetime, timedelta, timezone

from telemetripy.core.exceptions import PropertyFormatError

TIMESTAMP_FORMAT = "yyyy-MM-ddTHH:mm:ss.fffffff zzz"

# Value returned for absent timestamps
DEFAULT_TIMESTAMP = datetime.min.replace(tzinfo=UTC)

_TIMESTAMP_RE = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"[T ](?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d{1,7}))?"
    r"\s?(?P<offset>Z|[+-]\d{2}:?\d{2})?$"
)

_DURATION_RE = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)\.)?"
    r"(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2})(?:\.(?P<fraction>\d{1,7}))?)?$"
)

_DAYS_ONLY_RE = re.compile(r"^(?P<sign>-)?(?P<days>\d+)$")

_ISO_DURATION_RE = re.compile(
    r"^(?P<sign>-)?P"
    r"(?:(?P<weeks>\d+(?:\.\d+)?)W)?"
    r"(?:(?P<days>\d+(?:\.\d+)?)D)?"
    r"(?:T(?:(?P<hours>\d+(?:\.\d+)?)H)?"
    r"(?:(?P<minutes>\d+(?:\.\d+)?)M)?"
    r"(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)

_MICROSECONDS_PER_SECOND = 1_000_000
_MICROSECONDS_PER_DAY = 86_400 * _MICROSECONDS_PER_SECOND


def _format_offset(offset: timedelta) -> str:
    total_minutes = int(offset.total_seconds()) // 60
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def format_timestamp(value: datetime) -> str:
    """Format a datetime in the canonical timestamp format.

    Naive datetimes are treated as UTC. The seventh fractional digit is
    always ``0`` since datetimes only carry microseconds.

    Args:
        value: The datetime to format.

    Returns:
        Text such as ``2024-05-01T10:15:30.1234560 +02:00``.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    offset = value.utcoffset() or timedelta(0)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond:06d}0 {_format_offset(offset)}"
    )


def _parse_offset(text: str | None) -> timezone:
    if text is None or text == "Z":
        return UTC
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
    return timezone(sign * offset)


def parse_timestamp(text: str) -> datetime:
    """Parse a timestamp written in the canonical format or ISO 8601.

    Input without an offset is read as UTC.

    Args:
        text: Timestamp text.

    Returns:
        An aware datetime.

    Raises:
        PropertyFormatError: If the text is not a recognizable timestamp.
    """
    stripped = text.strip()
    match = _TIMESTAMP_RE.match(stripped)
    if match is None:
        try:
            parsed = datetime.fromisoformat(stripped)
        except ValueError as e:
            raise PropertyFormatError(f"'{text}' is not a valid timestamp") from e
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    # Only the first six digits fit into a datetime
    fraction = (match["fraction"] or "").ljust(6, "0")[:6]
    try:
        return datetime(
            int(match["year"]),
            int(match["month"]),
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"]),
            int(fraction),
            tzinfo=_parse_offset(match["offset"]),
        )
    except ValueError as e:
        raise PropertyFormatError(f"'{text}' is not a valid timestamp") from e


def format_duration(value: timedelta) -> str:
    """Format a duration as ``[-][d.]hh:mm:ss[.fffffff]``.

    Args:
        value: The duration to format.

    Returns:
        Text such as ``00:00:01.5000000`` or ``2.03:00:00``.
    """
    total = (value.days * 86_400 + value.seconds) * _MICROSECONDS_PER_SECOND
    total += value.microseconds
    sign = "-" if total < 0 else ""
    days, rest = divmod(abs(total), _MICROSECONDS_PER_DAY)
    seconds, fraction = divmod(rest, _MICROSECONDS_PER_SECOND)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)

    text = sign + (f"{days}." if days else "")
    text += f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if fraction:
        text += f".{fraction:06d}0"
    return text


def _parse_iso_duration(match: re.Match[str]) -> timedelta:
    parts = {
        name: float(match[name])
        for name in ("weeks", "days", "hours", "minutes", "seconds")
        if match[name] is not None
    }
    value = timedelta(**parts)
    return -value if match["sign"] else value


def parse_duration(text: str) -> timedelta:
    """Parse a duration in constant format, days only, or ISO 8601 form.

    Args:
        text: Duration text, e.g. ``00:00:01.5000000``, ``3`` or ``PT1.5S``.

    Returns:
        The parsed timedelta.

    Raises:
        PropertyFormatError: If the text is not a recognizable duration.
        OverflowError: If a component is out of range or the value does not
            fit into a timedelta.
    """
    stripped = text.strip()

    days_only = _DAYS_ONLY_RE.match(stripped)
    if days_only is not None:
        value = timedelta(days=int(days_only["days"]))
        return -value if days_only["sign"] else value

    match = _DURATION_RE.match(stripped)
    if match is not None:
        hours = int(match["hours"])
        minutes = int(match["minutes"])
        seconds = int(match["seconds"] or 0)
        if hours > 23 or minutes > 59 or seconds > 59:
            raise OverflowError(f"duration component out of range in '{text}'")
        ticks = int((match["fraction"] or "").ljust(7, "0"))
        value = timedelta(
            days=int(match["days"] or 0),
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            microseconds=ticks // 10,
        )
        return -value if match["sign"] else value

    iso = _ISO_DURATION_RE.match(stripped)
    if iso is not None and stripped.rstrip("-P") and not stripped.endswith("T"):
        return _parse_iso_duration(iso)

    raise PropertyFormatError(f"'{text}' is not a valid duration")
