"""Exception telemetry converter."""

import inspect
from typing import Any

from telemetripy.core.converters.base import CustomTelemetryConverter
from telemetripy.core.exceptions import ConfigurationError
from telemetripy.core.models import LogEvent
from telemetripy.core.ports import HasStructuredFields
from telemetripy.core.properties import get_as_raw_string
from telemetripy.core.telemetry import ExceptionTelemetry


def _declared_fields(exception: BaseException) -> dict[str, Any]:
    """Read the public data descriptors declared below ``BaseException``.

    Built-in exceptions such as ``OSError`` keep their fields in descriptors
    rather than in the instance ``__dict__``. Unset descriptors are skipped.
    """
    fields: dict[str, Any] = {}
    for cls in reversed(type(exception).__mro__):
        if not issubclass(cls, BaseException) or cls is BaseException:
            continue
        for name, attribute in vars(cls).items():
            if name.startswith("_") or not inspect.isdatadescriptor(attribute):
                continue
            value = getattr(exception, name, None)
            if value is not None and not callable(value):
                fields[name] = value
    return fields


def _public_fields(exception: BaseException) -> dict[str, Any]:
    if isinstance(exception, HasStructuredFields):
        return dict(exception.structured_fields())
    fields = _declared_fields(exception)
    fields.update(
        (name, value)
        for name, value in vars(exception).items()
        if not name.startswith("_")
    )
    return fields


class ExceptionTelemetryConverter(CustomTelemetryConverter[ExceptionTelemetry]):
    """Convert log events carrying an exception into exception telemetry.

    When ``ExceptionOptions.include_properties`` is set, the exception's
    fields are added as properties named through
    ``ExceptionOptions.property_format``.
    """

    def create_telemetry_entry(self, log_event: LogEvent) -> ExceptionTelemetry:
        exception = log_event.exception
        if exception is None:
            raise ValueError("Requires a log event with an exception")

        telemetry = ExceptionTelemetry(
            exception=exception,
            message=log_event.message or str(exception),
            severity_level=log_event.level,
            timestamp=log_event.timestamp,
        )
        options = self.options.exception
        if options.include_properties:
            if options.property_format is None:
                raise ConfigurationError(
                    "Requires a property format to add exception properties"
                )
            fields = _public_fields(exception)
            for name in fields:
                value = get_as_raw_string(fields, name)
                if value is not None:
                    telemetry.properties[options.property_format.format(name)] = value
        return telemetry
