"""Configuration for the telemetry converters."""

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from telemetripy.core.context import ContextProperties


def _generate_request_id() -> str:
    return str(uuid.uuid4())


@dataclass
class CorrelationOptions:
    """Property names the correlation ids are read from."""

    operation_id_property_name: str = ContextProperties.Correlation.OPERATION_ID
    transaction_id_property_name: str = ContextProperties.Correlation.TRANSACTION_ID
    operation_parent_id_property_name: str = (
        ContextProperties.Correlation.OPERATION_PARENT_ID
    )

    def __post_init__(self) -> None:
        for name in (
            "operation_id_property_name",
            "transaction_id_property_name",
            "operation_parent_id_property_name",
        ):
            value = getattr(self, name)
            if not value or not value.strip():
                raise ValueError(f"Requires a non-blank {name.replace('_', ' ')}")


@dataclass
class RequestOptions:
    """Options for request telemetry.

    Attributes:
        generate_id: Produces a request id when the record carries none.
    """

    generate_id: Callable[[], str] = _generate_request_id


@dataclass
class ExceptionOptions:
    """Options for exception telemetry.

    Attributes:
        include_properties: Add the exception's public fields as properties.
        property_format: Name of each added property; ``{0}`` is replaced by
            the field name.
    """

    include_properties: bool = False
    property_format: str | None = "Exception-{0}"

    def __post_init__(self) -> None:
        if self.property_format is not None:
            self._validate_format(self.property_format)

    @staticmethod
    def _validate_format(property_format: str) -> None:
        if not property_format.strip():
            raise ValueError("Requires a non-blank property format")
        if property_format.count("{0}") != 1:
            raise ValueError(
                "Requires a property format with exactly one '{0}' placeholder,"
                f" got '{property_format}'"
            )
        try:
            property_format.format("name")
        except (IndexError, KeyError, ValueError) as e:
            raise ValueError(
                f"Property format '{property_format}' contains other placeholders"
            ) from e


@dataclass
class TelemetryConverterOptions:
    """All converter options in one place."""

    request: RequestOptions = field(default_factory=RequestOptions)
    exception: ExceptionOptions = field(default_factory=ExceptionOptions)
    correlation: CorrelationOptions = field(default_factory=CorrelationOptions)
