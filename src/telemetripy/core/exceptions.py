"""Exception types raised by telemetripy.

Builders raise ``ValidationError`` for invalid arguments, property readers
raise ``PropertyFormatError`` for malformed values and converters raise
``ConfigurationError`` when their options are incomplete.
"""


class TelemetryError(Exception):
    """Base class for all telemetripy errors."""


class ValidationError(TelemetryError, ValueError):
    """An entry builder received an invalid argument.

    Attributes:
        param: Name of the offending parameter.
    """

    def __init__(self, param: str, message: str) -> None:
        super().__init__(f"{message} (parameter '{param}')")
        self.param = param


class PropertyFormatError(TelemetryError, ValueError):
    """A property value is present but cannot be parsed into the requested type."""


class ConfigurationError(TelemetryError, RuntimeError):
    """Converter options are missing a required setting."""


class UnknownRequestSourceError(TelemetryError, ValueError):
    """A request source system value is outside the known set."""
