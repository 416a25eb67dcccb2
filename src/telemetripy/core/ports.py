"""Port interfaces between the conversion core and its collaborators.

The core depends only on these protocols, not on a concrete backend.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from telemetripy.core.telemetry import Telemetry


@runtime_checkable
class TelemetryChannelPort(Protocol):
    """Port accepting converted telemetry records.

    Adapters implementing this protocol forward telemetry to a backend.
    Examples: InMemoryTelemetryChannel.
    """

    def send(self, telemetry: Telemetry) -> None:
        """Accept a single telemetry record."""
        ...


@runtime_checkable
class HasStructuredFields(Protocol):
    """Exceptions that expose their own fields for exception telemetry."""

    def structured_fields(self) -> Mapping[str, Any]:
        """Return the field names and values to add as properties."""
        ...
