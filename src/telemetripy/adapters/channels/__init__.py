"""Telemetry channel adapters."""

from telemetripy.adapters.channels.in_memory import InMemoryTelemetryChannel

__all__ = ["InMemoryTelemetryChannel"]
