"""Shared test fixtures for all test modules."""

import logging
import uuid
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest

try:
    import httpx
except ImportError:
    httpx = None

from telemetripy.adapters.channels.in_memory import InMemoryTelemetryChannel
from telemetripy.adapters.logging import TelemetryHandler
from telemetripy.adapters.logging_context import clear_correlation_info


@pytest.fixture(autouse=True)
def _no_correlation_leak() -> Iterator[None]:
    """Every test starts and ends without correlation info."""
    clear_correlation_info()
    yield
    clear_correlation_info()


@pytest.fixture
def start_time() -> datetime:
    """A fixed, timezone-aware start time."""
    return datetime(2024, 5, 1, 10, 15, 30, 123456, tzinfo=UTC)


@pytest.fixture
def five_seconds() -> timedelta:
    return timedelta(seconds=5)


@pytest.fixture
def channel() -> InMemoryTelemetryChannel:
    """Fixture providing an empty in-memory telemetry channel."""
    return InMemoryTelemetryChannel()


@pytest.fixture
def telemetry_handler(channel: InMemoryTelemetryChannel) -> TelemetryHandler:
    """Handler sending converted telemetry to the channel fixture."""
    return TelemetryHandler(channel)


@pytest.fixture
def telemetry_logger(telemetry_handler: TelemetryHandler) -> Iterator[logging.Logger]:
    """Isolated logger wired to the telemetry handler.

    Each test gets its own logger name so handlers never accumulate.
    """
    logger = logging.getLogger(f"telemetripy.tests.{uuid.uuid4().hex}")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addHandler(telemetry_handler)
    yield logger
    logger.removeHandler(telemetry_handler)


@pytest.fixture
def capturing_logger() -> Iterator[tuple[logging.Logger, list[logging.LogRecord]]]:
    """Logger recording raw LogRecords, for tests of what the helpers write."""
    records: list[logging.LogRecord] = []

    class _ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    handler = _ListHandler()
    logger = logging.getLogger(f"telemetripy.tests.raw.{uuid.uuid4().hex}")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addHandler(handler)
    yield logger, records
    logger.removeHandler(handler)


# === ASGI Test Fixtures ===


@pytest.fixture
def basic_asgi_app():
    """Basic ASGI app fixture that returns 200 OK."""
    from telemetripy.adapters.frameworks.asgi import Receive, Scope, Send

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        """Simple ASGI app that returns 200 OK."""
        await send({"type": "http.response.start", "status": 200, "headers": []})
        await send({"type": "http.response.body", "body": b"OK"})

    return app


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            async with asgi_test_client(app) as client:
                response = await client.get("/endpoint")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client


# === Log Event Fixtures ===


@pytest.fixture
def make_log_event(start_time: datetime):
    """Factory fixture building the LogEvent a handler would produce for an entry.

    Usage:
        def test_something(make_log_event):
            log_event = make_log_event(entry, Extra="value")
    """
    from telemetripy.core.models import LogEvent

    def _make(entry=None, *, message_template: str = "", exception=None, **extra):
        properties = entry.to_properties() if entry is not None else {}
        properties.update(extra)
        template = entry.message_template if entry is not None else message_template
        return LogEvent(
            timestamp=start_time,
            level="WARNING",
            message_template=template,
            message=str(entry) if entry is not None else template,
            properties=properties,
            exception=exception,
        )

    return _make
