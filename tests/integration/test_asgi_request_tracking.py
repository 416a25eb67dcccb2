"""Integration tests for ASGIRequestTrackingMiddleware."""

import logging

import pytest

from telemetripy.adapters.enrichers import CorrelationInfoEnricher
from telemetripy.adapters.frameworks.asgi import (
    ASGIRequestTrackingMiddleware,
    Receive,
    Scope,
    Send,
)
from telemetripy.adapters.logging_context import get_correlation_info
from telemetripy.adapters.tracking import log_dependency
from telemetripy.core.measurement import DurationMeasurement

pytestmark = [pytest.mark.integration, pytest.mark.tier(2)]


@pytest.mark.tra("Adapter.ASGI.RequestTracking.Request")
async def test_request_is_tracked(basic_asgi_app, asgi_test_client, telemetry_logger, channel):
    """A successful request is converted into request telemetry."""
    # Arrange
    app = ASGIRequestTrackingMiddleware(basic_asgi_app, request_logger=telemetry_logger)

    # Act
    async with asgi_test_client(app) as client:
        response = await client.get("/orders")

    # Assert
    assert response.status_code == 200
    [request] = channel.requests
    assert request.request_name == "GET /orders"
    assert request.url == "http://test/orders"
    assert request.response_code == "200"
    assert request.success is True
    assert request.context.operation.name == "GET /orders"


@pytest.mark.tra("Adapter.ASGI.RequestTracking.Correlation")
async def test_correlation_headers_are_used(
    basic_asgi_app, asgi_test_client, telemetry_logger, channel
):
    """The transaction id and the caller's id come from the request headers."""
    app = ASGIRequestTrackingMiddleware(basic_asgi_app, request_logger=telemetry_logger)

    async with asgi_test_client(app) as client:
        await client.get("/orders", headers={"X-Transaction-ID": "tx-1", "Request-Id": "caller-1"})

    [request] = channel.requests
    assert request.context.operation.id == "tx-1"
    assert request.context.operation.parent_id == "caller-1"
    assert request.id


@pytest.mark.tra("Adapter.ASGI.RequestTracking.CustomHeaders")
async def test_custom_header_names(basic_asgi_app, asgi_test_client, telemetry_logger, channel):
    app = ASGIRequestTrackingMiddleware(
        basic_asgi_app,
        request_logger=telemetry_logger,
        transaction_id_header="X-Correlation-ID",
        operation_parent_id_header="traceparent",
    )

    async with asgi_test_client(app) as client:
        await client.get("/", headers={"X-Correlation-ID": "tx-2", "traceparent": "caller-2"})

    [request] = channel.requests
    assert request.context.operation.id == "tx-2"
    assert request.context.operation.parent_id == "caller-2"


@pytest.mark.tra("Adapter.ASGI.RequestTracking.Dependencies")
async def test_dependencies_hang_below_the_request(
    asgi_test_client, telemetry_handler, telemetry_logger, channel
):
    """Dependencies tracked while handling a request share its operation."""
    # Arrange
    telemetry_handler.addFilter(CorrelationInfoEnricher())

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        with DurationMeasurement.start() as measurement:
            pass
        log_dependency(
            telemetry_logger, "Sql", "SELECT 1", True,
            dependency_name="orders/GetOrders", measurement=measurement,
        )
        await send({"type": "http.response.start", "status": 200, "headers": []})
        await send({"type": "http.response.body", "body": b"OK"})

    middleware = ASGIRequestTrackingMiddleware(app, request_logger=telemetry_logger)

    # Act
    async with asgi_test_client(middleware) as client:
        await client.get("/orders", headers={"X-Transaction-ID": "tx-3"})

    # Assert
    [request] = channel.requests
    [dependency] = channel.dependencies
    assert dependency.context.operation.id == "tx-3"
    assert dependency.context.operation.parent_id == request.id


@pytest.mark.tra("Adapter.ASGI.RequestTracking.Exception")
async def test_failing_app_is_tracked_as_500(asgi_test_client, telemetry_logger, channel):
    """The app's exception is re-raised after tracking a 500 request."""

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        raise RuntimeError("boom")

    middleware = ASGIRequestTrackingMiddleware(app, request_logger=telemetry_logger)

    async with asgi_test_client(middleware) as client:
        with pytest.raises(RuntimeError, match="boom"):
            await client.get("/orders")

    [request] = channel.requests
    assert request.response_code == "500"
    assert request.success is False
    assert request.properties["Exception"] == "RuntimeError: boom"


@pytest.mark.tra("Adapter.ASGI.RequestTracking.TrackingFailure")
async def test_tracking_failure_does_not_break_response(
    basic_asgi_app, asgi_test_client, telemetry_logger, channel, caplog
):
    """A request that cannot be tracked is still answered and the failure logged."""
    # Arrange
    app = ASGIRequestTrackingMiddleware(basic_asgi_app, request_logger=telemetry_logger)

    # Act
    with caplog.at_level(logging.ERROR, logger="telemetripy.adapters.frameworks.asgi"):
        async with asgi_test_client(app) as client:
            response = await client.get("/orders", headers={"Host": "my host"})

    # Assert
    assert response.status_code == 200
    assert channel.requests == []
    assert "Failed to track request GET /orders" in caplog.text


@pytest.mark.tra("Adapter.ASGI.RequestTracking.TrackingFailure")
async def test_tracking_failure_keeps_app_exception(asgi_test_client, telemetry_logger, channel):
    """The app's own exception surfaces even when tracking the request fails."""

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        raise KeyError("order")

    middleware = ASGIRequestTrackingMiddleware(app, request_logger=telemetry_logger)

    async with asgi_test_client(middleware) as client:
        with pytest.raises(KeyError):
            await client.get("/orders", headers={"Host": "my host"})

    assert channel.requests == []


@pytest.mark.tra("Adapter.ASGI.RequestTracking.LogLevel")
@pytest.mark.parametrize(("status", "level"), [(200, "WARNING"), (404, "WARNING"), (503, "ERROR")])
async def test_log_level_follows_status(
    asgi_test_client, capturing_logger, status: int, level: str
):
    logger, records = capturing_logger

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        await send({"type": "http.response.start", "status": status, "headers": []})
        await send({"type": "http.response.body", "body": b""})

    middleware = ASGIRequestTrackingMiddleware(app, request_logger=logger)

    async with asgi_test_client(middleware) as client:
        await client.get("/")

    [record] = records
    assert record.levelname == level


@pytest.mark.tra("Adapter.ASGI.RequestTracking.ExcludePaths")
async def test_excluded_paths_are_not_tracked(
    basic_asgi_app, asgi_test_client, telemetry_logger, channel
):
    app = ASGIRequestTrackingMiddleware(
        basic_asgi_app,
        request_logger=telemetry_logger,
        exclude_paths=["/health", "/internal/*"],
    )

    async with asgi_test_client(app) as client:
        await client.get("/health")
        await client.get("/internal/metrics")
        await client.get("/orders")

    assert [request.url for request in channel.requests] == ["http://test/orders"]


@pytest.mark.tra("Adapter.ASGI.RequestTracking.Disabled")
async def test_tracking_can_be_disabled(
    basic_asgi_app, asgi_test_client, telemetry_logger, channel
):
    """Correlation scopes stay active while request tracking is off."""
    seen = []

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        seen.append(get_correlation_info())
        await basic_asgi_app(scope, receive, send)

    middleware = ASGIRequestTrackingMiddleware(app, request_logger=telemetry_logger)
    middleware.set_track_requests(False)

    async with asgi_test_client(middleware) as client:
        await client.get("/orders")

    assert channel.requests == []
    assert seen[0] is not None


@pytest.mark.tra("Adapter.ASGI.RequestTracking.Passthrough")
async def test_non_http_scopes_pass_through(telemetry_logger, channel):
    calls = []

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        calls.append(scope["type"])

    middleware = ASGIRequestTrackingMiddleware(app, request_logger=telemetry_logger)

    async def receive() -> dict:
        return {"type": "lifespan.startup"}

    async def send(message: dict) -> None:
        pass

    await middleware({"type": "lifespan"}, receive, send)

    assert calls == ["lifespan"]
    assert channel.items == []


@pytest.mark.tra("Adapter.ASGI.RequestTracking.DefaultLogger")
def test_default_request_logger():
    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        pass

    middleware = ASGIRequestTrackingMiddleware(app)

    assert middleware.request_logger is logging.getLogger(
        "telemetripy.adapters.frameworks.asgi"
    )
    assert middleware.exclude_paths == []
    assert middleware.track_requests is True
