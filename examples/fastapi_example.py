"""Example FastAPI application tracking requests, dependencies and events.

Run with:
    uvicorn examples.fastapi_example:app --reload

Endpoints:
    /                     - Tracked request, nothing else
    /orders/{order_id}    - Tracked request with a SQL dependency and an event
    /telemetry            - Summary of the telemetry collected so far
    /error                - Request failing with status 500

Correlation:
    Send an ``X-Transaction-ID`` header to see it become the operation id of
    every telemetry item written while handling the request.
"""

import asyncio
import logging

from fastapi import FastAPI

from telemetripy import (
    ApplicationEnricher,
    ASGIRequestTrackingMiddleware,
    CorrelationInfoEnricher,
    InMemoryTelemetryChannel,
    TelemetryHandler,
    log_event,
    log_sql_dependency,
    measure,
)

# Collect telemetry in memory
channel = InMemoryTelemetryChannel()
handler = TelemetryHandler(channel)
handler.addFilter(ApplicationEnricher("order-service"))
handler.addFilter(CorrelationInfoEnricher())

logger = logging.getLogger("orders")
logger.setLevel(logging.INFO)
logger.addHandler(handler)

app = FastAPI(title="Telemetry Example")
app.add_middleware(
    ASGIRequestTrackingMiddleware,
    request_logger=logger,
    exclude_paths=["/telemetry"],
)


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "Hello! Check /telemetry after a few requests."}


@app.get("/orders/{order_id}")
async def get_order(order_id: str) -> dict[str, str]:
    """Fetch an order, tracking the database call and a custom event."""
    with measure() as measurement:
        # Simulate the database query
        await asyncio.sleep(0.02)
    log_sql_dependency(
        logger,
        server_name="orders-db.database.windows.net",
        database_name="orders",
        sql_command="SELECT * FROM Orders WHERE Id = @id",
        operation_name="GetOrder",
        is_successful=True,
        measurement=measurement,
    )
    log_event(logger, "Order Viewed", {"OrderId": order_id})
    return {"id": order_id, "status": "shipped"}


@app.get("/telemetry")
async def telemetry() -> dict[str, list[dict[str, str | None]]]:
    """Summarize collected requests, dependencies and events."""
    return {
        "requests": [
            {
                "name": r.name,
                "code": r.response_code,
                "operation_id": r.context.operation.id,
            }
            for r in channel.requests
        ],
        "dependencies": [
            {"name": d.name, "type": d.type, "operation_id": d.context.operation.id}
            for d in channel.dependencies
        ],
        "events": [
            {"name": e.name, "operation_id": e.context.operation.id}
            for e in channel.events
        ],
    }


@app.get("/error")
async def error_endpoint() -> dict[str, str]:
    """Raise, so the request is tracked with status 500 at ERROR level."""
    raise ValueError("Intentional error for demonstration")
