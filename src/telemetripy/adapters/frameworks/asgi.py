"""ASGI middleware tracking every HTTP request as request telemetry.

Framework-agnostic: works with any ASGI application (Starlette, FastAPI,
Django's ASGI handler) without depending on one of them.
"""

import fnmatch
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from telemetripy.adapters.logging_context import CorrelationInfo, correlation_scope
from telemetripy.adapters.tracking.requests import log_request
from telemetripy.core.context import ContextProperties
from telemetripy.core.measurement import DurationMeasurement

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

logger = logging.getLogger(__name__)


def _extract_header(scope: Scope, header_name: str) -> str | None:
    """Extract a header value from ASGI scope headers (case-insensitive).

    Args:
        scope: ASGI scope dictionary containing request metadata.
        header_name: Name of the header to search for.

    Returns:
        The header value, or None if the header is absent.
    """
    header_bytes = header_name.lower().encode()
    headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
    for name, value in headers:
        if name.lower() == header_bytes:
            return value.decode("utf-8", errors="replace")
    return None


def _request_host(scope: Scope) -> str:
    """Determine the requested host from the Host header or the server address."""
    host = _extract_header(scope, "host")
    if host:
        return host.strip()
    server = scope.get("server")
    if server:
        server_host, port = server
        return f"{server_host}:{port}" if port else str(server_host)
    return "localhost"


def _get_log_level_for_status(status_code: int) -> int:
    """Determine log level based on HTTP status code.

    Maps status codes to log levels:
    - 500-599 (5xx) → ERROR
    - Other → WARNING (the tracking default)

    Args:
        status_code: HTTP status code from response.

    Returns:
        Logging level number.
    """
    if 500 <= status_code < 600:
        return logging.ERROR
    return logging.WARNING


class ASGIRequestTrackingMiddleware:
    """ASGI middleware that tracks each HTTP request.

    Every request runs inside a correlation scope: the transaction id is read
    from a header (or generated) and a fresh operation id is generated.
    After the response the request is logged as a request entry, with status
    500 when the wrapped app raised.
    """

    def __init__(
        self,
        app: ASGIApp,
        request_logger: logging.Logger | None = None,
        exclude_paths: list[str] | None = None,
        transaction_id_header: str = "X-Transaction-ID",
        operation_parent_id_header: str = "Request-Id",
    ) -> None:
        """Initialize the middleware with a wrapped app.

        Args:
            app: The ASGI application to wrap.
            request_logger: Logger to track requests with. Defaults to this
                module's logger.
            exclude_paths: List of paths to exclude from tracking.
                          Supports exact matches and wildcard patterns
                          (e.g., "/internal/*").
            transaction_id_header: Header carrying the transaction id
                                 (default: "X-Transaction-ID").
            operation_parent_id_header: Header carrying the id of the calling
                                      operation (default: "Request-Id").
        """
        self.app = app
        self.request_logger = request_logger or logger
        self.exclude_paths = exclude_paths or []
        self.transaction_id_header = transaction_id_header
        self.operation_parent_id_header = operation_parent_id_header
        self.track_requests = True

    def set_track_requests(self, enabled: bool) -> None:
        """Set whether to track requests.

        Args:
            enabled: True to enable request tracking, False to disable.
                    Correlation scopes are opened regardless of this setting.
        """
        self.track_requests = enabled

    def _path_excluded(self, path: str) -> bool:
        """Check if path matches any pattern in exclude_paths."""
        return any(fnmatch.fnmatch(path, pattern) for pattern in self.exclude_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI callable interface that processes requests through the wrapped app."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        measurement = DurationMeasurement.start()
        captured: dict[str, Any] = {"status": None, "exception": None}

        async def wrapped_send(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                captured["status"] = message["status"]
            await send(message)

        with correlation_scope(
            transaction_id=_extract_header(scope, self.transaction_id_header),
            operation_parent_id=_extract_header(scope, self.operation_parent_id_header),
        ) as correlation:
            try:
                await self.app(scope, receive, wrapped_send)
            except Exception as e:
                captured["exception"] = e
                captured["status"] = 500
            finally:
                measurement.stop()
            try:
                self._track_request(scope, captured, measurement, correlation)
            except Exception:
                logger.exception(
                    "Failed to track request %s %s", scope.get("method"), scope.get("path")
                )

        if captured["exception"] is not None:
            raise captured["exception"]

    def _track_request(
        self,
        scope: Scope,
        captured: dict[str, Any],
        measurement: DurationMeasurement,
        correlation: CorrelationInfo,
    ) -> None:
        """Log the request entry unless tracking is off or the path is excluded."""
        if not self.track_requests or self._path_excluded(scope["path"]):
            return
        status_code = captured["status"] or 0
        context: dict[str, Any] = {
            ContextProperties.Correlation.OPERATION_ID: correlation.operation_id,
            ContextProperties.Correlation.TRANSACTION_ID: correlation.transaction_id,
        }
        if correlation.operation_parent_id:
            context[ContextProperties.Correlation.OPERATION_PARENT_ID] = (
                correlation.operation_parent_id
            )
        if captured["exception"] is not None:
            exc = captured["exception"]
            context["Exception"] = f"{type(exc).__name__}: {exc!s}"
        log_request(
            self.request_logger,
            request_method=scope["method"],
            request_scheme=scope.get("scheme", "http"),
            request_host=_request_host(scope),
            request_uri=scope["path"],
            response_status_code=status_code,
            measurement=measurement,
            context=context,
            level=_get_log_level_for_status(status_code),
        )
