"""Correlation information for the code currently executing.

Stored in a ContextVar, so every thread and asyncio task sees its own
value and concurrent requests do not leak ids into each other.
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass


@dataclass(frozen=True)
class CorrelationInfo:
    """Ids correlating telemetry of one logical operation.

    Attributes:
        operation_id: Id of the current operation (e.g. the request).
        transaction_id: Id of the end-to-end transaction spanning services.
        operation_parent_id: Id of the operation that called this one.
    """

    operation_id: str
    transaction_id: str | None = None
    operation_parent_id: str | None = None

    def __post_init__(self) -> None:
        if not self.operation_id or not self.operation_id.strip():
            raise ValueError("Requires a non-blank operation id")


_correlation_info: ContextVar[CorrelationInfo | None] = ContextVar(
    "telemetripy_correlation_info", default=None
)


def set_correlation_info(info: CorrelationInfo) -> Token[CorrelationInfo | None]:
    """Make ``info`` the current correlation info.

    Returns:
        Token to restore the previous value with ``reset_correlation_info``.
    """
    return _correlation_info.set(info)


def get_correlation_info() -> CorrelationInfo | None:
    """Return the current correlation info, or None outside any scope."""
    return _correlation_info.get()


def reset_correlation_info(token: Token[CorrelationInfo | None]) -> None:
    _correlation_info.reset(token)


def clear_correlation_info() -> None:
    _correlation_info.set(None)


@contextmanager
def correlation_scope(
    operation_id: str | None = None,
    transaction_id: str | None = None,
    operation_parent_id: str | None = None,
) -> Iterator[CorrelationInfo]:
    """Run a block with the given correlation ids.

    Missing operation and transaction ids are generated. The previous value
    is restored on exit.

    Example:
        ```python
        with correlation_scope(transaction_id=incoming_id) as info:
            log_event(logger, "Order Created")
        ```
    """
    info = CorrelationInfo(
        operation_id=operation_id or str(uuid.uuid4()),
        transaction_id=transaction_id or str(uuid.uuid4()),
        operation_parent_id=operation_parent_id,
    )
    token = _correlation_info.set(info)
    try:
        yield info
    finally:
        _correlation_info.reset(token)
