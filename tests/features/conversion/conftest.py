"""BDD step definitions for conversion.feature."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest
from pytest_bdd import given, parsers, then, when

from telemetripy.adapters.channels import InMemoryTelemetryChannel
from telemetripy.adapters.enrichers import CorrelationInfoEnricher
from telemetripy.adapters.logging import TelemetryHandler
from telemetripy.adapters.logging_context import CorrelationInfo, set_correlation_info
from telemetripy.adapters.tracking import log_custom_request, log_dependency, log_event
from telemetripy.core.context import ContextProperties
from telemetripy.core.converters import TelemetryConverter
from telemetripy.core.models import LogEvent
from telemetripy.core.telemetry import DependencyTelemetry, RequestTelemetry, Telemetry

_Dependency = ContextProperties.DependencyTracking


@dataclass
class ConversionScenarioContext:
    """State shared between the steps of one scenario."""

    logger: logging.Logger
    records: list[logging.LogRecord]
    handler: TelemetryHandler = field(
        default_factory=lambda: TelemetryHandler(InMemoryTelemetryChannel())
    )
    log_event: LogEvent | None = None
    telemetry: Telemetry | None = None


@pytest.fixture
def ctx(capturing_logger) -> ConversionScenarioContext:
    """Fresh scenario context recording the raw records of the tracking helpers."""
    logger, records = capturing_logger
    logger.addFilter(CorrelationInfoEnricher())
    return ConversionScenarioContext(logger=logger, records=records)


# === Given ===


@given("a logger feeding a telemetry converter")
def given_logger(ctx: ConversionScenarioContext) -> None:
    assert ctx.records == []


@given(
    parsers.parse('the current operation id is "{operation_id}" and transaction id is "{transaction_id}"')
)
def given_correlation(
    ctx: ConversionScenarioContext, operation_id: str, transaction_id: str
) -> None:
    set_correlation_info(CorrelationInfo(operation_id, transaction_id))


# === When ===


@when(
    parsers.parse(
        'a dependency of type "{dependency_type}" with data "{data}"'
        " is tracked as successful for {seconds:d} seconds"
    )
)
def when_dependency_tracked(
    ctx: ConversionScenarioContext, dependency_type: str, data: str, seconds: int
) -> None:
    log_dependency(
        ctx.logger,
        dependency_type,
        data,
        True,
        datetime.now(UTC),
        timedelta(seconds=seconds),
    )


@when(
    parsers.parse(
        'a custom request from "{source}" for operation "{operation}" is tracked as failed'
    )
)
def when_custom_request_tracked(
    ctx: ConversionScenarioContext, source: str, operation: str
) -> None:
    log_custom_request(
        ctx.logger,
        source,
        False,
        datetime.now(UTC),
        timedelta(milliseconds=250),
        operation_name=operation,
    )


@when(parsers.parse('an event named "{name}" is tracked'))
def when_event_tracked(ctx: ConversionScenarioContext, name: str) -> None:
    log_event(ctx.logger, name)


@when("the record is converted")
def when_converted(ctx: ConversionScenarioContext) -> None:
    [record] = ctx.records
    ctx.log_event = ctx.handler.to_log_event(record)
    [ctx.telemetry] = TelemetryConverter().convert(ctx.log_event)


# === Then ===


@then(
    parsers.parse(
        'the telemetry is a dependency of type "{dependency_type}" with data "{data}"'
    )
)
def then_dependency(
    ctx: ConversionScenarioContext, dependency_type: str, data: str
) -> None:
    assert isinstance(ctx.telemetry, DependencyTelemetry)
    assert ctx.telemetry.type == dependency_type
    assert ctx.telemetry.data == data


@then("the telemetry is successful")
def then_successful(ctx: ConversionScenarioContext) -> None:
    assert ctx.telemetry.success is True


@then("the telemetry is not successful")
def then_not_successful(ctx: ConversionScenarioContext) -> None:
    assert ctx.telemetry.success is False


@then(parsers.parse("the telemetry lasted {seconds:d} seconds"))
def then_duration(ctx: ConversionScenarioContext, seconds: int) -> None:
    assert ctx.telemetry.duration == timedelta(seconds=seconds)


@then("no dependency tracking properties are left over")
def then_no_leftovers(ctx: ConversionScenarioContext) -> None:
    consumed = {
        _Dependency.DEPENDENCY_TYPE,
        _Dependency.DEPENDENCY_DATA,
        _Dependency.IS_SUCCESSFUL,
        _Dependency.START_TIME,
        _Dependency.DURATION,
    }
    assert consumed.isdisjoint(ctx.log_event.properties)
    assert consumed.isdisjoint(ctx.telemetry.properties)


@then(parsers.parse('the telemetry is a request with response code "{code}"'))
def then_request_code(ctx: ConversionScenarioContext, code: str) -> None:
    assert isinstance(ctx.telemetry, RequestTelemetry)
    assert ctx.telemetry.response_code == code


@then(parsers.parse('the request source contains "{label}"'))
def then_request_source(ctx: ConversionScenarioContext, label: str) -> None:
    assert label in ctx.telemetry.source


@then(parsers.parse('the telemetry operation id is "{operation_id}"'))
def then_operation_id(ctx: ConversionScenarioContext, operation_id: str) -> None:
    assert ctx.telemetry.context.operation.id == operation_id


@then(parsers.parse('the telemetry operation parent id is "{parent_id}"'))
def then_operation_parent_id(ctx: ConversionScenarioContext, parent_id: str) -> None:
    assert ctx.telemetry.context.operation.parent_id == parent_id
