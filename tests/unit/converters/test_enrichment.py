"""Tests for correlation and cloud context enrichment."""

from datetime import timedelta

import pytest

from telemetripy.core.converters import (
    CloudContextConverter,
    DependencyTelemetryConverter,
    OperationContextConverter,
    RequestTelemetryConverter,
)
from telemetripy.core.models import DependencyLogEntry, RequestLogEntry
from telemetripy.core.options import (
    CorrelationOptions,
    RequestOptions,
    TelemetryConverterOptions,
)
from telemetripy.core.telemetry import (
    DependencyTelemetry,
    EventTelemetry,
    RequestTelemetry,
    TraceTelemetry,
)

CORRELATION = {
    "OperationId": "op-1",
    "TransactionId": "tx-1",
    "OperationParentId": "parent-1",
}


@pytest.fixture
def request_entry(start_time):
    def _make(context=None):
        return RequestLogEntry.create_for_http_request(
            "GET", "https", "shop", "/orders", "GetOrders", 200, start_time,
            timedelta(0), context,
        )

    return _make


@pytest.mark.core
class TestRequestCorrelation:
    """Requests are the root of an operation."""

    @pytest.mark.tier(0)
    def test_ids_are_mapped_onto_request(self, make_log_event, request_entry) -> None:
        [telemetry] = RequestTelemetryConverter().convert(
            make_log_event(request_entry(CORRELATION))
        )
        assert telemetry.id == "op-1"
        assert telemetry.context.operation.id == "tx-1"
        assert telemetry.context.operation.parent_id == "parent-1"
        assert telemetry.context.operation.name == "GetOrders"

    @pytest.mark.tier(0)
    @pytest.mark.parametrize("operation_id", [None, "", "null"])
    def test_missing_operation_id_is_generated(
        self, make_log_event, request_entry, operation_id
    ) -> None:
        context = {"TransactionId": "tx-1"}
        if operation_id is not None:
            context["OperationId"] = operation_id
        options = TelemetryConverterOptions(
            request=RequestOptions(generate_id=lambda: "generated-id")
        )
        [telemetry] = RequestTelemetryConverter(options).convert(
            make_log_event(request_entry(context))
        )
        assert telemetry.id == "generated-id"
        assert telemetry.context.operation.id == "tx-1"
        assert telemetry.context.operation.parent_id is None

    @pytest.mark.tier(0)
    def test_custom_property_names(self, make_log_event, request_entry) -> None:
        options = TelemetryConverterOptions(
            correlation=CorrelationOptions(
                operation_id_property_name="RequestId",
                transaction_id_property_name="CorrelationId",
                operation_parent_id_property_name="CallerId",
            )
        )
        context = {"RequestId": "op-2", "CorrelationId": "tx-2", "CallerId": "parent-2"}
        [telemetry] = RequestTelemetryConverter(options).convert(
            make_log_event(request_entry(context))
        )
        assert telemetry.id == "op-2"
        assert telemetry.context.operation.id == "tx-2"
        assert telemetry.context.operation.parent_id == "parent-2"

    @pytest.mark.tier(0)
    def test_existing_operation_name_is_kept(self) -> None:
        telemetry = RequestTelemetry(request_name="GetOrders")
        telemetry.context.operation.name = "Checkout"
        OperationContextConverter().enrich_with_operation_name(telemetry)
        assert telemetry.context.operation.name == "Checkout"

    @pytest.mark.tier(0)
    def test_null_transaction_and_parent_ids_are_ignored(self) -> None:
        telemetry = RequestTelemetry(
            request_name="GetOrders",
            properties={
                "OperationId": "op-1",
                "TransactionId": "null",
                "OperationParentId": "null",
            },
        )
        OperationContextConverter().enrich_with_correlation_info(telemetry)
        assert telemetry.id == "op-1"
        assert telemetry.context.operation.id is None
        assert telemetry.context.operation.parent_id is None


@pytest.mark.core
class TestChildCorrelation:
    """Every non-request kind hangs below the request of its operation."""

    @pytest.mark.tier(0)
    def test_dependency_ids(self, make_log_event, start_time) -> None:
        entry = DependencyLogEntry(
            dependency_type="Http",
            dependency_name="GET /stock",
            dependency_data=None,
            target_name="stock-api",
            duration=timedelta(0),
            start_time=start_time,
            result_code=200,
            is_successful=True,
            context=CORRELATION,
        )
        [telemetry] = DependencyTelemetryConverter().convert(make_log_event(entry))
        assert telemetry.context.operation.id == "tx-1"
        assert telemetry.context.operation.parent_id == "op-1"
        assert telemetry.context.operation.name == "GET /stock"

    @pytest.mark.tier(0)
    def test_missing_ids_leave_context_unset(self) -> None:
        telemetry = DependencyTelemetry(type="Http")
        OperationContextConverter().enrich_with_correlation_info(telemetry)
        assert telemetry.context.operation.id is None
        assert telemetry.context.operation.parent_id is None

    @pytest.mark.tier(0)
    def test_trace_gets_ids_but_no_operation_name(self) -> None:
        telemetry = TraceTelemetry(message="hello", properties=dict(CORRELATION))
        converter = OperationContextConverter()
        converter.enrich_with_correlation_info(telemetry)
        converter.enrich_with_operation_name(telemetry)
        assert telemetry.context.operation.id == "tx-1"
        assert telemetry.context.operation.parent_id == "op-1"
        assert telemetry.context.operation.name is None

    @pytest.mark.tier(0)
    def test_null_operation_id_is_not_used_as_parent(self) -> None:
        telemetry = EventTelemetry(
            event_name="Order Placed",
            properties={"OperationId": "null", "TransactionId": "tx-1"},
        )
        OperationContextConverter().enrich_with_correlation_info(telemetry)
        assert telemetry.context.operation.id == "tx-1"
        assert telemetry.context.operation.parent_id is None

    @pytest.mark.tier(0)
    def test_null_transaction_id_leaves_operation_unset(self) -> None:
        telemetry = EventTelemetry(
            event_name="Order Placed",
            properties={"OperationId": "op-1", "TransactionId": "null"},
        )
        OperationContextConverter().enrich_with_correlation_info(telemetry)
        assert telemetry.context.operation.id is None
        assert telemetry.context.operation.parent_id == "op-1"


@pytest.mark.core
class TestCloudContextConverter:
    """Tests for CloudContextConverter."""

    @pytest.mark.tier(0)
    def test_pod_name_wins_over_machine_name(self, make_log_event) -> None:
        log_event = make_log_event(
            ComponentName="order-service", MachineName="vm-01", PodName="orders-7d9f"
        )
        telemetry = TraceTelemetry(message="hello")
        CloudContextConverter().enrich_with_app_info(log_event, telemetry)
        assert telemetry.context.cloud.role_name == "order-service"
        assert telemetry.context.cloud.role_instance == "orders-7d9f"

    @pytest.mark.tier(0)
    def test_machine_name_without_pod(self, make_log_event) -> None:
        log_event = make_log_event(MachineName="vm-01", PodName="  ")
        telemetry = TraceTelemetry(message="hello")
        CloudContextConverter().enrich_with_app_info(log_event, telemetry)
        assert telemetry.context.cloud.role_name is None
        assert telemetry.context.cloud.role_instance == "vm-01"

    @pytest.mark.tier(0)
    def test_nothing_to_enrich(self, make_log_event) -> None:
        telemetry = TraceTelemetry(message="hello")
        CloudContextConverter().enrich_with_app_info(make_log_event(), telemetry)
        assert telemetry.context.cloud.role_name is None
        assert telemetry.context.cloud.role_instance is None

    @pytest.mark.tier(0)
    def test_enriched_properties_are_still_forwarded(self, make_log_event) -> None:
        log_event = make_log_event(
            message_template="hello", ComponentName="order-service"
        )
        [telemetry] = DependencyTelemetryConverter().convert(log_event)
        assert telemetry.context.cloud.role_name == "order-service"
        assert telemetry.properties["ComponentName"] == "order-service"
