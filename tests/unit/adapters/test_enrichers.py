"""Tests for the enriching logging filters."""

import logging
from importlib import metadata

import pytest

from telemetripy.adapters.enrichers import (
    ApplicationEnricher,
    CorrelationInfoEnricher,
    KubernetesEnricher,
    VersionEnricher,
    add_property_if_absent,
    has_property,
)
from telemetripy.adapters.logging_context import CorrelationInfo, correlation_scope
from telemetripy.adapters.tracking import log_dependency
from telemetripy.core.options import CorrelationOptions


def _record(**fields) -> logging.LogRecord:
    return logging.makeLogRecord({"msg": "hello", **fields})


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.AddIfAbsent")
def test_add_property_if_absent_keeps_existing_values() -> None:
    """Properties in the record's mapping or attributes are never overwritten."""
    record = _record(args={"Tenant": "contoso"}, Region="west")

    add_property_if_absent(record, "Tenant", "fabrikam")
    add_property_if_absent(record, "Region", "east")
    add_property_if_absent(record, "Zone", "  ")
    add_property_if_absent(record, "Shard", "7")

    assert record.args == {"Tenant": "contoso"}
    assert record.Region == "west"
    assert not has_property(record, "Zone")
    assert record.Shard == "7"


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.Correlation")
def test_correlation_enricher_adds_current_ids() -> None:
    """Inside a correlation scope the ids are added to every record."""
    record = _record()

    with correlation_scope("op-1", "tx-1", "parent-1"):
        assert CorrelationInfoEnricher().filter(record) is True

    assert record.OperationId == "op-1"
    assert record.TransactionId == "tx-1"
    assert record.OperationParentId == "parent-1"


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.Correlation.Outside")
def test_correlation_enricher_outside_scope_adds_nothing() -> None:
    record = _record()

    assert CorrelationInfoEnricher().filter(record) is True
    assert not has_property(record, "OperationId")


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.Correlation.Options")
def test_correlation_enricher_custom_names_and_accessor() -> None:
    """Property names come from CorrelationOptions and ids from the accessor."""
    enricher = CorrelationInfoEnricher(
        CorrelationOptions(
            operation_id_property_name="RequestId",
            transaction_id_property_name="CorrelationId",
            operation_parent_id_property_name="CallerId",
        ),
        accessor=lambda: CorrelationInfo("op-9", "tx-9"),
    )
    record = _record()

    enricher.filter(record)

    assert record.RequestId == "op-9"
    assert record.CorrelationId == "tx-9"
    assert not has_property(record, "CallerId")


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.Application")
def test_application_enricher() -> None:
    record = _record()

    ApplicationEnricher("order-service", machine_name="vm-01").filter(record)

    assert record.ComponentName == "order-service"
    assert record.MachineName == "vm-01"


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.Application.Validation")
def test_application_enricher_requires_component_name() -> None:
    with pytest.raises(ValueError):
        ApplicationEnricher(" ")


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.Kubernetes")
def test_kubernetes_enricher_reads_downward_api_variables() -> None:
    """Only the variables that are set are added."""
    environ = {"KUBERNETES_POD_NAME": "orders-7d9f", "KUBERNETES_NAMESPACE": "shop"}
    record = _record()

    KubernetesEnricher(environ).filter(record)

    assert record.PodName == "orders-7d9f"
    assert record.Namespace == "shop"
    assert not has_property(record, "NodeName")


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.Kubernetes.Environment")
def test_kubernetes_enricher_defaults_to_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("KUBERNETES_NODE_NAME", "node-3")
    record = _record()

    KubernetesEnricher().filter(record)

    assert record.NodeName == "node-3"


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.Version")
def test_version_enricher() -> None:
    record = _record()

    VersionEnricher("1.2.3", property_name="AppVersion").filter(record)

    assert record.AppVersion == "1.2.3"


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.Version.Distribution")
def test_version_enricher_reads_installed_distribution() -> None:
    record = _record()

    VersionEnricher(distribution="pytest").filter(record)

    assert record.version == metadata.version("pytest")


@pytest.mark.tier(0)
@pytest.mark.tra("Adapter.Enrichers.Version.Validation")
def test_version_enricher_requires_a_source() -> None:
    with pytest.raises(ValueError):
        VersionEnricher()
    with pytest.raises(metadata.PackageNotFoundError):
        VersionEnricher(distribution="telemetripy-no-such-distribution")


@pytest.mark.tier(1)
@pytest.mark.tra("Adapter.Enrichers.Pipeline")
def test_enrichers_feed_telemetry_context(
    telemetry_handler, telemetry_logger, channel, start_time, five_seconds
) -> None:
    """Enriched properties drive the cloud and operation context of telemetry."""
    # Arrange
    telemetry_handler.addFilter(ApplicationEnricher("order-service", "vm-01"))
    telemetry_handler.addFilter(CorrelationInfoEnricher())

    # Act
    with correlation_scope("op-1", "tx-1"):
        log_dependency(
            telemetry_logger, "Arcus", None, True, start_time, five_seconds,
            dependency_name="orders",
        )

    # Assert
    [dependency] = channel.dependencies
    assert dependency.context.cloud.role_name == "order-service"
    assert dependency.context.cloud.role_instance == "vm-01"
    assert dependency.context.operation.id == "tx-1"
    assert dependency.context.operation.parent_id == "op-1"
