"""Logging filters that enrich records with correlation and deployment info.

Attach them to the handler (or logger) that feeds the TelemetryHandler.
Each enricher only adds a property when the record does not already carry
it and the value is not blank; records are never dropped.

Example:
    ```python
    handler = TelemetryHandler(channel)
    handler.addFilter(ApplicationEnricher("order-service"))
    handler.addFilter(KubernetesEnricher())
    handler.addFilter(CorrelationInfoEnricher())
    ```
"""

import logging
import os
import platform
from collections.abc import Callable, Mapping
from importlib import metadata
from typing import Any

from telemetripy.adapters.logging_context import CorrelationInfo, get_correlation_info
from telemetripy.core.context import ContextProperties
from telemetripy.core.options import CorrelationOptions

KUBERNETES_NODE_NAME_VARIABLE = "KUBERNETES_NODE_NAME"
KUBERNETES_POD_NAME_VARIABLE = "KUBERNETES_POD_NAME"
KUBERNETES_NAMESPACE_VARIABLE = "KUBERNETES_NAMESPACE"

VERSION_PROPERTY_NAME = "version"


def has_property(record: logging.LogRecord, name: str) -> bool:
    """Check whether a record already carries a property."""
    if isinstance(record.args, Mapping) and name in record.args:
        return True
    return name in record.__dict__


def add_property_if_absent(record: logging.LogRecord, name: str, value: Any) -> None:
    """Set ``name`` on the record unless present or ``value`` is blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return
    if not has_property(record, name):
        setattr(record, name, value)


class CorrelationInfoEnricher(logging.Filter):
    """Add the current operation, transaction and parent ids."""

    def __init__(
        self,
        options: CorrelationOptions | None = None,
        accessor: Callable[[], CorrelationInfo | None] = get_correlation_info,
    ) -> None:
        """Initialize the enricher.

        Args:
            options: Property names to write the ids under.
            accessor: Returns the current correlation info.
        """
        super().__init__()
        self._options = options or CorrelationOptions()
        self._accessor = accessor

    def filter(self, record: logging.LogRecord) -> bool:
        info = self._accessor()
        if info is None:
            return True
        add_property_if_absent(
            record, self._options.operation_id_property_name, info.operation_id
        )
        add_property_if_absent(
            record, self._options.transaction_id_property_name, info.transaction_id
        )
        add_property_if_absent(
            record,
            self._options.operation_parent_id_property_name,
            info.operation_parent_id,
        )
        return True


class ApplicationEnricher(logging.Filter):
    """Add the component name and the machine name."""

    def __init__(self, component_name: str, machine_name: str | None = None) -> None:
        """Initialize the enricher.

        Args:
            component_name: Name of the application component.
            machine_name: Name of the host. Defaults to the network name of
                the current machine.
        """
        if not component_name or not component_name.strip():
            raise ValueError("Requires a non-blank application component name")
        super().__init__()
        self.component_name = component_name
        self.machine_name = machine_name or platform.node()

    def filter(self, record: logging.LogRecord) -> bool:
        add_property_if_absent(
            record, ContextProperties.General.COMPONENT_NAME, self.component_name
        )
        add_property_if_absent(
            record, ContextProperties.General.MACHINE_NAME, self.machine_name
        )
        return True


class KubernetesEnricher(logging.Filter):
    """Add node, pod and namespace from the Kubernetes downward API variables."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._environ = environ

    def filter(self, record: logging.LogRecord) -> bool:
        environ = os.environ if self._environ is None else self._environ
        add_property_if_absent(
            record,
            ContextProperties.Kubernetes.NODE_NAME,
            environ.get(KUBERNETES_NODE_NAME_VARIABLE),
        )
        add_property_if_absent(
            record,
            ContextProperties.Kubernetes.POD_NAME,
            environ.get(KUBERNETES_POD_NAME_VARIABLE),
        )
        add_property_if_absent(
            record,
            ContextProperties.Kubernetes.NAMESPACE,
            environ.get(KUBERNETES_NAMESPACE_VARIABLE),
        )
        return True


class VersionEnricher(logging.Filter):
    """Add the application version."""

    def __init__(
        self,
        version: str | None = None,
        *,
        distribution: str | None = None,
        property_name: str = VERSION_PROPERTY_NAME,
    ) -> None:
        """Initialize the enricher.

        Args:
            version: The version to add.
            distribution: Installed distribution to read the version from
                when ``version`` is not given.
            property_name: Property to write the version under.

        Raises:
            ValueError: If neither a version nor a distribution is given.
            importlib.metadata.PackageNotFoundError: If the distribution is
                not installed.
        """
        if version is None:
            if distribution is None:
                raise ValueError("Requires a version or a distribution to read it from")
            version = metadata.version(distribution)
        if not property_name or not property_name.strip():
            raise ValueError("Requires a non-blank property name for the version")
        super().__init__()
        self.version = version
        self.property_name = property_name

    def filter(self, record: logging.LogRecord) -> bool:
        add_property_if_absent(record, self.property_name, self.version)
        return True
