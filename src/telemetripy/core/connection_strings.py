"""Read the parts of SQL and IoT Hub connection strings used for dependency tracking."""

from dataclasses import dataclass

_DATA_SOURCE_ALIASES = ("data source", "server", "addr", "address", "network address")
_INITIAL_CATALOG_ALIASES = ("initial catalog", "database")


@dataclass(frozen=True)
class SqlConnectionInfo:
    """Server and database named by a connection string.

    Attributes:
        data_source: The SQL server, or None when the string names none.
        initial_catalog: The database, or None when the string names none.
    """

    data_source: str | None
    initial_catalog: str | None


def _find_property(parts: dict[str, str], aliases: tuple[str, ...]) -> str | None:
    for alias in aliases:
        if alias in parts:
            return parts[alias]
    return None


def _split_pairs(connection_string: str) -> dict[str, str]:
    parts: dict[str, str] = {}
    for part in connection_string.split(";"):
        key, separator, value = part.partition("=")
        if not separator:
            continue
        parts.setdefault(key.strip().lower(), value.strip().strip("'\""))
    return parts


def parse_sql_connection_string(connection_string: str) -> SqlConnectionInfo:
    """Parse ``key=value;key=value`` pairs, matching keys case-insensitively.

    Args:
        connection_string: The SQL connection string.

    Returns:
        The data source and initial catalog found in the string.

    Raises:
        ValueError: If the connection string is blank.
    """
    if not connection_string or not connection_string.strip():
        raise ValueError(
            "Requires a non-blank SQL connection string to retrieve specific SQL properties"
        )

    parts = _split_pairs(connection_string)
    return SqlConnectionInfo(
        data_source=_find_property(parts, _DATA_SOURCE_ALIASES),
        initial_catalog=_find_property(parts, _INITIAL_CATALOG_ALIASES),
    )


def parse_iot_hub_host_name(connection_string: str) -> str:
    """Return the ``HostName`` of an IoT Hub connection string.

    Raises:
        ValueError: If the connection string is blank or names no host.
    """
    if not connection_string or not connection_string.strip():
        raise ValueError(
            "Requires an IoT Hub connection string to retrieve the IoT host name"
        )
    host_name = _split_pairs(connection_string).get("hostname")
    if not host_name:
        raise ValueError("IoT Hub connection string does not contain a 'HostName'")
    return host_name
