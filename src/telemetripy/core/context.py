"""Well-known property keys, message prefixes and message templates.

The keys below are the wire protocol between the logging frontend and the
telemetry converters: entries write them into the property bag and the
converters read them back out.
"""


class ContextProperties:
    """Property keys grouped by concern."""

    TELEMETRY_CONTEXT = "Context"

    class Correlation:
        OPERATION_ID = "OperationId"
        TRANSACTION_ID = "TransactionId"
        OPERATION_PARENT_ID = "OperationParentId"

    class DependencyTracking:
        DEPENDENCY_ID = "DependencyId"
        DEPENDENCY_TYPE = "DependencyType"
        TARGET_NAME = "DependencyTargetName"
        DEPENDENCY_NAME = "DependencyName"
        DEPENDENCY_DATA = "DependencyData"
        START_TIME = "DependencyStartTime"
        RESULT_CODE = "DependencyResultCode"
        DURATION = "DependencyDuration"
        IS_SUCCESSFUL = "DependencyIsSuccessful"

        class ServiceBus:
            ENTITY_TYPE = "EntityType"
            ENDPOINT = "ServiceBus-Endpoint"

    class EventTracking:
        EVENT_NAME = "EventName"
        # Only read by the legacy prefix based conversion
        EVENT_DESCRIPTION = "EventDescription"

    class MetricTracking:
        METRIC_NAME = "MetricName"
        METRIC_VALUE = "MetricValue"
        TIMESTAMP = "Timestamp"

    class RequestTracking:
        REQUEST_METHOD = "RequestMethod"
        REQUEST_HOST = "RequestHost"
        REQUEST_URI = "RequestUri"
        RESPONSE_STATUS_CODE = "ResponseStatusCode"
        REQUEST_DURATION = "RequestDuration"
        REQUEST_TIME = "RequestTime"
        OPERATION_NAME = "RequestOperationName"
        SOURCE_SYSTEM = "RequestSourceSystem"
        CUSTOM_SOURCE = "RequestCustomSource"

        class ServiceBus:
            ENDPOINT = "ServiceBus-Endpoint"
            ENTITY_NAME = "ServiceBus-Entity"
            ENTITY_TYPE = "EntityType"

        class EventHubs:
            NAMESPACE = "EventHubs-Namespace"
            NAME = "EventHubs-Name"
            CONSUMER_GROUP = "ConsumerGroup"

    class Kubernetes:
        NAMESPACE = "Namespace"
        NODE_NAME = "NodeName"
        POD_NAME = "PodName"

    class General:
        COMPONENT_NAME = "ComponentName"
        MACHINE_NAME = "MachineName"
        TELEMETRY_TYPE = "TelemetryType"


class MessagePrefixes:
    """Leading words of each message template, used by legacy dispatch."""

    REQUEST_VIA_HTTP = "HTTP Request"
    DEPENDENCY = "Dependency"
    DEPENDENCY_VIA_HTTP = "HTTP Dependency"
    DEPENDENCY_VIA_SQL = "SQL Dependency"
    EVENT = "Events"
    METRIC = "Metric"


class MessageFormats:
    """Logging templates rendered against the property bag.

    Each template uses ``%(Key)s`` placeholders so that
    ``LogRecord.getMessage()`` renders it when the record's single argument
    is the property mapping.
    """

    DEPENDENCY = (
        MessagePrefixes.DEPENDENCY
        + " %(DependencyType)s %(DependencyName)s %(DependencyData)s"
        " named %(DependencyTargetName)s with ID %(DependencyId)s"
        " in %(DependencyDuration)s at %(DependencyStartTime)s"
        " (IsSuccessful: %(DependencyIsSuccessful)s"
        " - ResultCode: %(DependencyResultCode)s - Context: %(Context)s)"
    )
    REQUEST = (
        MessagePrefixes.REQUEST_VIA_HTTP
        + " %(RequestMethod)s %(RequestHost)s/%(RequestUri)s"
        " from %(RequestOperationName)s completed with %(ResponseStatusCode)s"
        " in %(RequestDuration)s at %(RequestTime)s - (Context: %(Context)s)"
    )
    EVENT = MessagePrefixes.EVENT + " %(EventName)s (Context: %(Context)s)"
    METRIC = (
        MessagePrefixes.METRIC
        + " %(MetricName)s: %(MetricValue)s at %(Timestamp)s"
        " (Context: %(Context)s)"
    )
