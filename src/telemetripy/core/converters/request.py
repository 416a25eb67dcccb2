"""Request telemetry converter."""

from telemetripy.core.context import ContextProperties
from telemetripy.core.converters.base import CustomTelemetryConverter
from telemetripy.core.exceptions import PropertyFormatError
from telemetripy.core.models import (
    LogEvent,
    RequestSourceSystem,
    determine_request_source,
)
from telemetripy.core.properties import (
    get_as_datetime,
    get_as_raw_string,
    get_as_timedelta,
)
from telemetripy.core.telemetry import RequestTelemetry

_Request = ContextProperties.RequestTracking


def _is_successful(response_status_code: str | None) -> bool:
    if response_status_code is None:
        return False
    try:
        status_code = int(response_status_code)
    except ValueError as e:
        raise PropertyFormatError(
            f"Response status code '{response_status_code}' is not an integer"
        ) from e
    return 200 <= status_code < 300


class RequestTelemetryConverter(CustomTelemetryConverter[RequestTelemetry]):
    """Convert request log events into request telemetry.

    HTTP requests get a URL built from host and URI; requests from other
    systems get the label of their source system instead.
    """

    consumed_properties = (
        _Request.REQUEST_METHOD,
        _Request.REQUEST_HOST,
        _Request.REQUEST_URI,
        _Request.RESPONSE_STATUS_CODE,
        _Request.REQUEST_DURATION,
        _Request.REQUEST_TIME,
        _Request.OPERATION_NAME,
        _Request.SOURCE_SYSTEM,
        _Request.CUSTOM_SOURCE,
    )

    def create_telemetry_entry(self, log_event: LogEvent) -> RequestTelemetry:
        properties = log_event.properties
        method = get_as_raw_string(properties, _Request.REQUEST_METHOD)
        host = get_as_raw_string(properties, _Request.REQUEST_HOST)
        uri = get_as_raw_string(properties, _Request.REQUEST_URI)
        status_code = get_as_raw_string(properties, _Request.RESPONSE_STATUS_CODE)
        operation_name = get_as_raw_string(properties, _Request.OPERATION_NAME)

        raw_source = properties.get(_Request.SOURCE_SYSTEM)
        source_system = (
            RequestSourceSystem.HTTP
            if raw_source is None
            else RequestSourceSystem.parse(raw_source)
        )

        telemetry = RequestTelemetry(
            request_name=operation_name or f"{method} {uri}",
            timestamp=get_as_datetime(properties, _Request.REQUEST_TIME),
            duration=get_as_timedelta(properties, _Request.REQUEST_DURATION),
            response_code=status_code,
            success=_is_successful(status_code),
        )
        if source_system is RequestSourceSystem.HTTP:
            if host is not None:
                telemetry.url = f"{host}{uri or ''}"
        else:
            telemetry.source = determine_request_source(
                source_system, get_as_raw_string(properties, _Request.CUSTOM_SOURCE)
            )
        return telemetry
