"""Admin API health info client with version negotiation."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Final, Iterable

import httpx

from healthinfo.domain import (
    HealthDataType,
    HealthInfoEnvelope,
    domain_format_duration,
    domain_is_supported_health_info_version,
)

from .admin_errors import adapter_close_response, adapter_error_from_response
from .health_errors import (
    HealthInfoApplicationError,
    HealthInfoDecodeError,
    HealthInfoVersionError,
)
from .health_stream import HealthInfoStream, JsonDocumentReader
from .interfaces import AdminTransportPort, HealthInfoPort

logger = logging.getLogger(__name__)


def adapter_build_health_info_query(
    data_types: Iterable[HealthDataType],
    deadline: timedelta,
) -> dict[str, str]:
    """Build the fully explicit query parameter set for a health info request.

    Every known health data type is present: requested types are `"true"`,
    all others `"false"`.

    Args:
        data_types: Requested health data categories.
        deadline: Server-side collection deadline, truncated to whole seconds.

    Returns:
        dict[str, str]: Query parameters keyed by wire name.

    Raises:
        ValueError: Raised when a requested type is not a known health data type.
    """

    query_parameters = {"deadline": domain_format_duration(deadline)}
    for data_type in HealthDataType:
        query_parameters[data_type.value] = "false"
    for data_type in data_types:
        query_parameters[HealthDataType(data_type).value] = "true"
    return query_parameters


class AdminHealthInfoClient(HealthInfoPort):
    """Client for the admin `/healthinfo` endpoint.

    One call issues exactly one GET request. There are no retries; the caller
    decides whether and when to try again.
    """

    _HEALTH_INFO_PATH: Final[str] = "/healthinfo"

    def __init__(self, transport: AdminTransportPort):
        """Initialize health info client.

        Args:
            transport: Admin API transport used to execute requests.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when transport is None.
        """

        if transport is None:
            raise ValueError("transport must not be None")
        self._transport = transport

    def adapter_request_health_info(
        self,
        data_types: Iterable[HealthDataType],
        deadline: timedelta,
        timeout_seconds: float | None = None,
    ) -> HealthInfoStream:
        """Request cluster health info and negotiate the response version.

        Args:
            data_types: Requested health data categories.
            deadline: Server-side collection deadline.
            timeout_seconds: Optional client-side request timeout.

        Returns:
            HealthInfoStream: Open stream positioned on the negotiation document.

        Raises:
            HealthInfoTransportError: Raised when the endpoint cannot be reached or drops mid-envelope.
            HealthInfoTimeoutError: Raised when the request or the envelope read times out.
            HealthInfoServerError: Raised for non-200 responses.
            HealthInfoDecodeError: Raised when the envelope cannot be decoded.
            HealthInfoApplicationError: Raised when the envelope reports an error.
            HealthInfoVersionError: Raised for unsupported health info versions.
        """

        query_parameters = adapter_build_health_info_query(data_types=data_types, deadline=deadline)
        response = self._transport.transport_execute(
            "GET",
            self._HEALTH_INFO_PATH,
            query_parameters,
            timeout_seconds=timeout_seconds,
        )

        if response.status_code != httpx.codes.OK:
            logger.warning("health info request rejected: status=%d", response.status_code)
            raise adapter_error_from_response(response)

        try:
            reader = JsonDocumentReader(response.iter_text())
            first_document = reader.reader_next_document()
            if first_document is None:
                raise HealthInfoDecodeError("health info response body is empty")
            try:
                envelope = HealthInfoEnvelope.model_validate(first_document)
            except ValueError as error:
                raise HealthInfoDecodeError("health info envelope failed validation") from error
        except BaseException:
            adapter_close_response(response)
            raise

        if envelope.error:
            adapter_close_response(response)
            raise HealthInfoApplicationError(envelope.error)

        if not domain_is_supported_health_info_version(envelope.version):
            adapter_close_response(response)
            raise HealthInfoVersionError(envelope.version)

        logger.info("health info negotiated: version=%r", envelope.version)
        return HealthInfoStream(
            response=response,
            reader=reader,
            first_document=first_document,
            version=envelope.version,
        )

    def adapter_close(self) -> None:
        """Release the underlying transport.

        Returns:
            None: Closes pooled connections as side effect.

        Raises:
            RuntimeError: Raised when the transport cannot be closed.
        """

        self._transport.transport_close()
