"""Project-native typed exceptions for health info client failures."""

from __future__ import annotations


class HealthInfoClientError(Exception):
    """Base exception for health info request failures.

    Attributes:
        error_code: Optional server-reported error code.
    """

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class HealthInfoTransportError(HealthInfoClientError, ConnectionError):
    """Transport-level connectivity failure while calling the admin endpoint."""


class HealthInfoTimeoutError(HealthInfoClientError, TimeoutError):
    """Request exceeded the caller-supplied or configured timeout."""


class HealthInfoServerError(HealthInfoClientError, RuntimeError):
    """Structured error returned by the admin endpoint with a non-200 status.

    Attributes:
        status_code: HTTP status code of the response.
        request_id: Optional server request identifier for diagnostics.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(message=message, error_code=error_code)
        self.status_code = status_code
        self.request_id = request_id


class HealthInfoApplicationError(HealthInfoClientError, RuntimeError):
    """Error reported inside the response envelope of an HTTP 200 response."""


class HealthInfoVersionError(HealthInfoClientError, ValueError):
    """Server health info version is not readable by this client.

    Attributes:
        version: Unsupported version reported by the server.
    """

    def __init__(self, version: str):
        super().__init__(message=f"Upgrade client to support health info version {version}")
        self.version = version


class HealthInfoDecodeError(HealthInfoClientError, ValueError):
    """Response body does not contain a decodable health info document."""
