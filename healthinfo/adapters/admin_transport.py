"""httpx-backed transport for admin API requests."""

from __future__ import annotations

import logging
from typing import Final, Mapping

import httpx

from .health_errors import HealthInfoTimeoutError, HealthInfoTransportError
from .interfaces import AdminTransportPort

logger = logging.getLogger(__name__)


class HttpxAdminTransport(AdminTransportPort):
    """Execute admin API requests through one pooled `httpx.Client`."""

    _USER_AGENT: Final[str] = "cluster-health-client/1.0 (Python/httpx)"

    def __init__(
        self,
        endpoint_url: str,
        admin_api_prefix: str = "/minio/admin/v3",
        access_token: str | None = None,
        request_timeout_seconds: float = 60.0,
        verify_tls: bool = True,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize admin API transport.

        Args:
            endpoint_url: Scheme and authority of the cluster endpoint.
            admin_api_prefix: Path prefix of the admin API.
            access_token: Optional bearer token sent with every request.
            request_timeout_seconds: Default request timeout in seconds.
            verify_tls: Whether server certificates are verified.
            transport: Optional httpx transport, used to stub the network in tests.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_endpoint_url = endpoint_url.strip().rstrip("/")
        normalized_prefix = "/" + admin_api_prefix.strip().strip("/")

        if not normalized_endpoint_url:
            raise ValueError("endpoint_url must not be blank")
        if normalized_prefix == "/":
            raise ValueError("admin_api_prefix must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        headers = {"User-Agent": self._USER_AGENT}
        if access_token and access_token.strip():
            headers["Authorization"] = f"Bearer {access_token.strip()}"

        self._admin_api_prefix = normalized_prefix
        self._request_timeout_seconds = request_timeout_seconds
        self._client = httpx.Client(
            base_url=normalized_endpoint_url,
            headers=headers,
            timeout=request_timeout_seconds,
            verify=verify_tls,
            transport=transport,
        )

    @property
    def admin_api_prefix(self) -> str:
        return self._admin_api_prefix

    def transport_execute(
        self,
        method: str,
        rel_path: str,
        query_parameters: Mapping[str, str],
        timeout_seconds: float | None = None,
    ) -> httpx.Response:
        """Send one request and return the response with its body unread.

        Args:
            method: HTTP method.
            rel_path: Path relative to the admin API prefix.
            query_parameters: Query string parameters.
            timeout_seconds: Optional per-request timeout override.

        Returns:
            httpx.Response: Streamed response; the caller owns and must close it.

        Raises:
            HealthInfoTimeoutError: Raised when the request times out.
            HealthInfoTransportError: Raised for connection and protocol failures.
        """

        request_path = f"{self._admin_api_prefix}/{rel_path.lstrip('/')}"
        effective_timeout = self._request_timeout_seconds if timeout_seconds is None else timeout_seconds
        request = self._client.build_request(
            method,
            request_path,
            params=dict(query_parameters),
            timeout=effective_timeout,
        )
        logger.debug("admin request: method=%s path=%s", method, request_path)

        try:
            return self._client.send(request, stream=True)
        except httpx.TimeoutException as error:
            raise HealthInfoTimeoutError(f"admin request timed out: {request_path}") from error
        except httpx.TransportError as error:
            raise HealthInfoTransportError(f"admin request failed: {request_path}: {error}") from error

    def transport_close(self) -> None:
        self._client.close()
