"""Typed interfaces for adapter-layer responsibilities."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Iterable, Mapping, Protocol

import httpx

from healthinfo.domain import HealthDataType

if TYPE_CHECKING:
    from .health_stream import HealthInfoStream


class AdminTransportPort(Protocol):
    """Port definition for executing one admin API request."""

    def transport_execute(
        self,
        method: str,
        rel_path: str,
        query_parameters: Mapping[str, str],
        timeout_seconds: float | None = None,
    ) -> httpx.Response:
        """Execute one request relative to the admin API prefix.

        Args:
            method: HTTP method.
            rel_path: Path relative to the admin API prefix, for example `/healthinfo`.
            query_parameters: Query string parameters.
            timeout_seconds: Optional per-request timeout override.

        Returns:
            httpx.Response: Response with an unread, open body stream.

        Raises:
            HealthInfoTransportError: Raised when the endpoint cannot be reached.
            HealthInfoTimeoutError: Raised when the request times out.
        """

    def transport_close(self) -> None:
        """Release pooled connections held by the transport.

        Returns:
            None: Closes resources as side effect.

        Raises:
            RuntimeError: Raised when the transport cannot be closed.
        """


class HealthInfoPort(Protocol):
    """Port definition for requesting the cluster health report."""

    def adapter_request_health_info(
        self,
        data_types: Iterable[HealthDataType],
        deadline: timedelta,
        timeout_seconds: float | None = None,
    ) -> "HealthInfoStream":
        """Request health info and negotiate its version.

        Args:
            data_types: Requested health data categories.
            deadline: Server-side collection deadline.
            timeout_seconds: Optional client-side request timeout.

        Returns:
            HealthInfoStream: Open response stream owned by the caller.

        Raises:
            HealthInfoClientError: Raised for every failed request.
        """
