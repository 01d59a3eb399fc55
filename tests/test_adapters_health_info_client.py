"""Regression tests for health info request, negotiation and response release."""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Callable, Iterator

import httpx
import pytest

from healthinfo.adapters import (
    AdminHealthInfoClient,
    HealthInfoApplicationError,
    HealthInfoDecodeError,
    HealthInfoServerError,
    HealthInfoTimeoutError,
    HealthInfoTransportError,
    HealthInfoVersionError,
    HttpxAdminTransport,
    adapter_build_health_info_query,
)
from healthinfo.domain import HealthDataType


class _CloseCountingStream(httpx.SyncByteStream):
    """Response body stub that records how often it is released."""

    def __init__(self, chunks: list[bytes]):
        self._chunks = chunks
        self.close_count = 0

    def __iter__(self) -> Iterator[bytes]:
        yield from self._chunks

    def close(self) -> None:
        self.close_count += 1


def _build_client(handler: Callable[[httpx.Request], httpx.Response], **transport_kwargs: object) -> AdminHealthInfoClient:
    """Create a client whose transport is served by an in-memory handler.

    Args:
        handler: Request handler returning the stubbed response.
        transport_kwargs: Extra transport keyword arguments.

    Returns:
        AdminHealthInfoClient: Client under test.

    Raises:
        ValueError: Raised by transport when configuration is invalid.
    """

    transport = HttpxAdminTransport(
        endpoint_url="http://cluster.test:9000",
        transport=httpx.MockTransport(handler),
        **transport_kwargs,
    )
    return AdminHealthInfoClient(transport=transport)


def _json_chunks(*documents: dict[str, object]) -> list[bytes]:
    return [json.dumps(document).encode("utf-8") + b"\n" for document in documents]


def test_adapters_health_info_query_sets_every_type_with_requested_true() -> None:
    """Include every known type key with requested types set to true.

    Returns:
        None: Assertions validate the explicit query contract.

    Raises:
        AssertionError: Raised when a type key is missing or mis-set.
    """

    requested_types = {HealthDataType.SYS_CPU, HealthDataType.PERF_NET}

    query_parameters = adapter_build_health_info_query(data_types=requested_types, deadline=timedelta(seconds=30))

    assert query_parameters["deadline"] == "30s"
    assert len(query_parameters) == 13
    for data_type in HealthDataType:
        expected_value = "true" if data_type in requested_types else "false"
        assert query_parameters[data_type.value] == expected_value


def test_adapters_health_info_query_with_no_types_sets_all_false() -> None:
    """Send explicit false values when no types are requested.

    Returns:
        None: Assertions validate default false values.

    Raises:
        AssertionError: Raised when any type is not false.
    """

    query_parameters = adapter_build_health_info_query(data_types=[], deadline=timedelta(minutes=2))

    assert query_parameters["deadline"] == "2m0s"
    assert {value for key, value in query_parameters.items() if key != "deadline"} == {"false"}


def test_adapters_health_info_request_sends_truncated_deadline_and_path() -> None:
    """Send one GET to the health info path with a second-truncated deadline.

    Returns:
        None: Assertions validate outgoing request shape.

    Raises:
        AssertionError: Raised when the request is malformed.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, content=b'{"version": "1"}')

    client = _build_client(_handler)
    health_stream = client.adapter_request_health_info(
        data_types=[HealthDataType.SYS_MEM],
        deadline=timedelta(milliseconds=1500),
    )
    health_stream.close()

    assert len(captured_requests) == 1
    request = captured_requests[0]
    assert request.method == "GET"
    assert request.url.path == "/minio/admin/v3/healthinfo"
    assert request.url.params["deadline"] == "1s"
    assert request.url.params["sysmem"] == "true"
    assert request.url.params["syscpu"] == "false"


def test_adapters_health_info_request_applies_timeout_override_and_token() -> None:
    """Forward per-call timeout override and configured bearer token.

    Returns:
        None: Assertions validate timeout and auth header propagation.

    Raises:
        AssertionError: Raised when request metadata is not propagated.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, content=b'{"version": ""}')

    client = _build_client(_handler, access_token="secret-token")
    client.adapter_request_health_info(
        data_types=[],
        deadline=timedelta(seconds=10),
        timeout_seconds=5.0,
    ).close()

    request = captured_requests[0]
    assert request.extensions["timeout"]["read"] == 5.0
    assert request.headers["Authorization"] == "Bearer secret-token"


def test_adapters_health_info_accepts_empty_version_and_keeps_stream_open() -> None:
    """Accept legacy empty version and hand over an open stream.

    Returns:
        None: Assertions validate negotiation success path.

    Raises:
        AssertionError: Raised when negotiation rejects the legacy version.
    """

    body_stream = _CloseCountingStream(_json_chunks({"version": "", "sys": {}}))
    client = _build_client(lambda request: httpx.Response(200, stream=body_stream))

    health_stream = client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))

    assert health_stream.version == ""
    assert not health_stream.closed
    assert body_stream.close_count == 0
    health_stream.close()
    assert body_stream.close_count == 1


def test_adapters_health_info_accepts_current_version() -> None:
    """Accept the current health info version.

    Returns:
        None: Assertions validate negotiated version.

    Raises:
        AssertionError: Raised when current version is rejected.
    """

    client = _build_client(lambda request: httpx.Response(200, content=b'{"version": "1", "error": ""}'))

    with client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1)) as health_stream:
        assert health_stream.version == "1"


def test_adapters_health_info_unknown_version_raises_and_closes_body() -> None:
    """Reject unknown versions with an upgrade error naming the version.

    Returns:
        None: Assertions validate version-mismatch handling.

    Raises:
        AssertionError: Raised when unsupported versions are accepted.
    """

    body_stream = _CloseCountingStream(_json_chunks({"version": "2"}))
    client = _build_client(lambda request: httpx.Response(200, stream=body_stream))

    with pytest.raises(HealthInfoVersionError, match="version 2") as error_info:
        client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))

    assert error_info.value.version == "2"
    assert body_stream.close_count == 1


def test_adapters_health_info_envelope_error_raises_and_closes_body() -> None:
    """Surface envelope errors from HTTP 200 responses as application errors.

    Returns:
        None: Assertions validate embedded error handling.

    Raises:
        AssertionError: Raised when embedded errors are not surfaced.
    """

    body_stream = _CloseCountingStream(_json_chunks({"version": "1", "error": "boom"}))
    client = _build_client(lambda request: httpx.Response(200, stream=body_stream))

    with pytest.raises(HealthInfoApplicationError) as error_info:
        client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))

    assert str(error_info.value) == "boom"
    assert body_stream.close_count == 1


def test_adapters_health_info_non_200_decodes_structured_error() -> None:
    """Decode structured admin API errors from non-200 responses.

    Returns:
        None: Assertions validate server error mapping.

    Raises:
        AssertionError: Raised when server error fields are lost.
    """

    error_body = {"Code": "AccessDenied", "Message": "Access Denied.", "RequestId": "req-1"}
    body_stream = _CloseCountingStream([json.dumps(error_body).encode("utf-8")])
    client = _build_client(lambda request: httpx.Response(403, stream=body_stream))

    with pytest.raises(HealthInfoServerError, match="Access Denied.") as error_info:
        client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))

    assert error_info.value.status_code == 403
    assert error_info.value.error_code == "AccessDenied"
    assert error_info.value.request_id == "req-1"
    assert body_stream.close_count == 1


def test_adapters_health_info_non_200_plain_body_and_empty_body_fallbacks() -> None:
    """Fall back to raw body text, then reason phrase, for unstructured errors.

    Returns:
        None: Assertions validate error message fallbacks.

    Raises:
        AssertionError: Raised when fallback messages are incorrect.
    """

    plain_client = _build_client(lambda request: httpx.Response(502, content=b"upstream unavailable"))
    with pytest.raises(HealthInfoServerError, match="upstream unavailable"):
        plain_client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))

    empty_stream = _CloseCountingStream([])
    empty_client = _build_client(lambda request: httpx.Response(500, stream=empty_stream))
    with pytest.raises(HealthInfoServerError, match="Internal Server Error") as error_info:
        empty_client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))

    assert error_info.value.error_code is None
    assert empty_stream.close_count == 1


def test_adapters_health_info_malformed_envelope_raises_decode_error() -> None:
    """Raise decode errors for truncated or empty envelopes and close the body.

    Returns:
        None: Assertions validate decode failure handling.

    Raises:
        AssertionError: Raised when malformed bodies are accepted.
    """

    truncated_stream = _CloseCountingStream([b'{"version": "1"'])
    truncated_client = _build_client(lambda request: httpx.Response(200, stream=truncated_stream))
    with pytest.raises(HealthInfoDecodeError):
        truncated_client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))
    assert truncated_stream.close_count == 1

    empty_stream = _CloseCountingStream([b"  \n"])
    empty_client = _build_client(lambda request: httpx.Response(200, stream=empty_stream))
    with pytest.raises(HealthInfoDecodeError, match="empty"):
        empty_client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))
    assert empty_stream.close_count == 1


def test_adapters_health_info_connect_failure_raises_transport_error() -> None:
    """Map connection failures to typed transport errors.

    Returns:
        None: Assertions validate transport error mapping.

    Raises:
        AssertionError: Raised when connection failures are not typed.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _build_client(_handler)

    with pytest.raises(HealthInfoTransportError, match="connection refused"):
        client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))


def test_adapters_health_info_timeout_raises_timeout_error() -> None:
    """Map transport timeouts to typed timeout errors.

    Returns:
        None: Assertions validate timeout mapping.

    Raises:
        AssertionError: Raised when timeouts are not typed.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = _build_client(_handler)

    with pytest.raises(HealthInfoTimeoutError, match="timed out"):
        client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))


def test_adapters_health_info_success_stream_reads_final_document() -> None:
    """Replay the negotiation document and return the last one as health info.

    Returns:
        None: Assertions validate stream handover and payload decoding.

    Raises:
        AssertionError: Raised when documents are lost or misparsed.
    """

    final_document = {
        "version": "1",
        "timestamp": "2026-10-18T10:00:00Z",
        "sys": {"meminfo": [{"addr": "node-1:9000", "total": 8, "available": 4}]},
        "perf": {"drives": [{"addr": "node-1:9000", "serial_perf": [{"path": "/data", "latency": {"avg": 0.5}}]}]},
        "minio": {"config": {"config": {"region": "us-east-1"}}, "info": {"mode": "online"}},
    }
    body_stream = _CloseCountingStream(_json_chunks({"version": "1"}, final_document))
    client = _build_client(lambda request: httpx.Response(200, stream=body_stream))

    health_stream = client.adapter_request_health_info(data_types=list(HealthDataType), deadline=timedelta(hours=1))
    health_info = health_stream.stream_read_health_info()

    assert health_info.version == "1"
    assert health_info.sys.meminfo[0]["total"] == 8
    assert health_info.perf.drives[0].serial_perf[0].latency.avg == pytest.approx(0.5)
    assert health_info.server.config.config == {"region": "us-east-1"}
    assert health_info.health_info_to_dict()["minio"]["info"] == {"mode": "online"}
    assert health_stream.closed
    assert body_stream.close_count == 1


def test_adapters_health_info_client_reuses_one_transport_client(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reuse one pooled HTTP client across requests.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions verify pooled client reuse behavior.

    Raises:
        AssertionError: Raised when more than one client instance is created.
    """

    import healthinfo.adapters.admin_transport as transport_module

    client_creation_count = 0
    original_client_class = httpx.Client

    def _counting_client_factory(*args: object, **kwargs: object) -> httpx.Client:
        nonlocal client_creation_count
        client_creation_count += 1
        return original_client_class(*args, **kwargs)

    monkeypatch.setattr(transport_module.httpx, "Client", _counting_client_factory)

    client = _build_client(lambda request: httpx.Response(200, content=b'{"version": "1"}'))
    for _ in range(2):
        client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1)).close()
    client.adapter_close()

    assert client_creation_count == 1


class _InterruptedStream(_CloseCountingStream):
    """Response body stub that fails after yielding its chunks."""

    def __init__(self, chunks: list[bytes], error: Exception):
        super().__init__(chunks)
        self._error = error

    def __iter__(self) -> Iterator[bytes]:
        yield from self._chunks
        raise self._error


def test_adapters_health_info_undecodable_content_encoding_raises_decode_error_and_closes_body() -> None:
    """Map content decoding failures to decode errors and release the body.

    Returns:
        None: Assertions validate error mapping and body release.

    Raises:
        AssertionError: Raised when the httpx error escapes or the body stays open.
    """

    body_stream = _CloseCountingStream([b"not gzip at all"])
    client = _build_client(
        lambda request: httpx.Response(200, headers={"content-encoding": "gzip"}, stream=body_stream)
    )

    with pytest.raises(HealthInfoDecodeError, match="could not be decoded"):
        client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))

    assert body_stream.close_count == 1


def test_adapters_health_info_envelope_read_timeout_raises_timeout_error_and_closes_body() -> None:
    """Map a read timeout in the middle of the envelope to a timeout error.

    Returns:
        None: Assertions validate error mapping and body release.

    Raises:
        AssertionError: Raised when the timeout is reported as a decode error.
    """

    body_stream = _InterruptedStream([b'{"vers'], httpx.ReadTimeout("read timed out"))
    client = _build_client(lambda request: httpx.Response(200, stream=body_stream))

    with pytest.raises(HealthInfoTimeoutError):
        client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))

    assert body_stream.close_count == 1


def test_adapters_health_info_envelope_connection_drop_raises_transport_error() -> None:
    """Map a dropped connection in the middle of the envelope to a transport error.

    Returns:
        None: Assertions validate error mapping and body release.

    Raises:
        AssertionError: Raised when the drop is reported as a decode error.
    """

    body_stream = _InterruptedStream([b'{"version": '], httpx.RemoteProtocolError("peer closed connection"))
    client = _build_client(lambda request: httpx.Response(200, stream=body_stream))

    with pytest.raises(HealthInfoTransportError, match="interrupted"):
        client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1))

    assert body_stream.close_count == 1


def test_adapters_health_info_null_version_is_treated_as_legacy_version() -> None:
    """Accept a null version as the legacy empty version.

    Returns:
        None: Assertions validate null version handling.

    Raises:
        AssertionError: Raised when a null version is rejected.
    """

    client = _build_client(lambda request: httpx.Response(200, content=b'{"version": null}'))

    with client.adapter_request_health_info(data_types=[], deadline=timedelta(seconds=1)) as health_stream:
        assert health_stream.version == ""
