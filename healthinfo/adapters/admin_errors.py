"""Admin API error-response decoding and response release helpers."""

from __future__ import annotations

import json

import httpx

from .health_errors import HealthInfoServerError

_ERROR_BODY_READ_LIMIT = 64 * 1024


def adapter_close_response(response: httpx.Response | None) -> None:
    """Release a response body, tolerating a missing response.

    Args:
        response: Response to close, or None when the request never produced one.

    Returns:
        None: Closes the response as side effect.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if response is not None:
        response.close()


def adapter_error_from_response(response: httpx.Response) -> HealthInfoServerError:
    """Convert a non-200 admin API response into a typed server error.

    The admin API reports failures as a JSON document with `Code`, `Message`
    and `RequestId` keys. Bodies that are not such a document fall back to the
    raw body text, then to the HTTP reason phrase. The response is closed.

    Args:
        response: Non-success response with an unread body.

    Returns:
        HealthInfoServerError: Error describing the server-side failure.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    try:
        body_text = _adapter_read_error_body(response)
    finally:
        adapter_close_response(response)

    error_code: str | None = None
    request_id: str | None = response.headers.get("x-amz-request-id")
    message = ""

    try:
        error_document = json.loads(body_text) if body_text else None
    except json.JSONDecodeError:
        error_document = None

    if isinstance(error_document, dict):
        error_code = _adapter_optional_text(error_document.get("Code"))
        message = _adapter_optional_text(error_document.get("Message")) or ""
        request_id = _adapter_optional_text(error_document.get("RequestId")) or request_id
    elif body_text:
        message = body_text.strip()

    if not message:
        message = response.reason_phrase or f"HTTP {response.status_code}"

    return HealthInfoServerError(
        message=message,
        status_code=response.status_code,
        error_code=error_code,
        request_id=request_id,
    )


def _adapter_read_error_body(response: httpx.Response) -> str:
    chunks: list[bytes] = []
    size = 0
    try:
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            size += len(chunk)
            if size >= _ERROR_BODY_READ_LIMIT:
                break
    except httpx.HTTPError:
        return ""
    return b"".join(chunks)[:_ERROR_BODY_READ_LIMIT].decode("utf-8", errors="replace")


def _adapter_optional_text(value: object) -> str | None:
    if value is None:
        return None
    text_value = str(value).strip()
    return text_value or None
