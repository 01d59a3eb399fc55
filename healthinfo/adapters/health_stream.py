"""Incremental JSON document decoding over an open health info response.

The admin endpoint writes the health info body as concatenated JSON
documents. The first document carries the `version` and `error` fields used
for negotiation; later documents refine the report and the last one is the
complete aggregate. Documents are decoded one at a time from the text stream
so the remainder of the body is never buffered ahead of the caller.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterator

import httpx

from healthinfo.domain import HealthInfo

from .health_errors import HealthInfoDecodeError, HealthInfoTimeoutError, HealthInfoTransportError

logger = logging.getLogger(__name__)

_JSON_WHITESPACE = " \t\r\n"
_STRUCTURAL_PATTERN = re.compile(r'[{}\[\]"]')
_STRING_SPECIAL_PATTERN = re.compile(r'["\\]')


class JsonDocumentReader:
    """Decode consecutive JSON objects from an iterator of text chunks.

    Chunks are scanned once for string and nesting state; a document is handed
    to the JSON decoder only after its closing bracket has been seen.
    """

    def __init__(self, text_chunks: Iterator[str]):
        self._text_chunks = text_chunks
        self._pending = ""
        self._document_parts: list[str] = []
        self._depth = 0
        self._in_string = False
        self._escaped = False
        self._exhausted = False

    def reader_next_document(self) -> dict[str, Any] | None:
        """Decode the next JSON object from the stream.

        Returns:
            dict[str, Any] | None: Next document, or None at clean end of stream.

        Raises:
            HealthInfoDecodeError: Raised on malformed, truncated or non-object documents.
            HealthInfoTimeoutError: Raised when reading the body times out.
            HealthInfoTransportError: Raised when the connection drops mid-body.
        """

        while True:
            document_text = self._reader_take_document()
            if document_text is not None:
                return self._reader_decode(document_text)
            if self._exhausted:
                if self._document_parts:
                    raise HealthInfoDecodeError("malformed health info document: unexpected end of stream")
                return None
            self._reader_fill_buffer()

    def _reader_take_document(self) -> str | None:
        if not self._document_parts:
            self._pending = self._pending.lstrip(_JSON_WHITESPACE)
            if self._pending and self._pending[0] not in "{[":
                raise HealthInfoDecodeError("health info document must be a JSON object")
        if not self._pending:
            return None

        end_index = self._reader_scan(self._pending)
        if end_index is None:
            self._document_parts.append(self._pending)
            self._pending = ""
            return None

        self._document_parts.append(self._pending[:end_index])
        self._pending = self._pending[end_index:]
        document_text = "".join(self._document_parts)
        self._document_parts = []
        return document_text

    def _reader_scan(self, text: str) -> int | None:
        """Advance nesting state over `text`; return the index after the closing bracket."""
        index = 0
        if self._escaped:
            index = 1
            self._escaped = False
        while index < len(text):
            if self._in_string:
                match = _STRING_SPECIAL_PATTERN.search(text, index)
                if match is None:
                    return None
                if match.group() == "\\":
                    index = match.end() + 1
                    if index > len(text):
                        self._escaped = True
                        return None
                    continue
                self._in_string = False
                index = match.end()
                continue

            match = _STRUCTURAL_PATTERN.search(text, index)
            if match is None:
                return None
            index = match.end()
            character = match.group()
            if character == '"':
                self._in_string = True
            elif character in "{[":
                self._depth += 1
            else:
                self._depth -= 1
                if self._depth == 0:
                    return index
        return None

    def _reader_decode(self, document_text: str) -> dict[str, Any]:
        try:
            document = json.loads(document_text)
        except json.JSONDecodeError as error:
            raise HealthInfoDecodeError(f"malformed health info document: {error.msg}") from error
        if not isinstance(document, dict):
            raise HealthInfoDecodeError("health info document must be a JSON object")
        return document

    def _reader_fill_buffer(self) -> None:
        try:
            self._pending += next(self._text_chunks)
        except StopIteration:
            self._exhausted = True
        except httpx.StreamError as error:
            raise HealthInfoDecodeError("health info stream is no longer readable") from error
        except httpx.TimeoutException as error:
            raise HealthInfoTimeoutError("health info stream timed out") from error
        except httpx.TransportError as error:
            raise HealthInfoTransportError(f"health info stream was interrupted: {error}") from error
        except httpx.HTTPError as error:
            raise HealthInfoDecodeError(f"health info stream could not be decoded: {error}") from error


class HealthInfoStream:
    """Open health info response handed to the caller after version negotiation.

    The stream owns the HTTP response and must be closed by the caller, either
    explicitly or by using it as a context manager. The document consumed for
    negotiation is replayed as the first item of `stream_documents`.
    """

    def __init__(
        self,
        response: httpx.Response,
        reader: JsonDocumentReader,
        first_document: dict[str, Any],
        version: str,
    ):
        self._response = response
        self._reader = reader
        self._pending_first_document: dict[str, Any] | None = first_document
        self._version = version

    @property
    def version(self) -> str:
        """Negotiated health info version."""

        return self._version

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    def stream_documents(self) -> Iterator[dict[str, Any]]:
        """Yield remaining health info documents in stream order.

        Returns:
            Iterator[dict[str, Any]]: Decoded JSON documents.

        Raises:
            HealthInfoDecodeError: Raised when a document cannot be decoded.
        """

        if self._pending_first_document is not None:
            first_document = self._pending_first_document
            self._pending_first_document = None
            yield first_document

        while True:
            document = self._reader.reader_next_document()
            if document is None:
                return
            yield document

    def stream_read_health_info(self) -> HealthInfo:
        """Consume the stream and return the final health info aggregate.

        The stream is closed once the last document has been read.

        Returns:
            HealthInfo: Last document in the stream validated as health info.

        Raises:
            HealthInfoDecodeError: Raised when no document is left or validation fails.
        """

        last_document: dict[str, Any] | None = None
        document_count = 0
        try:
            for document in self.stream_documents():
                last_document = document
                document_count += 1
        finally:
            self.close()

        if last_document is None:
            raise HealthInfoDecodeError("health info stream contained no documents")

        logger.debug("health info stream consumed: documents=%d", document_count)
        try:
            return HealthInfo.model_validate(last_document)
        except ValueError as error:
            raise HealthInfoDecodeError("health info document failed validation") from error

    def close(self) -> None:
        self._response.close()

    def __enter__(self) -> "HealthInfoStream":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
