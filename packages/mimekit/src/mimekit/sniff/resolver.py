"""Decode-only resolver that guesses the wire format from body content.

Used whenever Content-Type is missing or names an unregistered format.

Phase 1 looks at the first code point of the body and tries every format
whose sniff hints contain it; a hinted format that fails to decode is not
tried again. Phase 2 tries every remaining registered format. Both phases
walk formats in registration order and the first successful decode wins, so
the outcome depends on registration order when several formats accept the
same bytes (a binary body may also start with a byte that is some text
format's hint).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, MutableMapping, TypeVar

from mimekit.components.codecs.base import BaseCodec
from mimekit.components.codecs.exceptions import (
    CodecDecodeError,
    EncodingNotSupportedError,
    PayloadTooLargeError,
    UnableToDetermineMimeError,
)
from mimekit.conf.defaults import DEFAULTS
from mimekit.headers import preferred_format
from mimekit.registry.codecs import CodecRegistry
from mimekit.types.protocols import Exchange, FormatCarrier, ResponseExchange

logger = logging.getLogger(__name__)

__all__ = ["SniffResolver"]

R = TypeVar("R")


class _BufferedExchange:
    """Read-only view of an exchange whose body has been buffered in memory."""

    def __init__(self, source: Exchange, body: bytes) -> None:
        self.headers: MutableMapping[str, str] = source.headers
        self.status_code: int = getattr(source, "status_code", 200)
        self._body = body

    @property
    def content_length(self) -> int:
        return len(self._body)

    def read_body(self) -> bytes:
        return self._body

    def write_body(self, data: bytes) -> None:
        raise EncodingNotSupportedError("buffered sniff exchanges are read-only")


def _first_code_point(body: bytes) -> str | None:
    for size in range(1, min(len(body), 4) + 1):
        try:
            return body[:size].decode("utf-8")[:1]
        except UnicodeDecodeError:
            continue
    return None


class SniffResolver:
    """Codec-shaped fallback: decodes by trial, never encodes."""

    def __init__(self, registry: CodecRegistry, *, max_body_bytes: int | None = None) -> None:
        self.registry = registry
        self.max_body_bytes = int(DEFAULTS["SNIFF_MAX_BODY_BYTES"] if max_body_bytes is None else max_body_bytes)

    # ---- Encode: not supported --------------------------------------------
    def encode_request(self, request: Exchange, message: Any) -> None:
        raise EncodingNotSupportedError("sniffing is decode-only; encode_request is not implemented")

    def encode_response(self, response: Exchange, message: Any) -> None:
        raise EncodingNotSupportedError("sniffing is decode-only; encode_response is not implemented")

    # ---- Decode ------------------------------------------------------------
    def decode_request(self, request: Exchange, into: Any = Any) -> Any:
        buffered = self._buffer(request)
        return self._resolve(buffered, lambda codec: codec.decode_request(buffered, into))

    def decode_response(self, response: ResponseExchange, into: Any = Any) -> Any:
        buffered = self._buffer(response)
        return self._resolve(buffered, lambda codec: codec.decode_response(buffered, into, require_envelope=True))

    def decode_error(self, response: ResponseExchange) -> BaseException:
        """Sniff an error envelope out of a non-success response body."""
        buffered = self._buffer(response)
        return self._resolve(buffered, lambda codec: codec.decode_error(buffered, require_envelope=True))

    # ---- Internals ---------------------------------------------------------
    def _buffer(self, exchange: Exchange) -> _BufferedExchange:
        declared = exchange.content_length
        if declared > self.max_body_bytes:
            raise PayloadTooLargeError(
                f"declared body length {declared} exceeds sniff limit {self.max_body_bytes}"
            )
        body = exchange.read_body()
        if len(body) > self.max_body_bytes:
            raise PayloadTooLargeError(
                f"body length {len(body)} exceeds sniff limit {self.max_body_bytes}"
            )
        return _BufferedExchange(exchange, body)

    def _attempt(self, format_id: str, codec: BaseCodec, attempt: Callable[[BaseCodec], R]) -> tuple[bool, R | None]:
        try:
            return True, attempt(codec)
        except CodecDecodeError as exc:
            logger.debug("sniff: %s rejected body: %s", format_id, exc)
            return False, None

    def _resolve(self, exchange: _BufferedExchange, attempt: Callable[[BaseCodec], R]) -> R:
        body = exchange.read_body()
        tried: set[str] = set()

        code_point = _first_code_point(body)
        if code_point is not None:
            for format_id in self.registry.hinted(code_point):
                tried.add(format_id)
                ok, result = self._attempt(format_id, self.registry.get(format_id), attempt)
                if ok:
                    return self._finish(exchange, format_id, result, phase="hinted")

        for format_id, codec in self.registry.items():
            if format_id in tried:
                continue
            ok, result = self._attempt(format_id, codec, attempt)
            if ok:
                return self._finish(exchange, format_id, result, phase="brute-force")

        raise UnableToDetermineMimeError(
            f"no registered format could decode the body (tried {self.registry.keys(as_csv=True) or 'nothing'})"
        )

    def _finish(self, exchange: _BufferedExchange, format_id: str, result: R, *, phase: str) -> R:
        logger.debug("sniff: body decoded as %s (%s)", format_id, phase)
        if isinstance(result, FormatCarrier):
            result.set_format(preferred_format(self.registry, format_id, exchange.headers.get("Accept")))
        return result
