# mimekit/components/codecs/base.py


import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Callable, ClassVar

from pydantic import TypeAdapter

from .exceptions import CodecDecodeError, CodecEncodeError
from ...errors import ErrorEnvelope, ErrorTypeRegistry, RemoteError, unwrap_envelope, wrap_error
from ...headers import normalize_format_id, parse_content_type
from ...types.protocols import Exchange, ResponseExchange
from ...types.transport import is_success

logger = logging.getLogger(__name__)

__all__ = ["BaseCodec", "adapter_for", "make_error_encoder", "PLAIN_TEXT"]

PLAIN_TEXT = "text/plain"


@lru_cache(maxsize=256)
def adapter_for(tp: Any) -> TypeAdapter:
    """Cached pydantic adapter for a decode target type."""
    return TypeAdapter(tp)


class BaseCodec(ABC):
    """One wire format bound to one FormatID.

    Responsibilities
    ----------------
    • Implement the four-operation contract (encode/decode x request/response)
      on top of four primitives: ``_dumps``/``_loads`` for messages and
      ``_dumps_envelope``/``_loads_envelope`` for error envelopes.
    • Stamp its FormatID on outgoing Content-Type (and Accept, for requests).
    • Turn non-success responses into error *values* instead of failures.
    • Never negotiate or touch FormatCarrier state; the dispatcher does that.

    Library exceptions listed in ``encode_exceptions``/``decode_exceptions``
    are re-raised as :class:`CodecEncodeError`/:class:`CodecDecodeError`.
    """

    #: FormatIDs this codec family is registered under by default
    format_ids: ClassVar[tuple[str, ...]] = ()
    #: Leading code points that suggest this format when sniffing
    sniff_hints: ClassVar[frozenset[str] | None] = None

    encode_exceptions: ClassVar[tuple[type[BaseException], ...]] = (TypeError, ValueError)
    decode_exceptions: ClassVar[tuple[type[BaseException], ...]] = (TypeError, ValueError)

    def __init__(
            self,
            format_id: str | None = None,
            *,
            error_types: ErrorTypeRegistry,
            strict_errors: bool = False,
    ) -> None:
        if format_id is None:
            if not self.format_ids:
                raise TypeError(f"{type(self).__name__} has no default format id")
            format_id = self.format_ids[0]
        self.format_id = normalize_format_id(format_id)
        self.error_types = error_types
        self.strict_errors = strict_errors

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.format_id!r})"

    # ---- Primitives --------------------------------------------------------
    @abstractmethod
    def _dumps(self, value: Any) -> bytes: ...

    @abstractmethod
    def _loads(self, data: bytes, into: Any) -> Any: ...

    @abstractmethod
    def _dumps_envelope(self, envelope: ErrorEnvelope) -> bytes: ...

    @abstractmethod
    def _loads_envelope(self, data: bytes) -> ErrorEnvelope: ...

    def dumps(self, value: Any) -> bytes:
        try:
            return self._dumps(value)
        except self.encode_exceptions as exc:
            raise CodecEncodeError(
                f"{self.format_id}: unable to encode {type(value).__name__}"
            ) from exc

    def loads(self, data: bytes, into: Any = Any) -> Any:
        try:
            return self._loads(data, into)
        except self.decode_exceptions as exc:
            raise CodecDecodeError(
                f"{self.format_id}: unable to decode into {getattr(into, '__name__', into)!s}"
            ) from exc

    def dumps_envelope(self, envelope: ErrorEnvelope) -> bytes:
        try:
            return self._dumps_envelope(envelope)
        except self.encode_exceptions as exc:
            raise CodecEncodeError(f"{self.format_id}: unable to encode error envelope") from exc

    def loads_envelope(self, data: bytes) -> ErrorEnvelope:
        try:
            return self._loads_envelope(data)
        except self.decode_exceptions as exc:
            raise CodecDecodeError(f"{self.format_id}: body is not an error envelope") from exc

    # ---- Errors ------------------------------------------------------------
    def encode_error(self, err: BaseException) -> bytes:
        return self.dumps_envelope(wrap_error(err, self.error_types))

    def decode_error(self, response: ResponseExchange, *, require_envelope: bool = False) -> BaseException:
        """Interpret a non-success response body as an error value.

        A body that is not an error envelope (a proxy's error page, say) comes
        back as a :class:`RemoteError` carrying the body text, or
        ``HTTP <status>`` when the body is empty. With ``require_envelope``
        such a body raises :class:`CodecDecodeError` instead; the sniff
        resolver relies on that to reject formats.
        """
        body = response.read_body()
        if parse_content_type(response.headers.get("Content-Type")) == PLAIN_TEXT:
            # nothing structured to work with; the text is the message
            return RemoteError(body.decode("utf-8", errors="replace"))
        try:
            envelope = self.loads_envelope(body)
        except CodecDecodeError:
            if require_envelope:
                raise
            logger.debug("%s: status %s body is not an error envelope", self.format_id, response.status_code)
            text = body.decode("utf-8", errors="replace").strip()
            return RemoteError(text or f"HTTP {response.status_code}")
        return unwrap_envelope(envelope, self.error_types, strict=self.strict_errors)

    # ---- Four-operation contract ------------------------------------------
    def encode_request(self, request: Exchange, message: Any) -> None:
        body = self.dumps(message)
        request.headers["Content-Type"] = self.format_id
        request.headers["Accept"] = self.format_id
        request.write_body(body)

    def decode_request(self, request: Exchange, into: Any = Any) -> Any:
        return self.loads(request.read_body(), into)

    def encode_response(self, response: Exchange, message: Any) -> None:
        """Write ``message``; exceptions are wrapped in an error envelope first."""
        if isinstance(message, BaseException):
            body = self.encode_error(message)
        else:
            body = self.dumps(message)
        response.headers["Content-Type"] = self.format_id
        response.write_body(body)

    def decode_response(self, response: ResponseExchange, into: Any = Any, *, require_envelope: bool = False) -> Any:
        """Decode a response; non-success statuses yield the transported error as the result."""
        if not is_success(response.status_code):
            return self.decode_error(response, require_envelope=require_envelope)
        return self.loads(response.read_body(), into)


def make_error_encoder(codec: BaseCodec) -> Callable[..., None]:
    """Return ``encode(response, err, status_code=500)`` writing ``err`` with ``codec``."""

    def encode(response: ResponseExchange, err: BaseException, status_code: int = 500) -> None:
        if is_success(response.status_code):
            response.status_code = status_code
        codec.encode_response(response, err)

    return encode
