# mimekit/dispatch/dispatcher.py
"""Format-negotiating facade over the codec registry.

The dispatcher keeps no state between calls. Each operation:

1. works out the FormatID from the message (FormatCarrier) or the headers,
2. looks the codec up in the :class:`~mimekit.registry.codecs.CodecRegistry`,
3. delegates, falling back to the :class:`~mimekit.sniff.SniffResolver` when
   an incoming Content-Type is missing or unregistered.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from asgiref.sync import sync_to_async

from mimekit.components.codecs.base import PLAIN_TEXT, BaseCodec
from mimekit.components.codecs.exceptions import EncodingUnavailableError, MimeNotSpecifiedError
from mimekit.conf.defaults import DEFAULTS
from mimekit.errors import RemoteError
from mimekit.headers import parse_content_type, preferred_format
from mimekit.registry import RegistryLookupError
from mimekit.registry.codecs import CodecRegistry
from mimekit.sniff import SniffResolver
from mimekit.tracing import codec_span, set_span_attributes
from mimekit.types.protocols import Exchange, FormatCarrier, ResponseExchange
from mimekit.types.transport import is_success

logger = logging.getLogger(__name__)

__all__ = ["Dispatcher"]


class Dispatcher:
    """Encode/decode entry point used by transports and generated clients.

    :param codecs: Registry of available codecs.
    :param default_format: FormatID used when a message carries no registered
        format of its own. Defaults to ``settings["DEFAULT_FORMAT"]``.
    :param sniffer: Resolver used for missing/unregistered Content-Types.
    :param settings: Optional mapping consulted for ``DEFAULT_FORMAT`` and
        ``SNIFF_MAX_BODY_BYTES``.
    """

    def __init__(
            self,
            codecs: CodecRegistry,
            *,
            default_format: str | None = None,
            sniffer: SniffResolver | None = None,
            settings: Mapping[str, Any] | None = None,
    ) -> None:
        settings = DEFAULTS if settings is None else settings
        self.codecs = codecs
        self.default_format = default_format or str(settings.get("DEFAULT_FORMAT", DEFAULTS["DEFAULT_FORMAT"]))
        self.sniffer = sniffer or SniffResolver(
            codecs,
            max_body_bytes=int(settings.get("SNIFF_MAX_BODY_BYTES", DEFAULTS["SNIFF_MAX_BODY_BYTES"])),
        )

    def __repr__(self) -> str:
        return f"Dispatcher(default_format={self.default_format!r}, codecs=[{self.codecs.keys(as_csv=True)}])"

    # ---- Format selection --------------------------------------------------
    def _default_codec(self) -> BaseCodec:
        codec = self.codecs.try_get(self.default_format)
        if codec is None:
            raise EncodingUnavailableError(
                f"default format {self.default_format!r} has no registered codec "
                f"(registered: {self.codecs.keys(as_csv=True) or 'none'})"
            )
        return codec

    def _outgoing_codec(self, format_id: str | None) -> BaseCodec:
        if self.codecs.is_registered(format_id):
            return self.codecs.get(format_id)
        return self._default_codec()

    def codec_for(self, message: Any) -> BaseCodec:
        """Codec for the format a FormatCarrier message remembers.

        :raises MimeNotSpecifiedError: If ``message`` is not a carrier or has no
            format recorded.
        :raises CodecNotFoundError: If the recorded format is not registered.
        """
        format_id = message.get_format() if isinstance(message, FormatCarrier) else None
        if not format_id:
            raise MimeNotSpecifiedError(f"{type(message).__name__} does not name a wire format")
        return self.codecs.get(format_id)

    def negotiate(self, headers: Mapping[str, str]) -> str:
        """FormatID to answer with: the registered Accept favourite, else the default."""
        return preferred_format(self.codecs, self.default_format, headers.get("Accept"))

    # ---- Requests ----------------------------------------------------------
    def encode_request(self, request: Exchange, message: Any) -> None:
        try:
            codec = self.codec_for(message)
        except (MimeNotSpecifiedError, RegistryLookupError, ValueError):
            codec = self._default_codec()
        with codec_span("dispatch.encode_request", attributes={"mimekit.format": codec.format_id}):
            codec.encode_request(request, message)

    def decode_request(self, request: Exchange, into: Any = Any) -> Any:
        content_type = parse_content_type(request.headers.get("Content-Type"))
        with codec_span("dispatch.decode_request", attributes={"mimekit.content_type": content_type}) as span:
            codec = self.codecs.try_get(content_type) if content_type else None
            if codec is None:
                logger.debug("decode_request: content type %r not usable, sniffing", content_type)
                set_span_attributes(span, {"mimekit.sniffed": True})
                return self.sniffer.decode_request(request, into)

            result = codec.decode_request(request, into)
            if isinstance(result, FormatCarrier):
                chosen = preferred_format(self.codecs, codec.format_id, request.headers.get("Accept"))
                result.set_format(chosen)
                set_span_attributes(span, {"mimekit.format": chosen})
            return result

    # ---- Responses ---------------------------------------------------------
    def encode_response(self, response: Exchange, message: Any, *, format_id: str | None = None) -> None:
        """Write ``message`` as ``format_id`` when registered, else the default.

        FormatCarrier state on ``message`` is neither read nor written; a
        server answering in the negotiated format passes it explicitly.
        """
        codec = self._outgoing_codec(format_id)
        with codec_span("dispatch.encode_response", attributes={"mimekit.format": codec.format_id}):
            codec.encode_response(response, message)

    def decode_response(self, response: ResponseExchange, into: Any = Any) -> Any:
        """Decode a response body.

        Non-success statuses never raise on their own: the transported error
        (or a :class:`RemoteError` standing in for it) is returned as the value.
        """
        content_type = parse_content_type(response.headers.get("Content-Type"))
        attrs = {"mimekit.content_type": content_type, "mimekit.status_code": response.status_code}
        with codec_span("dispatch.decode_response", attributes=attrs) as span:
            codec = self.codecs.try_get(content_type) if content_type else None
            if codec is not None:
                return codec.decode_response(response, into)

            set_span_attributes(span, {"mimekit.sniffed": True})
            if not content_type or is_success(response.status_code):
                logger.debug("decode_response: content type %r not usable, sniffing", content_type)
                return self.sniffer.decode_response(response, into)

            if content_type == PLAIN_TEXT:
                return RemoteError(response.read_body().decode("utf-8", errors="replace"))
            return self.sniffer.decode_error(response)

    def encode_error(
            self,
            response: ResponseExchange,
            err: BaseException,
            status_code: int = 500,
            *,
            accept: str | None = None,
    ) -> None:
        """Write ``err`` as an error response.

        The format is the registered Accept favourite of ``accept`` (usually
        the request's Accept header), else the default. A status code already
        outside the success range is left alone.
        """
        format_id = preferred_format(self.codecs, self.default_format, accept)
        codec = self.codecs.try_get(format_id) or self._default_codec()
        with codec_span("dispatch.encode_error", attributes={"mimekit.format": codec.format_id}):
            if is_success(response.status_code):
                response.status_code = status_code
            codec.encode_response(response, err)

    # ---- Async wrappers ----------------------------------------------------
    async def aencode_request(self, request: Exchange, message: Any) -> None:
        """Async wrapper around `encode_request`."""
        return await sync_to_async(self.encode_request)(request, message)

    async def adecode_request(self, request: Exchange, into: Any = Any) -> Any:
        """Async wrapper around `decode_request`."""
        return await sync_to_async(self.decode_request)(request, into)

    async def aencode_response(self, response: Exchange, message: Any, *, format_id: str | None = None) -> None:
        """Async wrapper around `encode_response`."""
        return await sync_to_async(self.encode_response)(response, message, format_id=format_id)

    async def adecode_response(self, response: ResponseExchange, into: Any = Any) -> Any:
        """Async wrapper around `decode_response`."""
        return await sync_to_async(self.decode_response)(response, into)

    async def aencode_error(
            self,
            response: ResponseExchange,
            err: BaseException,
            status_code: int = 500,
            *,
            accept: str | None = None,
    ) -> None:
        """Async wrapper around `encode_error`."""
        return await sync_to_async(self.encode_error)(response, err, status_code, accept=accept)
