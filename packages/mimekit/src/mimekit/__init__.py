"""
mimekit: content negotiation and multi-format codecs for RPC transports.

One dispatcher picks a wire format per exchange (from a message's remembered
format, the Accept header, or the body itself) and hands the work to a codec
from the registry. Application errors travel inside an error envelope so a
non-success response decodes to an error *value* instead of a failure.

Import Guidelines:
------------------
- Use `mimekit.create_dispatcher` to get a ready dispatcher with the JSON,
  XML and MessagePack codecs registered.
- Subclass `mimekit.WireError` (as a dataclass) for errors that should keep
  their fields across the wire, and register them on an `ErrorTypeRegistry`.
- Subclass `mimekit.FormatCarrierModel` for messages that remember the format
  they were negotiated in.
- Use `mimekit.headers` for the Accept / Content-Type grammars on their own.
"""

from importlib.metadata import PackageNotFoundError, version

from .bootstrap import create_dispatcher, register_builtin_codecs
from .components.codecs import BaseCodec, JSONCodec, MsgPackCodec, XMLCodec, make_error_encoder
from .conf import Settings
from .dispatch import Dispatcher
from .errors import ErrorEnvelope, ErrorTypeRegistry, RemoteError, WireError
from .exceptions import MimeKitError
from .registry.codecs import CodecRegistry
from .sniff import SniffResolver
from .types import FormatCarrier, FormatCarrierModel, WireRequest, WireResponse

try:
    __version__ = version("mimekit")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "BaseCodec",
    "CodecRegistry",
    "Dispatcher",
    "ErrorEnvelope",
    "ErrorTypeRegistry",
    "FormatCarrier",
    "FormatCarrierModel",
    "JSONCodec",
    "MimeKitError",
    "MsgPackCodec",
    "RemoteError",
    "Settings",
    "SniffResolver",
    "WireError",
    "WireRequest",
    "WireResponse",
    "XMLCodec",
    "create_dispatcher",
    "make_error_encoder",
    "register_builtin_codecs",
]
