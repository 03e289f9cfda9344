"""Accept / Content-Type header grammars and format negotiation."""

from .accept import AcceptEntry, highest, parse_accept
from .content_type import parse_content_type
from .media_type import MediaTypeError, normalize_format_id, parse_media_type
from .negotiation import preferred_format

__all__ = [
    "AcceptEntry",
    "MediaTypeError",
    "highest",
    "parse_accept",
    "parse_content_type",
    "normalize_format_id",
    "parse_media_type",
    "preferred_format",
]
