"""Content-Type header parsing."""

from __future__ import annotations

from .media_type import MediaTypeError, parse_media_type

__all__ = ["parse_content_type"]


def parse_content_type(raw: str | None) -> str:
    """Return the FormatID named by a Content-Type header, or ``""``.

    Only the first comma-delimited segment is considered and its parameters
    (``charset`` and friends) are discarded.
    """
    if not raw:
        return ""
    try:
        media_type, _params = parse_media_type(raw.split(",", 1)[0])
    except MediaTypeError:
        return ""
    return media_type
