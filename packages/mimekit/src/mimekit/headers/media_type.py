"""Media type grammar shared by the Accept and Content-Type parsers.

    media-type = type "/" subtype *( OWS ";" OWS parameter )
    parameter  = token "=" ( token / quoted-string )
"""

from __future__ import annotations

import re

from mimekit.exceptions.base import MimeKitError

__all__ = ["MediaTypeError", "normalize_format_id", "parse_media_type"]

_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_QUOTED = r'"(?:[^"\\]|\\.)*"'

_TYPE_RE = re.compile(rf"\s*({_TOKEN})/({_TOKEN})\s*")
_PARAM_RE = re.compile(rf";\s*(?:({_TOKEN})\s*=\s*({_TOKEN}|{_QUOTED}))?\s*")
_QUOTED_PAIR_RE = re.compile(r"\\(.)")


class MediaTypeError(MimeKitError, ValueError):
    """Raised when a header value is not a valid media type."""


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _QUOTED_PAIR_RE.sub(r"\1", value[1:-1])
    return value


def parse_media_type(raw: str) -> tuple[str, dict[str, str]]:
    """Parse ``raw`` into a lowercase ``type/subtype`` and its parameters.

    Parameter names are lowercased; values keep their case. Empty parameter
    slots (``text/plain;;charset=utf-8`` or a trailing ``;``) are tolerated.

    :raises MediaTypeError: If ``raw`` does not follow the grammar, or a
        parameter is repeated.
    """
    if not isinstance(raw, str):
        raise MediaTypeError(f"media type must be a string, got {type(raw).__name__}")

    m = _TYPE_RE.match(raw)
    if m is None:
        raise MediaTypeError(f"invalid media type: {raw!r}")
    media_type = f"{m.group(1)}/{m.group(2)}".lower()

    params: dict[str, str] = {}
    pos = m.end()
    while pos < len(raw):
        pm = _PARAM_RE.match(raw, pos)
        if pm is None or pm.end() == pos:
            raise MediaTypeError(f"invalid media type parameter in {raw!r} at {pos}")
        name, value = pm.group(1), pm.group(2)
        if name is not None:
            key = name.lower()
            if key in params:
                raise MediaTypeError(f"duplicate media type parameter {key!r} in {raw!r}")
            params[key] = _unquote(value)
        pos = pm.end()

    return media_type, params


def normalize_format_id(value: str) -> str:
    """Return the canonical lowercase ``type/subtype`` form of ``value``.

    Unlike :func:`parse_media_type` this rejects parameters: a FormatID is a
    bare media type.
    """
    if not isinstance(value, str):
        raise TypeError(f"format id must be a string, got {type(value).__name__}")
    m = _TYPE_RE.fullmatch(value)
    if m is None:
        raise ValueError(f"format id must look like 'type/subtype': {value!r}")
    return f"{m.group(1)}/{m.group(2)}".lower()
