# mimekit/types/transport.py
"""
In-memory request/response exchanges.

The dispatcher and codecs only need a mutable header mapping, a readable body
with a known length and, for responses, a status code (see
:mod:`mimekit.types.protocols`). The classes here are the reference
implementation of that contract, used by tests and by transports that buffer
bodies anyway.

Classes:
    - Headers: case-insensitive header mapping that keeps the caller's casing.
    - WireRequest: outgoing or incoming request exchange.
    - WireResponse: outgoing or incoming response exchange with a status code.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, MutableMapping

__all__ = ["Headers", "WireMessage", "WireRequest", "WireResponse", "is_success"]


def is_success(status_code: int) -> bool:
    """200-299 inclusive is success."""
    return 200 <= status_code <= 299


class Headers(MutableMapping[str, str]):
    """Case-insensitive header mapping."""

    def __init__(self, data: Mapping[str, str] | Iterable[tuple[str, str]] | None = None, **kwargs: str) -> None:
        self._store: dict[str, tuple[str, str]] = {}
        self.update(data or {}, **kwargs)

    def __getitem__(self, key: str) -> str:
        return self._store[key.lower()][1]

    def __setitem__(self, key: str, value: str) -> None:
        self._store[key.lower()] = (key, str(value))

    def __delitem__(self, key: str) -> None:
        del self._store[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"


@dataclass
class WireMessage:
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)

    @property
    def content_length(self) -> int:
        """Declared body length; falls back to the buffered length."""
        raw = self.headers.get("Content-Length")
        if raw is not None:
            try:
                declared = int(raw)
            except ValueError:
                declared = -1
            if declared >= 0:
                return declared
        return len(self.body)

    def read_body(self) -> bytes:
        return self.body[: self.content_length]

    def write_body(self, data: bytes) -> None:
        self.body = bytes(data)
        self.headers["Content-Length"] = str(len(self.body))


@dataclass
class WireRequest(WireMessage):
    method: str = "POST"
    path: str = "/"


@dataclass
class WireResponse(WireMessage):
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return is_success(self.status_code)
