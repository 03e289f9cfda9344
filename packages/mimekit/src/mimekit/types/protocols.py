"""Collaborator contracts and the FormatCarrier capability."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import MutableMapping, Protocol, runtime_checkable

from pydantic import BaseModel, PrivateAttr

__all__ = ["Exchange", "ResponseExchange", "FormatCarrier", "FormatCarrierModel"]


@runtime_checkable
class Exchange(Protocol):
    """What the transport must supply for one request or response."""

    headers: MutableMapping[str, str]

    @property
    def content_length(self) -> int: ...

    def read_body(self) -> bytes: ...

    def write_body(self, data: bytes) -> None: ...


@runtime_checkable
class ResponseExchange(Exchange, Protocol):
    status_code: int


class FormatCarrier(ABC):
    """Explicit opt-in for messages that remember their negotiated wire format.

    The dispatcher only reads or writes the format of messages that subclass
    this interface; nothing is inferred from attribute names.
    """

    @abstractmethod
    def get_format(self) -> str | None:
        """Return the remembered FormatID, or None if nothing was set."""

    @abstractmethod
    def set_format(self, format_id: str) -> None:
        """Remember ``format_id`` until it is explicitly overwritten."""


class FormatCarrierModel(BaseModel, FormatCarrier):
    """Pydantic message base that carries its FormatID outside the payload."""

    _format_id: str | None = PrivateAttr(default=None)

    def get_format(self) -> str | None:
        return self._format_id

    def set_format(self, format_id: str) -> None:
        self._format_id = format_id
