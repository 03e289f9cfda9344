from .protocols import Exchange, FormatCarrier, FormatCarrierModel, ResponseExchange
from .transport import Headers, WireMessage, WireRequest, WireResponse, is_success

__all__ = [
    "Exchange",
    "ResponseExchange",
    "FormatCarrier",
    "FormatCarrierModel",
    "Headers",
    "WireMessage",
    "WireRequest",
    "WireResponse",
    "is_success",
]
