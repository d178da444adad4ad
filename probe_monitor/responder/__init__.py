"""Echo responder."""

from .envelope import ChannelDelivery, unwrap_delivery
from .responder import (
    BusCallbackTarget,
    EchoResponder,
    HttpCallbackTarget,
    ICallbackTarget,
)

__all__ = [
    "EchoResponder",
    "ICallbackTarget",
    "HttpCallbackTarget",
    "BusCallbackTarget",
    "ChannelDelivery",
    "unwrap_delivery",
]
