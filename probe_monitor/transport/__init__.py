"""Transport adapters between the engine and the pub/sub channel."""

from .http import post_json
from .publisher import BusChannelPublisher, HttpChannelPublisher, IProbePublisher

__all__ = [
    "IProbePublisher",
    "HttpChannelPublisher",
    "BusChannelPublisher",
    "post_json",
]
