"""Unwrapping channel deliveries into individual messages."""

import json
from dataclasses import dataclass, field
from typing import Any

SUBSCRIPTION_CONFIRMATION = "SubscriptionConfirmation"
NOTIFICATION = "Notification"


@dataclass
class ChannelDelivery:
    """Messages carried by one delivery, plus a pending subscription to confirm."""

    messages: list[Any] = field(default_factory=list)
    subscribe_url: str | None = None


def unwrap_delivery(raw: str | bytes | dict | Any) -> ChannelDelivery:
    """
    Accept the shapes a channel delivery can take.

    - Lambda-style batches: ``{"Records": [{"Sns": {"Message": "..."}}]}``
    - SNS HTTP notifications: ``{"Type": "Notification", "Message": "..."}``
    - SNS subscription confirmations carrying a ``SubscribeURL``
    - anything else is a single raw message
    """
    body = raw
    if isinstance(raw, (str, bytes)):
        try:
            body = json.loads(raw)
        except ValueError:
            return ChannelDelivery(messages=[raw])

    if not isinstance(body, dict):
        return ChannelDelivery(messages=[body])

    records = body.get("Records")
    if isinstance(records, list):
        messages = []
        for record in records:
            sns = record.get("Sns") if isinstance(record, dict) else None
            if isinstance(sns, dict) and "Message" in sns:
                messages.append(sns["Message"])
        return ChannelDelivery(messages=messages)

    delivery_type = body.get("Type")
    if delivery_type == SUBSCRIPTION_CONFIRMATION:
        return ChannelDelivery(subscribe_url=body.get("SubscribeURL"))
    if delivery_type == NOTIFICATION and "Message" in body:
        return ChannelDelivery(messages=[body["Message"]])

    return ChannelDelivery(messages=[body])
