"""HTTP notification backends."""

from datetime import datetime, timezone

import httpx

from ..errors import AlertDeliveryError, TransportError
from ..transport import post_json

PAGERDUTY_EVENTS_URL = "https://events.pagerduty.com/v2/enqueue"


class SlackWebhookBackend:
    """Posts the alert body to a Slack incoming webhook."""

    name = "slack"

    def __init__(
        self,
        webhook_url: str,
        client: httpx.AsyncClient,
        timeout: float | None = None,
    ):
        self._webhook_url = webhook_url
        self._client = client
        self._timeout = timeout

    async def deliver(self, subject: str, body: str) -> None:
        try:
            await post_json(
                self._client,
                self._webhook_url,
                {"text": f"{subject}: {body}"},
                timeout=self._timeout,
            )
        except TransportError as e:
            raise AlertDeliveryError(f"Slack alert failed: {e}") from e


class PagerDutyBackend:
    """Triggers a PagerDuty Events v2 incident."""

    name = "pagerduty"

    def __init__(
        self,
        routing_key: str,
        client: httpx.AsyncClient,
        source: str = "probe-monitor",
        events_url: str = PAGERDUTY_EVENTS_URL,
        timeout: float | None = None,
    ):
        self._routing_key = routing_key
        self._client = client
        self._source = source
        self._events_url = events_url
        self._timeout = timeout

    def build_event(self, subject: str, body: str) -> dict:
        return {
            "routing_key": self._routing_key,
            "event_action": "trigger",
            "payload": {
                "summary": subject,
                "source": self._source,
                "severity": "error",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "custom_details": {"message": body},
            },
        }

    async def deliver(self, subject: str, body: str) -> None:
        try:
            await post_json(
                self._client,
                self._events_url,
                self.build_event(subject, body),
                timeout=self._timeout,
            )
        except TransportError as e:
            raise AlertDeliveryError(f"PagerDuty alert failed: {e}") from e
