"""Alert delivery."""

import httpx

from ..config import Settings
from .backends import PAGERDUTY_EVENTS_URL, PagerDutyBackend, SlackWebhookBackend
from .sink import (
    FanOutAlertSink,
    IAlertBackend,
    IAlertSink,
    LogAlertBackend,
    fire_alert,
)


def build_alert_sink(settings: Settings, client: httpx.AsyncClient) -> FanOutAlertSink:
    """Enable one backend per configured credential, plus the log backend."""
    backends: list[IAlertBackend] = [LogAlertBackend()]

    if settings.slack_webhook_url:
        backends.append(
            SlackWebhookBackend(
                settings.slack_webhook_url,
                client,
                timeout=settings.http_timeout_seconds,
            )
        )

    if settings.pagerduty_routing_key:
        backends.append(
            PagerDutyBackend(
                settings.pagerduty_routing_key,
                client,
                source=settings.alert_source,
                timeout=settings.http_timeout_seconds,
            )
        )

    return FanOutAlertSink(backends, source=settings.alert_source)


__all__ = [
    "IAlertSink",
    "IAlertBackend",
    "FanOutAlertSink",
    "LogAlertBackend",
    "SlackWebhookBackend",
    "PagerDutyBackend",
    "PAGERDUTY_EVENTS_URL",
    "build_alert_sink",
    "fire_alert",
]
