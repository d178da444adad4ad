"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from probe_monitor.errors import TransportError  # noqa: E402


class FakeClock:
    """Manually advanced wall clock; also usable as an async sleep."""

    def __init__(self, now: float = 1.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.now += seconds


class RecordingAlertSink:
    """Alert sink that keeps every (subject, body) pair."""

    def __init__(self):
        self.alerts: list[tuple[str, str]] = []

    async def send_alert(self, subject: str, body: str) -> None:
        self.alerts.append((subject, body))

    def subjects(self) -> list[str]:
        return [subject for subject, _ in self.alerts]


class RecordingPublisher:
    """Publisher that records payloads and can be told to fail."""

    def __init__(self, failures: int = 0):
        self.payloads: list[dict] = []
        self.failures = failures

    async def publish(self, payload: dict) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise TransportError("channel unavailable")
        self.payloads.append(payload)


@pytest.fixture
def clock():
    """Fake clock starting at t=1s (timestamp 1000)."""
    return FakeClock(1.0)


@pytest.fixture
def alert_sink():
    """Recording alert sink."""
    return RecordingAlertSink()


@pytest.fixture
def publisher():
    """Recording publisher."""
    return RecordingPublisher()


@pytest.fixture
def engine(publisher, alert_sink, clock):
    """ProbeEngine with threshold 10s and timeout 20s."""
    from probe_monitor.engine import ProbeEngine

    return ProbeEngine(
        publisher=publisher,
        alert_sink=alert_sink,
        latency_threshold_seconds=10.0,
        expiry_timeout_seconds=20.0,
        clock=clock,
    )


@pytest.fixture
def requests_seen():
    """Requests captured by the mock HTTP transport."""
    return []


@pytest_asyncio.fixture
async def http_client(requests_seen):
    """httpx client answering 200 to everything, recording requests."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        return httpx.Response(200, json={"ok": True})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    yield client
    await client.aclose()
