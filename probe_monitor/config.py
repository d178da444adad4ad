"""Environment-driven settings and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Union

from .errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent.parent
LOGS_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_PATH = LOGS_DIR / "probe_monitor.log"

MEMORY_CHANNEL = "memory://"

MODE_MONITOR = "monitor"
MODE_RESPONDER = "responder"

PathLike = Union[str, Path]


def get_env_int(env: Mapping[str, str], key: str, default: int) -> int:
    """Read an integer setting, falling back to the default when unset or malformed."""
    value = env.get(key)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def resolve_log_path(env_value: PathLike | None = None) -> Path:
    """Resolve LOG_FILE to an absolute path."""
    if not env_value:
        return DEFAULT_LOG_PATH

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


@dataclass(frozen=True)
class Settings:
    """Runtime settings for both the monitor and responder roles."""

    mode: str = MODE_MONITOR
    channel_url: str | None = None
    callback_url: str | None = None
    latency_threshold_seconds: float = 10.0
    publish_interval_seconds: float = 30.0
    expiry_timeout_seconds: float = 20.0
    sweep_interval_seconds: float = 5.0
    health_poll_interval_seconds: float = 10.0
    health_wait_minutes: int = 5
    health_target_url: str | None = None
    slack_webhook_url: str | None = None
    pagerduty_routing_key: str | None = None
    alert_source: str = "probe-monitor"
    http_timeout_seconds: float = 10.0
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    @property
    def loopback(self) -> bool:
        """True when probes travel over the in-process bus."""
        return self.channel_url == MEMORY_CHANNEL

    @property
    def health_wait_seconds(self) -> float:
        return self.health_wait_minutes * 60.0

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables."""
        if env is None:
            env = os.environ

        settings = cls(
            mode=(env.get("MODE") or MODE_MONITOR).strip().lower(),
            channel_url=env.get("PROBE_CHANNEL_URL") or None,
            callback_url=env.get("CALLBACK_URL") or None,
            latency_threshold_seconds=float(
                get_env_int(env, "LATENCY_THRESHOLD_SECONDS", 10)
            ),
            publish_interval_seconds=float(
                get_env_int(env, "PUBLISH_INTERVAL_SECONDS", 30)
            ),
            expiry_timeout_seconds=float(get_env_int(env, "HEALTHCHECK_TIMEOUT", 20)),
            sweep_interval_seconds=float(get_env_int(env, "SWEEP_INTERVAL_SECONDS", 5)),
            health_poll_interval_seconds=float(
                get_env_int(env, "HEALTH_POLL_INTERVAL_SECONDS", 10)
            ),
            health_wait_minutes=get_env_int(env, "WAIT_MINUTES", 5),
            health_target_url=env.get("ADDR") or None,
            slack_webhook_url=env.get("SLACK_WEBHOOK_URL") or None,
            pagerduty_routing_key=env.get("PAGERDUTY_ROUTING_KEY") or None,
            alert_source=env.get("ALERT_SOURCE") or "probe-monitor",
            http_timeout_seconds=float(get_env_int(env, "HTTP_TIMEOUT_SECONDS", 10)),
            api_host=env.get("API_HOST") or "0.0.0.0",
            api_port=get_env_int(env, "API_PORT", 8080),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise ConfigurationError for settings the service cannot start with."""
        if self.mode not in (MODE_MONITOR, MODE_RESPONDER):
            raise ConfigurationError(
                f"Unknown MODE: {self.mode!r}. Use '{MODE_MONITOR}' or '{MODE_RESPONDER}'"
            )

        if self.mode == MODE_MONITOR and not self.channel_url:
            raise ConfigurationError("PROBE_CHANNEL_URL not set")

        positive = {
            "LATENCY_THRESHOLD_SECONDS": self.latency_threshold_seconds,
            "PUBLISH_INTERVAL_SECONDS": self.publish_interval_seconds,
            "HEALTHCHECK_TIMEOUT": self.expiry_timeout_seconds,
            "SWEEP_INTERVAL_SECONDS": self.sweep_interval_seconds,
            "HEALTH_POLL_INTERVAL_SECONDS": self.health_poll_interval_seconds,
            "WAIT_MINUTES": self.health_wait_minutes,
            "HTTP_TIMEOUT_SECONDS": self.http_timeout_seconds,
        }
        for key, value in positive.items():
            if value <= 0:
                raise ConfigurationError(f"{key} must be positive, got {value}")
