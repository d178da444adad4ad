"""Exception hierarchy for the probe monitor."""


class MonitorError(Exception):
    """Base class for probe monitor errors."""


class ConfigurationError(MonitorError):
    """Required settings are missing or invalid. Fatal at startup."""


class TransportError(MonitorError):
    """Publishing to the channel or delivering a callback failed."""


class DispatchError(TransportError):
    """A probe could not be published."""

    def __init__(self, probe_id: str, cause: Exception):
        super().__init__(f"Failed to publish probe {probe_id}: {cause}")
        self.probe_id = probe_id
        self.cause = cause


class AlertDeliveryError(MonitorError):
    """A notification backend rejected or failed to receive an alert."""
