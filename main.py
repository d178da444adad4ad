"""Main entry point for the probe monitor."""

import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from probe_monitor import (
    ConfigurationError,
    MonitorApplication,
    ResponderApplication,
    Settings,
)
from probe_monitor.api import create_fastapi_app, create_responder_app
from probe_monitor.config import MODE_MONITOR
from probe_monitor.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> int:
    """Run the service in the role selected by MODE."""
    project_root = Path(__file__).resolve().parent
    load_dotenv(project_root / ".env")
    setup_logging()

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return 1

    if settings.mode == MODE_MONITOR:
        app = create_fastapi_app(MonitorApplication(settings))
    else:
        app = create_responder_app(ResponderApplication(settings))

    logger.info(
        "Listening on %s:%s for %s", settings.api_host, settings.api_port, settings.mode
    )
    # uvicorn handles SIGINT/SIGTERM and runs the lifespan shutdown
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
