"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..app import IApplication, MonitorApplication, ResponderApplication
from .routes import callbacks, channel, observability


def _lifespan(application: IApplication):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    return lifespan


def _add_health_route(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz", tags=["health"])
    async def healthz() -> dict:
        """Liveness of the HTTP listener itself."""
        return {"status": "ok"}


def create_fastapi_app(application: MonitorApplication) -> FastAPI:
    """Create the monitor's FastAPI application."""
    fastapi_app = FastAPI(
        title="Probe Monitor API",
        description="Callback intake and status for the round-trip latency monitor",
        version="0.1.0",
        lifespan=_lifespan(application),
    )

    fastapi_app.include_router(callbacks.create_callbacks_router(application))
    fastapi_app.include_router(observability.create_observability_router(application))
    _add_health_route(fastapi_app)

    return fastapi_app


def create_responder_app(application: ResponderApplication) -> FastAPI:
    """Create the responder's FastAPI application."""
    fastapi_app = FastAPI(
        title="Probe Responder API",
        description="Channel intake that echoes probes back to the monitor",
        version="0.1.0",
        lifespan=_lifespan(application),
    )

    fastapi_app.include_router(channel.create_channel_router(application))
    _add_health_route(fastapi_app)

    return fastapi_app
