"""Callback and inbound event routes."""

import json

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from ...app import MonitorApplication
from ...models import ProbeCallback, decode_inbound


class CallbackResponse(BaseModel):
    """Response model for a processed callback."""

    status: str
    outcome: str
    probe_id: str | None = None
    latency_seconds: float | None = None


class EventResponse(BaseModel):
    """Response model for an inbound event."""

    status: str
    outcome: str | None = None


async def _read_json(request: Request):
    body = await request.body()
    try:
        return json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON format")


def create_callbacks_router(app: MonitorApplication) -> APIRouter:
    """Create callbacks router."""
    router = APIRouter(tags=["callbacks"])

    @router.post("/callback", response_model=CallbackResponse)
    async def receive_callback(request: Request) -> dict:
        """Resolve a probe callback sent by the responder."""
        message = decode_inbound(await _read_json(request))
        if not isinstance(message, ProbeCallback):
            raise HTTPException(status_code=400, detail="Missing numeric timestamp")

        resolution = await app.engine.resolve_callback(message)
        return {
            "status": "callback processed",
            "outcome": resolution.outcome.value,
            "probe_id": resolution.probe.probe_id if resolution.probe else None,
            "latency_seconds": resolution.latency_seconds,
        }

    @router.post("/events", response_model=EventResponse)
    async def receive_event(request: Request, response: Response) -> dict:
        """Route an inbound channel message by shape."""
        resolution = await app.handle_inbound(await _read_json(request))
        if resolution is None:
            response.status_code = 202
            return {"status": "health check triggered"}
        return {"status": "callback processed", "outcome": resolution.outcome.value}

    return router
