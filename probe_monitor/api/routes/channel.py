"""Channel delivery route for the responder role."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...app import ResponderApplication


class DeliveryResponse(BaseModel):
    """Response model for a channel delivery."""

    status: str
    handled: int


def create_channel_router(app: ResponderApplication) -> APIRouter:
    """Create channel router."""
    router = APIRouter(tags=["channel"])

    @router.post("/channel", response_model=DeliveryResponse)
    async def receive_delivery(request: Request) -> dict:
        """Accept a pub/sub delivery (raw JSON, SNS notification or record batch)."""
        body = await request.body()
        handled = await app.responder.handle_delivery(body)
        return {"status": "ok", "handled": handled}

    return router
