"""HTTP API."""

from .app import create_fastapi_app, create_responder_app

__all__ = ["create_fastapi_app", "create_responder_app"]
