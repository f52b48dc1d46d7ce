"""
FastAPI app factory.

Responsibilities:
- Create and configure the FastAPI application
- Attach the shared GenerationController
- Register routes

The app is transport-agnostic; server.main serves it on the local
Unix socket.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI

from server.routes import register_routes

if TYPE_CHECKING:
    from orchestrator.generation import GenerationController


def create_app(controller: GenerationController) -> FastAPI:
    """
    Create and configure the FastAPI application.

    This is the app factory pattern that allows:
    - Testing with a fake controller
    - Serving on a pre-bound socket
    """
    app = FastAPI(
        title="explaind",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.controller = controller

    register_routes(app)

    return app
