"""
Route registration for the IPC listener.

Responsibilities:
- Accept a POST whose body is the raw text to explain
- Hand non-empty text to the GenerationController
- Acknowledge immediately, independent of the streaming outcome

Protocol:
- Any path. POST -> 200 with an empty body, always.
- Any other method, standard or not -> 404.
- Empty / whitespace-only / undecodable bodies are accepted silently
  and produce no submission.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from observability.logger import log_event


async def _method_not_found(request: Request, exc: StarletteHTTPException) -> Response:
    # Starlette answers 405 for a known path with an unregistered method;
    # the listener only knows POST, so everything else is "not found".
    log_event({
        "event_type": "ipc_method_rejected",
        "method": request.method,
        "path": request.url.path,
    })
    return Response(status_code=404)


def register_routes(app: FastAPI) -> None:
    """Register all routes on the FastAPI app."""

    app.add_exception_handler(405, _method_not_found)

    @app.post("/{path:path}")
    async def explain(request: Request, path: str) -> Response: # pyright: ignore[reportUnusedFunction]
        body = await request.body()

        try:
            text = body.decode("utf-8").strip()
        except UnicodeDecodeError:
            log_event({
                "event_type": "ipc_payload_undecodable",
                "path": path,
                "bytes": len(body),
            })
            return Response(status_code=200)

        if not text:
            log_event({
                "event_type": "ipc_payload_empty",
                "path": path,
            })
            return Response(status_code=200)

        try:
            generation = app.state.controller.submit(text)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "event_type": "ipc_submit_failed",
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            return Response(status_code=200)

        log_event({
            "event_type": "ipc_payload_accepted",
            "path": path,
            "chars": len(text),
            "generation": generation,
        })
        return Response(status_code=200)
