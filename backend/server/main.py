"""
Daemon entry point.

Responsibilities:
- Load .env and AppConfig, apply CLI overrides
- Build registry, adapter, surface and GenerationController
- Serve the IPC app on the local Unix socket via uvicorn
- Submit the optional startup request
- Clean up on exit: socket file, stream tasks, provider clients
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from types import FrameType

import uvicorn
from dotenv import load_dotenv

from adapters.llm.base import LLMAdapter
from adapters.llm.streaming import OpenAIStreamingAdapter
from config import AppConfig, ConfigError
from observability.logger import log_event, set_enabled
from orchestrator.generation import GenerationController
from providers.registry import EmptyRegistryError, ProviderRegistry, default_registry
from server.app import create_app
from server.ipc_socket import bind_unix_socket, remove_socket_file
from spec import SOCKET_BACKLOG
from surface.base import PresentationSurface
from surface.console import ConsoleSurface


# ------------------------------------------------------------------
# Serving
# ------------------------------------------------------------------

async def serve(
    *,
    registry: ProviderRegistry,
    socket_path: str,
    log_level: str,
    startup_text: str | None,
    adapter: LLMAdapter | None = None,
    surface: PresentationSurface | None = None,
) -> None:
    """
    Run the daemon until uvicorn is told to exit (SIGINT / SIGTERM).

    adapter and surface default to the OpenAI streaming adapter and the
    console; tests pass fakes.
    """
    if adapter is None:
        adapter = OpenAIStreamingAdapter()
    controller = GenerationController(
        registry=registry,
        adapter=adapter,
        surface=surface if surface is not None else ConsoleSurface(),
    )
    app = create_app(controller)

    sock = bind_unix_socket(socket_path)
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            log_level=log_level.lower(),
            lifespan="off",
            backlog=SOCKET_BACKLOG,
        )
    )

    log_event({
        "event_type": "daemon_started",
        "socket_path": socket_path,
        "providers": [p.label for p in registry],
    })

    try:
        # Same admission rule as an IPC payload: trimmed, non-empty
        startup_text = (startup_text or "").strip()
        if startup_text:
            controller.submit(startup_text)
        else:
            log_event({"event_type": "no_startup_text"})

        await server.serve(sockets=[sock])

    finally:
        # Synchronous cleanup first: it must happen even if the awaits
        # below are interrupted by a second signal.
        sock.close()
        remove_socket_file(socket_path)

        await controller.shutdown()
        await adapter.aclose()

        log_event({"event_type": "daemon_stopped", "socket_path": socket_path})


# ------------------------------------------------------------------
# CLI
# ------------------------------------------------------------------

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="explaind",
        description="Stream explanations of text posted to a local socket.",
    )
    parser.add_argument(
        "--socket",
        help="Unix socket path (default: $EXPLAIN_SOCKET)",
    )
    parser.add_argument(
        "--log-level",
        help="uvicorn log level (default: $LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def _exit_on_sigterm(signum: int, _frame: FrameType | None) -> None:
    raise SystemExit(128 + signum)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    args = parse_args(argv)
    config = AppConfig.load_from_env()
    set_enabled(config.enable_json_logs)

    socket_path = args.socket or config.socket_path
    log_level = args.log_level or config.log_level

    try:
        registry = default_registry(config)
    except EmptyRegistryError as exc:
        raise ConfigError(
            "no provider credentials configured (set CEREBRAS_API_KEY and/or GROQ_API_KEY)"
        ) from exc

    # uvicorn re-raises captured signals after a graceful stop; turn
    # SIGTERM into SystemExit so the cleanup in serve() still runs.
    signal.signal(signal.SIGTERM, _exit_on_sigterm)

    try:
        asyncio.run(
            serve(
                registry=registry,
                socket_path=socket_path,
                log_level=log_level,
                startup_text=config.startup_text,
            )
        )
    except KeyboardInterrupt:
        pass
    finally:
        remove_socket_file(socket_path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
