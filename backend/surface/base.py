"""
Presentation surface contract (v1).

The surface that renders streamed text lives outside the daemon's core.
This module defines only the boundary the Generation Controller talks to.

Rules:
- One sink per generation.
- A sink may be closed (torn down) while a stale attempt still runs;
  the controller never delivers to a sink after replacing it.
- Sinks know nothing about providers, failover, or generations other
  than their own.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class OutputSink(Protocol):
    """Consumer of data / end / error events for one generation."""

    async def data(self, chunk: str) -> None: ...

    async def end(self) -> None: ...

    async def error(self, message: str) -> None: ...

    def close(self) -> None:
        """
        Tear down the sink. Idempotent.
        Events arriving after close() must be ignored, not raised.
        """


@runtime_checkable
class PresentationSurface(Protocol):
    """Factory for per-generation output sinks."""

    def open_sink(self, generation: int) -> OutputSink: ...
