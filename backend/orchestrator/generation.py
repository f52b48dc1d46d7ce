"""
Generation controller.

Responsibilities:
- Own the monotonic generation counter and the current output sink
- Admit new requests: mint a generation, retire the previous one,
  pick a random start provider, open a sink, start streaming
- Act as the single emission gate: events from a stale generation
  never reach a sink

Non-responsibilities:
- NO provider calls, NO failover (StreamOrchestrator)
- NO transport concerns (server.app)
- NO rendering (surface)

Concurrency:
- submit() never awaits, so on the single event loop each submission
  runs to completion before any other submission or any stream task
  can observe the counter. No lock is needed.
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass

from adapters.llm.base import LLMAdapter
from observability.logger import log_event
from orchestrator.enums.state import AttemptState
from orchestrator.events import SinkEvent, SinkEventKind
from orchestrator.normalize import normalize
from orchestrator.stream import StreamOrchestrator
from providers.registry import ProviderRegistry
from spec import GENERATION_NONE
from surface.base import OutputSink, PresentationSurface


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class ExplainRequest:
    """
    One admitted request. Never persisted.
    """

    raw_text: str
    generation: int


class GenerationController:
    """
    Guarantees at most one live stream at a time.

    Retirement of the previous generation is two-fold:
    - cooperative: its generation no longer matches, so the orchestrator
      stops reading and deliver() drops anything already in flight
    - hard: its task is cancelled, which unwinds the adapter and closes
      the provider's HTTP stream instead of leaving it open
    """

    def __init__(
        self,
        *,
        registry: ProviderRegistry,
        adapter: LLMAdapter,
        surface: PresentationSurface,
        rng: random.Random | None = None,
    ) -> None:
        self._registry = registry
        self._surface = surface
        self._rng = rng or random.Random()

        self._generation: int = GENERATION_NONE
        self._sink: OutputSink | None = None
        self._task: asyncio.Task[AttemptState] | None = None

        # Cancelled tasks still unwinding; strong refs keep them alive
        self._retired: set[asyncio.Task[AttemptState]] = set()

        self._orchestrator = StreamOrchestrator(
            registry=registry,
            adapter=adapter,
            emit_event=self.deliver,
            is_current=self.is_current,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def current_generation(self) -> int:
        return self._generation

    @property
    def current_task(self) -> asyncio.Task[AttemptState] | None:
        return self._task

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def submit(self, raw_text: str) -> int:
        """
        Admit a new request and start streaming it.

        Must be called from within the running event loop.
        Returns immediately with the allocated generation; the stream
        runs in its own task.
        """
        self._generation += 1
        request = ExplainRequest(raw_text=raw_text, generation=self._generation)

        self._retire_current()

        start_index = self._rng.randrange(len(self._registry))
        self._sink = self._surface.open_sink(request.generation)

        text = normalize(request.raw_text)

        log_event({
            "ts_ms": _now_ms(),
            "event_type": "generation_submitted",
            "generation": request.generation,
            "start_index": start_index,
            "start_provider": self._registry[start_index].label,
            "raw_chars": len(request.raw_text),
            "normalized_chars": len(text),
        })

        self._task = asyncio.create_task(
            self._run(text=text, start_index=start_index, generation=request.generation),
            name=f"generation-{request.generation}",
        )
        return request.generation

    async def deliver(self, event: SinkEvent) -> None:
        """
        Forward one event to the current sink if, and only if, it belongs
        to the current generation.

        Sink failures are logged and do not propagate into the stream:
        a broken renderer is not a provider failure.
        """
        sink = self._sink
        if sink is None or event.generation != self._generation:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "sink_event_dropped_stale",
                "event_generation": event.generation,
                "current_generation": self._generation,
                "kind": event.kind.value,
            })
            return

        try:
            if event.kind is SinkEventKind.DATA:
                await sink.data(event.payload)
            elif event.kind is SinkEventKind.END:
                await sink.end()
            elif event.kind is SinkEventKind.ERROR:
                await sink.error(event.payload)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "sink_delivery_failed",
                "generation": event.generation,
                "kind": event.kind.value,
                "exception": type(exc).__name__,
                "message": str(exc),
            })

    async def shutdown(self) -> None:
        """
        Retire the live generation and wait for every stream task to
        finish unwinding. Called once on daemon exit.
        """
        self._retire_current()

        if self._retired:
            await asyncio.gather(*self._retired, return_exceptions=True)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _retire_current(self) -> None:
        """
        Close the previous sink and cancel the previous task.
        Never waits.
        """
        sink, self._sink = self._sink, None
        task, self._task = self._task, None

        if sink is not None:
            sink.close()

        if task is not None and not task.done():
            task.cancel()
            self._retired.add(task)
            task.add_done_callback(self._retired.discard)

            log_event({
                "ts_ms": _now_ms(),
                "event_type": "generation_retired",
                "task": task.get_name(),
                "current_generation": self._generation,
            })

    async def _run(self, *, text: str, start_index: int, generation: int) -> AttemptState:
        try:
            state = await self._orchestrator.run(
                text=text,
                start_index=start_index,
                generation=generation,
            )
        except asyncio.CancelledError:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "generation_cancelled",
                "generation": generation,
            })
            raise

        log_event({
            "ts_ms": _now_ms(),
            "event_type": "generation_finished",
            "generation": generation,
            "state": state.value,
        })
        return state
