"""
Stream orchestrator.

Responsibilities:
- Run one request's failover chain: start provider, then the registry's
  fixed order, wrapping, each provider tried at most once
- Drive each attempt through Idle -> Requesting -> Streaming -> terminal
- Gate every read and every emission on the request's generation
- Classify provider failures and decide between hop and terminal error

Non-responsibilities:
- NO generation allocation (GenerationController)
- NO sink ownership; events go out through emit_event only
- NO vendor details (adapters.llm)
"""

from __future__ import annotations

import time
from contextlib import aclosing
from dataclasses import dataclass
from typing import Awaitable, Callable

from adapters.llm.base import LLMAdapter
from adapters.llm.prompts import SYSTEM_PROMPT_VERSION, build_messages
from observability.logger import log_event
from observability.metrics import (
    FIRST_CHUNK_MS,
    PROVIDER_ATTEMPT_MS,
    discard_timer,
    start_timer,
    stop_timer,
    timed,
)
from orchestrator.enums.state import AttemptState
from orchestrator.events import SinkEvent, data_event, end_event, error_event
from orchestrator.failover import (
    FailoverBudget,
    FailureType,
    classify_failure,
    describe_failure,
    record_attempt,
)
from providers.registry import ProviderConfig, ProviderRegistry
from spec import HOP_NOTICE_TEMPLATE, PROVIDERS_EXHAUSTED_MESSAGE


# ---------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------

EventSink = Callable[[SinkEvent], Awaitable[None]]
IsCurrentFn = Callable[[int], bool]


@dataclass(frozen=True)
class StreamAttempt:
    """
    One provider call within a request's failover chain.

    start_index is fixed for the whole chain; provider_index moves.
    """

    generation: int
    provider_index: int
    start_index: int


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


# ---------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------

class StreamOrchestrator:
    """
    Streams one request from the provider ring into the event sink.

    Guarantees:
    - At most len(registry) attempts per request
    - Exactly one terminal sink event (end or error) for a request that
      stays current; none for one that is superseded
    - data events leave in the order the provider produced them
    - asyncio.CancelledError is never caught: a cancelled request task
      unwinds immediately and closes its network stream on the way out
    """

    def __init__(
        self,
        *,
        registry: ProviderRegistry,
        adapter: LLMAdapter,
        emit_event: EventSink,
        is_current: IsCurrentFn,
    ) -> None:
        self._registry = registry
        self._adapter = adapter
        self._emit_event = emit_event
        self._is_current = is_current

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(
        self,
        *,
        text: str,
        start_index: int,
        generation: int,
    ) -> AttemptState:
        """
        Run the failover chain for one request.

        Returns the terminal state of the last attempt
        (COMPLETED, FAILED_TERMINAL or SUPERSEDED).
        """
        messages = build_messages(text)
        start_index = start_index % len(self._registry)
        budget = FailoverBudget(registry_size=len(self._registry))
        index = start_index

        while not budget.exhausted:
            attempt = StreamAttempt(
                generation=generation,
                provider_index=index,
                start_index=start_index,
            )
            budget = record_attempt(budget)

            state = await self._run_attempt(attempt, messages)
            if state is not AttemptState.FAILED_RETRYABLE:
                return state

            # Neither a hop notice nor the exhaustion error belongs to
            # a request that has been replaced.
            if not self._is_current(generation):
                return AttemptState.SUPERSEDED

            if budget.exhausted:
                break

            index = self._registry.next_index(index)
            await self._announce_hop(attempt, index)

        log_event({
            "ts_ms": _now_ms(),
            "event_type": "stream_providers_exhausted",
            "generation": generation,
            "start_index": start_index,
            "attempts": budget.attempts,
        })
        await self._emit_event(error_event(generation, PROVIDERS_EXHAUSTED_MESSAGE))
        return AttemptState.FAILED_TERMINAL

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _run_attempt(
        self,
        attempt: StreamAttempt,
        messages: list[dict[str, str]],
    ) -> AttemptState:
        """
        One provider call. Never raises except for cancellation.
        """
        provider = self._registry[attempt.provider_index]

        if not self._is_current(attempt.generation):
            self._log_finished(attempt, provider, AttemptState.SUPERSEDED)
            return AttemptState.SUPERSEDED

        log_event({
            "ts_ms": _now_ms(),
            "event_type": "stream_attempt_started",
            "generation": attempt.generation,
            "provider_index": attempt.provider_index,
            "start_index": attempt.start_index,
            "provider": provider.label,
            "system_prompt_version": SYSTEM_PROMPT_VERSION,
        })

        first_chunk_timer = start_timer(FIRST_CHUNK_MS)
        try:
            with timed(
                PROVIDER_ATTEMPT_MS,
                generation=attempt.generation,
                provider=provider.label,
            ):
                state = await self._consume(attempt, provider, messages, first_chunk_timer)

        except Exception as exc:  # pylint: disable=broad-exception-caught
            failure = classify_failure(exc)
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "stream_attempt_failed",
                "generation": attempt.generation,
                "provider": provider.label,
                "failure": failure.value,
                "exception": type(exc).__name__,
                "message": str(exc),
            })

            if not self._is_current(attempt.generation):
                state = AttemptState.SUPERSEDED
            elif failure is FailureType.RATE_LIMITED:
                state = AttemptState.FAILED_RETRYABLE
            else:
                await self._emit_event(
                    error_event(attempt.generation, describe_failure(exc))
                )
                state = AttemptState.FAILED_TERMINAL

        finally:
            discard_timer(first_chunk_timer)

        self._log_finished(attempt, provider, state)
        return state

    async def _consume(
        self,
        attempt: StreamAttempt,
        provider: ProviderConfig,
        messages: list[dict[str, str]],
        first_chunk_timer: str,
    ) -> AttemptState:
        state = AttemptState.REQUESTING

        async with aclosing(self._adapter.stream_completion(provider, messages)) as stream:
            async for delta in stream:
                # Checked before touching the chunk; leaving the loop
                # closes the provider stream via aclosing().
                if not self._is_current(attempt.generation):
                    return AttemptState.SUPERSEDED

                if state is AttemptState.REQUESTING:
                    state = AttemptState.STREAMING
                    stop_timer(
                        first_chunk_timer,
                        generation=attempt.generation,
                        provider=provider.label,
                    )

                if delta:
                    await self._emit_event(data_event(attempt.generation, delta))

        if not self._is_current(attempt.generation):
            return AttemptState.SUPERSEDED

        await self._emit_event(end_event(attempt.generation))
        return AttemptState.COMPLETED

    async def _announce_hop(self, attempt: StreamAttempt, next_index: int) -> None:
        current = self._registry[attempt.provider_index]
        following = self._registry[next_index]

        log_event({
            "ts_ms": _now_ms(),
            "event_type": "stream_failover",
            "generation": attempt.generation,
            "from_index": attempt.provider_index,
            "to_index": next_index,
            "from_provider": current.label,
            "to_provider": following.label,
        })

        notice = HOP_NOTICE_TEMPLATE.format(
            current=current.label,
            following=following.label,
        )
        await self._emit_event(data_event(attempt.generation, notice))

    @staticmethod
    def _log_finished(
        attempt: StreamAttempt,
        provider: ProviderConfig,
        state: AttemptState,
    ) -> None:
        log_event({
            "ts_ms": _now_ms(),
            "event_type": "stream_attempt_finished",
            "generation": attempt.generation,
            "provider_index": attempt.provider_index,
            "provider": provider.label,
            "state": state.value,
        })
