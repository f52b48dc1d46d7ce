"""
Latency metrics for the explain stream.

Two durations are recorded per provider attempt:
- first_chunk_ms: request sent -> first delta received. Only emitted
  when a delta actually arrives; a failed or superseded attempt
  discards it.
- provider_attempt_ms: request sent -> attempt over, whatever the
  outcome (completed, rate limited, failed, cancelled).

Each measurement is one METRIC_TIMER line in the JSONL log, tagged with
the request generation and the provider label, so a log reader can line
it up with the stream_attempt_* events. Nothing is aggregated in-process.
"""

from __future__ import annotations

import time
import uuid
from contextlib import contextmanager
from typing import Any, Final, Iterator

from observability.logger import log_event

FIRST_CHUNK_MS: Final[str] = "first_chunk_ms"
PROVIDER_ATTEMPT_MS: Final[str] = "provider_attempt_ms"

# timer_id -> (metric, monotonic start in ns)
_pending: dict[str, tuple[str, int]] = {}


def start_timer(metric: str) -> str:
    """
    Begin measuring `metric` and return a handle for stop/discard.

    A handle that is never stopped or discarded stays in memory; use
    timed() where the measured span is a single block.
    """
    timer_id = uuid.uuid4().hex[:12]
    _pending[timer_id] = (metric, time.monotonic_ns())
    return timer_id


def stop_timer(
    timer_id: str,
    *,
    generation: int | None = None,
    provider: str | None = None,
    details: dict[str, Any] | None = None,
) -> int | None:
    """
    Emit the elapsed time for `timer_id`.

    Returns the duration in ms, or None if the handle was already
    stopped or discarded (a second stop emits nothing).
    """
    entry = _pending.pop(timer_id, None)
    if entry is None:
        return None

    metric, started_ns = entry
    elapsed_ms = (time.monotonic_ns() - started_ns) // 1_000_000

    log_event({
        "event_type": "METRIC_TIMER",
        "metric": metric,
        "value_ms": elapsed_ms,
        "generation": generation,
        "provider": provider,
        "details": details or {},
    })
    return elapsed_ms


def discard_timer(timer_id: str) -> None:
    """Forget a pending measurement without logging it."""
    _pending.pop(timer_id, None)


@contextmanager
def timed(
    metric: str,
    *,
    generation: int | None = None,
    provider: str | None = None,
    details: dict[str, Any] | None = None,
) -> Iterator[None]:
    """
    Measure the enclosed block and emit exactly once on the way out,
    including when it exits through an exception or cancellation.
    """
    timer_id = start_timer(metric)
    try:
        yield
    finally:
        stop_timer(timer_id, generation=generation, provider=provider, details=details)
