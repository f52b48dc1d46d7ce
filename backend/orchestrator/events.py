"""
Sink event definitions (v1).

Rules:
- Events describe output that a stream attempt wants shown.
- Events carry data only (no behavior).
- Every event is tagged with the generation that produced it;
  the Generation Controller drops events whose generation is stale.
- No clocks, no timers, no async, no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SinkEventKind(str, Enum):
    """
    The three event kinds an Output Sink understands.
    """

    DATA = "data"
    END = "end"
    ERROR = "error"


@dataclass(frozen=True)
class SinkEvent:
    """
    One unit of output scoped to a generation.

    payload:
        DATA  -> text chunk (never empty)
        END   -> ""
        ERROR -> user-facing message
    """

    kind: SinkEventKind
    generation: int
    payload: str = ""


# =============================================================================
# Constructors
# =============================================================================

def data_event(generation: int, chunk: str) -> SinkEvent:
    return SinkEvent(kind=SinkEventKind.DATA, generation=generation, payload=chunk)


def end_event(generation: int) -> SinkEvent:
    return SinkEvent(kind=SinkEventKind.END, generation=generation)


def error_event(generation: int, message: str) -> SinkEvent:
    return SinkEvent(kind=SinkEventKind.ERROR, generation=generation, payload=message)
