"""
Stream attempt state enumeration.

Rules:
- This enum defines ONLY the lifecycle states of one provider attempt.
- No behavior, no helper methods, no side effects.
- Transitions are driven exclusively by the stream orchestrator.
"""

from __future__ import annotations

from enum import Enum


class AttemptState(str, Enum):
    """
    Idle -> Requesting -> Streaming -> one terminal state.

    FAILED_RETRYABLE is terminal for the attempt only; the orchestrator
    then moves on to the next provider with the same generation.
    SUPERSEDED is terminal and silent.
    """

    IDLE = "IDLE"
    REQUESTING = "REQUESTING"
    STREAMING = "STREAMING"
    COMPLETED = "COMPLETED"
    FAILED_TERMINAL = "FAILED_TERMINAL"
    FAILED_RETRYABLE = "FAILED_RETRYABLE"
    SUPERSEDED = "SUPERSEDED"
