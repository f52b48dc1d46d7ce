"""
Failover policy helpers (v1).

Purpose:
- Centralize provider failure classification
- Keep the stream orchestrator free of vendor error details
- Allow deterministic failover decisions

This module contains NO timers, NO async, NO side effects.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import openai

from spec import (
    RATE_LIMIT_ERROR_CODE,
    RATE_LIMIT_STATUS_CODE,
    RATE_LIMIT_TEXT_MARKERS,
)


# =============================================================================
# Failure Types
# =============================================================================

class FailureType(str, Enum):
    """
    Failure classification used by the failover policy.

    RATE_LIMITED:
        Provider rejected the request for rate limiting (HTTP 429,
        rate_limit_exceeded code, or an error message saying so).
        Retryable, but never against the same provider: the request
        moves to the next provider in the registry.

    OTHER:
        Everything else: timeouts, auth failures, malformed responses,
        connection errors. Terminal, surfaced verbatim, no retry.

    Notes:
    - Supersession is NOT a failure type and must never trigger failover.
    """

    RATE_LIMITED = "rate_limited"
    OTHER = "other"


def classify_failure(exc: BaseException) -> FailureType:
    """
    Classify a provider error.

    Timeouts are deliberately OTHER: a slow provider is not a reason to
    hop, it is a reason to tell the user.
    """
    if isinstance(exc, openai.APITimeoutError):
        return FailureType.OTHER

    if isinstance(exc, openai.RateLimitError):
        return FailureType.RATE_LIMITED

    status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    if status == RATE_LIMIT_STATUS_CODE:
        return FailureType.RATE_LIMITED

    if getattr(exc, "code", None) == RATE_LIMIT_ERROR_CODE:
        return FailureType.RATE_LIMITED

    text = str(exc).lower()
    if any(marker in text for marker in RATE_LIMIT_TEXT_MARKERS):
        return FailureType.RATE_LIMITED

    return FailureType.OTHER


def describe_failure(exc: BaseException) -> str:
    """User-facing description of a terminal provider error."""
    return str(exc) or type(exc).__name__


# =============================================================================
# Failover ring
# =============================================================================

@dataclass(frozen=True)
class FailoverBudget:
    """
    Visited-count guard for one request's failover chain.

    Semantics:
    - `attempts` counts providers already tried, start provider included.
    - The chain is exhausted once every provider has been tried once.
    """

    registry_size: int
    attempts: int = 0

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.registry_size


def record_attempt(budget: FailoverBudget) -> FailoverBudget:
    """Return a budget with one more provider marked as tried."""
    return FailoverBudget(
        registry_size=budget.registry_size,
        attempts=budget.attempts + 1,
    )
