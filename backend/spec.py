"""
SPEC-AS-CONSTANTS
-----------------
Single source of truth for all behavioral invariants in the daemon.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic numbers elsewhere in the codebase.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Generations
# =============================================================================

# 0 means "no request has been submitted yet"; the first request gets 1.
GENERATION_NONE: Final[int] = 0

# =============================================================================
# Provider calls
# =============================================================================

PROVIDER_REQUEST_TIMEOUT_S: Final[float] = 60.0

# SDK-level retries would hammer a rate-limited provider; failover replaces them.
PROVIDER_MAX_RETRIES: Final[int] = 0

# Reasoning effort value meaning "do not send the parameter at all".
REASONING_EFFORT_NONE: Final[str] = "none"

RATE_LIMIT_STATUS_CODE: Final[int] = 429
RATE_LIMIT_ERROR_CODE: Final[str] = "rate_limit_exceeded"
RATE_LIMIT_TEXT_MARKERS: Final[tuple[str, ...]] = (
    "429",
    "rate limit",
    "rate_limit",
)

# =============================================================================
# User-visible stream messages
# =============================================================================

HOP_NOTICE_TEMPLATE: Final[str] = (
    "\n\n*[Rate limited on {current}, switching to {following}...]*\n\n"
)

PROVIDERS_EXHAUSTED_MESSAGE: Final[str] = (
    "Tất cả model đều bị rate limit. Vui lòng thử lại sau."
)

# =============================================================================
# Text normalization
# =============================================================================

PARAGRAPH_MARKER: Final[str] = "§PARAGRAPH§"

# =============================================================================
# IPC socket
# =============================================================================

DEFAULT_SOCKET_PATH: Final[str] = "/tmp/explaind.sock"
SOCKET_PERMISSIONS: Final[int] = 0o600
SOCKET_BIND_UMASK: Final[int] = 0o177
SOCKET_BACKLOG: Final[int] = 16
