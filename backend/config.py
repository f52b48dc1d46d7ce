"""
Application configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No orchestration logic
- No behavioral constants (see spec.py)
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from spec import DEFAULT_SOCKET_PATH


class ConfigError(RuntimeError):
    """Raised when the environment cannot produce a runnable daemon."""


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to the provider registry and the daemon bootstrap.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str
    log_level: str

    # ------------------------------------------------------------------
    # IPC
    # ------------------------------------------------------------------

    socket_path: str

    # Optional request submitted once at startup
    startup_text: str | None

    # ------------------------------------------------------------------
    # Provider credentials
    # ------------------------------------------------------------------

    cerebras_api_key: str | None
    groq_api_key: str | None

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    enable_json_logs: bool

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Missing credentials are allowed here; the provider registry
        decides whether enough providers remain to start.
        """
        return AppConfig(
            env=os.environ.get("ENV", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),

            socket_path=os.environ.get("EXPLAIN_SOCKET", DEFAULT_SOCKET_PATH),
            startup_text=os.environ.get("EXPLAIN_TEXT", "").strip() or None,

            cerebras_api_key=os.environ.get("CEREBRAS_API_KEY"),
            groq_api_key=os.environ.get("GROQ_API_KEY"),

            enable_json_logs=os.environ.get("ENABLE_JSON_LOGS", "1") == "1",
        )
