"""
Provider registry.

Rules:
- The registry is an ordered, fixed list of provider configurations.
- Index is significant: it defines failover order and cycle detection.
- This module defines structure, not behavior (no network, no retries).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator

from spec import REASONING_EFFORT_NONE

if TYPE_CHECKING:
    from config import AppConfig


class EmptyRegistryError(ValueError):
    """Raised when a registry would contain no providers."""


@dataclass(frozen=True)
class ProviderConfig:
    """
    One remote OpenAI-compatible text-generation backend.

    Immutable; loaded once at startup.
    """

    name: str
    base_url: str
    model: str
    api_key: str | None
    reasoning_effort: str | None = None

    @property
    def label(self) -> str:
        """Human-readable identity used in hop notices and logs."""
        return f"{self.name} - {self.model}"

    @property
    def wants_reasoning_effort(self) -> bool:
        return bool(self.reasoning_effort) and self.reasoning_effort != REASONING_EFFORT_NONE

    def __repr__(self) -> str:
        # Never leak credentials into logs
        return (
            f"ProviderConfig(name={self.name!r}, base_url={self.base_url!r}, "
            f"model={self.model!r}, reasoning_effort={self.reasoning_effort!r})"
        )


class ProviderRegistry:
    """
    Immutable ordered sequence of providers.

    Lookup is modulo the registry size so callers can walk the
    failover ring without bounds checks.
    """

    def __init__(self, providers: Iterable[ProviderConfig]) -> None:
        self._providers: tuple[ProviderConfig, ...] = tuple(providers)
        if not self._providers:
            raise EmptyRegistryError("provider registry must not be empty")

    def __len__(self) -> int:
        return len(self._providers)

    def __getitem__(self, index: int) -> ProviderConfig:
        return self._providers[index % len(self._providers)]

    def __iter__(self) -> Iterator[ProviderConfig]:
        return iter(self._providers)

    def next_index(self, index: int) -> int:
        """Failover successor of `index`, wrapping at the end."""
        return (index + 1) % len(self._providers)


# ---------------------------------------------------------------------
# Built-in provider table
# ---------------------------------------------------------------------

CEREBRAS_BASE_URL = "https://api.cerebras.ai/v1"
GROQ_BASE_URL = "https://api.groq.com/openai/v1"


def default_registry(config: AppConfig) -> ProviderRegistry:
    """
    Build the default failover ring from configured credentials.

    Providers without a credential are skipped.

    Raises:
        EmptyRegistryError if no credential is configured at all.
    """
    candidates = [
        ProviderConfig(
            name="Cerebras",
            base_url=CEREBRAS_BASE_URL,
            model="zai-glm-4.7",
            api_key=config.cerebras_api_key,
            reasoning_effort=REASONING_EFFORT_NONE,
        ),
        ProviderConfig(
            name="Cerebras",
            base_url=CEREBRAS_BASE_URL,
            model="gpt-oss-120b",
            api_key=config.cerebras_api_key,
            reasoning_effort="high",
        ),
        ProviderConfig(
            name="Groq",
            base_url=GROQ_BASE_URL,
            model="openai/gpt-oss-120b",
            api_key=config.groq_api_key,
            reasoning_effort="high",
        ),
        ProviderConfig(
            name="Groq",
            base_url=GROQ_BASE_URL,
            model="moonshotai/kimi-k2-instruct",
            api_key=config.groq_api_key,
            reasoning_effort=REASONING_EFFORT_NONE,
        ),
    ]
    return ProviderRegistry(p for p in candidates if p.api_key)
