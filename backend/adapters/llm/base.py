"""
LLM adapter contract (v1).

Purpose:
- Define the interface for streaming chat completions against one provider.
- Keep failover, supersession, and sink emission OUT of the adapter.

Rules:
- This file contains NO logic.
- No retries.
- No knowledge of generations, sinks, or the provider registry order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, AsyncGenerator

if TYPE_CHECKING:
    from providers.registry import ProviderConfig


class LLMAdapter(ABC):
    """
    Abstract base class for streaming LLM adapters.

    The adapter is a *dumb pipe*:
    provider + messages -> vendor -> text deltas.

    Orchestrator responsibilities (NOT here):
    - Which provider to call
    - When to stop reading (supersession)
    - Failure classification and failover
    - What to do with deltas
    """

    @abstractmethod
    def stream_completion(
        self,
        provider: ProviderConfig,
        messages: list[dict[str, str]],
    ) -> AsyncGenerator[str, None]:
        """
        Stream a chat completion from `provider`.

        Contract:
        - Yields incremental text deltas in arrival order; empty deltas
          (control-only chunks) may be skipped or yielded as "".
        - Raises the vendor error unchanged on failure, both while
          opening the stream and mid-stream.
        - Must NOT retry internally.
        - Closing the iterator early (aclose / task cancellation) must
          release the underlying network stream.
        """
        raise NotImplementedError

    @abstractmethod
    async def aclose(self) -> None:
        """
        Release pooled clients / connections.

        Best-effort and idempotent. Called once on daemon shutdown.
        """
        raise NotImplementedError
