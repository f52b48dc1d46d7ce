"""LLM Adapter"""
from __future__ import annotations

from typing import Any, AsyncGenerator, Callable

from openai import AsyncOpenAI

from adapters.llm.base import LLMAdapter
from observability.logger import log_event
from providers.registry import ProviderConfig
from spec import PROVIDER_MAX_RETRIES, PROVIDER_REQUEST_TIMEOUT_S


def build_request_params(
    provider: ProviderConfig,
    messages: list[dict[str, str]],
) -> dict[str, Any]:
    """
    Keyword arguments for chat.completions.create().

    reasoning_effort is only sent when the provider asks for one;
    providers that do not understand it reject the request otherwise.
    """
    params: dict[str, Any] = {
        "model": provider.model,
        "messages": messages,
        "stream": True,
    }
    if provider.wants_reasoning_effort:
        params["reasoning_effort"] = provider.reasoning_effort
    return params


class OpenAIStreamingAdapter(LLMAdapter):
    """
    Streaming adapter for OpenAI-compatible chat completion endpoints.

    Design notes:
    - One AsyncOpenAI client per (base_url, api_key), created lazily and
      reused across requests so connection pools survive between calls.
    - Every client carries the fixed request timeout and no SDK retries.
    - Adapter is responsible ONLY for:
        - Talking to the provider
        - Turning chunks into text deltas
    - Adapter does NOT:
        - Fail over
        - Check generations
        - Emit sink events
    """

    def __init__(
        self,
        *,
        client_factory: Callable[..., Any] = AsyncOpenAI,
        timeout_s: float = PROVIDER_REQUEST_TIMEOUT_S,
    ) -> None:
        """
        Args:
            client_factory:
                Builds a vendor client from api_key / base_url / timeout /
                max_retries keywords. AsyncOpenAI in production.
            timeout_s:
                Per-request connect/response timeout.
        """
        self._client_factory = client_factory
        self._timeout_s = timeout_s
        self._clients: dict[tuple[str, str | None], Any] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def stream_completion(
        self,
        provider: ProviderConfig,
        messages: list[dict[str, str]],
    ) -> AsyncGenerator[str, None]:
        client = self._client_for(provider)
        params = build_request_params(provider, messages)

        stream = await client.chat.completions.create(**params)
        try:
            async for chunk in stream:
                delta = self._extract_delta(chunk)
                if delta:
                    yield delta
        finally:
            # Runs on normal end, on aclose() after supersession, and on
            # task cancellation: the HTTP response is released every time.
            await stream.close()

    async def aclose(self) -> None:
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            try:
                await client.close()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                log_event({
                    "event_type": "llm_client_close_failed",
                    "exception": type(exc).__name__,
                    "message": str(exc),
                })

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _client_for(self, provider: ProviderConfig) -> Any:
        key = (provider.base_url, provider.api_key)
        client = self._clients.get(key)
        if client is None:
            client = self._client_factory(
                api_key=provider.api_key,
                base_url=provider.base_url,
                timeout=self._timeout_s,
                max_retries=PROVIDER_MAX_RETRIES,
            )
            self._clients[key] = client
        return client

    @staticmethod
    def _extract_delta(chunk: Any) -> str:
        """
        Extract token delta from vendor response (OpenAI format).
        """
        try:
            delta = chunk.choices[0].delta
            return delta.content or ""
        except (AttributeError, IndexError, TypeError):
            return ""
