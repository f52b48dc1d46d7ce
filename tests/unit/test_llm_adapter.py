# pylint: disable=missing-module-docstring,missing-function-docstring

import asyncio
from types import SimpleNamespace
from typing import Any

from adapters.llm.prompts import SYSTEM_PROMPT_V1, build_messages
from adapters.llm.streaming import OpenAIStreamingAdapter, build_request_params
from providers.registry import ProviderConfig
from spec import PROVIDER_REQUEST_TIMEOUT_S


def chunk(content: str | None) -> Any:
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class FakeStream:
    def __init__(self, chunks: list[Any]) -> None:
        self._chunks = chunks
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for c in self._chunks:
            yield c

    async def close(self) -> None:
        self.closed = True


class FakeClient:
    def __init__(self, stream: FakeStream, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self.params: list[dict[str, Any]] = []
        self.closed = False
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        self._stream = stream

    async def _create(self, **params: Any) -> FakeStream:
        self.params.append(params)
        return self._stream

    async def close(self) -> None:
        self.closed = True


def make_adapter(stream: FakeStream) -> tuple[OpenAIStreamingAdapter, list[FakeClient]]:
    created: list[FakeClient] = []

    def factory(**kwargs: Any) -> FakeClient:
        client = FakeClient(stream, **kwargs)
        created.append(client)
        return client

    return OpenAIStreamingAdapter(client_factory=factory), created


def provider(model: str = "m", effort: str | None = None, base_url: str = "https://p.test/v1") -> ProviderConfig:
    return ProviderConfig(
        name="P",
        base_url=base_url,
        model=model,
        api_key="sk",
        reasoning_effort=effort,
    )


# ---------------------------------------------------------------------
# Prompt shape
# ---------------------------------------------------------------------

def test_messages_are_system_then_quoted_user_text():
    messages = build_messages("xin chao")

    assert messages == [
        {"role": "system", "content": SYSTEM_PROMPT_V1},
        {"role": "user", "content": '"xin chao"'},
    ]


# ---------------------------------------------------------------------
# Request parameters
# ---------------------------------------------------------------------

def test_params_without_reasoning_effort():
    params = build_request_params(provider(effort="none"), [])

    assert params == {"model": "m", "messages": [], "stream": True}


def test_params_with_reasoning_effort():
    params = build_request_params(provider(effort="high"), [])

    assert params["reasoning_effort"] == "high"
    assert params["stream"] is True


# ---------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------

def test_stream_yields_non_empty_deltas_and_closes():
    stream = FakeStream([
        chunk("xin"),
        SimpleNamespace(choices=[]),
        chunk(None),
        chunk("chao"),
    ])
    adapter, created = make_adapter(stream)

    async def collect() -> list[str]:
        return [d async for d in adapter.stream_completion(provider(), build_messages("x"))]

    assert asyncio.run(collect()) == ["xin", "chao"]
    assert stream.closed is True
    assert created[0].params[0]["model"] == "m"


def test_client_carries_timeout_and_no_sdk_retries():
    adapter, created = make_adapter(FakeStream([]))

    async def drain() -> None:
        async for _ in adapter.stream_completion(provider(), []):
            pass

    asyncio.run(drain())

    assert created[0].kwargs == {
        "api_key": "sk",
        "base_url": "https://p.test/v1",
        "timeout": PROVIDER_REQUEST_TIMEOUT_S,
        "max_retries": 0,
    }


def test_early_close_releases_stream():
    stream = FakeStream([chunk("a"), chunk("b"), chunk("c")])
    adapter, _ = make_adapter(stream)

    async def read_one_then_close() -> str:
        agen = adapter.stream_completion(provider(), [])
        first = await agen.__anext__()
        await agen.aclose()
        return first

    assert asyncio.run(read_one_then_close()) == "a"
    assert stream.closed is True


def test_clients_are_shared_per_endpoint_and_closed():
    adapter, created = make_adapter(FakeStream([]))

    async def scenario() -> None:
        for p in (provider("a"), provider("b"), provider("c", base_url="https://q.test/v1")):
            async for _ in adapter.stream_completion(p, []):
                pass
        await adapter.aclose()

    asyncio.run(scenario())

    assert len(created) == 2
    assert all(c.closed for c in created)
