import asyncio
import sys

from dotenv import load_dotenv

from adapters.llm.prompts import build_messages
from adapters.llm.streaming import OpenAIStreamingAdapter
from config import AppConfig
from providers.registry import default_registry


async def probe(text: str):
    registry = default_registry(AppConfig.load_from_env())
    adapter = OpenAIStreamingAdapter()

    try:
        for provider in registry:
            print(f"\n=== {provider.label} ===")
            try:
                async for delta in adapter.stream_completion(provider, build_messages(text)):
                    print(delta, end="", flush=True)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                print(f"FAILED {type(exc).__name__}: {exc}")
        print()
    finally:
        await adapter.aclose()


# After `pip install -e .`:  python tools/provider_probe.py "some text"
if __name__ == "__main__":
    load_dotenv()
    asyncio.run(probe(sys.argv[1] if len(sys.argv) > 1 else "xin chao"))
