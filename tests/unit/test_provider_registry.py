# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from config import AppConfig
from providers.registry import (
    EmptyRegistryError,
    ProviderConfig,
    ProviderRegistry,
    default_registry,
)


def make_config(**overrides) -> AppConfig:
    values = {
        "env": "test",
        "log_level": "INFO",
        "socket_path": "/tmp/test.sock",
        "startup_text": None,
        "cerebras_api_key": None,
        "groq_api_key": None,
        "enable_json_logs": False,
    }
    values.update(overrides)
    return AppConfig(**values)


def provider(model: str, effort: str | None = None) -> ProviderConfig:
    return ProviderConfig(
        name="P",
        base_url="https://p.test/v1",
        model=model,
        api_key="sk-secret",
        reasoning_effort=effort,
    )


# ---------------------------------------------------------------------
# ProviderRegistry
# ---------------------------------------------------------------------

def test_empty_registry_rejected():
    with pytest.raises(EmptyRegistryError):
        ProviderRegistry([])


def test_lookup_wraps_modulo_size():
    registry = ProviderRegistry([provider("a"), provider("b"), provider("c")])

    assert len(registry) == 3
    assert registry[3].model == "a"
    assert registry[4].model == "b"


def test_next_index_wraps():
    registry = ProviderRegistry([provider("a"), provider("b")])

    assert registry.next_index(0) == 1
    assert registry.next_index(1) == 0


def test_iteration_preserves_order():
    registry = ProviderRegistry([provider("a"), provider("b"), provider("c")])
    assert [p.model for p in registry] == ["a", "b", "c"]


# ---------------------------------------------------------------------
# ProviderConfig
# ---------------------------------------------------------------------

def test_label_combines_name_and_model():
    assert provider("gpt-oss-120b").label == "P - gpt-oss-120b"


@pytest.mark.parametrize(
    "effort, expected",
    [(None, False), ("", False), ("none", False), ("high", True)],
)
def test_wants_reasoning_effort(effort, expected):
    assert provider("m", effort).wants_reasoning_effort is expected


def test_repr_hides_credentials():
    assert "sk-secret" not in repr(provider("m"))


# ---------------------------------------------------------------------
# default_registry
# ---------------------------------------------------------------------

def test_default_registry_with_all_credentials():
    registry = default_registry(make_config(cerebras_api_key="c", groq_api_key="g"))

    assert [p.label for p in registry] == [
        "Cerebras - zai-glm-4.7",
        "Cerebras - gpt-oss-120b",
        "Groq - openai/gpt-oss-120b",
        "Groq - moonshotai/kimi-k2-instruct",
    ]
    assert [p.api_key for p in registry] == ["c", "c", "g", "g"]


def test_default_registry_skips_providers_without_credentials():
    registry = default_registry(make_config(groq_api_key="g"))

    assert len(registry) == 2
    assert all(p.name == "Groq" for p in registry)


def test_default_registry_without_credentials_is_an_error():
    with pytest.raises(EmptyRegistryError):
        default_registry(make_config())
