# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from config import AppConfig
from server.main import parse_args
from spec import DEFAULT_SOCKET_PATH

ENV_KEYS = (
    "ENV",
    "LOG_LEVEL",
    "EXPLAIN_SOCKET",
    "EXPLAIN_TEXT",
    "CEREBRAS_API_KEY",
    "GROQ_API_KEY",
    "ENABLE_JSON_LOGS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_environment():
    config = AppConfig.load_from_env()

    assert config.socket_path == DEFAULT_SOCKET_PATH
    assert config.startup_text is None
    assert config.cerebras_api_key is None
    assert config.groq_api_key is None
    assert config.enable_json_logs is True


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EXPLAIN_SOCKET", "/tmp/other.sock")
    monkeypatch.setenv("EXPLAIN_TEXT", "hello")
    monkeypatch.setenv("GROQ_API_KEY", "gsk")
    monkeypatch.setenv("ENABLE_JSON_LOGS", "0")

    config = AppConfig.load_from_env()

    assert config.socket_path == "/tmp/other.sock"
    assert config.startup_text == "hello"
    assert config.groq_api_key == "gsk"
    assert config.enable_json_logs is False


def test_empty_startup_text_means_none(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EXPLAIN_TEXT", "")

    assert AppConfig.load_from_env().startup_text is None


def test_cli_flags_are_optional():
    args = parse_args([])
    assert args.socket is None
    assert args.log_level is None

    args = parse_args(["--socket", "/tmp/x.sock", "--log-level", "debug"])
    assert args.socket == "/tmp/x.sock"
    assert args.log_level == "debug"


def test_whitespace_startup_text_means_none(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EXPLAIN_TEXT", "  \n\t ")

    assert AppConfig.load_from_env().startup_text is None


def test_startup_text_is_trimmed(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EXPLAIN_TEXT", "  hello\n")

    assert AppConfig.load_from_env().startup_text == "hello"
