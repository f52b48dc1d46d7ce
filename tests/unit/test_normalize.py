# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from orchestrator.normalize import normalize


# ---------------------------------------------------------------------
# Paragraphs and line breaks
# ---------------------------------------------------------------------

def test_paragraph_break_preserved():
    assert normalize("a\n\nb") == "a\n\nb"


def test_single_newline_becomes_space():
    assert normalize("a\nb") == "a b"


def test_hard_wrapped_paragraphs():
    text = "first line\nstill first\n\nsecond para\nwrapped"
    assert normalize(text) == "first line still first\n\nsecond para wrapped"


def test_crlf_treated_as_newline():
    assert normalize("a\r\nb\r\n\r\nc") == "a b\n\nc"


# ---------------------------------------------------------------------
# Whitespace collapse
# ---------------------------------------------------------------------

def test_runs_of_spaces_collapse():
    assert normalize("a    b") == "a b"


def test_leading_and_trailing_whitespace_removed():
    assert normalize("  \n hello world \n\n ") == "hello world"


@pytest.mark.parametrize("empty", [None, "", "   ", "\n\n"])
def test_empty_input_yields_empty_output(empty):
    assert normalize(empty) == ""


# ---------------------------------------------------------------------
# Idempotence
# ---------------------------------------------------------------------

@pytest.mark.parametrize(
    "text",
    [
        "a\n\nb",
        "a\nb",
        "a\n\n\nb",
        "a\n\n\n\nb",
        "  x  \n  y  ",
        "a\r\r\n\nb",
        "tab\there\n\n  indented",
        "literal §PARAGRAPH§ marker",
        "def f():\n    return 1\n",
    ],
)
def test_normalize_is_idempotent(text):
    once = normalize(text)
    assert normalize(once) == once
