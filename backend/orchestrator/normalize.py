"""
Request text normalization.

Pure function, applied once per request before dispatch:
- Paragraph breaks (blank-line pairs) survive
- Single line breaks become spaces (selection text is often hard-wrapped)
- Runs of spaces collapse to one
- Leading / trailing whitespace is trimmed

Never raises. Idempotent.
"""

from __future__ import annotations

import re

from spec import PARAGRAPH_MARKER

_MULTI_SPACE = re.compile(r" +")


def normalize(text: str | None) -> str:
    """Return `text` with paragraph-preserving whitespace collapse applied."""
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\n\n", PARAGRAPH_MARKER)
    text = text.replace("\n", " ")
    text = text.replace(PARAGRAPH_MARKER, "\n\n")
    text = _MULTI_SPACE.sub(" ", text)
    return text.strip()
