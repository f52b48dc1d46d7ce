"""
Terminal presentation surface.

Streams each generation's text to stdout. Stands in for a windowed
surface: same sink contract, plain text instead of rendered markdown.
"""

from __future__ import annotations

import sys
from typing import Callable


def _stdout_write(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


class ConsoleSink:
    """Output sink bound to a single generation."""

    def __init__(self, *, generation: int, write: Callable[[str], None]) -> None:
        self.generation = generation
        self._write = write
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def data(self, chunk: str) -> None:
        if self._closed:
            return
        self._write(chunk)

    async def end(self) -> None:
        if self._closed:
            return
        self._write("\n")

    async def error(self, message: str) -> None:
        if self._closed:
            return
        self._write(f"\n\nError: {message}\n")

    def close(self) -> None:
        self._closed = True


class ConsoleSurface:
    """
    Opens one ConsoleSink per generation.

    A header line separates generations so superseded output is
    visibly cut off.
    """

    def __init__(self, write: Callable[[str], None] | None = None) -> None:
        self._write = write or _stdout_write

    def open_sink(self, generation: int) -> ConsoleSink:
        self._write(f"\n--- #{generation} ---\n")
        return ConsoleSink(generation=generation, write=self._write)
