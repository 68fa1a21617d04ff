"""Payload loading: a locator names a UTF-8 text file split into lines."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from .errors import PayloadError


@dataclass(frozen=True, slots=True)
class Payload:
    locator: str
    lines: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.lines)


def split_lines(text: str) -> tuple[str, ...]:
    """Split on ``\\n`` (dropping a trailing ``\\r``); a final newline adds no line.

    Unlike ``str.splitlines`` only line feeds separate lines, so form feeds
    and other exotic separators stay inside the art.
    """
    if not text:
        return ()
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return tuple(line.removesuffix("\r") for line in lines)


def _read_file(path: Path) -> str:
    return path.read_text(encoding="utf-8")


async def load_payload(locator: str) -> Payload:
    """Read the file named by ``locator`` without blocking the event loop.

    Raises:
        PayloadError: Missing, unreadable or non UTF-8 file.
    """
    if not locator.strip():
        raise PayloadError("Empty payload locator", locator=locator)
    path = Path(locator.strip())
    loop = asyncio.get_running_loop()
    try:
        text = await loop.run_in_executor(None, _read_file, path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise PayloadError(f"Cannot read {locator}: {e}", locator=locator) from e
    return Payload(locator=locator, lines=split_lines(text))
