"""Placeholder grammar: ``/*[[name|type|default|...]]*/``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Sequence

__all__ = ["PLACEHOLDER_RE", "Placeholder", "find_placeholders", "iter_batches"]

PLACEHOLDER_RE = re.compile(r"/\*\[\[(?P<body>[^\]]+)\]\]\*/")


@dataclass(frozen=True)
class Placeholder:
    """One placeholder occurrence inside a CSS document."""

    text: str
    fields: tuple[str, ...]
    start: int
    end: int

    @property
    def name(self) -> str:
        return self.fields[0].strip()

    @property
    def type(self) -> str | None:
        return self.fields[1].strip() if len(self.fields) > 1 else None

    @property
    def inline_default(self) -> str | None:
        return self.fields[2] if len(self.fields) > 2 else None


def find_placeholders(css: str) -> list[Placeholder]:
    """All placeholders in *css*, in document order."""
    return [
        Placeholder(
            text=match.group(0),
            fields=tuple(match.group("body").split("|")),
            start=match.start(),
            end=match.end(),
        )
        for match in PLACEHOLDER_RE.finditer(css)
    ]


def iter_batches(
    placeholders: Sequence[Placeholder], size: int
) -> Iterator[Sequence[Placeholder]]:
    """Yield *placeholders* in consecutive slices of at most *size* items."""
    if size < 1:
        raise ValueError(f"batch size must be positive, got {size}")
    for offset in range(0, len(placeholders), size):
        yield placeholders[offset:offset + size]
