"""Character scanner for ``@var`` directive values.

    @var <type> <name> "<label>" <default tail...>
"""

from __future__ import annotations

__all__ = ["DirectiveScanner", "strip_wrapping_quotes"]

QUOTES = ("\"", "'", "`")


def strip_wrapping_quotes(value: str) -> str:
    """Remove one pair of matching quotes around *value*."""
    trimmed = value.strip()
    if len(trimmed) >= 2 and trimmed[0] in QUOTES and trimmed[0] == trimmed[-1]:
        return trimmed[1:-1]
    return trimmed


def _is_word_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch in "_-")


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in "_-")


class DirectiveScanner:
    """Sequential reader over a single directive value."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.position = 0

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.source)

    def _skip_whitespace(self) -> None:
        while not self.at_end and self.source[self.position].isspace():
            self.position += 1

    def _read_while(self, predicate) -> str | None:
        self._skip_whitespace()
        start = self.position
        while not self.at_end and predicate(self.source[self.position]):
            self.position += 1
        if self.position == start:
            return None
        return self.source[start:self.position]

    def read_word(self) -> str | None:
        return self._read_while(_is_word_char)

    def read_identifier(self) -> str | None:
        return self._read_while(_is_ident_char)

    def read_label(self) -> str | None:
        """Read a quoted label (with backslash escapes) or a bare word."""
        self._skip_whitespace()
        if self.at_end:
            return None
        quote = self.source[self.position]
        if quote not in QUOTES:
            return self._read_while(lambda ch: not ch.isspace() and ch != "{")

        self.position += 1
        chars: list[str] = []
        while not self.at_end:
            ch = self.source[self.position]
            if ch == "\\" and self.position + 1 < len(self.source):
                chars.append(self.source[self.position + 1])
                self.position += 2
                continue
            self.position += 1
            if ch == quote:
                break
            chars.append(ch)
        return "".join(chars)

    def read_rest(self) -> str:
        self._skip_whitespace()
        rest = self.source[self.position:].strip()
        self.position = len(self.source)
        return rest
