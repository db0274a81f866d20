"""Tokenizer for metadata directives.

A directive starts with ``@name`` at the beginning of a line; its value runs
until the next line-start directive or the end of the block, so values may
span several physical lines. The legacy ``-moz-document`` line is tokenized
the same way. Lines inside an unterminated ``<<<EOT`` heredoc never start a
new directive, so option CSS may contain at-rules such as ``@media``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["Directive", "tokenize_directives", "REPEATABLE_DIRECTIVES", "LEGACY_DIRECTIVE"]

LEGACY_DIRECTIVE = "-moz-document"

# Directives that may legitimately appear more than once.
REPEATABLE_DIRECTIVES = frozenset({"var", "advanced"})

_DIRECTIVE_START_RE = re.compile(
    r"^[^\S\r\n]*(?:@(?P<name>[^\s]+)|(?P<legacy>-moz-document)(?=[\s(]|$))[^\S\r\n]*(?P<value>.*)$"
)

_HEREDOC_OPEN_RE = re.compile(r"<<<EOT")
_HEREDOC_CLOSE_RE = re.compile(r"(?<!<)EOT\s*;")


@dataclass(frozen=True)
class Directive:
    """A single ``@name value`` entry of a metadata block."""

    name: str
    value: str
    line: int  # 1-based, relative to the block start


def _in_heredoc(text: str) -> bool:
    return len(_HEREDOC_OPEN_RE.findall(text)) > len(_HEREDOC_CLOSE_RE.findall(text))


def tokenize_directives(content: str, first_line: int = 1) -> list[Directive]:
    """Split metadata *content* into directives in source order.

    *first_line* is the block-relative line number of the first content line.
    Text before the first directive is ignored.
    """
    directives: list[Directive] = []
    name: str | None = None
    line_no = first_line
    parts: list[str] = []

    def flush() -> None:
        if name is not None:
            directives.append(Directive(name=name, value="\n".join(parts).strip(), line=line_no))

    for index, line in enumerate(content.splitlines()):
        match = _DIRECTIVE_START_RE.match(line)
        if match and not (name is not None and _in_heredoc("\n".join(parts))):
            flush()
            name = match.group("name") or match.group("legacy")
            line_no = first_line + index
            parts = [match.group("value")]
        elif name is not None:
            parts.append(line)
    flush()
    return directives
