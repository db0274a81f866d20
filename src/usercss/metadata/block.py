"""Locate the ``==UserStyle==`` metadata block inside a user style document.

Accepted forms, tried in order:

    /* ==UserStyle==          // ==UserStyle==          /**
    @name ...                 // @name ...                @name ...
    ==/UserStyle== */         // ==/UserStyle==          */

The last one is a fallback for documents that only carry a leading doc
comment; its whole content is treated as directive text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from usercss.errors import MetadataError

__all__ = ["MetadataBlock", "find_metadata_block", "strip_metadata_block"]

START_MARKER = "==UserStyle=="
END_MARKER = "==/UserStyle=="

_COMMENT_BLOCK_RE = re.compile(
    r"""
    /\*\s*==UserStyle==[^\S\r\n]*\r?\n?   # opening marker inside a comment
    (?P<content>[\s\S]*?)                 # directive text
    \s*==/UserStyle==\s*(?:\*/|\r?\n|$)   # closing marker
    """,
    re.VERBOSE,
)

_LINE_COMMENT_BLOCK_RE = re.compile(
    r"^[^\S\r\n]*//\s*==UserStyle==[^\S\r\n]*\r?\n"
    r"(?P<content>[\s\S]*?)\r?\n"
    r"[^\S\r\n]*//\s*==/UserStyle==[^\S\r\n]*(?:\r?\n|$)",
    re.MULTILINE,
)

_DOC_COMMENT_RE = re.compile(r"^\s*/\*\*(?P<content>[\s\S]*?)\*/")

_NESTED_COMMENT_RE = re.compile(r"(?<!\S)/\*[\s\S]*?\*/")
_TRAILING_OPENER_RE = re.compile(r"(?<!\S)/\*$")
_TERMINATOR_RE = re.compile(r"\*/(?!\S)")

_LINE_COMMENT_PREFIX_RE = re.compile(r"^([^\S\r\n]*)//[^\S\r\n]?", re.MULTILINE)


@dataclass(frozen=True)
class MetadataBlock:
    """A metadata block located in a raw document.

    Attributes:
        text: The full block including its markers.
        content: Directive text between the markers.
        start: Offset of ``text`` in the raw document.
        end: Offset just past ``text``.
        content_line: 1-based line of ``content`` relative to the block start.
        canonical: False for the leading doc-comment fallback.
        nested_comments: Number of complete comments found inside ``content``.
    """

    text: str
    content: str
    start: int
    end: int
    content_line: int = 1
    canonical: bool = True
    nested_comments: int = 0


def _check_nested_comments(content: str) -> int:
    """Reject blocks whose closing marker was probably never reached.

    Comment tokens only count at word boundaries, so directive values such as
    ``@match *://*/*`` are never mistaken for comment syntax.

    Returns the number of well-formed nested comments, which are tolerated.
    """
    if _TRAILING_OPENER_RE.search(content.rstrip()):
        raise MetadataError(
            "No UserCSS metadata block found. "
            "Expected block between ==UserStyle== and ==/UserStyle=="
        )
    nested = list(_NESTED_COMMENT_RE.finditer(content))
    for comment in nested:
        if START_MARKER in comment.group(0) or END_MARKER in comment.group(0):
            raise MetadataError(
                "No UserCSS metadata block found. "
                "Metadata contains conflicting comment structures."
            )
    for terminator in _TERMINATOR_RE.finditer(content):
        if any(c.start() <= terminator.start() < c.end() for c in nested):
            continue
        raise MetadataError(
            "No UserCSS metadata block found. "
            "Metadata contains a stray comment terminator.",
            line=content[: terminator.start()].count("\n") + 1,
        )
    return len(nested)


def _build(match: re.Match[str], canonical: bool, content: str | None = None) -> MetadataBlock:
    text = match.group(0)
    raw_content = match.group("content")
    offset = match.start("content") - match.start()
    return MetadataBlock(
        text=text,
        content=raw_content if content is None else content,
        start=match.start(),
        end=match.end(),
        content_line=text[:offset].count("\n") + 1,
        canonical=canonical,
        nested_comments=_check_nested_comments(raw_content),
    )


def find_metadata_block(raw: str) -> MetadataBlock | None:
    """Return the metadata block of *raw*, or None when there is none.

    Raises:
        MetadataError: A block was started but cannot be reliably delimited.
    """
    match = _COMMENT_BLOCK_RE.search(raw)
    if match:
        return _build(match, canonical=True)

    match = _LINE_COMMENT_BLOCK_RE.search(raw)
    if match:
        content = _LINE_COMMENT_PREFIX_RE.sub(r"\1", match.group("content"))
        return _build(match, canonical=True, content=content)

    match = _DOC_COMMENT_RE.match(raw)
    if match:
        return _build(match, canonical=False)

    return None


def strip_metadata_block(raw: str, block: MetadataBlock | None) -> str:
    """Return the CSS body of *raw* with *block* removed."""
    if block is None:
        return raw
    return (raw[: block.start] + raw[block.end :]).strip()
