"""Metadata extraction: block location, directive tokenization, duplicates."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from usercss.metadata.block import MetadataBlock, find_metadata_block, strip_metadata_block
from usercss.metadata.directives import (
    REPEATABLE_DIRECTIVES,
    Directive,
    tokenize_directives,
)
from usercss.model.diagnostic import Diagnostic, error, warning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetadataExtraction:
    """Everything the metadata stage hands to later stages.

    ``directives`` maps each non-repeatable directive to its first value;
    ``repeated`` keeps every ``@var``/``@advanced`` directive in source order.
    """

    block: MetadataBlock | None
    css: str
    directives: dict[str, str] = field(default_factory=dict)
    repeated: tuple[Directive, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def found(self) -> bool:
        return self.block is not None

    def get(self, name: str, default: str = "") -> str:
        return self.directives.get(name, default)


def extract_metadata(raw: str) -> MetadataExtraction:
    """Split *raw* into metadata directives and the CSS body.

    Raises:
        MetadataError: The block could not be reliably delimited.
    """
    block = find_metadata_block(raw)
    if block is None:
        logger.debug("No metadata block found; treating document as plain CSS")
        return MetadataExtraction(block=None, css=raw)

    diagnostics: list[Diagnostic] = []
    if block.nested_comments:
        diagnostics.append(
            warning(
                "nested_comments",
                "Metadata block contains nested comments - "
                "ensure they don't interfere with parsing",
            )
        )

    directives: dict[str, str] = {}
    repeated: list[Directive] = []
    for directive in tokenize_directives(block.content, block.content_line):
        if directive.name in REPEATABLE_DIRECTIVES:
            repeated.append(directive)
            continue
        if directive.name in directives:
            diagnostics.append(
                error(
                    "duplicate_directive",
                    f"Duplicate @{directive.name} directive found at line {directive.line}",
                    line=directive.line,
                )
            )
            continue
        directives[directive.name] = directive.value

    logger.debug(
        "Extracted %d directive(s) and %d variable directive(s)",
        len(directives),
        len(repeated),
    )
    return MetadataExtraction(
        block=block,
        css=strip_metadata_block(raw, block),
        directives=directives,
        repeated=tuple(repeated),
        diagnostics=tuple(diagnostics),
    )
