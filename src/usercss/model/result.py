"""ParseResult: the structured outcome of one parse call."""

from __future__ import annotations

from dataclasses import dataclass, field

from usercss.model.detection import PreprocessorDetection
from usercss.model.diagnostic import Diagnostic
from usercss.model.style import StyleDefinition


@dataclass(frozen=True)
class ParseResult:
    """Metadata, CSS body and diagnostics for one parsed document.

    ``warnings`` and ``errors`` are the rendered messages of ``diagnostics``.
    """

    meta: StyleDefinition
    css: str
    metadata_block: str = ""
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    detection: PreprocessorDetection | None = None
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, object]:
        return {
            "meta": self.meta.to_dict(),
            "css": self.css,
            "metadataBlock": self.metadata_block,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "preprocessor": self.detection.to_dict() if self.detection else None,
        }
