"""Preprocessor detection model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Dialect(str, Enum):
    """Preprocessing language a style's CSS body is written in."""

    NONE = "none"
    LESS = "less"
    STYLUS = "stylus"
    USO = "uso"


class DetectionSource(str, Enum):
    METADATA = "metadata"
    HEURISTIC = "heuristic"


@dataclass(frozen=True)
class PreprocessorDetection:
    """Result of classifying a document's dialect. Never persisted."""

    type: Dialect
    source: DetectionSource | None
    confidence: float

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type.value,
            "source": self.source.value if self.source else None,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class PreprocessorResult:
    """Output of an external preprocessor engine."""

    css: str
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
