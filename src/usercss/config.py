"""Parser configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MetadataMode(str, Enum):
    """How the orchestrator treats a document without a metadata block."""

    OPTIONAL = "optional"  # global style, no metadata
    REQUIRED = "required"  # hard parse failure


@dataclass(frozen=True)
class ParserConfig:
    """Options controlling how UserStyleProcessor treats a document."""

    metadata_mode: MetadataMode = MetadataMode.OPTIONAL
    strict_variable_names: bool = False  # require a leading "--"
    resolve_batch_size: int = 50
    compile_on_parse: bool = True
