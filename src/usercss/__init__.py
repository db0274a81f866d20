"""usercss -- parse, classify, resolve and scope user style documents."""

from __future__ import annotations

from typing import Iterable, Mapping

from usercss.config import MetadataMode, ParserConfig
from usercss.domains import DomainMatcher
from usercss.model import (
    Dialect,
    DomainKind,
    DomainRule,
    ParseResult,
    PreprocessorDetection,
    StyleDefinition,
    VariableDescriptor,
    VariableType,
)
from usercss.pipeline import UserStyleProcessor
from usercss.preprocessor import detect_dialect
from usercss.resolver import resolve

__version__ = "0.3.0"


def parse(
    raw: str,
    values: Mapping[str, str] | None = None,
    *,
    config: ParserConfig | None = None,
) -> ParseResult:
    """Parse a user style document. Never raises."""
    return UserStyleProcessor(config=config).parse(raw, values)


def matches(url: str, domains: Iterable[DomainRule]) -> bool:
    """Return True if a style scoped by *domains* applies to *url*."""
    return DomainMatcher().matches(url, domains)


__all__ = [
    "__version__",
    "parse",
    "detect_dialect",
    "resolve",
    "matches",
    "UserStyleProcessor",
    "ParserConfig",
    "MetadataMode",
    "ParseResult",
    "StyleDefinition",
    "VariableDescriptor",
    "VariableType",
    "DomainRule",
    "DomainKind",
    "Dialect",
    "PreprocessorDetection",
]
