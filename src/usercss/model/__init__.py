"""usercss model layer -- public type re-exports."""

from usercss.model.detection import (
    DetectionSource,
    Dialect,
    PreprocessorDetection,
    PreprocessorResult,
)
from usercss.model.diagnostic import Diagnostic, Severity
from usercss.model.result import ParseResult
from usercss.model.style import (
    DomainKind,
    DomainRule,
    StyleDefinition,
    VariableDescriptor,
    VariableType,
    style_id,
)

__all__ = [
    # style
    "DomainKind",
    "DomainRule",
    "VariableType",
    "VariableDescriptor",
    "StyleDefinition",
    "style_id",
    # detection
    "Dialect",
    "DetectionSource",
    "PreprocessorDetection",
    "PreprocessorResult",
    # diagnostic
    "Severity",
    "Diagnostic",
    # result
    "ParseResult",
]
