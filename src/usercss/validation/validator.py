"""Style validator: runs all validation rules and reports diagnostics."""

from __future__ import annotations

from usercss.model.diagnostic import Diagnostic
from usercss.model.style import StyleDefinition
from usercss.validation.rules import ALL_RULES


def validate(style: StyleDefinition) -> list[Diagnostic]:
    """Run all validation rules against *style*.

    Returns the full list of diagnostics (errors, warnings, info).
    """
    diagnostics: list[Diagnostic] = []
    for rule in ALL_RULES:
        diagnostics.extend(rule(style))
    return diagnostics
