"""Validation rules for parsed style metadata.

Each rule is a function taking a StyleDefinition and returning a list of
Diagnostic objects describing any issues found.
"""

from __future__ import annotations

import re

from usercss.model.diagnostic import Diagnostic, Severity
from usercss.model.style import StyleDefinition, VariableType

REQUIRED_FIELDS = ("name", "namespace", "version")

_URL_RE = re.compile(r"^(?:(?:https?|ftp|file)://|data:)", re.IGNORECASE)

_URL_FIELDS = (
    ("homepageURL", "homepage_url"),
    ("supportURL", "support_url"),
    ("updateURL", "update_url"),
)


# ---------------------------------------------------------------------------
# Metadata rules (ERROR severity)
# ---------------------------------------------------------------------------


def check_required_fields(style: StyleDefinition) -> list[Diagnostic]:
    """@name, @namespace and @version must be present and non-empty."""
    return [
        Diagnostic(
            rule="check_required_fields",
            severity=Severity.ERROR,
            message=f"Missing required @{field} directive in metadata block",
        )
        for field in REQUIRED_FIELDS
        if not getattr(style, field).strip()
    ]


# ---------------------------------------------------------------------------
# Field format rules (WARNING severity)
# ---------------------------------------------------------------------------


def check_url_fields(style: StyleDefinition) -> list[Diagnostic]:
    """URL-shaped directives must carry a URL scheme."""
    diagnostics: list[Diagnostic] = []
    for directive, attribute in _URL_FIELDS:
        value = getattr(style, attribute)
        if value and not _URL_RE.match(value):
            diagnostics.append(
                Diagnostic(
                    rule="check_url_fields",
                    severity=Severity.WARNING,
                    message=f"Invalid @{directive} format: {value}",
                )
            )
    return diagnostics


# ---------------------------------------------------------------------------
# Variable rules (INFO severity)
# ---------------------------------------------------------------------------


def check_select_options(style: StyleDefinition) -> list[Diagnostic]:
    """Select variables should offer at least one option."""
    return [
        Diagnostic(
            rule="check_select_options",
            severity=Severity.INFO,
            message=f"Select variable '{var.name}' has no parseable options.",
        )
        for var in style.variables.values()
        if var.type is VariableType.SELECT and not var.options
    ]


def check_number_bounds(style: StyleDefinition) -> list[Diagnostic]:
    """A number's default should lie within its declared min/max."""
    diagnostics: list[Diagnostic] = []
    for var in style.variables.values():
        if var.type is not VariableType.NUMBER:
            continue
        try:
            default = float(var.default.rstrip("abcdefghijklmnopqrstuvwxyz%"))
        except ValueError:
            continue
        low = var.min if var.min is not None else default
        high = var.max if var.max is not None else default
        if not low <= default <= high:
            diagnostics.append(
                Diagnostic(
                    rule="check_number_bounds",
                    severity=Severity.INFO,
                    message=f"Default of '{var.name}' ({var.default}) lies outside [{var.min}, {var.max}].",
                )
            )
    return diagnostics


ALL_RULES = [
    check_required_fields,
    check_url_fields,
    check_select_options,
    check_number_bounds,
]
