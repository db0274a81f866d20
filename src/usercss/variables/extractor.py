"""Build VariableDescriptor objects from ``@var`` and ``@advanced`` directives.

Syntax:
    @var      <type> <name> "<label>" <default tail>
    @advanced <type> <name> "<label>" <default tail>

Extraction never raises: malformed declarations are skipped or degrade to an
empty-but-valid descriptor.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Iterable

from usercss.metadata.directives import Directive
from usercss.model.diagnostic import Diagnostic, warning
from usercss.model.style import VariableDescriptor, VariableType
from usercss.variables.options import parse_select_options
from usercss.variables.scanner import DirectiveScanner, strip_wrapping_quotes

__all__ = ["TYPE_ALIASES", "parse_var_directive", "parse_advanced_directive", "extract_variables"]

logger = logging.getLogger(__name__)

TYPE_ALIASES: dict[str, VariableType] = {
    "range": VariableType.NUMBER,
    "number": VariableType.NUMBER,
    "color": VariableType.COLOR,
    "text": VariableType.TEXT,
    "select": VariableType.SELECT,
    "dropdown": VariableType.SELECT,
    "image": VariableType.SELECT,
    "checkbox": VariableType.CHECKBOX,
}

_ADVANCED_RE = re.compile(
    r"""
    ^\s*(?P<type>[A-Za-z_-]+)\s+                 # declared type
    (?P<name>[A-Za-z0-9_-]+)                     # variable name
    (?:\s+(?P<label>"(?:[^"\\]|\\.)*"            # quoted label
             |'(?:[^'\\]|\\.)*'
             |`(?:[^`\\]|\\.)*`
             |[^\s{]+))?
    \s*(?P<rest>[\s\S]*)$                        # default tail or option block
    """,
    re.VERBOSE,
)

_UNQUOTE_ESCAPES_RE = re.compile(r"\\(.)")


def _format_number(num: float | int) -> str:
    if isinstance(num, float) and num.is_integer():
        num = int(num)
    return str(num)


def _as_number(entry: object) -> float | int | None:
    if isinstance(entry, bool):
        return None
    if isinstance(entry, (int, float)):
        return entry
    if isinstance(entry, str):
        try:
            value = float(entry)
        except ValueError:
            return None
        return int(value) if value.is_integer() and "." not in entry else value
    return None


def _parse_numeric_tail(raw: str, append_unit: bool) -> dict[str, object] | None:
    """Parse ``[default, min, max, step, unit]`` or a bare number."""
    trimmed = raw.strip()
    if not trimmed:
        return None

    if trimmed.startswith("["):
        try:
            parsed = json.loads(trimmed)
        except ValueError:
            return None
        if not isinstance(parsed, list):
            return None
        numbers: list[float | int | None] = []
        unit: str | None = None
        for entry in parsed:
            if entry is None:
                numbers.append(None)
                continue
            number = _as_number(entry)
            if number is not None:
                numbers.append(number)
            elif isinstance(entry, str) and unit is None:
                unit = entry
        numbers += [None] * (4 - len(numbers))
        default, minimum, maximum, step = numbers[:4]
        value = _format_number(default if default is not None else 0)
        if append_unit and unit:
            value += unit
        return {"value": value, "min": minimum, "max": maximum, "step": step, "unit": unit}

    number = _as_number(trimmed)
    if number is None:
        return None
    return {"value": _format_number(number)}


def _build_descriptor(
    raw_type: str, name: str, label: str | None, remainder: str
) -> VariableDescriptor:
    kind = raw_type.lower()
    var_type = TYPE_ALIASES.get(kind, VariableType.UNKNOWN)
    label = label or name

    if var_type is VariableType.SELECT:
        parsed = parse_select_options(remainder)
        if parsed.malformed:
            logger.debug("Option list for %r could not be parsed", name)
        return VariableDescriptor(
            name=name,
            type=var_type,
            label=label,
            default=parsed.default,
            value=parsed.default,
            options=parsed.options,
            option_css=parsed.option_css,
        )

    if var_type is VariableType.NUMBER:
        numeric = _parse_numeric_tail(remainder, append_unit=kind == "range")
        if numeric is None:
            fallback = strip_wrapping_quotes(remainder)
            return VariableDescriptor(
                name=name, type=var_type, label=label, default=fallback, value=fallback
            )
        value = str(numeric["value"])
        return VariableDescriptor(
            name=name,
            type=var_type,
            label=label,
            default=value,
            value=value,
            min=numeric.get("min"),  # type: ignore[arg-type]
            max=numeric.get("max"),  # type: ignore[arg-type]
            step=numeric.get("step"),  # type: ignore[arg-type]
            unit=numeric.get("unit"),  # type: ignore[arg-type]
        )

    cleaned = strip_wrapping_quotes(remainder)
    if var_type is VariableType.CHECKBOX:
        cleaned = "1" if cleaned in ("1", "true") else "0"
    return VariableDescriptor(name=name, type=var_type, label=label, default=cleaned, value=cleaned)


def _drop_dangling_quote(value: str) -> str:
    """Drop an unbalanced trailing double quote left by a wrapped label."""
    if value.endswith('"') and not value.endswith('\\"') and value.count('"') % 2 == 1:
        return value[:-1]
    return value


def parse_var_directive(value: str) -> VariableDescriptor | None:
    """Parse the value of a ``@var`` directive; None if it has no type/name."""
    trimmed = _drop_dangling_quote(value.strip())
    if not trimmed:
        return None
    scanner = DirectiveScanner(trimmed)
    raw_type = scanner.read_word()
    if not raw_type:
        return None
    name = scanner.read_identifier()
    if not name:
        return None
    label = scanner.read_label()
    return _build_descriptor(raw_type, name, label, scanner.read_rest())


def parse_advanced_directive(value: str) -> VariableDescriptor | None:
    """Parse the value of a USO ``@advanced`` directive."""
    match = _ADVANCED_RE.match(value)
    if not match:
        return None
    label = match.group("label")
    if label is not None and label[:1] in "\"'`":
        label = _UNQUOTE_ESCAPES_RE.sub(r"\1", label[1:-1])
    return _build_descriptor(match.group("type"), match.group("name"), label, match.group("rest"))


_PARSERS = {
    "var": parse_var_directive,
    "advanced": parse_advanced_directive,
}


def extract_variables(
    directives: Iterable[Directive],
    *,
    strict_names: bool = False,
    diagnostics: list[Diagnostic] | None = None,
) -> dict[str, VariableDescriptor]:
    """Return descriptors for every variable directive, keyed by name.

    When two directives declare the same name the first one wins. With
    *strict_names*, names without a leading ``--`` are skipped and reported
    to *diagnostics*.
    """
    variables: dict[str, VariableDescriptor] = {}
    for directive in directives:
        parser = _PARSERS.get(directive.name)
        if parser is None:
            continue
        descriptor = parser(directive.value)
        if descriptor is None:
            logger.debug("Skipping unparseable @%s at line %d", directive.name, directive.line)
            continue
        if strict_names and not descriptor.name.startswith("--"):
            if diagnostics is not None:
                diagnostics.append(
                    warning(
                        "variable_name",
                        f'Variable name "{descriptor.name}" must start with "--"',
                        line=directive.line,
                    )
                )
            continue
        if descriptor.name in variables:
            logger.debug("Variable %r already declared; skipping duplicate", descriptor.name)
            continue
        variables[descriptor.name] = descriptor
    return variables
