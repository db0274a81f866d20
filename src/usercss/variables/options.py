"""Option-list grammars for select variables.

Three shapes are understood:

* USO option blocks, one CSS snippet per option::

      {
          opt-a  "Label A"   <<<EOT css... EOT;
          opt-b* "Label B"   <<<EOT css... EOT;
      }

* JSON objects mapping ``"value:Label"`` keys to values.
* JSON arrays of ``"value"`` or ``"value:Label"`` strings.

In every shape a ``*`` on the key or label marks the default option; without
one the first option is the default.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field

from usercss.variables.scanner import strip_wrapping_quotes

__all__ = ["SelectOptions", "extract_braced", "parse_option_block", "parse_select_options"]

_ENTRY_RE = re.compile(
    r"""
    (?P<key>[\w*-]+)\s+          # option key, may carry the default marker
    (?P<label>[^<]+?)\s*         # display label, usually quoted
    <<<EOT(?P<css>[\s\S]*?)      # heredoc body
    EOT\s*;
    """,
    re.VERBOSE,
)

DEFAULT_MARKER = "*"


@dataclass(frozen=True)
class SelectOptions:
    """Options parsed from a select declaration.

    ``option_css`` maps option labels to the snippet substituted when that
    option is chosen; it is None for plain value lists.
    """

    options: tuple[str, ...] = ()
    default: str = ""
    option_css: dict[str, str] | None = None
    malformed: bool = False


MALFORMED = SelectOptions(malformed=True)


def extract_braced(text: str, start: int = 0) -> str | None:
    """Return the text between the first ``{`` at/after *start* and its match.

    Braces are counted so nested CSS blocks inside option snippets are kept
    intact. Returns None if there is no ``{`` or the braces never balance.
    """
    open_at = text.find("{", start)
    if open_at < 0:
        return None
    depth = 0
    for index in range(open_at, len(text)):
        ch = text[index]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[open_at + 1:index]
    return None


def _clean_snippet(css: str) -> str:
    return css.strip().replace("*\\/", "*/")


def _split_marker(text: str) -> tuple[str, bool]:
    """Strip a leading/trailing default marker; report whether one was found."""
    stripped = text.strip()
    marked = stripped.startswith(DEFAULT_MARKER) or stripped.endswith(DEFAULT_MARKER)
    return stripped.strip(DEFAULT_MARKER).strip(), marked


def parse_option_block(block: str) -> SelectOptions:
    """Parse the body of a USO option block (braces already removed)."""
    options: list[str] = []
    option_css: dict[str, str] = {}
    default = ""
    for match in _ENTRY_RE.finditer(block):
        label, label_marked = _split_marker(strip_wrapping_quotes(match.group("label")))
        key = match.group("key")
        if not label:
            label = key.replace(DEFAULT_MARKER, "")
        if label in option_css:
            continue
        options.append(label)
        option_css[label] = _clean_snippet(match.group("css"))
        if not default and (DEFAULT_MARKER in key or label_marked):
            default = label

    if not options:
        return MALFORMED
    return SelectOptions(
        options=tuple(options),
        default=default or options[0],
        option_css=option_css,
    )


def _parse_json_object(raw: str) -> SelectOptions:
    try:
        parsed = json.loads(raw)
    except ValueError:
        return MALFORMED
    if not isinstance(parsed, dict) or not parsed:
        return MALFORMED

    options: list[str] = []
    option_css: dict[str, str] = {}
    default = ""
    for raw_key, raw_value in parsed.items():
        name, _, label = str(raw_key).partition(":")
        name, name_marked = _split_marker(name)
        label, label_marked = _split_marker(label) if label else (name, False)
        options.append(label)
        option_css[label] = raw_value if isinstance(raw_value, str) else json.dumps(raw_value)
        if not default and (name_marked or label_marked):
            default = label
    return SelectOptions(options=tuple(options), default=default or options[0], option_css=option_css)


def _parse_json_array(raw: str) -> SelectOptions:
    try:
        parsed = json.loads(raw)
    except ValueError:
        return MALFORMED
    if not isinstance(parsed, list) or not parsed:
        return MALFORMED

    options: list[str] = []
    default = ""
    for entry in parsed:
        value, _, label = str(entry).strip().partition(":")
        value, value_marked = _split_marker(value)
        label_marked = _split_marker(label)[1] if label else False
        options.append(value)
        if not default and (value_marked or label_marked):
            default = value
    return SelectOptions(options=tuple(options), default=default or options[0])


def parse_select_options(raw: str) -> SelectOptions:
    """Parse the tail of a select/dropdown declaration in any supported shape."""
    trimmed = raw.strip()
    if not trimmed:
        return MALFORMED

    if "<<<EOT" in trimmed:
        if not trimmed.startswith("{"):
            return parse_option_block(trimmed)
        block = extract_braced(trimmed)
        if block is None:
            return MALFORMED
        return parse_option_block(block)

    if trimmed.startswith("{"):
        return _parse_json_object(trimmed)
    if trimmed.startswith("["):
        return _parse_json_array(trimmed)
    return MALFORMED
