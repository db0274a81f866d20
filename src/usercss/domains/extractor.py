"""Extract DomainRule entries from metadata directives and the CSS body.

Sources, in order:
    1. ``@domain a.com, b.com``
    2. ``@match *://*.example.com/*`` (and ``@exclude-match`` for exclusions)
    3. the legacy ``-moz-document`` header directive
    4. ``@-moz-document`` rules inside the CSS body

Rules are de-duplicated on ``(kind, pattern)`` after normalization.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Mapping
from urllib.parse import urlsplit

from usercss.domains.conditions import (
    ConditionSyntaxError,
    find_document_rules,
    parse_conditions,
)
from usercss.metadata.directives import LEGACY_DIRECTIVE
from usercss.model.diagnostic import Diagnostic, warning
from usercss.model.style import DomainKind, DomainRule

__all__ = ["DomainExtraction", "extract_domains", "normalize_pattern", "match_pattern_host"]

logger = logging.getLogger(__name__)

_PROTOCOL_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_FUNCTION_RE = re.compile(
    r"""(?P<func>url-prefix|url|domain|regexp)\(\s*["']?(?P<arg>[^"')]*)["']?\s*\)""",
    re.IGNORECASE,
)

_FUNCTION_KINDS = {
    "url": DomainKind.URL,
    "url-prefix": DomainKind.URL_PREFIX,
    "domain": DomainKind.DOMAIN,
    "regexp": DomainKind.REGEXP,
}

WILDCARD_PLACEHOLDER = "wildcard-placeholder"


@dataclass
class DomainExtraction:
    """Accumulates rules in first-seen order, skipping duplicates."""

    rules: list[DomainRule] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    _seen: set[tuple[str, str]] = field(default_factory=set, repr=False)

    def add(self, rule: DomainRule) -> None:
        if not rule.pattern:
            return
        if rule.key in self._seen:
            logger.debug("Skipping duplicate domain rule %s(%s)", rule.kind.value, rule.pattern)
            return
        self._seen.add(rule.key)
        self.rules.append(rule)

    def warn(self, rule: str, message: str) -> None:
        self.diagnostics.append(warning(rule, message))


def normalize_pattern(kind: DomainKind, pattern: str) -> str:
    """Normalize a rule pattern at extraction time.

    Everything but ``regexp`` is lowercased; ``domain`` loses its protocol;
    ``domain`` and ``url`` lose a trailing slash. ``url-prefix`` keeps it so
    the prefix stays as narrow as written.
    """
    text = pattern.strip()
    if kind is DomainKind.REGEXP:
        return text
    text = text.lower()
    if kind is DomainKind.DOMAIN:
        text = _PROTOCOL_RE.sub("", text)
    if kind in (DomainKind.DOMAIN, DomainKind.URL):
        text = text.rstrip("/")
    return text


def match_pattern_host(pattern: str) -> str | None:
    """Derive the hostname a ``@match`` wildcard pattern targets.

    Wildcards are replaced by a placeholder so the pattern parses as a URL;
    leading placeholder labels (``*.example.com``) are then dropped because a
    domain rule already covers every subdomain. Returns "" for patterns that
    match any host and None for patterns that cannot be parsed.
    """
    candidate = pattern.strip().replace("*", WILDCARD_PLACEHOLDER)
    if candidate.startswith(f"{WILDCARD_PLACEHOLDER}://"):
        candidate = "https://" + candidate[len(WILDCARD_PLACEHOLDER) + 3:]
    elif not _PROTOCOL_RE.match(candidate):
        candidate = "https://" + candidate
    try:
        host = urlsplit(candidate).hostname
    except ValueError:
        return None
    if host is None:
        return None
    labels = host.split(".")
    while labels and WILDCARD_PLACEHOLDER in labels[0]:
        labels.pop(0)
    if any(WILDCARD_PLACEHOLDER in label for label in labels):
        return None
    return ".".join(labels)


def _split_list(value: str) -> list[str]:
    return [entry.strip() for entry in value.split(",") if entry.strip()]


def _add_domain_directive(value: str, out: DomainExtraction) -> None:
    for entry in _split_list(value):
        include = True
        if entry.startswith("!"):
            include = False
            entry = entry[1:].strip()
        if "://" in entry:
            out.warn("domain_protocol", f'Domain "{entry}" includes protocol - should be hostname only')
        if any(ch in _PROTOCOL_RE.sub("", entry) for ch in "/?#"):
            out.warn("domain_path", f'Domain "{entry}" includes path or query - should be hostname only')
        out.add(DomainRule(DomainKind.DOMAIN, normalize_pattern(DomainKind.DOMAIN, entry), include))


def _add_match_directive(value: str, out: DomainExtraction, include: bool, directive: str) -> None:
    for entry in _split_list(value):
        host = match_pattern_host(entry)
        if host is None:
            out.warn("match_pattern", f"Invalid @{directive} pattern: {entry}")
            continue
        if not host:
            logger.debug("@%s pattern %r matches every host", directive, entry)
            continue
        out.add(DomainRule(DomainKind.DOMAIN, normalize_pattern(DomainKind.DOMAIN, host), include))


def _conditions(source: str) -> list[tuple[str, str]]:
    try:
        return parse_conditions(source)
    except ConditionSyntaxError as exc:
        logger.debug("Condition list did not parse (%s); falling back to a scan", exc)
        return [(m.group("func").lower(), m.group("arg").strip()) for m in _FUNCTION_RE.finditer(source)]


def _add_conditions(source: str, out: DomainExtraction) -> None:
    for func, argument in _conditions(source):
        kind = _FUNCTION_KINDS[func]
        if kind is DomainKind.REGEXP:
            try:
                re.compile(argument)
            except re.error:
                out.warn("regexp_pattern", f"Unresolved regexp domain pattern: {argument}")
                continue
        out.add(DomainRule(kind, normalize_pattern(kind, argument), True))


def extract_domains(directives: Mapping[str, str], css: str = "") -> DomainExtraction:
    """Collect domain rules from metadata *directives* and the CSS body."""
    out = DomainExtraction()

    if directives.get("domain"):
        _add_domain_directive(directives["domain"], out)

    if directives.get("match"):
        _add_match_directive(directives["match"], out, include=True, directive="match")
    if directives.get("exclude-match"):
        _add_match_directive(directives["exclude-match"], out, include=False, directive="exclude-match")

    legacy = directives.get(LEGACY_DIRECTIVE)
    if legacy:
        out.warn(
            "legacy_syntax",
            "Legacy -moz-document syntax detected. Consider using modern @domain directive",
        )
        _add_conditions(legacy, out)

    for conditions in find_document_rules(css):
        _add_conditions(conditions, out)

    return out
