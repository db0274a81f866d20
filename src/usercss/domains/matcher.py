"""Decide whether a style's domain rules apply to a URL.

Evaluation order:
    1. no rules                      -> match (global style)
    2. any exclusion matches         -> no match
    3. any inclusion matches         -> match
    4. inclusions exist, none match  -> no match
    5. only exclusions, none match   -> match
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable

from usercss.model.style import DomainKind, DomainRule

__all__ = ["DomainMatcher", "matches", "extract_host", "normalize_url"]

_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.-]*)://([^/?#]*)", re.IGNORECASE)


def extract_host(url: str) -> str:
    """Lowercased hostname of *url* without credentials or port.

    A string without a scheme is treated as a bare host.
    """
    match = _SCHEME_RE.match(url.strip())
    authority = match.group(2) if match else re.split(r"[/?#]", url.strip(), maxsplit=1)[0]
    authority = authority.rsplit("@", 1)[-1]
    if authority.startswith("["):
        authority = authority.split("]", 1)[0] + "]"
    else:
        authority = authority.split(":", 1)[0]
    return authority.lower()


def normalize_url(url: str) -> str:
    """Lowercase *url*, assume https when it has no scheme, drop a trailing slash."""
    text = url.strip()
    if not _SCHEME_RE.match(text):
        text = "https://" + text
    return text.lower().rstrip("/")


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error:
        return None


class DomainMatcher:
    """Evaluates URLs against domain rule lists."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or logging.getLogger("usercss.domains")

    def matches(self, url: str, rules: Iterable[DomainRule]) -> bool:
        """Return True if a style scoped by *rules* applies to *url*."""
        rules = list(rules)
        if not rules:
            self._log.debug("No rules; %s matches as a global style", url)
            return True

        for rule in rules:
            if not rule.include and self.rule_matches(url, rule):
                self._log.debug("%s excluded by %s(%s)", url, rule.kind.value, rule.pattern)
                return False

        for rule in rules:
            if rule.include and self.rule_matches(url, rule):
                self._log.debug("%s included by %s(%s)", url, rule.kind.value, rule.pattern)
                return True

        return not any(rule.include for rule in rules)

    def rule_matches(self, url: str, rule: DomainRule) -> bool:
        """Match a single rule's pattern, ignoring its include flag."""
        if rule.kind is DomainKind.DOMAIN:
            return self._match_domain(extract_host(url), rule.pattern.lower())
        if rule.kind is DomainKind.URL_PREFIX:
            return url.strip().lower().startswith(rule.pattern.lower())
        if rule.kind is DomainKind.URL:
            return normalize_url(url) == normalize_url(rule.pattern)
        if rule.kind is DomainKind.REGEXP:
            compiled = _compile(rule.pattern)
            if compiled is None:
                self._log.debug("Invalid regexp pattern %r never matches", rule.pattern)
                return False
            return compiled.search(url) is not None
        return False

    @staticmethod
    def _match_domain(host: str, pattern: str) -> bool:
        if pattern.startswith("*."):
            base = pattern[2:]
            return host == base or host.endswith("." + base)
        if pattern.endswith("*"):
            return host.startswith(pattern[:-1])
        if host == pattern or host.endswith("." + pattern):
            return True
        # www.example.com also covers the bare example.com
        return pattern.startswith("www.") and host == pattern[4:]


def matches(url: str, domains: Iterable[DomainRule]) -> bool:
    """Return True if a style with *domains* applies to *url*."""
    return DomainMatcher().matches(url, domains)
