from usercss.domains.conditions import ConditionSyntaxError, find_document_rules, parse_conditions
from usercss.domains.extractor import (
    DomainExtraction,
    extract_domains,
    match_pattern_host,
    normalize_pattern,
)
from usercss.domains.matcher import DomainMatcher, extract_host, matches, normalize_url

__all__ = [
    "ConditionSyntaxError",
    "find_document_rules",
    "parse_conditions",
    "DomainExtraction",
    "extract_domains",
    "match_pattern_host",
    "normalize_pattern",
    "DomainMatcher",
    "extract_host",
    "matches",
    "normalize_url",
]
