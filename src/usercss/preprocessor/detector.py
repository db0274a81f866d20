"""Preprocessor dialect detection.

An explicit ``@preprocessor <name>`` directive always wins. Otherwise each
dialect accumulates a score from syntax markers and the scores are compared
in a fixed tie-break order:

    1. uso     if its score >= 3 and is the maximum
    2. uso     if its score > 0 and >= both others
    3. less    if its score >= 1 and stylus leads by at most one point
    4. stylus  if it beats less and is positive
    5. none
"""

from __future__ import annotations

import re

from usercss.model.detection import DetectionSource, Dialect, PreprocessorDetection

__all__ = ["detect_dialect", "score_dialects", "preprocessor_name"]

_DIRECTIVE_RE = re.compile(r"@preprocessor[^\S\r\n]+([A-Za-z-]+)")

_EXPLICIT: dict[str, Dialect] = {
    "less": Dialect.LESS,
    "stylus": Dialect.STYLUS,
    "uso": Dialect.USO,
}

# (pattern, weight)
_USO_MARKERS = [
    (re.compile(r"<<<EOT"), 2),
    (re.compile(r"@advanced\b"), 2),
    (re.compile(r"\bdropdown\b"), 1),
    (re.compile(r"==UserStyle=="), 1),
]

_LESS_MARKERS = [
    (re.compile(r"@import\b"), 1),
    (re.compile(r"@extend\b"), 1),
    (re.compile(r"@mixin\b"), 1),
    (re.compile(r"\.[A-Za-z_][\w-]*\([^)]*\)\s*;"), 1),  # mixin call: .btn();
    (re.compile(r"\bwhen\s"), 1),
]

_STYLUS_MARKERS = [
    (re.compile(r"&"), 1),
    (re.compile(r"(?<!:)//"), 1),
    (re.compile(r"->"), 1),
    (re.compile(r":[^\S\r\n]+[A-Za-z_][\w-]*\.[A-Za-z_][\w-]*[^\S\r\n]*(?:;|}|$)", re.MULTILINE), 1),  # color: colors.red
    (re.compile(r"^[^\S\r\n]*(?:if|unless)\s", re.MULTILINE), 1),
]

_USO_NORM, _USO_CAP = 6, 0.9
_PRE_NORM, _PRE_CAP = 4, 0.8


def _score(text: str, markers: list[tuple[re.Pattern[str], int]]) -> int:
    return sum(weight for pattern, weight in markers if pattern.search(text))


def score_dialects(text: str) -> dict[Dialect, int]:
    """Heuristic marker scores per dialect."""
    return {
        Dialect.USO: _score(text, _USO_MARKERS),
        Dialect.LESS: _score(text, _LESS_MARKERS),
        Dialect.STYLUS: _score(text, _STYLUS_MARKERS),
    }


def detect_dialect(text: str) -> PreprocessorDetection:
    """Classify the preprocessing dialect of a raw user style document."""
    explicit = _DIRECTIVE_RE.search(text)
    if explicit:
        dialect = _EXPLICIT.get(explicit.group(1).lower())
        if dialect is None:
            return PreprocessorDetection(Dialect.NONE, DetectionSource.METADATA, 0.5)
        return PreprocessorDetection(dialect, DetectionSource.METADATA, 1.0)

    scores = score_dialects(text.strip())
    uso, less, stylus = scores[Dialect.USO], scores[Dialect.LESS], scores[Dialect.STYLUS]
    highest = max(scores.values())

    if uso >= 3 and uso == highest:
        return _heuristic(Dialect.USO, uso)
    if uso > 0 and uso >= max(less, stylus):
        return _heuristic(Dialect.USO, uso)
    if less >= 1 and stylus - less <= 1:
        return _heuristic(Dialect.LESS, less)
    if stylus > less and stylus > 0:
        return _heuristic(Dialect.STYLUS, stylus)
    return PreprocessorDetection(Dialect.NONE, None, 0.0)


def _heuristic(dialect: Dialect, score: int) -> PreprocessorDetection:
    if dialect is Dialect.USO:
        confidence = min(score / _USO_NORM, _USO_CAP)
    else:
        confidence = min(score / _PRE_NORM, _PRE_CAP)
    return PreprocessorDetection(dialect, DetectionSource.HEURISTIC, confidence)


def preprocessor_name(dialect: Dialect) -> str:
    """Human-readable name of *dialect*."""
    return {
        Dialect.NONE: "None",
        Dialect.LESS: "Less",
        Dialect.STYLUS: "Stylus",
        Dialect.USO: "USO",
    }.get(dialect, "Unknown")
