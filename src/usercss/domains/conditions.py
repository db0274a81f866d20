"""Lark parser for ``-moz-document`` condition lists."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError

from usercss.errors import UserStyleError

__all__ = ["ConditionSyntaxError", "parse_conditions", "find_document_rules"]

GRAMMAR_PATH = Path(__file__).parent / "conditions.lark"

_CSS_ESCAPE_RE = re.compile(r"\\(.)")
_DOCUMENT_RULE_RE = re.compile(r"@-moz-document\s+", re.IGNORECASE)


class ConditionSyntaxError(UserStyleError):
    """Raised when a condition list does not match the grammar."""

    def __init__(self, message: str, column: int | None = None):
        self.column = column
        super().__init__(message)


class ConditionTransformer(Transformer):  # type: ignore[type-arg]
    """Turn the parse tree into ``(function, argument)`` pairs."""

    def string(self, items: list[Token]) -> str:
        raw = str(items[0])
        return _CSS_ESCAPE_RE.sub(r"\1", raw[1:-1])

    def bare(self, items: list[Token]) -> str:
        return str(items[0])

    def condition(self, items: list[object]) -> tuple[str, str]:
        func = str(items[0]).lower()
        argument = items[1] if len(items) > 1 and items[1] is not None else ""
        return func, str(argument).strip()

    def start(self, items: list[tuple[str, str]]) -> list[tuple[str, str]]:
        return list(items)


@lru_cache(maxsize=1)
def _parser() -> Lark:
    return Lark(GRAMMAR_PATH.read_text(), parser="lalr", start="start")


def parse_conditions(source: str) -> list[tuple[str, str]]:
    """Parse a condition list into ``(function, argument)`` pairs.

    Raises:
        ConditionSyntaxError: *source* is not a valid condition list.
    """
    text = source.strip().rstrip("{").strip()
    if not text:
        return []
    try:
        tree = _parser().parse(text)
    except LarkError as e:
        raise ConditionSyntaxError(str(e), column=getattr(e, "column", None)) from e
    return ConditionTransformer().transform(tree)


def find_document_rules(css: str) -> list[str]:
    """Return the raw condition list of every ``@-moz-document`` rule in *css*.

    The list ends at the first ``{`` outside quotes and parentheses.
    """
    found: list[str] = []
    for match in _DOCUMENT_RULE_RE.finditer(css):
        depth = 0
        quote = ""
        index = match.end()
        while index < len(css):
            ch = css[index]
            if quote:
                if ch == "\\":
                    index += 1
                elif ch == quote:
                    quote = ""
            elif ch in "\"'":
                quote = ch
            elif ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
            elif ch == "{" and depth <= 0:
                found.append(css[match.end():index])
                break
            index += 1
    return found
