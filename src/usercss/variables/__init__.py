from usercss.variables.extractor import (
    TYPE_ALIASES,
    extract_variables,
    parse_advanced_directive,
    parse_var_directive,
)
from usercss.variables.options import (
    SelectOptions,
    extract_braced,
    parse_option_block,
    parse_select_options,
)
from usercss.variables.scanner import DirectiveScanner, strip_wrapping_quotes

__all__ = [
    "TYPE_ALIASES",
    "extract_variables",
    "parse_var_directive",
    "parse_advanced_directive",
    "SelectOptions",
    "extract_braced",
    "parse_option_block",
    "parse_select_options",
    "DirectiveScanner",
    "strip_wrapping_quotes",
]
