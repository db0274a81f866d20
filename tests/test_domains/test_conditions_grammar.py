"""Tests for the -moz-document condition list grammar."""

import pytest

from usercss.domains import ConditionSyntaxError, find_document_rules, parse_conditions


class TestParseConditions:
    def test_all_functions(self):
        source = (
            'url("https://a.com/"), url-prefix(https://b.com/x), '
            r'domain(c.com), regexp("https?://d\\.com/.*")'
        )
        assert parse_conditions(source) == [
            ("url", "https://a.com/"),
            ("url-prefix", "https://b.com/x"),
            ("domain", "c.com"),
            ("regexp", r"https?://d\.com/.*"),
        ]

    def test_single_quotes_and_case(self):
        assert parse_conditions("DOMAIN('example.com')") == [("domain", "example.com")]

    def test_trailing_brace_and_comma(self):
        assert parse_conditions('domain("a.com"), {') == [("domain", "a.com")]

    def test_empty_argument(self):
        assert parse_conditions("url-prefix()") == [("url-prefix", "")]

    def test_empty_source(self):
        assert parse_conditions("   ") == []

    def test_unknown_function_rejected(self):
        with pytest.raises(ConditionSyntaxError):
            parse_conditions("foo(bar)")

    def test_unclosed_call_rejected(self):
        with pytest.raises(ConditionSyntaxError):
            parse_conditions('domain("a.com"')


class TestFindDocumentRules:
    def test_condition_list_up_to_block(self):
        css = '@-moz-document url-prefix("https://a.com/{x}"), domain(b.com) {\n a{}\n}'
        assert [c.strip() for c in find_document_rules(css)] == [
            'url-prefix("https://a.com/{x}"), domain(b.com)'
        ]

    def test_multiple_rules(self):
        css = "@-moz-document domain(a.com) { a{} }\n@-moz-document domain(b.com) { b{} }"
        assert [c.strip() for c in find_document_rules(css)] == ["domain(a.com)", "domain(b.com)"]

    def test_no_rules(self):
        assert find_document_rules("body { color: red; }") == []
