"""Tests for style metadata validation rules."""

import pytest

from usercss.model.diagnostic import Severity
from usercss.model.style import StyleDefinition, VariableDescriptor, VariableType
from usercss.validation import validate
from usercss.validation.rules import (
    check_number_bounds,
    check_required_fields,
    check_select_options,
    check_url_fields,
)

COMPLETE = StyleDefinition(name="Demo", namespace="ns", version="1.0.0")


# ---------------------------------------------------------------------------
# Required fields
# ---------------------------------------------------------------------------


class TestRequiredFields:
    def test_complete(self):
        assert check_required_fields(COMPLETE) == []

    def test_all_missing(self):
        diagnostics = check_required_fields(StyleDefinition())
        assert [d.message for d in diagnostics] == [
            "Missing required @name directive in metadata block",
            "Missing required @namespace directive in metadata block",
            "Missing required @version directive in metadata block",
        ]
        assert all(d.severity is Severity.ERROR for d in diagnostics)

    def test_whitespace_counts_as_missing(self):
        style = StyleDefinition(name="  ", namespace="ns", version="1")
        assert len(check_required_fields(style)) == 1


# ---------------------------------------------------------------------------
# URL fields
# ---------------------------------------------------------------------------


class TestUrlFields:
    @pytest.mark.parametrize("url", [
        "https://example.com",
        "http://example.com/a",
        "ftp://example.com/file",
        "data:text/css,a{}",
    ])
    def test_valid(self, url):
        style = StyleDefinition(homepage_url=url)
        assert check_url_fields(style) == []

    def test_invalid(self):
        style = StyleDefinition(update_url="example.com/style.user.css")
        (diagnostic,) = check_url_fields(style)
        assert diagnostic.severity is Severity.WARNING
        assert diagnostic.message == "Invalid @updateURL format: example.com/style.user.css"


# ---------------------------------------------------------------------------
# Variable rules
# ---------------------------------------------------------------------------


class TestVariableRules:
    def test_select_without_options(self):
        style = StyleDefinition(variables={
            "x": VariableDescriptor(name="x", type=VariableType.SELECT),
        })
        (diagnostic,) = check_select_options(style)
        assert diagnostic.severity is Severity.INFO

    def test_number_out_of_bounds(self):
        style = StyleDefinition(variables={
            "n": VariableDescriptor(name="n", type=VariableType.NUMBER, default="40px", min=0, max=32),
        })
        assert len(check_number_bounds(style)) == 1

    def test_number_within_bounds(self):
        style = StyleDefinition(variables={
            "n": VariableDescriptor(name="n", type=VariableType.NUMBER, default="16px", min=0, max=32),
        })
        assert check_number_bounds(style) == []

    def test_non_numeric_default_ignored(self):
        style = StyleDefinition(variables={
            "n": VariableDescriptor(name="n", type=VariableType.NUMBER, default="auto", min=0, max=1),
        })
        assert check_number_bounds(style) == []


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class TestValidator:
    def test_complete_style_has_no_diagnostics(self):
        assert validate(COMPLETE) == []

    def test_all_severities_reported(self):
        style = StyleDefinition(
            name="a",
            version="1",
            homepage_url="nope",
            variables={"x": VariableDescriptor(name="x", type=VariableType.SELECT)},
        )
        diagnostics = validate(style)
        assert [d.severity for d in diagnostics] == [
            Severity.ERROR,
            Severity.WARNING,
            Severity.INFO,
        ]
