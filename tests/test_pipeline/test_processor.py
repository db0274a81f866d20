"""End-to-end tests for UserStyleProcessor and the package entry points."""

import json
import logging

import pytest

import usercss
import usercss.pipeline.processor as processor_module
from usercss import MetadataMode, ParserConfig, UserStyleProcessor
from usercss.model.detection import DetectionSource, Dialect, PreprocessorResult
from usercss.model.style import DomainKind, DomainRule, StyleDefinition, style_id
from usercss.preprocessor import StaticCapabilities

DEMO = (
    "/* ==UserStyle==\n"
    "@name Demo\n"
    "@namespace ns\n"
    "@version 1.0.0\n"
    "@domain example.com\n"
    "==/UserStyle== */\n"
    "body{color:red}"
)


def header(*lines, body="body{}"):
    return "/* ==UserStyle==\n" + "\n".join(lines) + "\n==/UserStyle== */\n" + body


class FakeEngine:
    def __init__(self, result):
        self.result = result
        self.sources = []

    def compile(self, source, dialect):
        self.sources.append(source)
        return self.result


# ---------------------------------------------------------------------------
# Basic parsing
# ---------------------------------------------------------------------------


class TestParse:
    def test_demo_document(self):
        result = usercss.parse(DEMO)
        assert result.meta.name == "Demo"
        assert result.meta.domains == (DomainRule(DomainKind.DOMAIN, "example.com", True),)
        assert result.css == "body{color:red}"
        assert result.errors == []
        assert result.warnings == []
        assert result.ok

    def test_demo_matches_subdomain(self):
        result = usercss.parse(DEMO)
        assert usercss.matches("https://sub.example.com/page", result.meta.domains)

    def test_metadata_fields(self):
        result = usercss.parse(DEMO)
        assert result.meta.id == style_id("Demo", "ns")
        assert len(result.meta.id) == 8
        assert result.meta.version == "1.0.0"
        assert result.metadata_block.startswith("/* ==UserStyle==")
        assert result.meta.raw_metadata_block == result.metadata_block
        assert result.meta.compiled_css == "body{color:red}"

    def test_to_dict_is_json_serializable(self):
        data = json.loads(json.dumps(usercss.parse(DEMO).to_dict()))
        assert data["meta"]["domains"] == [
            {"kind": "domain", "pattern": "example.com", "include": True}
        ]
        assert data["errors"] == []

    def test_match_as_last_directive(self):
        raw = header(
            "@name Demo", "@namespace ns", "@version 1.0.0",
            "@match *://*.example.com/*",
            body="body{color:red}",
        )
        result = usercss.parse(raw)
        assert result.errors == []
        assert result.meta.name == "Demo"
        assert result.meta.domains == (DomainRule(DomainKind.DOMAIN, "example.com"),)
        assert result.css == "body{color:red}"

    def test_url_fields(self):
        raw = header(
            "@name a", "@namespace b", "@version 1",
            "@homepageURL example.com", "@supportURL https://example.com/issues",
            "@license MIT",
        )
        result = usercss.parse(raw)
        assert result.warnings == ["Invalid @homepageURL format: example.com"]
        assert result.meta.support_url == "https://example.com/issues"
        assert result.meta.license == "MIT"
        assert result.meta.source_url == "example.com"


# ---------------------------------------------------------------------------
# Required fields and header problems
# ---------------------------------------------------------------------------


class TestRequiredFields:
    FIELDS = {"name": "@name a", "namespace": "@namespace b", "version": "@version 1"}

    @pytest.mark.parametrize("missing", ["name", "namespace", "version"])
    def test_one_error_per_missing_field(self, missing):
        lines = [line for key, line in self.FIELDS.items() if key != missing]
        result = usercss.parse(header(*lines))
        assert result.errors == [f"Missing required @{missing} directive in metadata block"]

    def test_all_missing(self):
        result = usercss.parse(header("@description only"))
        assert len(result.errors) == 3

    def test_empty_header(self):
        assert len(usercss.parse("/* ==UserStyle==\n==/UserStyle== */").errors) == 3

    def test_errors_skip_compilation(self):
        result = usercss.parse(header("@name a", body="a{color:/*[[c|color|red]]*/}"))
        assert result.errors
        assert result.meta.compiled_css == ""

    def test_duplicate_directive(self):
        result = usercss.parse(header("@name a", "@name b", "@namespace n", "@version 1"))
        assert result.errors == ["Duplicate @name directive found at line 3"]
        assert result.meta.name == "a"

    def test_rejected_block(self):
        raw = "/* ==UserStyle==\n@name a */\n@namespace b\n==/UserStyle== */\nbody{}"
        result = usercss.parse(raw)
        assert len(result.errors) == 1
        assert result.errors[0].startswith("No UserCSS metadata block found")
        assert result.css == raw
        assert result.meta == StyleDefinition()

    def test_nested_comment_warning(self):
        raw = header("/* note */", "@name a", "@namespace b", "@version 1")
        result = usercss.parse(raw)
        assert result.errors == []
        assert result.warnings == [
            "Metadata block contains nested comments - ensure they don't interfere with parsing"
        ]


class TestMetadataMode:
    def test_optional_treats_plain_css_as_global(self):
        result = usercss.parse("body{}")
        assert result.errors == []
        assert result.meta.name == ""
        assert result.meta.is_global
        assert result.meta.compiled_css == "body{}"
        assert result.css == "body{}"

    def test_required_reports_missing_block(self):
        config = ParserConfig(metadata_mode=MetadataMode.REQUIRED)
        result = usercss.parse("body{}", config=config)
        assert result.errors == [processor_module.NO_BLOCK_MESSAGE]

    def test_compile_on_parse_disabled(self):
        result = usercss.parse(DEMO, config=ParserConfig(compile_on_parse=False))
        assert result.meta.compiled_css == ""


# ---------------------------------------------------------------------------
# USO styles
# ---------------------------------------------------------------------------


class TestUsoStyle:
    def test_parses_cleanly(self, uso_style):
        result = usercss.parse(uso_style)
        assert result.errors == []
        assert result.warnings == []
        assert result.detection.type is Dialect.USO
        assert result.detection.source is DetectionSource.METADATA

    def test_variables(self, uso_style):
        variables = usercss.parse(uso_style).meta.variables
        assert list(variables) == ["bg", "bg-custom", "bg-overlay", "bg-blur", "top-bar"]
        assert variables["bg"].options == (
            "Sky Default", "Soft Gradient", "Angular Grid", "Custom Upload",
        )
        assert variables["bg"].default == "Sky Default"
        assert variables["bg-blur"].default == "No Blur"
        assert variables["top-bar"].option_css["Hide"] == ":root { --demo-top-bar: none; }"

    def test_defaults_compiled(self, uso_style):
        css = usercss.parse(uso_style).meta.compiled_css
        assert "url(https://assets.example.com/backgrounds/sky-default.jpg)" in css
        assert "background-color: #112233aa;" in css
        assert "/*[[" not in css

    def test_selected_values(self, uso_style):
        css = usercss.parse(uso_style, {"bg-blur": "Strong", "top-bar": "Hide"}).meta.compiled_css
        assert "backdrop-filter: blur(10px);" in css
        assert ":root { --demo-top-bar: none; }" in css

    def test_custom_option_resolves_nested_variable(self, uso_style):
        css = usercss.parse(uso_style, {"bg": "Custom Upload"}).meta.compiled_css
        assert "url(https://assets.example.com/backgrounds/custom-placeholder.jpg)" in css

        css = usercss.parse(
            uso_style, {"bg": "Custom Upload", "bg-custom": "https://me.example/x.png"}
        ).meta.compiled_css
        assert "url(https://me.example/x.png)" in css

    def test_values_recorded_on_descriptors(self, uso_style):
        bg = usercss.parse(uso_style, {"bg": "Angular Grid"}).meta.variables["bg"]
        assert bg.value == "Angular Grid"
        assert bg.default == "Sky Default"

    def test_reprocess(self, uso_style):
        processor = UserStyleProcessor()
        result = processor.parse(uso_style)
        updated = processor.reprocess(result, {"bg": "Angular Grid"})
        assert "angular-grid.png" in updated.meta.compiled_css
        assert "sky-default.jpg" in result.meta.compiled_css
        assert updated.meta.variables["bg"].value == "Angular Grid"

    def test_yield_hook_between_batches(self, uso_style):
        calls = []
        processor = UserStyleProcessor(
            config=ParserConfig(resolve_batch_size=1),
            yield_hook=lambda: calls.append(1),
        )
        processor.parse(uso_style)
        assert len(calls) == 3

    def test_placeholder_value_override(self):
        raw = header("@name a", "@namespace b", "@version 1",
                     '@var color accent "Accent" #ff0000',
                     body="a { color: /*[[accent]]*/; }")
        result = usercss.parse(raw, {"accent": "#00ff00"})
        assert result.meta.compiled_css == "a { color: #00ff00; }"
        assert result.meta.variables["accent"].default == "#ff0000"


# ---------------------------------------------------------------------------
# Less / Stylus delegation
# ---------------------------------------------------------------------------


class TestExternalPreprocessor:
    def test_without_execution_context(self, less_style):
        result = usercss.parse(less_style)
        assert result.detection.type is Dialect.LESS
        assert result.errors == []
        assert result.warnings == [
            "Preprocessor less requires an execution context, skipping preprocessing"
        ]
        assert result.meta.compiled_css == result.css
        assert result.meta.variables["radius"].default == "4px"
        assert result.meta.domains == (DomainRule(DomainKind.DOMAIN, "example.net"),)

    def test_engine_without_capability_is_not_used(self, less_style):
        engine = FakeEngine(PreprocessorResult(css="compiled"))
        result = UserStyleProcessor(engine=engine).parse(less_style)
        assert engine.sources == []
        assert result.meta.compiled_css == result.css

    def test_engine_compiles(self, less_style):
        engine = FakeEngine(PreprocessorResult(css="a{color:#00f}"))
        processor = UserStyleProcessor(
            capabilities=StaticCapabilities(frozenset({Dialect.LESS})), engine=engine
        )
        result = processor.parse(less_style, {"accent": "#00f"})
        assert result.meta.compiled_css == "a{color:#00f}"
        assert result.warnings == []
        assert engine.sources[0].startswith("@accent: #00f;\n@radius: 4px;\n")

    def test_engine_errors_keep_source(self, less_style):
        engine = FakeEngine(PreprocessorResult(css="", errors=["syntax error"]))
        processor = UserStyleProcessor(
            capabilities=StaticCapabilities(frozenset({Dialect.LESS})), engine=engine
        )
        result = processor.parse(less_style)
        assert result.errors == []
        assert "syntax error" in result.warnings
        assert result.meta.compiled_css == result.css


# ---------------------------------------------------------------------------
# Domain scoping
# ---------------------------------------------------------------------------


class TestLegacyDocument:
    def test_rules_from_header_and_body(self, legacy_style):
        result = usercss.parse(legacy_style)
        assert result.meta.domains == (
            DomainRule(DomainKind.URL_PREFIX, "https://docs.example.com/guide/"),
            DomainRule(DomainKind.DOMAIN, "example.org"),
            DomainRule(DomainKind.REGEXP, r"https?://news\.example\.com/\d+"),
        )
        assert "Legacy -moz-document syntax detected. Consider using modern @domain directive" in result.warnings

    @pytest.mark.parametrize("url, expected", [
        ("https://docs.example.com/guide/intro", True),
        ("https://docs.example.com/other", False),
        ("https://www.example.org/", True),
        ("https://news.example.com/42", True),
        ("https://news.example.com/about", False),
    ])
    def test_matching(self, legacy_style, url, expected):
        processor = UserStyleProcessor()
        result = processor.parse(legacy_style)
        assert processor.matches(url, result.meta.domains) is expected


# ---------------------------------------------------------------------------
# Failure containment
# ---------------------------------------------------------------------------


class TestUnexpectedFailure:
    def test_collapsed_into_single_error(self, monkeypatch, caplog):
        def boom(raw):
            raise RuntimeError("boom")

        monkeypatch.setattr(processor_module, "extract_metadata", boom)
        with caplog.at_level(logging.ERROR, logger="usercss"):
            result = usercss.parse(DEMO)
        assert result.errors == ["Parsing error: boom"]
        assert result.meta == StyleDefinition()
        assert result.css == DEMO
        assert "Unexpected failure while parsing user style" in caplog.text


class TestEntryPoints:
    def test_detect_dialect(self):
        assert usercss.detect_dialect(DEMO).type is Dialect.USO

    def test_resolve(self):
        assert usercss.resolve("/*[[x|text|1]]*/") == "1"
