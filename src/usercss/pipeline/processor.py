"""UserStyleProcessor: composes extraction, detection, resolution and matching.

The processor never raises from :meth:`UserStyleProcessor.parse`. Expected
problems become diagnostics on the result; anything unexpected is logged and
collapsed into a single ``Parsing error`` entry with empty metadata.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Mapping

from usercss.config import MetadataMode, ParserConfig
from usercss.domains import DomainMatcher, extract_domains
from usercss.errors import MetadataError
from usercss.metadata import MetadataExtraction, extract_metadata
from usercss.model.detection import Dialect, PreprocessorDetection
from usercss.model.diagnostic import Diagnostic, Severity, error, warning
from usercss.model.result import ParseResult
from usercss.model.style import DomainRule, StyleDefinition, VariableDescriptor, style_id
from usercss.preprocessor import (
    NO_CAPABILITIES,
    ExecutionCapabilities,
    PreprocessorEngine,
    compile_with_engine,
    detect_dialect,
    preprocessor_name,
)
from usercss.resolver import resolve
from usercss.resolver.resolver import YieldHook
from usercss.validation import validate
from usercss.variables import extract_variables

__all__ = ["UserStyleProcessor"]

NO_BLOCK_MESSAGE = (
    "No UserCSS metadata block found. Expected block between ==UserStyle== and ==/UserStyle=="
)


class UserStyleProcessor:
    """Parses user style documents and recompiles them on value changes.

    Collaborators are injected; the processor holds no per-document state, so
    one instance may serve any number of documents.
    """

    def __init__(
        self,
        config: ParserConfig | None = None,
        capabilities: ExecutionCapabilities | None = None,
        engine: PreprocessorEngine | None = None,
        matcher: DomainMatcher | None = None,
        yield_hook: YieldHook | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or ParserConfig()
        self.capabilities = capabilities or NO_CAPABILITIES
        self.engine = engine
        self._log = logger or logging.getLogger("usercss")
        self.matcher = matcher or DomainMatcher(logger=self._log)
        self.yield_hook = yield_hook

    # ---- entry points ----

    def detect(self, raw: str) -> PreprocessorDetection:
        return detect_dialect(raw)

    def resolve(
        self,
        css: str,
        values: Mapping[str, str] | None,
        descriptors: Mapping[str, VariableDescriptor] | None,
    ) -> str:
        return resolve(
            css,
            values,
            descriptors,
            batch_size=self.config.resolve_batch_size,
            yield_hook=self.yield_hook,
        )

    def matches(self, url: str, domains: Iterable[DomainRule]) -> bool:
        return self.matcher.matches(url, domains)

    def parse(self, raw: str, values: Mapping[str, str] | None = None) -> ParseResult:
        """Parse *raw* into metadata, CSS body and diagnostics.

        *values* overrides the declared defaults of matching variables.
        """
        try:
            return self._parse(raw, values or {})
        except Exception as exc:
            self._log.exception("Unexpected failure while parsing user style")
            return _result(
                StyleDefinition(),
                raw,
                "",
                [error("internal", f"Parsing error: {exc}")],
                detection=None,
            )

    def reprocess(self, result: ParseResult, values: Mapping[str, str]) -> ParseResult:
        """Return *result* with new variable values and recompiled CSS."""
        variables = {
            name: var.with_value(values[name]) if name in values else var
            for name, var in result.meta.variables.items()
        }
        meta = replace(result.meta, variables=variables)
        detection = result.detection or detect_dialect(result.css)
        compiled, diagnostics = self._compile(result.css, meta, detection)
        new_warnings = [d.message for d in diagnostics if d.message not in result.warnings]
        return replace(
            result,
            meta=replace(meta, compiled_css=compiled),
            warnings=result.warnings + new_warnings,
            diagnostics=result.diagnostics + tuple(diagnostics),
        )

    # ---- stages ----

    def _parse(self, raw: str, values: Mapping[str, str]) -> ParseResult:
        detection = detect_dialect(raw)
        diagnostics: list[Diagnostic] = []

        try:
            extraction = extract_metadata(raw)
        except MetadataError as exc:
            self._log.debug("Metadata block rejected: %s", exc)
            diagnostics.append(error("metadata_block", str(exc), line=exc.line))
            return _result(StyleDefinition(), raw, "", diagnostics, detection)

        if not extraction.found:
            if self.config.metadata_mode is MetadataMode.REQUIRED:
                diagnostics.append(error("metadata_block", NO_BLOCK_MESSAGE))
            meta = StyleDefinition(compiled_css=raw)
            return _result(meta, raw, "", diagnostics, detection)

        diagnostics.extend(extraction.diagnostics)
        meta = self._build_meta(extraction, values, diagnostics)
        diagnostics.extend(validate(meta))

        if self.config.compile_on_parse and not any(d.is_error for d in diagnostics):
            compiled, compile_diagnostics = self._compile(extraction.css, meta, detection)
            diagnostics.extend(compile_diagnostics)
            meta = replace(meta, compiled_css=compiled)

        self._log.debug(
            "Parsed style %r: %d variable(s), %d domain rule(s), dialect=%s",
            meta.name,
            len(meta.variables),
            len(meta.domains),
            detection.type.value,
        )
        block = extraction.block.text if extraction.block else ""
        return _result(meta, extraction.css, block, diagnostics, detection)

    def _build_meta(
        self,
        extraction: MetadataExtraction,
        values: Mapping[str, str],
        diagnostics: list[Diagnostic],
    ) -> StyleDefinition:
        variables = extract_variables(
            extraction.repeated,
            strict_names=self.config.strict_variable_names,
            diagnostics=diagnostics,
        )
        variables = {
            name: var.with_value(values[name]) if name in values else var
            for name, var in variables.items()
        }
        domains = extract_domains(extraction.directives, extraction.css)
        diagnostics.extend(domains.diagnostics)

        get = extraction.get
        name, namespace = get("name"), get("namespace")
        return StyleDefinition(
            id=style_id(name, namespace),
            name=name,
            namespace=namespace,
            version=get("version"),
            description=get("description"),
            author=get("author"),
            source_url=get("homepageURL") or get("supportURL") or get("updateURL"),
            domains=tuple(domains.rules),
            variables=variables,
            raw_metadata_block=extraction.block.text if extraction.block else "",
            license=get("license"),
            homepage_url=get("homepageURL"),
            support_url=get("supportURL"),
            update_url=get("updateURL"),
            preprocessor=get("preprocessor"),
        )

    def _compile(
        self, css: str, meta: StyleDefinition, detection: PreprocessorDetection
    ) -> tuple[str, list[Diagnostic]]:
        dialect = detection.type
        if dialect is Dialect.NONE:
            return css, []
        if dialect is Dialect.USO:
            return self.resolve(css, meta.variable_values(), meta.variables), []

        if self.engine is None or not self.capabilities.can_run_preprocessor(dialect):
            self._log.warning("No execution context for %s, skipping preprocessing", dialect.value)
            return css, [
                warning(
                    "preprocessor",
                    f"Preprocessor {dialect.value} requires an execution context, "
                    "skipping preprocessing",
                )
            ]

        self._log.debug("Delegating %s compilation to %r", preprocessor_name(dialect), self.engine)
        compiled = compile_with_engine(css, dialect, meta.variables, self.engine)
        diagnostics = [warning("preprocessor", message) for message in compiled.warnings]
        diagnostics += [warning("preprocessor", message) for message in compiled.errors]
        if compiled.errors:
            return css, diagnostics
        return compiled.css, diagnostics


def _result(
    meta: StyleDefinition,
    css: str,
    block: str,
    diagnostics: list[Diagnostic],
    detection: PreprocessorDetection | None,
) -> ParseResult:
    return ParseResult(
        meta=meta,
        css=css,
        metadata_block=block,
        warnings=[d.message for d in diagnostics if d.severity is Severity.WARNING],
        errors=[d.message for d in diagnostics if d.severity is Severity.ERROR],
        detection=detection,
        diagnostics=tuple(diagnostics),
    )
