"""Capability-gated delegation to an external preprocessor engine.

The core never compiles Less or Stylus itself. A caller that owns an
execution context able to run such an engine injects both an
:class:`ExecutionCapabilities` and a :class:`PreprocessorEngine`; without
them the uncompiled CSS is returned together with a warning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Protocol

from usercss.model.detection import Dialect, PreprocessorResult
from usercss.model.style import VariableDescriptor

__all__ = [
    "ExecutionCapabilities",
    "PreprocessorEngine",
    "StaticCapabilities",
    "NO_CAPABILITIES",
    "variable_definitions",
    "compile_with_engine",
]

logger = logging.getLogger(__name__)


class ExecutionCapabilities(Protocol):
    """What the surrounding runtime is able to execute."""

    def can_run_preprocessor(self, dialect: Dialect) -> bool: ...


class PreprocessorEngine(Protocol):
    """An external compiler for Less/Stylus sources."""

    def compile(self, source: str, dialect: Dialect) -> PreprocessorResult: ...


@dataclass(frozen=True)
class StaticCapabilities:
    """Capabilities fixed at construction time."""

    dialects: frozenset[Dialect] = field(default_factory=frozenset)

    def can_run_preprocessor(self, dialect: Dialect) -> bool:
        return dialect in self.dialects


NO_CAPABILITIES = StaticCapabilities()


def variable_definitions(
    dialect: Dialect, variables: Mapping[str, VariableDescriptor]
) -> str:
    """Render *variables* as definitions in the syntax of *dialect*."""
    lines = []
    for name, variable in variables.items():
        if dialect is Dialect.STYLUS:
            lines.append(f"{name} = {variable.value}")
        else:
            lines.append(f"@{name}: {variable.value};")
    return "\n".join(lines)


def compile_with_engine(
    css: str,
    dialect: Dialect,
    variables: Mapping[str, VariableDescriptor],
    engine: PreprocessorEngine,
) -> PreprocessorResult:
    """Prepend variable definitions to *css* and hand it to *engine*.

    Engine failures are reported as warnings on the returned result.
    """
    source = css
    definitions = variable_definitions(dialect, variables)
    if definitions:
        source = definitions + "\n" + css
    try:
        return engine.compile(source, dialect)
    except Exception as exc:
        logger.warning("Preprocessor %s failed: %s", dialect.value, exc)
        return PreprocessorResult(
            css=css, warnings=[f"Failed to run {dialect.value} preprocessor: {exc}"]
        )
