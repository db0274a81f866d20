"""Core style model: DomainRule, VariableDescriptor and StyleDefinition."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, replace
from enum import Enum


class DomainKind(str, Enum):
    """How a domain rule pattern is compared against a URL."""

    DOMAIN = "domain"
    URL = "url"
    URL_PREFIX = "url-prefix"
    REGEXP = "regexp"


class VariableType(str, Enum):
    """Control type of a user-adjustable variable."""

    COLOR = "color"
    NUMBER = "number"
    TEXT = "text"
    SELECT = "select"
    CHECKBOX = "checkbox"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DomainRule:
    """A (kind, pattern, include) triple scoping a style to pages."""

    kind: DomainKind
    pattern: str
    include: bool = True

    @property
    def key(self) -> tuple[str, str]:
        """Identity used for de-duplication."""
        return (self.kind.value, self.pattern)

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind.value, "pattern": self.pattern, "include": self.include}


@dataclass(frozen=True)
class VariableDescriptor:
    """A typed variable declared by a ``@var`` or ``@advanced`` directive.

    ``min``/``max``/``step``/``unit`` only carry meaning for numbers.
    ``option_css`` is set only for option blocks that embed a CSS snippet per
    option; its keys are the entries of ``options``.
    """

    name: str
    type: VariableType
    default: str = ""
    value: str = ""
    label: str = ""
    min: float | None = None
    max: float | None = None
    step: float | None = None
    unit: str | None = None
    options: tuple[str, ...] = ()
    option_css: dict[str, str] | None = None

    def with_value(self, value: str) -> VariableDescriptor:
        """Return a copy carrying *value* as the current value."""
        return replace(self, value=value)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "name": self.name,
            "type": self.type.value,
            "label": self.label,
            "default": self.default,
            "value": self.value,
        }
        for key in ("min", "max", "step", "unit"):
            if getattr(self, key) is not None:
                data[key] = getattr(self, key)
        if self.options:
            data["options"] = list(self.options)
        if self.option_css is not None:
            data["optionCss"] = dict(self.option_css)
        return data


def style_id(name: str, namespace: str) -> str:
    """Deterministic 8-hex-digit id for ``namespace:name``."""
    if not name and not namespace:
        return ""
    digest = hashlib.sha1(f"{namespace}:{name}".encode("utf-8")).hexdigest()
    return digest[:8]


@dataclass(frozen=True)
class StyleDefinition:
    """Validated metadata of one parsed user style."""

    id: str = ""
    name: str = ""
    namespace: str = ""
    version: str = ""
    description: str = ""
    author: str = ""
    source_url: str = ""
    domains: tuple[DomainRule, ...] = ()
    variables: dict[str, VariableDescriptor] = field(default_factory=dict)
    compiled_css: str = ""
    raw_metadata_block: str = ""
    license: str = ""
    homepage_url: str = ""
    support_url: str = ""
    update_url: str = ""
    preprocessor: str = ""

    @property
    def is_global(self) -> bool:
        """True when the style carries no domain rules."""
        return not self.domains

    def variable_values(self) -> dict[str, str]:
        """Current value of every variable, keyed by name."""
        return {name: var.value for name, var in self.variables.items()}

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "namespace": self.namespace,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "sourceUrl": self.source_url,
            "license": self.license,
            "domains": [d.to_dict() for d in self.domains],
            "variables": {n: v.to_dict() for n, v in self.variables.items()},
            "compiledCss": self.compiled_css,
        }
