"""Substitute variable values into placeholder-bearing CSS."""

from __future__ import annotations

import logging
from typing import Callable, Mapping

from usercss.model.style import VariableDescriptor, VariableType
from usercss.resolver.placeholders import Placeholder, find_placeholders, iter_batches

__all__ = ["DEFAULT_BATCH_SIZE", "resolve", "replacement_for"]

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50

YieldHook = Callable[[], None]


def _option_snippet(
    placeholder: Placeholder,
    values: Mapping[str, str],
    descriptor: VariableDescriptor | None,
) -> str | None:
    if descriptor is None or descriptor.type is not VariableType.SELECT or not descriptor.option_css:
        return None
    selected = values.get(placeholder.name, descriptor.value)
    return descriptor.option_css.get(selected)


def _plain_value(
    placeholder: Placeholder,
    values: Mapping[str, str],
    descriptor: VariableDescriptor | None,
) -> str | None:
    if placeholder.name in values:
        return values[placeholder.name]
    if placeholder.inline_default is not None:
        return placeholder.inline_default
    if descriptor is not None:
        return descriptor.default
    return None


def _substitute_plain(
    css: str,
    values: Mapping[str, str],
    descriptors: Mapping[str, VariableDescriptor],
    skip: str,
) -> str:
    """Resolve placeholders inside an option snippet, one level deep."""
    pieces: list[str] = []
    cursor = 0
    for placeholder in find_placeholders(css):
        if placeholder.name == skip:
            continue
        replacement = _plain_value(placeholder, values, descriptors.get(placeholder.name))
        if replacement is None:
            continue
        pieces.append(css[cursor:placeholder.start])
        pieces.append(replacement)
        cursor = placeholder.end
    pieces.append(css[cursor:])
    return "".join(pieces)


def replacement_for(
    placeholder: Placeholder,
    values: Mapping[str, str],
    descriptors: Mapping[str, VariableDescriptor],
) -> str:
    """Text that replaces *placeholder*; the placeholder itself if unresolvable."""
    descriptor = descriptors.get(placeholder.name)
    snippet = _option_snippet(placeholder, values, descriptor)
    if snippet is not None:
        return _substitute_plain(snippet, values, descriptors, skip=placeholder.name)
    value = _plain_value(placeholder, values, descriptor)
    if value is None:
        logger.debug("Leaving unresolved placeholder %s", placeholder.text)
        return placeholder.text
    return value


def resolve(
    css: str,
    values: Mapping[str, str] | None = None,
    descriptors: Mapping[str, VariableDescriptor] | None = None,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    yield_hook: YieldHook | None = None,
) -> str:
    """Replace every ``/*[[name|...]]*/`` placeholder in *css*.

    Select variables carrying per-option CSS substitute the snippet of the
    chosen option. Other variables substitute the supplied value, else the
    placeholder's inline default, else the descriptor default; placeholders
    with none of these are left verbatim.

    Placeholders are processed in batches of *batch_size*; *yield_hook* is
    called between batches so a caller sharing a single-threaded scheduler
    can let other work run.
    """
    values = values or {}
    descriptors = descriptors or {}
    placeholders = find_placeholders(css)
    if not placeholders:
        return css

    pieces: list[str] = []
    cursor = 0
    for index, batch in enumerate(iter_batches(placeholders, batch_size)):
        if index and yield_hook is not None:
            yield_hook()
        for placeholder in batch:
            pieces.append(css[cursor:placeholder.start])
            pieces.append(replacement_for(placeholder, values, descriptors))
            cursor = placeholder.end
    pieces.append(css[cursor:])
    logger.debug("Resolved %d placeholder(s)", len(placeholders))
    return "".join(pieces)
