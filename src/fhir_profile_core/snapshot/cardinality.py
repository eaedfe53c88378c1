"""Defaulting rules for cardinality and descriptive text.

Small pure functions shared by the builder and the slice resolver, kept
separate so each rule can be tested on its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fhir_profile_core.snapshot.definitions import ElementDefinition, MaxValue

__all__ = ["UNBOUNDED", "compute_cardinality", "pick_description", "pick_detail"]

UNBOUNDED = "*"


def compute_cardinality(
    definition: ElementDefinition, is_required: bool
) -> tuple[int, MaxValue]:
    """Resolve ``(min, max)`` for a merged definition.

    Explicit bounds always win.  Otherwise min is 1 for fields listed in the
    parent's required names and 0 elsewhere; max is ``"*"`` for array
    fields and 1 for everything else, whatever the scalar/type/choice hints
    say.

    Args:
        definition:  Merged field definition.
        is_required: Whether the field name is in the parent's required list.

    Returns:
        A ``(min, max)`` tuple.
    """
    min_ = definition.min if definition.min is not None else (1 if is_required else 0)
    if definition.max is not None:
        max_: MaxValue = definition.max
    elif definition.array:
        max_ = UNBOUNDED
    else:
        max_ = 1
    return min_, max_


def pick_description(definition: ElementDefinition | None) -> str | None:
    """First non-empty of short, definition, comment, requirements."""
    if definition is None:
        return None
    return _first_text(
        definition.short,
        definition.definition,
        definition.comment,
        definition.requirements,
    )


def pick_detail(definition: ElementDefinition | None) -> str | None:
    """First non-empty of definition, comment, requirements (no short text)."""
    if definition is None:
        return None
    return _first_text(
        definition.definition, definition.comment, definition.requirements
    )


def _first_text(*candidates: str | None) -> str | None:
    for text in candidates:
        if text:
            return text
    return None
