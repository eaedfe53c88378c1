"""ElementDefinition records and the differential-over-base merge.

Schema documents describe each field as a JSON object with camelCase keys
(``mustSupport``, ``choiceOf``, ``slicing.slices`` ...).  ``parse_element``
turns one such object into an immutable ``ElementDefinition``; every field
is optional so the same record type serves both as a fully-specified base
definition and as a sparse differential override.

``merge_definitions`` applies an override onto a base explicitly, field by
field: override values win wherever they are set, and the nested
``elements`` maps are unioned rather than replaced.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

__all__ = [
    "EMPTY_DEFINITION",
    "ElementDefinition",
    "ElementMap",
    "MaxValue",
    "SliceDefinition",
    "Slicing",
    "merge_definitions",
    "merge_element_maps",
    "parse_element",
    "parse_elements",
    "with_cardinality",
]

# "*" or a non-negative integer
MaxValue = int | str

ElementMap = Mapping[str, "ElementDefinition"]


@dataclass(frozen=True, slots=True)
class SliceDefinition:
    """One named slice of a repeating element.

    Attributes:
        min: Slice-level minimum cardinality; overrides the field's own.
        max: Slice-level maximum cardinality; overrides the field's own.
        schema: Constraints applied to the slice on top of the sliced
            field's merged definition.
    """

    min: int | None = None
    max: MaxValue | None = None
    schema: ElementDefinition | None = None


@dataclass(frozen=True, slots=True)
class Slicing:
    """Slicing rules declared on a repeating element.

    ``discriminators`` and ``rules`` are carried through untouched; only
    ``slices`` drives tree construction.  Slice order follows declaration
    order in the source document.  ``slices`` is None when the document
    omits the key, which is distinct from an explicitly empty slice map.
    """

    slices: Mapping[str, SliceDefinition] | None = None
    discriminators: tuple[Mapping[str, Any], ...] = ()
    rules: str | None = None


@dataclass(frozen=True, slots=True)
class ElementDefinition:
    """A single field definition; all attributes are optional.

    ``None`` always means "not set here".  This is what lets a sparse
    differential be merged onto a base without erasing base values.
    """

    type: str | None = None
    array: bool | None = None
    scalar: bool | None = None
    min: int | None = None
    max: MaxValue | None = None
    summary: bool | None = None
    modifier: bool | None = None
    must_support: bool | None = None
    short: str | None = None
    definition: str | None = None
    comment: str | None = None
    requirements: str | None = None
    binding: Mapping[str, Any] | None = None
    elements: ElementMap | None = None
    choices: tuple[str, ...] | None = None
    choice_of: str | None = None
    slicing: Slicing | None = None
    required: tuple[str, ...] | None = None

    @property
    def slices(self) -> Mapping[str, SliceDefinition]:
        """Declared slices, or an empty mapping when the field is unsliced."""
        if self.slicing is None or self.slicing.slices is None:
            return {}
        return self.slicing.slices

    @property
    def declares_slices(self) -> bool:
        """True when a slice map is present, even an empty one."""
        return self.slicing is not None and self.slicing.slices is not None


EMPTY_DEFINITION = ElementDefinition()


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def merge_element_maps(
    base: ElementMap | None, override: ElementMap | None
) -> dict[str, ElementDefinition]:
    """Union two element maps.

    Base declaration order is kept; override-only names are appended.  A
    name present on both sides is merged with ``merge_definitions`` so a
    sparse override never erases the base entry's type or flags.
    """
    merged: dict[str, ElementDefinition] = dict(base or {})
    for name, definition in (override or {}).items():
        merged[name] = merge_definitions(merged.get(name), definition)
    return merged


def merge_definitions(
    base: ElementDefinition | None, override: ElementDefinition | None
) -> ElementDefinition:
    """Apply ``override`` onto ``base``.

    Args:
        base:     The inherited definition, or None.
        override: The differential constraints, or None.

    Returns:
        A new ElementDefinition.  When only one side is given it is
        returned unchanged; when neither is given the empty definition is
        returned.
    """
    if override is None:
        return base if base is not None else EMPTY_DEFINITION
    if base is None:
        return override

    elements: ElementMap | None = None
    if base.elements is not None or override.elements is not None:
        elements = merge_element_maps(base.elements, override.elements)

    return ElementDefinition(
        type=_pick(override.type, base.type),
        array=_pick(override.array, base.array),
        scalar=_pick(override.scalar, base.scalar),
        min=_pick(override.min, base.min),
        max=_pick(override.max, base.max),
        summary=_pick(override.summary, base.summary),
        modifier=_pick(override.modifier, base.modifier),
        must_support=_pick(override.must_support, base.must_support),
        short=_pick(override.short, base.short),
        definition=_pick(override.definition, base.definition),
        comment=_pick(override.comment, base.comment),
        requirements=_pick(override.requirements, base.requirements),
        binding=_pick(override.binding, base.binding),
        elements=elements,
        choices=_pick(override.choices, base.choices),
        choice_of=_pick(override.choice_of, base.choice_of),
        slicing=_pick(override.slicing, base.slicing),
        required=_pick(override.required, base.required),
    )


def with_cardinality(
    definition: ElementDefinition, min_: int | None, max_: MaxValue | None
) -> ElementDefinition:
    """Return ``definition`` with both bounds replaced, including by None."""
    return replace(definition, min=min_, max=max_)


def _pick(preferred: Any, fallback: Any) -> Any:
    return preferred if preferred is not None else fallback


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_elements(raw: Mapping[str, Any] | None) -> dict[str, ElementDefinition]:
    """Parse a ``{field name: raw element}`` mapping, preserving key order."""
    if not raw:
        return {}
    return {name: parse_element(value) for name, value in raw.items()}


def parse_element(raw: Mapping[str, Any] | None) -> ElementDefinition:
    """Parse one raw (camelCase) element object into an ElementDefinition.

    Unknown keys are ignored.  A missing or empty object yields the empty
    definition.
    """
    if not raw:
        return EMPTY_DEFINITION

    elements = raw.get("elements")
    choices = raw.get("choices")
    required = raw.get("required")

    return ElementDefinition(
        type=raw.get("type"),
        array=raw.get("array"),
        scalar=raw.get("scalar"),
        min=raw.get("min"),
        max=raw.get("max"),
        summary=raw.get("summary"),
        modifier=raw.get("modifier"),
        must_support=raw.get("mustSupport"),
        short=raw.get("short"),
        definition=raw.get("definition"),
        comment=raw.get("comment"),
        requirements=raw.get("requirements"),
        binding=raw.get("binding"),
        elements=parse_elements(elements) if elements is not None else None,
        choices=tuple(choices) if choices is not None else None,
        choice_of=raw.get("choiceOf"),
        slicing=_parse_slicing(raw.get("slicing")),
        required=tuple(required) if required is not None else None,
    )


def _parse_slicing(raw: Mapping[str, Any] | None) -> Slicing | None:
    if raw is None:
        return None
    raw_slices = raw.get("slices")
    slices: dict[str, SliceDefinition] | None = None
    if raw_slices is not None:
        slices = {
            name: SliceDefinition(
                min=entry.get("min"),
                max=entry.get("max"),
                schema=parse_element(entry["schema"]) if "schema" in entry else None,
            )
            for name, entry in raw_slices.items()
        }
    return Slicing(
        slices=slices,
        discriminators=tuple(raw.get("discriminator") or ()),
        rules=raw.get("rules"),
    )
