"""ElementNode, ElementMeta and SliceVariant: the snapshot output tree.

Nodes are frozen and their child collections are tuples.  A snapshot is
rebuilt wholesale for every request, so consumers can share and cache
nodes freely.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from fhir_profile_core.snapshot.definitions import MaxValue

__all__ = ["ElementMeta", "ElementNode", "SliceVariant"]


@dataclass(frozen=True, slots=True)
class ElementMeta:
    """Computed metadata shown for one element row.

    Attributes:
        type:         Concrete type name, or the union label for choice fields.
        min:          Resolved minimum cardinality.
        max:          Resolved maximum cardinality (int or "*").
        is_summary:   Summary flag, if declared anywhere in the merge chain.
        is_modifier:  Modifier flag, if declared.
        must_support: Must-support flag, if declared.
        short:        Resolved one-line description.
        desc:         Resolved long description (definition/comment/requirements).
    """

    type: str
    min: int
    max: MaxValue
    is_summary: bool | None = None
    is_modifier: bool | None = None
    must_support: bool | None = None
    short: str | None = None
    desc: str | None = None

    @property
    def cardinality(self) -> str:
        """Cardinality in FHIR ``min..max`` notation."""
        return f"{self.min}..{self.max}"


@dataclass(frozen=True, slots=True)
class SliceVariant:
    """An alternate child set for a sliced (non-extension) element."""

    id: str
    label: str
    children: tuple[ElementNode, ...] = ()


@dataclass(frozen=True, slots=True)
class ElementNode:
    """A node in the resolved element tree.

    Attributes:
        id:             ``parent.id + "/" + segment``; unique within a snapshot.
        name:           Field name (``extension:<slice>`` for extension slices).
        meta:           Computed metadata.
        children:       Default (unsliced) children in declaration order.
        slice_variants: One alternate child set per declared slice; empty for
                        unsliced fields and for extension slots.
    """

    id: str
    name: str
    meta: ElementMeta
    children: tuple[ElementNode, ...] = ()
    slice_variants: tuple[SliceVariant, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children and not any(v.children for v in self.slice_variants)

    def variant(self, variant_id: str) -> SliceVariant | None:
        """Return the slice variant with ``variant_id``, or None."""
        for variant in self.slice_variants:
            if variant.id == variant_id:
                return variant
        return None

    def walk(self) -> Iterator[ElementNode]:
        """Yield this node and its default descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()
