"""SliceResolver: expands declared slices into element nodes.

Two flavours of slicing are resolved here:

- Extension slots: every declared slice becomes its own sibling node named
  ``extension:<slice>``; the unsliced ``extension`` node is not emitted.
- Any other sliced field: the field keeps its default children and gains
  one ``SliceVariant`` per slice, an alternate child set a consumer may
  swap in.

Child construction is delegated back to the builder through the
``build_children`` callable so both flavours recurse exactly like ordinary
fields.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from fhir_profile_core.snapshot.cardinality import (
    compute_cardinality,
    pick_description,
    pick_detail,
)
from fhir_profile_core.snapshot.definitions import (
    EMPTY_DEFINITION,
    ElementDefinition,
    ElementMap,
    merge_definitions,
    merge_element_maps,
    with_cardinality,
)
from fhir_profile_core.snapshot.nodes import ElementMeta, ElementNode, SliceVariant

if TYPE_CHECKING:
    from fhir_profile_core.snapshot.catalog import TypeCatalog
    from fhir_profile_core.snapshot.config import SnapshotConfig

__all__ = ["BuildChildren", "SliceResolver"]

# (base_elements, profile_elements, parent_id, root_base, required, type_stack, depth)
BuildChildren = Callable[
    [ElementMap, ElementMap, str, ElementMap, Sequence[str], tuple[str, ...], int],
    list[ElementNode],
]


class SliceResolver:
    """Resolve named slices for extension slots and generic repeating fields."""

    def __init__(
        self,
        catalog: TypeCatalog,
        config: SnapshotConfig,
        build_children: BuildChildren,
    ) -> None:
        self._catalog = catalog
        self._config = config
        self._build_children = build_children

    # ------------------------------------------------------------------
    # Extension slots
    # ------------------------------------------------------------------

    def extension_slices(
        self,
        name: str,
        base: ElementDefinition | None,
        profile: ElementDefinition,
        parent_id: str,
        root_base: ElementMap,
        type_stack: tuple[str, ...],
        depth: int,
    ) -> list[ElementNode]:
        """Emit one node per declared extension slice.

        Each slice recurses against the slot type's own catalog, unioned
        with any inline elements of the merged slot definition.  Slice-level
        min/max replace the slot's bounds even when the slice leaves them
        unset, in which case the defaults apply.
        """
        merged = merge_definitions(base, profile)
        slice_base = merge_element_maps(
            self._catalog.elements_for(merged.type), merged.elements
        )
        next_stack = (*type_stack, merged.type) if merged.type else type_stack

        nodes: list[ElementNode] = []
        for slice_name, slice_def in profile.slices.items():
            schema = slice_def.schema or EMPTY_DEFINITION
            slice_merged = with_cardinality(
                merge_definitions(merged, schema), slice_def.min, slice_def.max
            )
            min_, max_ = compute_cardinality(slice_merged, is_required=False)
            node_id = f"{parent_id}/{name}:{slice_name}"

            children = self._build_children(
                slice_base,
                schema.elements or {},
                node_id,
                root_base,
                schema.required or (),
                next_stack,
                depth + 1,
            )
            nodes.append(
                ElementNode(
                    id=node_id,
                    name=f"{name}:{slice_name}",
                    meta=ElementMeta(
                        type=schema.type or merged.type or self._config.extension_type,
                        min=min_,
                        max=max_,
                        is_summary=slice_merged.summary,
                        is_modifier=slice_merged.modifier,
                        must_support=slice_merged.must_support,
                        short=pick_description(schema) or pick_description(merged),
                        desc=pick_detail(schema) or merged.definition,
                    ),
                    children=tuple(children),
                )
            )
        return nodes

    # ------------------------------------------------------------------
    # Generic repeating fields
    # ------------------------------------------------------------------

    def slice_variants(
        self,
        node_id: str,
        profile: ElementDefinition,
        children_base: ElementMap | None,
        root_base: ElementMap,
        type_stack: tuple[str, ...],
        depth: int,
    ) -> tuple[SliceVariant, ...]:
        """Build one alternate child set per declared slice.

        ``children_base`` is the same base the field's default children were
        built from, or None when the field was cut off by the cycle guard;
        in that case every variant is empty.
        """
        variants: list[SliceVariant] = []
        for slice_name, slice_def in profile.slices.items():
            schema = slice_def.schema or EMPTY_DEFINITION
            variant_id = f"{node_id}:{slice_name}"
            children: list[ElementNode] = []
            if children_base is not None:
                children = self._build_children(
                    children_base,
                    schema.elements or {},
                    variant_id,
                    root_base,
                    schema.required or (),
                    type_stack,
                    depth,
                )
            variants.append(
                SliceVariant(id=variant_id, label=slice_name, children=tuple(children))
            )
        return tuple(variants)
