"""SnapshotBuilder: merges a sparse differential onto a base element catalog.

The builder walks the base type's fields in declaration order, followed by
any names that only the differential introduces, and emits one
``ElementNode`` per field:

- Fields whose base definition is an alias of a choice field (``choiceOf``)
  are skipped; the choice field lists its concrete types itself.
- An ``extension`` slot whose differential declares slices is replaced by
  one node per slice, so an empty slice map removes the slot (see
  ``SliceResolver``).
- Every other field merges base and differential, resolves its type, and
  recurses into the type's catalog entry unioned with any inline elements.
- Choice fields get one synthetic leaf per declared type, resolved against
  the root catalog.
- Sliced non-extension fields additionally carry ``slice_variants``.

Type expansion is guarded by a type stack: the tuple of type names being
expanded along the current branch.  A field whose type already appears on
the stack becomes a leaf.  The tuple is passed down immutably, so the guard
is scoped to one branch and siblings never see each other's entries.

Unknown types resolve to an empty catalog, so a dangling type reference
produces a leaf rather than an error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from fhir_profile_core.snapshot.cardinality import (
    UNBOUNDED,
    compute_cardinality,
    pick_description,
    pick_detail,
)
from fhir_profile_core.snapshot.catalog import TypeCatalog
from fhir_profile_core.snapshot.config import SnapshotConfig
from fhir_profile_core.snapshot.definitions import (
    ElementDefinition,
    ElementMap,
    merge_definitions,
    merge_element_maps,
)
from fhir_profile_core.snapshot.nodes import ElementMeta, ElementNode, SliceVariant
from fhir_profile_core.snapshot.slicing import SliceResolver

__all__ = ["SnapshotBuilder"]

logger = logging.getLogger(__name__)


class SnapshotBuilder:
    """Builds a full ElementNode tree from a base type and a differential.

    The builder holds no per-call state; ``build`` can be called repeatedly
    and returns deep-equal trees for identical inputs.

    Example::

        catalog = TypeCatalog.from_schemas(schemas)
        builder = SnapshotBuilder(catalog)
        tree = builder.build("Patient", parse_elements(profile["elements"]))
        tree.children[0].id  # "root/id"
    """

    def __init__(
        self,
        catalog: TypeCatalog,
        config: SnapshotConfig | None = None,
    ) -> None:
        self._catalog = catalog
        self._config = config if config is not None else SnapshotConfig()
        self._slices = SliceResolver(catalog, self._config, self.build_nodes)

    @property
    def config(self) -> SnapshotConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(
        self,
        base_type_name: str,
        differential: ElementMap | None = None,
    ) -> ElementNode:
        """Build the snapshot tree for ``base_type_name``.

        Args:
            base_type_name: Catalog key of the base resource type.
            differential:   Top-level differential element map; None or
                            empty yields the plain base snapshot.

        Returns:
            The root ElementNode.  Its id is ``config.root_id``.
        """
        base_elements = self._catalog.elements_for(base_type_name)
        children = self.build_nodes(
            base_elements,
            differential or {},
            self._config.root_id,
            base_elements,
            required=(),
            type_stack=(),
            depth=1,
        )
        name = self._catalog.name_for(base_type_name) or base_type_name
        return ElementNode(
            id=self._config.root_id,
            name=name,
            meta=ElementMeta(
                type=self._config.root_type_label,
                min=0,
                max=UNBOUNDED,
                short=name,
            ),
            children=tuple(children),
        )

    def build_nodes(
        self,
        base_elements: ElementMap,
        profile_elements: ElementMap,
        parent_id: str,
        root_base: ElementMap,
        required: Sequence[str] = (),
        type_stack: tuple[str, ...] = (),
        depth: int = 1,
    ) -> list[ElementNode]:
        """Build the child nodes of one element.

        Args:
            base_elements:    Inherited element map for this level.
            profile_elements: Differential element map for this level.
            parent_id:        Id of the parent node.
            root_base:        Element map of the root base type; choice types
                              are always resolved against it.
            required:         Field names that default to min 1.
            type_stack:       Type names being expanded along this branch.
            depth:            Nesting depth of the nodes being built.

        Returns:
            Child nodes in base order, then differential-only names.
        """
        if self._too_deep(depth):
            return []

        extension_field = self._config.extension_field
        nodes: list[ElementNode] = []
        for name in _ordered_names(base_elements, profile_elements):
            base = base_elements.get(name)
            profile = profile_elements.get(name)

            if base is not None and base.choice_of:
                continue

            if name == extension_field and profile is not None and profile.declares_slices:
                nodes.extend(
                    self._slices.extension_slices(
                        name, base, profile, parent_id, root_base, type_stack, depth
                    )
                )
                continue

            nodes.append(
                self._build_field(
                    name,
                    base,
                    profile,
                    parent_id,
                    profile_elements,
                    root_base,
                    required,
                    type_stack,
                    depth,
                )
            )
        return nodes

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _too_deep(self, depth: int) -> bool:
        max_depth = self._config.max_depth
        return max_depth is not None and depth > max_depth

    def _build_field(
        self,
        name: str,
        base: ElementDefinition | None,
        profile: ElementDefinition | None,
        parent_id: str,
        profile_elements: ElementMap,
        root_base: ElementMap,
        required: Sequence[str],
        type_stack: tuple[str, ...],
        depth: int,
    ) -> ElementNode:
        merged = merge_definitions(base, profile)
        node_id = f"{parent_id}/{name}"
        min_, max_ = compute_cardinality(merged, is_required=name in required)

        type_name = merged.type or self._config.default_type
        is_choice = merged.choices is not None
        type_label = self._config.union_label if is_choice else type_name

        children_base: ElementMap | None
        if type_name in type_stack:
            logger.debug("Type %r already expanded above %s; emitting leaf", type_name, node_id)
            children_base = None
        else:
            type_elements = {} if is_choice else self._catalog.elements_for(type_name)
            children_base = merge_element_maps(type_elements, merged.elements)

        next_stack = (*type_stack, type_name)
        children: list[ElementNode] = []
        if children_base is not None:
            children = self.build_nodes(
                children_base,
                (profile.elements if profile is not None else None) or {},
                node_id,
                root_base,
                merged.required or (),
                next_stack,
                depth + 1,
            )

        if merged.choices and not self._too_deep(depth + 1):
            children.extend(
                self._choice_children(node_id, merged.choices, profile_elements, root_base)
            )

        slice_variants: tuple[SliceVariant, ...] = ()
        if profile is not None and profile.slices and name != self._config.extension_field:
            slice_variants = self._slices.slice_variants(
                node_id, profile, children_base, root_base, next_stack, depth + 1
            )

        return ElementNode(
            id=node_id,
            name=name,
            meta=ElementMeta(
                type=type_label,
                min=min_,
                max=max_,
                is_summary=merged.summary,
                is_modifier=merged.modifier,
                must_support=merged.must_support,
                short=pick_description(merged),
                desc=pick_detail(merged),
            ),
            children=tuple(children),
            slice_variants=slice_variants,
        )

    def _choice_children(
        self,
        node_id: str,
        choices: Iterable[str],
        profile_elements: ElementMap,
        root_base: ElementMap,
    ) -> list[ElementNode]:
        """One synthetic leaf per choice type that the root catalog or
        differential actually defines."""
        nodes: list[ElementNode] = []
        for choice in choices:
            choice_base = root_base.get(choice)
            choice_profile = profile_elements.get(choice)
            if choice_base is None and choice_profile is None:
                continue
            combined = merge_definitions(choice_base, choice_profile)
            min_, max_ = compute_cardinality(combined, is_required=False)
            nodes.append(
                ElementNode(
                    id=f"{node_id}/{choice}",
                    name=choice,
                    meta=ElementMeta(
                        type=combined.type or self._config.default_type,
                        min=min_,
                        max=max_,
                        is_summary=combined.summary,
                        is_modifier=combined.modifier,
                        must_support=combined.must_support,
                        short=pick_description(combined),
                        desc=pick_detail(combined),
                    ),
                )
            )
        return nodes


def _ordered_names(base: Mapping[str, object], profile: Mapping[str, object]) -> list[str]:
    return [*base, *(name for name in profile if name not in base)]
