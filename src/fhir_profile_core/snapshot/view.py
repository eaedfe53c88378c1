"""Visible-row projection of a snapshot tree.

A consumer keeps two pieces of view state next to an immutable snapshot:
the set of expanded node ids and, per sliced node, which slice variant is
swapped in.  ``element_rows`` turns the three into the ordered rows a
table renders.
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from dataclasses import dataclass

from fhir_profile_core.snapshot.nodes import ElementNode

__all__ = ["BASE_VARIANT", "ElementRow", "element_rows", "visible_children"]

# Selection value meaning "show the unsliced children".
BASE_VARIANT = "__base"


@dataclass(frozen=True, slots=True)
class ElementRow:
    node: ElementNode
    level: int


def visible_children(
    node: ElementNode, slice_selection: Mapping[str, str] | None = None
) -> tuple[ElementNode, ...]:
    """Children of ``node`` under the current slice selection.

    Falls back to the default children when no variant is selected for the
    node or the selected id is not one of its variants.
    """
    selected = (slice_selection or {}).get(node.id)
    if selected and selected != BASE_VARIANT:
        variant = node.variant(selected)
        if variant is not None:
            return variant.children
    return node.children


def element_rows(
    root: ElementNode,
    expanded: Set[str],
    slice_selection: Mapping[str, str] | None = None,
) -> list[ElementRow]:
    """Depth-first rows for every node reachable through expanded ancestors.

    The root is always emitted at level 0.
    """
    rows: list[ElementRow] = []
    stack: list[tuple[ElementNode, int]] = [(root, 0)]
    while stack:
        node, level = stack.pop()
        rows.append(ElementRow(node=node, level=level))
        if node.id not in expanded:
            continue
        children = visible_children(node, slice_selection)
        stack.extend((child, level + 1) for child in reversed(children))
    return rows
