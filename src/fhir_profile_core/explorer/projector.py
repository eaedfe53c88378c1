"""TreeProjector: pure derived views over a TreeState.

Every view is re-derived from scratch for a given state:

- ``filtered_tree``: the canonical tree for a blank query; otherwise a
  pruned copy keeping nodes that match and the ancestors of matches, in
  the original order.
- ``matches``: paths of every node matching the query.
- ``rows``: pre-order walk of ``filtered_tree`` where a node's children are
  emitted only when the node is expanded.  Each row carries its depth, so a
  fixed-row-height virtualized list can render it directly.
- ``selected``: the selected node resolved from the canonical tree, so it
  stays available even when the filter hides it.

Projections are memoized per state object in an LRU cache keyed on the
state's identity.  Each entry holds a reference to its state and is only
reused for that same object.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from cachetools import LRUCache

from fhir_profile_core.explorer.navigator import PathNavigator
from fhir_profile_core.explorer.nodes import FlattenedRow, TreeNode

if TYPE_CHECKING:
    from collections.abc import Sequence, Set

    from fhir_profile_core.explorer.store import TreeState

__all__ = [
    "Projection",
    "TreeProjector",
    "compute_projection",
    "filter_tree",
    "flatten_tree",
    "node_matches",
]


@dataclass(frozen=True, slots=True)
class Projection:
    """All derived views for one TreeState.

    Attributes:
        filtered_tree: Forest after query filtering.
        matches:       Paths of nodes that matched the query.
        rows:          Flattened visible rows of ``filtered_tree``.
        selected:      Selected node from the canonical tree, or None.
    """

    filtered_tree: tuple[TreeNode, ...]
    matches: frozenset[str]
    rows: tuple[FlattenedRow, ...]
    selected: TreeNode | None

    def row_index(self, path: str) -> int | None:
        """Index of the visible row for ``path``, or None if not visible."""
        for index, row in enumerate(self.rows):
            if row.node.path == path:
                return index
        return None


class TreeProjector:
    """Memoizing projector from TreeState to Projection.

    Args:
        max_size: Maximum number of projections kept.  Least-recently-used
            entries are evicted silently.
    """

    def __init__(self, max_size: int = 64) -> None:
        self._cache: LRUCache[int, tuple[TreeState, Projection]] = LRUCache(
            maxsize=max_size
        )

    @property
    def curr_size(self) -> int:
        return int(self._cache.currsize)

    def project(self, state: TreeState) -> Projection:
        """Return the projection for ``state``, computing it on a cache miss."""
        cached = self._cache.get(id(state))
        if cached is not None and cached[0] is state:
            return cached[1]
        projection = compute_projection(state)
        self._cache[id(state)] = (state, projection)
        return projection

    def clear(self) -> None:
        self._cache.clear()


def compute_projection(state: TreeState) -> Projection:
    """Derive every view for ``state`` without caching."""
    query = state.query.strip().lower()
    matches: set[str] = set()
    if query:
        filtered = tuple(filter_tree(state.nodes, query, matches))
    else:
        filtered = state.nodes

    frozen_matches = frozenset(matches)
    selected = None
    if state.selected_path:
        selected = PathNavigator.find(state.nodes, state.selected_path)

    return Projection(
        filtered_tree=filtered,
        matches=frozen_matches,
        rows=tuple(flatten_tree(filtered, state.expanded, frozen_matches)),
        selected=selected,
    )


def node_matches(node: TreeNode, query: str) -> bool:
    """Case-insensitive substring test; ``query`` must already be lower-cased."""
    candidates = (
        node.name,
        node.path,
        node.resource_id,
        node.resource_type,
        node.canonical_url,
    )
    return any(query in value.lower() for value in candidates if value)


def filter_tree(
    nodes: Sequence[TreeNode], query: str, matches: set[str]
) -> list[TreeNode]:
    """Prune ``nodes`` to matches and their ancestors, collecting match paths.

    Args:
        nodes:   Forest to filter.
        query:   Trimmed, lower-cased query.
        matches: Output set; every matching path is added.

    Returns:
        Pruned copies of the kept nodes, original order preserved.
    """
    kept: list[TreeNode] = []
    for node in nodes:
        children = filter_tree(node.children, query, matches)
        is_match = node_matches(node, query)
        if is_match:
            matches.add(node.path)
        if is_match or children:
            kept.append(replace(node, children=tuple(children)))
    return kept


def flatten_tree(
    nodes: Sequence[TreeNode],
    expanded: Set[str],
    matches: Set[str],
    depth: int = 0,
) -> list[FlattenedRow]:
    """Pre-order rows for nodes whose every ancestor is expanded."""
    rows: list[FlattenedRow] = []
    stack = [(node, depth) for node in reversed(nodes)]
    while stack:
        node, level = stack.pop()
        rows.append(FlattenedRow(node=node, depth=level, is_match=node.path in matches))
        if node.children and node.path in expanded:
            stack.extend((child, level + 1) for child in reversed(node.children))
    return rows
