"""TreeStore: owner of the project tree state and its mutations.

The store holds exactly one ``TreeState`` value: the canonical forest, the
expanded folder paths, the search query, the selected path and the project
id.  Every mutation builds a complete new state and swaps it in under a
lock, so a reader holding an earlier state (or any node from it) never
observes a later edit.

Derived views (filtered tree, match set, flattened rows, selected node)
come from ``TreeProjector`` and are read through ``TreeStore.projection``.

Malformed mutation input is a no-op rather than an error: an artifact
without a path, or a selection path that does not exist, leaves the state
unchanged.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, replace

from fhir_profile_core.explorer.config import ExplorerConfig
from fhir_profile_core.explorer.keyboard import ActionKind, KeyAction, TreeKey, handle_key
from fhir_profile_core.explorer.navigator import PathNavigator
from fhir_profile_core.explorer.nodes import (
    CreatedArtifact,
    NodeKind,
    TreeNode,
    TreeRoot,
)
from fhir_profile_core.explorer.projector import Projection, TreeProjector

__all__ = ["TreeState", "TreeStore", "insert_artifact"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TreeState:
    """Immutable snapshot of everything the store owns.

    Attributes:
        nodes:         Canonical forest, top-level nodes in display order.
        expanded:      Paths of expanded folders.
        query:         Free-text search query, as typed.
        selected_path: Path of the selected node, or None.
        project_id:    Id of the project the tree was loaded for.
    """

    nodes: tuple[TreeNode, ...] = ()
    expanded: frozenset[str] = frozenset()
    query: str = ""
    selected_path: str | None = None
    project_id: str | None = None


class TreeStore:
    """Single owner of the project tree state.

    All writes are serialized behind one re-entrant lock; reads return the
    current immutable state without locking.

    Example::

        store = TreeStore()
        store.load("demo", nodes)
        store.set_query("example")
        for row in store.projection.rows:
            print("  " * row.depth + row.node.name)
    """

    def __init__(self, config: ExplorerConfig | None = None) -> None:
        self._config = config if config is not None else ExplorerConfig()
        self._projector = TreeProjector(max_size=self._config.projection_cache_size)
        self._lock = threading.RLock()
        self._state = TreeState()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> TreeState:
        return self._state

    @property
    def projection(self) -> Projection:
        """Derived views for the current state."""
        return self._projector.project(self._state)

    @property
    def selected_node(self) -> TreeNode | None:
        return self.projection.selected

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def load(self, root_id: str, nodes: Iterable[TreeNode]) -> None:
        """Replace the canonical tree with a freshly fetched one.

        An empty payload is ignored entirely so a failed or partial fetch
        cannot wipe a good tree.  Otherwise expansion resets to the
        top-level folders, the query is cleared, and the selection is kept
        only if its path still exists in the new tree.

        Raises:
            PathConsistencyError: If ``validate_paths`` is enabled and a
                child path does not extend its parent's.
        """
        loaded = tuple(nodes)
        if not loaded:
            logger.debug("Ignoring empty tree payload for project %r", root_id)
            return
        if self._config.validate_paths:
            PathNavigator.check_consistency(loaded)

        with self._lock:
            selected = self._state.selected_path
            if selected is not None and PathNavigator.find(loaded, selected) is None:
                selected = None
            self._state = replace(
                self._state,
                nodes=loaded,
                expanded=PathNavigator.root_folder_paths(loaded),
                query="",
                selected_path=selected,
                project_id=root_id,
            )

    def insert_artifact(
        self, artifact: CreatedArtifact, folder_name: str | None = None
    ) -> None:
        """Add a newly created artifact as the first file of its folder.

        An existing file at the same path is replaced in place.  Missing
        folders along the path are created.  The artifact's ancestor
        folders are expanded so the new file is visible.

        Args:
            artifact:    Descriptor of the created artifact.
            folder_name: Display name for the artifact's immediate folder
                         if it has to be created; defaults to its segment.
        """
        if not artifact.path:
            logger.debug("Ignoring artifact %r without a path", artifact.resource_id)
            return

        with self._lock:
            state = self._state
            self._state = replace(
                state,
                nodes=insert_artifact(
                    state.nodes, artifact, self._config.default_root, folder_name
                ),
                expanded=PathNavigator.expand_to(state.expanded, artifact.path),
            )

    def toggle(self, path: str) -> None:
        """Flip whether ``path`` is expanded."""
        with self._lock:
            expanded = self._state.expanded
            if path in expanded:
                expanded = expanded - {path}
            else:
                expanded = expanded | {path}
            self._state = replace(self._state, expanded=expanded)

    def select(self, path: str | None) -> None:
        """Set the selected path directly, without revealing it."""
        with self._lock:
            self._state = replace(self._state, selected_path=path)

    def clear_selection(self) -> None:
        self.select(None)

    def select_by_path(self, path: str) -> bool:
        """Select the node at ``path`` and expand all of its ancestors.

        Returns:
            True if the node exists.  On a miss the state is unchanged.
        """
        with self._lock:
            state = self._state
            if PathNavigator.find(state.nodes, path) is None:
                logger.debug("select_by_path: no node at %r", path)
                return False
            self._state = replace(
                state,
                selected_path=path,
                expanded=PathNavigator.expand_to(state.expanded, path),
            )
            return True

    def set_query(self, query: str) -> None:
        """Store the search query and adjust expansion to reveal matches.

        A non-blank query expands every folder; a blank one restores the
        default top-level-only expansion.
        """
        with self._lock:
            nodes = self._state.nodes
            if query.strip():
                expanded = PathNavigator.all_folder_paths(nodes)
            else:
                expanded = PathNavigator.root_folder_paths(nodes)
            self._state = replace(self._state, query=query, expanded=expanded)

    def expand_all(self) -> None:
        with self._lock:
            self._state = replace(
                self._state, expanded=PathNavigator.all_folder_paths(self._state.nodes)
            )

    def collapse_all(self) -> None:
        with self._lock:
            self._state = replace(
                self._state, expanded=PathNavigator.root_folder_paths(self._state.nodes)
            )

    def apply_key(self, key: TreeKey) -> KeyAction:
        """Apply keyboard navigation for ``key`` and return the resolved action.

        SELECT and TOGGLE actions are applied here.  ACTIVATE is returned
        for the caller to act on (e.g. opening the resource).
        """
        with self._lock:
            state = self._state
            action = handle_key(
                self.projection.rows, state.selected_path, state.expanded, key
            )
            if action.kind == ActionKind.SELECT:
                self.select(action.path)
            elif action.kind == ActionKind.TOGGLE and action.path is not None:
                self.toggle(action.path)
            return action


# ---------------------------------------------------------------------------
# Structural edits
# ---------------------------------------------------------------------------


def insert_artifact(
    nodes: tuple[TreeNode, ...],
    artifact: CreatedArtifact,
    default_root: TreeRoot = TreeRoot.SD,
    folder_name: str | None = None,
) -> tuple[TreeNode, ...]:
    """Return a new forest with ``artifact`` inserted; ``nodes`` is untouched.

    Only the nodes along the artifact's folder path are rebuilt; all other
    subtrees are shared with the input.  New top-level folders are appended
    to the forest, deeper new folders and the file itself are prepended to
    their parent's children.  A file already present at the artifact's path
    is replaced where it stands.  A path without a folder segment yields a
    new top-level file.
    """
    if not artifact.path:
        return nodes

    segments = artifact.path.split("/")
    folder_parts = [part for part in segments[:-1] if part]
    file_name = segments[-1] or artifact.resource_id
    root = _root_for(folder_parts[0] if folder_parts else "", default_root)
    display_name = folder_name or (folder_parts[-1] if folder_parts else None)

    file_node = TreeNode(
        path=artifact.path,
        name=file_name,
        kind=NodeKind.FILE,
        root=root,
        resource_id=artifact.resource_id,
        resource_type=artifact.resource_type,
        resource_kind=artifact.resource_kind,
        canonical_url=artifact.canonical_url,
    )
    if not folder_parts:
        return _place_file(nodes, file_node)
    return _insert_into(nodes, folder_parts, 0, root, display_name, file_node)


def _insert_into(
    nodes: tuple[TreeNode, ...],
    folder_parts: list[str],
    index: int,
    root: TreeRoot,
    display_name: str | None,
    file_node: TreeNode,
) -> tuple[TreeNode, ...]:
    if index == len(folder_parts):
        return _place_file(nodes, file_node)

    folder_path = "/".join(folder_parts[: index + 1])
    for position, node in enumerate(nodes):
        if node.path == folder_path:
            updated = replace(
                node,
                children=_insert_into(
                    node.children, folder_parts, index + 1, root, display_name, file_node
                ),
            )
            return (*nodes[:position], updated, *nodes[position + 1 :])

    is_last = index == len(folder_parts) - 1
    folder = TreeNode(
        path=folder_path,
        name=(display_name or folder_parts[index]) if is_last else folder_parts[index],
        kind=NodeKind.FOLDER,
        root=root,
        children=_insert_into((), folder_parts, index + 1, root, display_name, file_node),
    )
    if index == 0:
        return (*nodes, folder)
    return (folder, *nodes)


def _place_file(nodes: tuple[TreeNode, ...], file_node: TreeNode) -> tuple[TreeNode, ...]:
    """Prepend ``file_node``, or replace a node with the same path in place."""
    for position, node in enumerate(nodes):
        if node.path == file_node.path:
            return (*nodes[:position], file_node, *nodes[position + 1 :])
    return (file_node, *nodes)


def _root_for(segment: str, default: TreeRoot) -> TreeRoot:
    try:
        return TreeRoot(segment)
    except ValueError:
        return default
