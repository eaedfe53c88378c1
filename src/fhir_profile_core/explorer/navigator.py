"""PathNavigator: path lookup and ancestor computation over a TreeNode forest.

All helpers are static and side-effect free.  Paths are slash-delimited;
the ancestors of ``a/b/c`` are ``a`` and ``a/b``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from fhir_profile_core.exceptions import PathConsistencyError
from fhir_profile_core.explorer.nodes import TreeNode

__all__ = ["PathNavigator"]


class PathNavigator:
    """Path resolution utilities for the project tree."""

    @staticmethod
    def find(nodes: Sequence[TreeNode], path: str) -> TreeNode | None:
        """Depth-first exact-path lookup.

        Args:
            nodes: Forest to search, in display order.
            path:  Full node path.

        Returns:
            The first node whose path equals ``path``, or None.
        """
        stack = list(reversed(nodes))
        while stack:
            node = stack.pop()
            if node.path == path:
                return node
            stack.extend(reversed(node.children))
        return None

    @staticmethod
    def parent_paths(path: str) -> list[str]:
        """Every proper ancestor path of ``path``, outermost first.

        Examples:
            "IR/input/profiles/p.json" -> ["IR", "IR/input", "IR/input/profiles"]
            "IR" -> []
        """
        parts = [part for part in path.split("/") if part]
        return ["/".join(parts[:i]) for i in range(1, len(parts))]

    @staticmethod
    def expand_to(expanded: Iterable[str], path: str) -> frozenset[str]:
        """Return ``expanded`` plus every ancestor of ``path``."""
        return frozenset(expanded).union(PathNavigator.parent_paths(path))

    @staticmethod
    def root_folder_paths(nodes: Iterable[TreeNode]) -> frozenset[str]:
        """Paths of the top-level folders."""
        return frozenset(node.path for node in nodes if node.is_folder)

    @staticmethod
    def all_folder_paths(nodes: Iterable[TreeNode]) -> frozenset[str]:
        """Paths of every folder reachable through folders."""
        paths: set[str] = set()
        stack = [node for node in nodes if node.is_folder]
        while stack:
            folder = stack.pop()
            paths.add(folder.path)
            stack.extend(child for child in folder.children if child.is_folder)
        return frozenset(paths)

    @staticmethod
    def check_consistency(nodes: Iterable[TreeNode]) -> None:
        """Assert that every child path is its parent's path plus one segment.

        Raises:
            PathConsistencyError: On the first violating child.
        """
        stack = list(nodes)
        while stack:
            parent = stack.pop()
            prefix = parent.path + "/"
            for child in parent.children:
                segment = child.path[len(prefix):]
                if not child.path.startswith(prefix) or not segment or "/" in segment:
                    raise PathConsistencyError(parent.path, child.path)
                stack.append(child)
