"""Tests for TreeProjector and the pure projection functions."""

from __future__ import annotations

from dataclasses import replace

import pytest

from fhir_profile_core.explorer import TreeNode, TreeProjector, TreeState
from fhir_profile_core.explorer.navigator import PathNavigator
from fhir_profile_core.explorer.projector import (
    compute_projection,
    filter_tree,
    flatten_tree,
    node_matches,
)


def _state(nodes: tuple[TreeNode, ...], query: str = "", **kwargs: object) -> TreeState:
    return TreeState(
        nodes=nodes,
        expanded=PathNavigator.all_folder_paths(nodes),
        query=query,
        **kwargs,  # type: ignore[arg-type]
    )


class TestFiltering:
    def test_blank_query_returns_canonical_tree(self, nodes: tuple[TreeNode, ...]) -> None:
        projection = compute_projection(_state(nodes, "  "))
        assert projection.filtered_tree is nodes
        assert projection.matches == frozenset()
        assert len(projection.rows) == 9

    def test_query_keeps_matches_and_ancestors(self, nodes: tuple[TreeNode, ...]) -> None:
        projection = compute_projection(_state(nodes, "example"))
        assert projection.matches == frozenset(
            {
                "IR/input/profiles/example-profile.json",
                "SD/extensions/example-extension.json",
            }
        )
        assert [row.node.path for row in projection.rows] == [
            "IR",
            "IR/input",
            "IR/input/profiles",
            "IR/input/profiles/example-profile.json",
            "SD",
            "SD/extensions",
            "SD/extensions/example-extension.json",
        ]

    def test_match_flags_on_rows(self, nodes: tuple[TreeNode, ...]) -> None:
        projection = compute_projection(_state(nodes, "profile"))
        flagged = {row.node.path for row in projection.rows if row.is_match}
        assert flagged == {
            "IR/input/profiles",
            "IR/input/profiles/example-profile.json",
        }
        assert flagged == projection.matches

    def test_query_is_case_insensitive_and_trimmed(
        self, nodes: tuple[TreeNode, ...]
    ) -> None:
        upper = compute_projection(_state(nodes, "  EXAMPLE "))
        lower = compute_projection(_state(nodes, "example"))
        assert upper.matches == lower.matches

    def test_no_match_yields_empty_tree(self, nodes: tuple[TreeNode, ...]) -> None:
        projection = compute_projection(_state(nodes, "zzz"))
        assert projection.filtered_tree == ()
        assert projection.rows == ()

    def test_filter_does_not_touch_input(self, nodes: tuple[TreeNode, ...]) -> None:
        matches: set[str] = set()
        filter_tree(nodes, "extension", matches)
        assert len(nodes[1].children) == 2
        assert "SD/extensions" in matches

    def test_matching_folder_subtree_is_kept(
        self, nodes: tuple[TreeNode, ...]
    ) -> None:
        kept = filter_tree(nodes, "sd", set())
        # Every SD descendant matches through its path; nothing under IR does
        (sd,) = kept
        assert [child.path for child in sd.children] == [
            "SD/extensions",
            "SD/value-sets",
        ]


class TestNodeMatches:
    def test_fields_searched(self, nodes: tuple[TreeNode, ...]) -> None:
        profile = nodes[0].children[0].children[0].children[0]
        assert node_matches(profile, "example-profile")
        assert node_matches(profile, "structuredefinition")
        assert node_matches(profile, "example.org")
        assert node_matches(profile, "ir/input")
        assert not node_matches(profile, "valueset")


class TestFlatten:
    def test_collapsed_folders_hide_children(self, nodes: tuple[TreeNode, ...]) -> None:
        rows = flatten_tree(nodes, expanded={"SD"}, matches=set())
        assert [(row.node.path, row.depth) for row in rows] == [
            ("IR", 0),
            ("SD", 0),
            ("SD/extensions", 1),
            ("SD/value-sets", 1),
            ("FSH", 0),
        ]

    def test_rows_respect_ancestor_expansion(self, nodes: tuple[TreeNode, ...]) -> None:
        rows = flatten_tree(nodes, expanded={"IR/input"}, matches=set())
        assert [row.node.path for row in rows] == ["IR", "SD", "FSH"]


class TestSelected:
    def test_selected_from_canonical_tree(self, nodes: tuple[TreeNode, ...]) -> None:
        state = _state(nodes, "example", selected_path="SD/value-sets")
        projection = compute_projection(state)
        assert projection.selected is not None
        assert projection.selected.path == "SD/value-sets"
        assert projection.row_index("SD/value-sets") is None

    def test_unknown_selection(self, nodes: tuple[TreeNode, ...]) -> None:
        projection = compute_projection(_state(nodes, selected_path="nope"))
        assert projection.selected is None


class TestTreeProjector:
    def test_memoizes_per_state(self, nodes: tuple[TreeNode, ...]) -> None:
        projector = TreeProjector()
        state = _state(nodes)
        first = projector.project(state)
        assert projector.project(state) is first
        assert projector.curr_size == 1

    def test_equal_state_object_is_not_a_hit(self, nodes: tuple[TreeNode, ...]) -> None:
        projector = TreeProjector()
        state = _state(nodes)
        first = projector.project(state)
        again = projector.project(replace(state))
        assert again is not first
        assert again == first
        assert projector.curr_size == 2

    def test_hit_does_not_hash_state(
        self, nodes: tuple[TreeNode, ...], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        projector = TreeProjector()
        state = _state(nodes)
        first = projector.project(state)

        def fail(self: object) -> int:
            raise AssertionError("state was hashed")

        monkeypatch.setattr(type(state), "__hash__", fail)
        assert projector.project(state) is first

    def test_new_state_recomputes(self, nodes: tuple[TreeNode, ...]) -> None:
        projector = TreeProjector()
        state = _state(nodes)
        first = projector.project(state)
        second = projector.project(replace(state, query="example"))
        assert second is not first
        assert projector.curr_size == 2

    def test_eviction(self, nodes: tuple[TreeNode, ...]) -> None:
        projector = TreeProjector(max_size=1)
        state = _state(nodes)
        first = projector.project(state)
        projector.project(replace(state, query="x"))
        assert projector.curr_size == 1
        assert projector.project(state) is not first

    def test_clear(self, nodes: tuple[TreeNode, ...]) -> None:
        projector = TreeProjector()
        projector.project(_state(nodes))
        projector.clear()
        assert projector.curr_size == 0
