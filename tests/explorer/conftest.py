"""Shared project-tree fixtures for explorer tests.

The payload mirrors what the project API returns for a fresh implementation
guide: an IR input tree with one profile, an SD tree with one extension and
an empty value-set folder, and an empty FSH root.
"""

from __future__ import annotations

from typing import Any

import pytest

from fhir_profile_core.explorer import TreeNode, TreeStore

PROJECT_PAYLOAD: list[dict[str, Any]] = [
    {
        "path": "IR",
        "name": "IR",
        "kind": "folder",
        "children": [
            {
                "path": "IR/input",
                "name": "input",
                "kind": "folder",
                "children": [
                    {
                        "path": "IR/input/profiles",
                        "name": "profiles",
                        "kind": "folder",
                        "children": [
                            {
                                "path": "IR/input/profiles/example-profile.json",
                                "name": "example-profile.json",
                                "kind": "file",
                                "resourceId": "example-profile",
                                "resourceType": "StructureDefinition",
                                "resourceKind": "profile",
                                "canonicalUrl": "http://example.org/fhir/StructureDefinition/example-profile",
                            }
                        ],
                    }
                ],
            }
        ],
    },
    {
        "path": "SD",
        "name": "SD",
        "kind": "folder",
        "children": [
            {
                "path": "SD/extensions",
                "name": "extensions",
                "kind": "folder",
                "children": [
                    {
                        "path": "SD/extensions/example-extension.json",
                        "name": "example-extension.json",
                        "kind": "file",
                        "resourceId": "example-extension",
                        "resourceType": "StructureDefinition",
                        "resourceKind": "extension",
                    }
                ],
            },
            {"path": "SD/value-sets", "name": "value-sets", "kind": "folder"},
        ],
    },
    {"path": "FSH", "name": "FSH", "kind": "folder", "children": []},
]


@pytest.fixture
def nodes() -> tuple[TreeNode, ...]:
    return tuple(TreeNode.from_dict(raw) for raw in PROJECT_PAYLOAD)


@pytest.fixture
def payload() -> list[dict[str, Any]]:
    return PROJECT_PAYLOAD


@pytest.fixture
def store(nodes: tuple[TreeNode, ...]) -> TreeStore:
    """A store loaded with the sample project."""
    tree_store = TreeStore()
    tree_store.load("demo", nodes)
    return tree_store
