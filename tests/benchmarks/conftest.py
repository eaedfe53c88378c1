"""Deterministic input generators for performance benchmarks.

All generators produce fixed, reproducible inputs.  No random values.

- Catalog: 20 complex types of 10 fields each.  Every field references the
  next type, so expansion depth is bounded only by the cycle guard.
- Project tree: 3 roots x 20 folders x 50 files = 3,063 nodes.
"""

from __future__ import annotations

from typing import Any

import pytest

from fhir_profile_core.explorer import TreeNode, TreeStore
from fhir_profile_core.snapshot import TypeCatalog

NUM_TYPES = 20
FIELDS_PER_TYPE = 10


def generate_chain_catalog(num_types: int, fields_per_type: int) -> TypeCatalog:
    """Type ``T{i}`` has one complex field pointing at ``T{i+1}``, the rest primitive."""
    schemas: list[dict[str, Any]] = []
    for i in range(num_types):
        elements: dict[str, Any] = {
            f"field{j}": {"type": "string", "short": f"Field {j} of T{i}"}
            for j in range(fields_per_type - 1)
        }
        elements["next"] = {"type": f"T{(i + 1) % num_types}", "array": True}
        schemas.append({"name": f"T{i}", "type": f"T{i}", "elements": elements})
    return TypeCatalog.from_schemas(schemas)


def generate_project_payload(folders: int, files: int) -> list[dict[str, Any]]:
    payload: list[dict[str, Any]] = []
    for root in ("IR", "SD", "FSH"):
        payload.append(
            {
                "path": root,
                "kind": "folder",
                "children": [
                    {
                        "path": f"{root}/folder-{f}",
                        "kind": "folder",
                        "children": [
                            {
                                "path": f"{root}/folder-{f}/resource-{f}-{n}.json",
                                "kind": "file",
                                "resourceId": f"resource-{f}-{n}",
                                "resourceType": "StructureDefinition",
                            }
                            for n in range(files)
                        ],
                    }
                    for f in range(folders)
                ],
            }
        )
    return payload


@pytest.fixture(scope="module")
def chain_catalog() -> TypeCatalog:
    return generate_chain_catalog(NUM_TYPES, FIELDS_PER_TYPE)


@pytest.fixture(scope="module")
def project_nodes() -> tuple[TreeNode, ...]:
    return tuple(TreeNode.from_dict(raw) for raw in generate_project_payload(20, 50))


@pytest.fixture
def loaded_store(project_nodes: tuple[TreeNode, ...]) -> TreeStore:
    store = TreeStore()
    store.load("bench", project_nodes)
    return store
