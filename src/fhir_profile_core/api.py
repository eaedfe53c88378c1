"""Public API functions for fhir-profile-core.

Thin conveniences over the two engines.  Each snapshot call creates a
fresh ``SnapshotBuilder`` so no state is shared between calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from fhir_profile_core.explorer.nodes import TreeNode
from fhir_profile_core.snapshot.builder import SnapshotBuilder
from fhir_profile_core.snapshot.catalog import TypeCatalog
from fhir_profile_core.snapshot.config import SnapshotConfig
from fhir_profile_core.snapshot.definitions import ElementMap, parse_elements
from fhir_profile_core.snapshot.nodes import ElementNode

__all__ = [
    "build_profile_snapshot",
    "build_snapshot",
    "load_catalog",
    "parse_project_tree",
]


def load_catalog(paths: Iterable[str | Path]) -> TypeCatalog:
    """Build a TypeCatalog from schema JSON files.

    Args:
        paths: Schema documents, each ``{"name", "type", "elements"}``.

    Returns:
        The catalog.  Documents without ``type`` or ``elements`` are skipped.
    """
    return TypeCatalog.from_json_files(paths)


def build_snapshot(
    base_type_name: str,
    differential: ElementMap | None,
    catalog: TypeCatalog,
    config: SnapshotConfig | None = None,
) -> ElementNode:
    """Merge a parsed differential onto ``base_type_name`` and return the tree.

    Args:
        base_type_name: Catalog key of the base resource type.
        differential:   Parsed top-level differential elements, or None.
        catalog:        Type catalog holding the base and all referenced types.
        config:         Builder settings.  Defaults to ``SnapshotConfig()``.

    Returns:
        The root ElementNode of a freshly built snapshot.
    """
    return SnapshotBuilder(catalog, config=config).build(base_type_name, differential)


def build_profile_snapshot(
    profile: Mapping[str, Any],
    catalog: TypeCatalog,
    base_type_name: str | None = None,
    config: SnapshotConfig | None = None,
) -> ElementNode:
    """Build a snapshot from a raw profile document.

    Args:
        profile:        Decoded profile document, ``{"name", "type"?, "elements"}``
                        with camelCase element keys.
        catalog:        Type catalog.
        base_type_name: Base type; defaults to the profile's ``type``.
        config:         Builder settings.

    Raises:
        ValueError: If no base type is given and the profile declares none.
    """
    base = base_type_name or profile.get("type")
    if not base:
        msg = "profile declares no 'type' and no base_type_name was given"
        raise ValueError(msg)
    return build_snapshot(base, parse_elements(profile.get("elements")), catalog, config)


def parse_project_tree(payload: Iterable[Mapping[str, Any]]) -> list[TreeNode]:
    """Parse a camelCase project-tree payload into TreeNodes."""
    return [TreeNode.from_dict(raw) for raw in payload]
