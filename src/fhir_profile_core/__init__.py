"""fhir-profile-core - snapshot building and project tree projection for FHIR profile authoring."""

from __future__ import annotations

import logging

from fhir_profile_core.api import (
    build_profile_snapshot,
    build_snapshot,
    load_catalog,
    parse_project_tree,
)
from fhir_profile_core.explorer import (
    CreatedArtifact,
    ExplorerConfig,
    Projection,
    TreeNode,
    TreeStore,
)
from fhir_profile_core.snapshot import (
    ElementNode,
    SnapshotBuilder,
    SnapshotConfig,
    TypeCatalog,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__: str = "0.1.0"
__all__: list[str] = [
    "CreatedArtifact",
    "ElementNode",
    "ExplorerConfig",
    "Projection",
    "SnapshotBuilder",
    "SnapshotConfig",
    "TreeNode",
    "TreeStore",
    "TypeCatalog",
    "build_profile_snapshot",
    "build_snapshot",
    "load_catalog",
    "parse_project_tree",
]
