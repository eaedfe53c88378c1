"""explorer subpackage: project tree state and its derived views.

Re-exports the public API:
- TreeNode / CreatedArtifact and their enums: project tree data
- TreeStore / TreeState: canonical state and mutations
- TreeProjector / Projection: filtered tree, matches, flattened rows
- PathNavigator: path lookup and ancestor helpers
- handle_key / TreeKey: keyboard navigation over flattened rows
"""

from fhir_profile_core.explorer.config import ExplorerConfig
from fhir_profile_core.explorer.keyboard import ActionKind, KeyAction, TreeKey, handle_key
from fhir_profile_core.explorer.navigator import PathNavigator
from fhir_profile_core.explorer.nodes import (
    CreatedArtifact,
    FlattenedRow,
    NodeKind,
    ResourceKind,
    TreeNode,
    TreeRoot,
)
from fhir_profile_core.explorer.projector import Projection, TreeProjector
from fhir_profile_core.explorer.store import TreeState, TreeStore

__all__ = [
    "ActionKind",
    "CreatedArtifact",
    "ExplorerConfig",
    "FlattenedRow",
    "KeyAction",
    "NodeKind",
    "PathNavigator",
    "Projection",
    "ResourceKind",
    "TreeKey",
    "TreeNode",
    "TreeProjector",
    "TreeRoot",
    "TreeState",
    "TreeStore",
    "handle_key",
]
