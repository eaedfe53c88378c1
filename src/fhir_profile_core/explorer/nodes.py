"""TreeNode and supporting types for the project resource browser.

Nodes are frozen and hold their children in tuples, so a tree value never
changes once built.  Structural edits produce a new tree that shares every
untouched subtree with the old one.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

__all__ = [
    "CreatedArtifact",
    "FlattenedRow",
    "NodeKind",
    "ResourceKind",
    "TreeNode",
    "TreeRoot",
]


class NodeKind(StrEnum):
    """Whether a tree node is a folder or a file."""

    FOLDER = auto()
    FILE = auto()


class TreeRoot(StrEnum):
    """Logical root groups; the first path segment of every node.

    - IR:  implementation-guide input files
    - SD:  StructureDefinition-family artifacts
    - FSH: FHIR Shorthand sources
    """

    IR = "IR"
    SD = "SD"
    FSH = "FSH"


class ResourceKind(StrEnum):
    PROFILE = auto()
    INSTANCE = auto()
    VALUESET = auto()
    CODESYSTEM = auto()
    EXTENSION = auto()
    EXAMPLE = auto()
    OPERATION = auto()
    MAPPING = auto()
    OTHER = auto()


@dataclass(frozen=True, slots=True)
class TreeNode:
    """A folder or file in the project tree.

    Attributes:
        path:          Slash-delimited, unique; first segment is the root group.
        name:          Display label, usually the last path segment.
        kind:          Folder or file.
        root:          Root group the node belongs to.
        children:      Ordered children; always empty for files.
        resource_id:   FHIR resource id for resource files.
        resource_type: FHIR resource type, e.g. "StructureDefinition".
        resource_kind: Authoring category of the resource.
        canonical_url: Canonical URL of the resource.
    """

    path: str
    name: str
    kind: NodeKind
    root: TreeRoot = TreeRoot.SD
    children: tuple[TreeNode, ...] = ()
    resource_id: str | None = None
    resource_type: str | None = None
    resource_kind: ResourceKind | None = None
    canonical_url: str | None = None

    @property
    def is_folder(self) -> bool:
        return self.kind == NodeKind.FOLDER

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> TreeNode:
        """Parse a camelCase project-tree payload node (recursively)."""
        resource_kind = raw.get("resourceKind")
        return cls(
            path=raw["path"],
            name=raw.get("name") or raw["path"].rsplit("/", 1)[-1],
            kind=NodeKind(raw.get("kind", NodeKind.FILE)),
            root=TreeRoot(raw["root"]) if raw.get("root") else _root_of(raw["path"]),
            children=tuple(cls.from_dict(child) for child in raw.get("children") or ()),
            resource_id=raw.get("resourceId"),
            resource_type=raw.get("resourceType"),
            resource_kind=ResourceKind(resource_kind) if resource_kind else None,
            canonical_url=raw.get("canonicalUrl"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the camelCase payload shape."""
        data: dict[str, Any] = {
            "path": self.path,
            "name": self.name,
            "kind": str(self.kind),
            "root": str(self.root),
            "children": [child.to_dict() for child in self.children],
        }
        if self.resource_id is not None:
            data["resourceId"] = self.resource_id
        if self.resource_type is not None:
            data["resourceType"] = self.resource_type
        if self.resource_kind is not None:
            data["resourceKind"] = str(self.resource_kind)
        if self.canonical_url is not None:
            data["canonicalUrl"] = self.canonical_url
        return data


@dataclass(frozen=True, slots=True)
class CreatedArtifact:
    """Descriptor of a newly created artifact, as returned on creation."""

    path: str
    resource_id: str
    resource_type: str
    resource_kind: ResourceKind = ResourceKind.OTHER
    canonical_url: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> CreatedArtifact:
        return cls(
            path=raw.get("path") or "",
            resource_id=raw.get("resourceId") or "",
            resource_type=raw.get("resourceType") or "",
            resource_kind=ResourceKind(raw.get("resourceKind") or ResourceKind.OTHER),
            canonical_url=raw.get("canonicalUrl"),
        )


@dataclass(frozen=True, slots=True)
class FlattenedRow:
    """One visible row of the flattened tree."""

    node: TreeNode
    depth: int
    is_match: bool = False


def _root_of(path: str) -> TreeRoot:
    head = path.split("/", 1)[0]
    try:
        return TreeRoot(head)
    except ValueError:
        return TreeRoot.SD
