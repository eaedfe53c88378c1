"""SnapshotConfig: immutable configuration for the snapshot builder.

Holds naming conventions and an optional depth ceiling.  The merge rules
themselves are not configurable.
"""

from __future__ import annotations

from dataclasses import dataclass

from fhir_profile_core.exceptions import ConfigurationError

__all__ = ["SnapshotConfig"]


@dataclass(frozen=True, slots=True)
class SnapshotConfig:
    """Immutable configuration for SnapshotBuilder.

    Attributes:
        root_id: Id of the root ElementNode; every other id extends it.
        root_type_label: Type label shown on the root node.
        default_type: Type name assumed when a field declares none.
        union_label: Type label used for choice fields.
        extension_field: Field name treated as the extension slot.
        extension_type: Type label for extension slices whose schema and
            field both omit a type.
        max_depth: Optional hard ceiling on nesting depth below the root.
            ``None`` means only the type-stack cycle guard limits expansion.
    """

    root_id: str = "root"
    root_type_label: str = "Resource"
    default_type: str = "Element"
    union_label: str = "union"
    extension_field: str = "extension"
    extension_type: str = "Extension"
    max_depth: int | None = None

    def __post_init__(self) -> None:
        if not self.root_id or "/" in self.root_id:
            msg = f"root_id must be a non-empty segment without '/', got {self.root_id!r}"
            raise ConfigurationError(msg)
        if not self.extension_field:
            msg = "extension_field must not be empty"
            raise ConfigurationError(msg)
        if self.max_depth is not None and self.max_depth < 1:
            msg = f"max_depth must be >= 1, got {self.max_depth}"
            raise ConfigurationError(msg)
