"""ExplorerConfig: immutable configuration for the project tree store."""

from __future__ import annotations

from dataclasses import dataclass

from fhir_profile_core.exceptions import ConfigurationError
from fhir_profile_core.explorer.nodes import TreeRoot

__all__ = ["ExplorerConfig"]


@dataclass(frozen=True, slots=True)
class ExplorerConfig:
    """Immutable configuration for TreeStore.

    Attributes:
        default_root: Root group assigned to inserted artifacts whose first
            path segment is not a known root group.
        projection_cache_size: Number of derived projections memoized per
            store.  Must be >= 1.
        validate_paths: When True, ``load`` rejects trees whose child paths
            do not extend their parent's path.
    """

    default_root: TreeRoot = TreeRoot.SD
    projection_cache_size: int = 64
    validate_paths: bool = True

    def __post_init__(self) -> None:
        if self.projection_cache_size < 1:
            msg = (
                "projection_cache_size must be >= 1, "
                f"got {self.projection_cache_size}"
            )
            raise ConfigurationError(msg)
