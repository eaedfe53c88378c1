"""Exception hierarchy for fhir-profile-core.

The snapshot builder and the tree store are deliberately lenient: missing
type references, empty artifact paths and unknown selection paths degrade
silently.  The exceptions below cover the remaining cases where input is
structurally wrong rather than merely incomplete.
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "FhirProfileCoreError",
    "PathConsistencyError",
    "SchemaFormatError",
]


class FhirProfileCoreError(Exception):
    """Base exception for all fhir-profile-core errors."""


class ConfigurationError(FhirProfileCoreError, ValueError):
    """Raised when a config dataclass is constructed with invalid values."""


class SchemaFormatError(FhirProfileCoreError, ValueError):
    """Raised when a schema document is not a JSON object."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid schema document '{source}': {reason}")


class PathConsistencyError(FhirProfileCoreError, AssertionError):
    """Raised when a child node's path does not extend its parent's path.

    Subclasses ``AssertionError``: a broken path hierarchy is a caller bug
    and there is no meaningful recovery.
    """

    def __init__(self, parent_path: str, child_path: str) -> None:
        self.parent_path = parent_path
        self.child_path = child_path
        super().__init__(
            f"Node path '{child_path}' does not extend parent path '{parent_path}'"
        )
