"""TypeCatalog: mapping from type name to that type's element map.

The catalog is static input.  It is assembled from schema documents of the
form ``{"name": ..., "type": ..., "elements": {...}}``; documents lacking a
``type`` or ``elements`` key are ignored, matching how partial FHIR
packages are shipped.

Lookups of unknown types return an empty map instead of raising: the
core package data is routinely incomplete and the builder treats such
fields as leaves.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from fhir_profile_core.exceptions import SchemaFormatError
from fhir_profile_core.snapshot.definitions import (
    ElementDefinition,
    ElementMap,
    parse_elements,
)

__all__ = ["TypeCatalog"]

logger = logging.getLogger(__name__)

_EMPTY: ElementMap = MappingProxyType({})


class TypeCatalog:
    """Read-only registry of element maps keyed by type name.

    Example::

        catalog = TypeCatalog.from_schemas([
            {"name": "Period", "type": "Period", "elements": {
                "start": {"type": "dateTime"},
                "end": {"type": "dateTime"},
            }},
        ])
        catalog.elements_for("Period")   # {"start": ..., "end": ...}
        catalog.elements_for("Unknown")  # {}
    """

    def __init__(
        self,
        types: Mapping[str, ElementMap] | None = None,
        names: Mapping[str, str] | None = None,
    ) -> None:
        self._types: dict[str, ElementMap] = {
            type_name: MappingProxyType(dict(elements))
            for type_name, elements in (types or {}).items()
        }
        self._names: dict[str, str] = dict(names or {})

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_schemas(cls, schemas: Iterable[Mapping[str, Any]]) -> TypeCatalog:
        """Build a catalog from already-decoded schema documents.

        Later documents for the same type replace earlier ones.
        """
        types: dict[str, ElementMap] = {}
        names: dict[str, str] = {}
        for schema in schemas:
            type_name = schema.get("type")
            raw_elements = schema.get("elements")
            if not type_name or not raw_elements:
                logger.debug("Skipping schema %r without type or elements", schema.get("name"))
                continue
            types[type_name] = parse_elements(raw_elements)
            names[type_name] = schema.get("name") or type_name
        return cls(types, names)

    @classmethod
    def from_json_files(cls, paths: Iterable[str | Path]) -> TypeCatalog:
        """Read schema documents from JSON files and build a catalog.

        Raises:
            SchemaFormatError: If a file does not contain a JSON object.
            OSError, json.JSONDecodeError: Propagated from reading/decoding.
        """
        schemas: list[Mapping[str, Any]] = []
        for path in paths:
            document = json.loads(Path(path).read_text(encoding="utf-8"))
            if not isinstance(document, dict):
                raise SchemaFormatError(str(path), "top-level value must be an object")
            schemas.append(document)
        return cls.from_schemas(schemas)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def elements_for(self, type_name: str | None) -> ElementMap:
        """Return the element map for ``type_name``; empty when unknown."""
        if not type_name:
            return _EMPTY
        elements = self._types.get(type_name)
        if elements is None:
            # Primitive types are lowercase and never have catalog entries
            if type_name[:1].isupper():
                logger.debug("No catalog entry for type %r; treating as leaf", type_name)
            return _EMPTY
        return elements

    def name_for(self, type_name: str) -> str | None:
        """Return the display name of the schema registered for ``type_name``."""
        return self._names.get(type_name)

    def element(self, type_name: str, field_name: str) -> ElementDefinition | None:
        return self.elements_for(type_name).get(field_name)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types

    def __len__(self) -> int:
        return len(self._types)

    @property
    def type_names(self) -> list[str]:
        return list(self._types)
