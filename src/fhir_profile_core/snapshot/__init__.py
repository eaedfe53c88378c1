"""snapshot subpackage: differential snapshot building.

Re-exports the public API:
- ElementDefinition / parse_elements: schema and differential records
- TypeCatalog: type name -> element map registry
- SnapshotBuilder / SnapshotConfig: the merge algorithm and its settings
- ElementNode / ElementMeta / SliceVariant: the output tree
- element_rows: visible-row projection honouring slice selection
"""

from fhir_profile_core.snapshot.builder import SnapshotBuilder
from fhir_profile_core.snapshot.catalog import TypeCatalog
from fhir_profile_core.snapshot.config import SnapshotConfig
from fhir_profile_core.snapshot.definitions import (
    ElementDefinition,
    SliceDefinition,
    Slicing,
    merge_definitions,
    parse_element,
    parse_elements,
)
from fhir_profile_core.snapshot.nodes import ElementMeta, ElementNode, SliceVariant
from fhir_profile_core.snapshot.slicing import SliceResolver
from fhir_profile_core.snapshot.view import ElementRow, element_rows

__all__ = [
    "ElementDefinition",
    "ElementMeta",
    "ElementNode",
    "ElementRow",
    "SliceDefinition",
    "SliceResolver",
    "SliceVariant",
    "Slicing",
    "SnapshotBuilder",
    "SnapshotConfig",
    "TypeCatalog",
    "element_rows",
    "merge_definitions",
    "parse_element",
    "parse_elements",
]
