"""Shared schema fixtures for snapshot tests.

A trimmed-down R4 catalog: a Patient resource plus the complex types it
references.  ``Identifier.assigner -> Reference.identifier -> Identifier``
forms a type cycle, and ``Node.next`` is directly self-referential.
Primitive types (string, uri, boolean ...) are deliberately absent, so
fields of those types exercise the unknown-type leaf path.
"""

from __future__ import annotations

from typing import Any

import pytest

from fhir_profile_core.snapshot import SnapshotBuilder, TypeCatalog

PATIENT_SCHEMA: dict[str, Any] = {
    "name": "Patient",
    "type": "Patient",
    "elements": {
        "id": {"type": "id", "summary": True, "short": "Logical id"},
        "extension": {
            "type": "Extension",
            "array": True,
            "definition": "Additional content defined by implementations",
        },
        "identifier": {
            "type": "Identifier",
            "array": True,
            "summary": True,
            "short": "An identifier for this patient",
        },
        "active": {"type": "boolean", "modifier": True, "summary": True},
        "name": {"type": "HumanName", "array": True},
        "deceased": {
            "choices": ["deceasedBoolean", "deceasedDateTime"],
            "modifier": True,
            "short": "Indicates if the individual is deceased or not",
        },
        "deceasedBoolean": {"type": "boolean", "choiceOf": "deceased"},
        "deceasedDateTime": {"type": "dateTime", "choiceOf": "deceased"},
        "contact": {
            "type": "BackboneElement",
            "array": True,
            "elements": {
                "relationship": {"type": "CodeableConcept", "array": True},
                "name": {"type": "HumanName"},
            },
        },
        "link": {
            "type": "BackboneElement",
            "array": True,
            "modifier": True,
            "required": ["other", "type"],
            "elements": {
                "other": {"type": "Reference"},
                "type": {"type": "code"},
            },
        },
    },
}

SUPPORT_SCHEMAS: list[dict[str, Any]] = [
    {
        "name": "Identifier",
        "type": "Identifier",
        "elements": {
            "use": {"type": "code", "modifier": True},
            "system": {"type": "uri"},
            "value": {"type": "string"},
            "assigner": {"type": "Reference"},
        },
    },
    {
        "name": "Reference",
        "type": "Reference",
        "elements": {
            "reference": {"type": "string"},
            "identifier": {"type": "Identifier"},
            "display": {"type": "string"},
        },
    },
    {
        "name": "HumanName",
        "type": "HumanName",
        "elements": {
            "family": {"type": "string", "summary": True},
            "given": {"type": "string", "array": True},
            "period": {"type": "Period"},
        },
    },
    {
        "name": "Period",
        "type": "Period",
        "elements": {
            "start": {"type": "dateTime"},
            "end": {"type": "dateTime"},
        },
    },
    {
        "name": "CodeableConcept",
        "type": "CodeableConcept",
        "elements": {
            "coding": {"type": "Coding", "array": True},
            "text": {"type": "string"},
        },
    },
    {
        "name": "BackboneElement",
        "type": "BackboneElement",
        "elements": {
            "id": {"type": "string"},
            "extension": {"type": "Extension", "array": True},
            "modifierExtension": {"type": "Extension", "array": True, "modifier": True},
        },
    },
    {
        "name": "Extension",
        "type": "Extension",
        "elements": {
            "extension": {"type": "Extension", "array": True},
            "url": {"type": "uri", "min": 1},
            "value": {"choices": ["valueString", "valueCode"]},
            "valueString": {"type": "string", "choiceOf": "value"},
            "valueCode": {"type": "code", "choiceOf": "value"},
        },
    },
    {
        "name": "Node",
        "type": "Node",
        "elements": {
            "label": {"type": "string"},
            "next": {"type": "Node"},
        },
    },
]


@pytest.fixture
def catalog() -> TypeCatalog:
    return TypeCatalog.from_schemas([PATIENT_SCHEMA, *SUPPORT_SCHEMAS])


@pytest.fixture
def builder(catalog: TypeCatalog) -> SnapshotBuilder:
    """A fresh SnapshotBuilder over the test catalog."""
    return SnapshotBuilder(catalog)


@pytest.fixture
def schemas() -> list[dict[str, Any]]:
    """The raw catalog documents, Patient first."""
    return [PATIENT_SCHEMA, *SUPPORT_SCHEMAS]
