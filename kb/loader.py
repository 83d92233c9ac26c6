"""
kb/loader.py — wczytywanie bazy wiedzy z pliku JSON.

Publiczne API:
  load_kb_json(path)   -> FactsKnowledgeBase
  kb_from_dict(data)   -> FactsKnowledgeBase
  KB_SCHEMA            schemat JSON (Draft 2020-12) pliku bazy wiedzy

Oczekiwany format::

    {
        "entities": [
            {"id": "http://example.org/onto#Neuron", "label": "neuron", "kind": "class"},
            {"id": "http://example.org/onto#n1",     "label": "n1",     "kind": "instance"}
        ],
        "subclass_of":   [["http://example.org/onto#Neuron", "http://example.org/onto#Cell"]],
        "equivalent_to": [],
        "instance_of":   [["http://example.org/onto#n1", "http://example.org/onto#Neuron"]]
    }
"""

from __future__ import annotations

import json
import pathlib
from typing import Any

import jsonschema

from .knowledge_base import Entity, EntityKind, FactsKnowledgeBase


class KnowledgeBaseFormatError(ValueError):
    """Plik bazy wiedzy nie spełnia KB_SCHEMA."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


_PAIR = {
    "type": "array",
    "items": {"type": "string", "minLength": 1},
    "minItems": 2,
    "maxItems": 2,
}

KB_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["entities"],
    "properties": {
        "entities": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "kind"],
                "properties": {
                    "id":    {"type": "string", "minLength": 1},
                    "label": {"type": "string"},
                    "kind":  {"enum": [k.value for k in EntityKind]},
                },
            },
        },
        "subclass_of":   {"type": "array", "items": _PAIR},
        "equivalent_to": {"type": "array", "items": _PAIR},
        "instance_of":   {"type": "array", "items": _PAIR},
    },
}


def _schema_errors(data: Any) -> list[str]:
    validator = jsonschema.Draft202012Validator(KB_SCHEMA)
    out: list[str] = []
    for e in validator.iter_errors(data):
        path = (
            "/" + "/".join(str(p) for p in e.absolute_path)
            if e.absolute_path
            else "/"
        )
        out.append(f"{path}: {e.message}")
    return out


def kb_from_dict(data: dict[str, Any]) -> FactsKnowledgeBase:
    """Buduje FactsKnowledgeBase z już wczytanego słownika (po walidacji schematu)."""
    errors = _schema_errors(data)
    if errors:
        raise KnowledgeBaseFormatError(
            f"Plik bazy wiedzy nie spełnia schematu ({len(errors)} błąd(ów)).",
            errors,
        )

    entities = [
        Entity(
            identifier=e["id"],
            label=e.get("label") or None,
            kind=EntityKind(e["kind"]),
        )
        for e in data["entities"]
    ]
    return FactsKnowledgeBase(
        entities,
        subclass_of=[tuple(p) for p in data.get("subclass_of", [])],
        equivalent_to=[tuple(p) for p in data.get("equivalent_to", [])],
        instance_of=[tuple(p) for p in data.get("instance_of", [])],
    )


def load_kb_json(path: str | pathlib.Path) -> FactsKnowledgeBase:
    """
    Wczytuje bazę wiedzy z pliku JSON.

    Raises:
        FileNotFoundError         gdy plik nie istnieje
        json.JSONDecodeError      gdy plik nie jest poprawnym JSON
        KnowledgeBaseFormatError  gdy plik nie spełnia KB_SCHEMA
    """
    raw = json.loads(pathlib.Path(path).read_text(encoding="utf-8"))
    return kb_from_dict(raw)
