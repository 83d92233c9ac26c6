"""
kb — baza wiedzy widziana przez walidator: indeks etykiet, protokoły
współpracowników i referencyjna implementacja na faktach.

Publiczne API:
  LabelIndex, short_form                 indeks etykiet (dwukierunkowy)
  ExpressionParser, KnowledgeBase,
  LabelSource                            protokoły współpracowników
  LabelExpressionParser                  referencyjny parser wyrażeń
  FactsKnowledgeBase, Entity, EntityKind referencyjna baza wiedzy
  load_kb_json(path)                     → FactsKnowledgeBase
  Evaluator, parse_rule                  silnik Datalog domknięcia
"""

from .label_index import LabelIndex, LabelCollision, short_form
from .expressions import (
    ExpressionParseError,
    NamedEntity,
    Intersection,
    Expression,
    SubClassOf,
    EquivalentClasses,
    Axiom,
    LabelExpressionParser,
)
from .knowledge_base import (
    EntityKind,
    Entity,
    ExpressionParser,
    KnowledgeBase,
    LabelSource,
    FactsKnowledgeBase,
    CLOSURE_RULES,
)
from .loader import KB_SCHEMA, KnowledgeBaseFormatError, kb_from_dict, load_kb_json
from .engine import Evaluator, parse_rule, parse_atom
from .types import Atom, Rule

__all__ = [
    "LabelIndex",
    "LabelCollision",
    "short_form",
    "ExpressionParseError",
    "NamedEntity",
    "Intersection",
    "Expression",
    "SubClassOf",
    "EquivalentClasses",
    "Axiom",
    "LabelExpressionParser",
    "EntityKind",
    "Entity",
    "ExpressionParser",
    "KnowledgeBase",
    "LabelSource",
    "FactsKnowledgeBase",
    "CLOSURE_RULES",
    "KB_SCHEMA",
    "KnowledgeBaseFormatError",
    "kb_from_dict",
    "load_kb_json",
    "Evaluator",
    "parse_rule",
    "parse_atom",
    "Atom",
    "Rule",
]
