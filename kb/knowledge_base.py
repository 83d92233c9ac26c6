"""
kb/knowledge_base.py — interfejsy współpracowników i referencyjna baza wiedzy.

Protokoły (implementowane poza rdzeniem walidatora):
  ExpressionParser  parse(text) -> Expression, ExpressionParseError
  KnowledgeBase     subclasses_of / superclasses_of / equivalent_classes /
                    instances_of / is_entailed / classify
  LabelSource       forward_labels() -> identyfikator -> etykieta

FactsKnowledgeBase — implementacja referencyjna: encje + asercje
(subclass_of, equivalent_to, instance_of) domknięte zestawem reguł
Datalog (CLOSURE_RULES) przez silnik kb.engine.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from .engine import Evaluator, parse_rule
from .expressions import (
    Axiom,
    EquivalentClasses,
    Expression,
    Intersection,
    NamedEntity,
    SubClassOf,
)
from .types import Facts


class EntityKind(StrEnum):
    CLASS    = "class"
    INSTANCE = "instance"


# ---------------------------------------------------------------------------
# Protokoły
# ---------------------------------------------------------------------------

class ExpressionParser(Protocol):
    def parse(self, text: str) -> Expression:
        ...


class KnowledgeBase(Protocol):
    def subclasses_of(self, expr: Expression, direct: bool) -> set[str]:
        ...

    def superclasses_of(self, expr: Expression, direct: bool) -> set[str]:
        ...

    def equivalent_classes(self, expr: Expression) -> set[str]:
        ...

    def instances_of(self, expr: Expression, direct: bool) -> set[str]:
        ...

    def is_entailed(self, axiom: Axiom) -> bool:
        ...

    def classify(self, identifier: str) -> EntityKind | None:
        ...


class LabelSource(Protocol):
    def forward_labels(self) -> Mapping[str, str]:
        ...


# ---------------------------------------------------------------------------
# Reguły domknięcia
# ---------------------------------------------------------------------------

# sub       : podklasa lub równa (zwrotna, przechodnia)
# same      : równoważność wyprowadzona z sub w obie strony
# strict_sub: podklasa właściwa (bez klas równoważnych)
# direct_sub: podklasa bezpośrednia (brak klasy pośredniej)
# type      : przynależność instancji do klasy (z nadklasami)
CLOSURE_RULES: tuple[str, ...] = (
    "equiv(?A, ?B) :- equivalent_to(?A, ?B).",
    "equiv(?B, ?A) :- equivalent_to(?A, ?B).",
    "sub(?A, ?A) :- class(?A).",
    "sub(?A, ?B) :- subclass_of(?A, ?B).",
    "sub(?A, ?B) :- equiv(?A, ?B).",
    "sub(?A, ?C) :- sub(?A, ?B), sub(?B, ?C).",
    "same(?A, ?B) :- sub(?A, ?B), sub(?B, ?A).",
    "strict_sub(?A, ?B) :- sub(?A, ?B), not same(?A, ?B).",
    "indirect_sub(?A, ?C) :- strict_sub(?A, ?B), strict_sub(?B, ?C).",
    "direct_sub(?A, ?B) :- strict_sub(?A, ?B), not indirect_sub(?A, ?B).",
    "type(?I, ?C) :- instance_of(?I, ?C).",
    "type(?I, ?D) :- type(?I, ?C), sub(?C, ?D).",
    "indirect_type(?I, ?D) :- type(?I, ?C), strict_sub(?C, ?D).",
    "direct_type(?I, ?C) :- type(?I, ?C), not indirect_type(?I, ?C).",
)


@dataclass(frozen=True, slots=True)
class Entity:
    identifier: str
    label: str | None
    kind: EntityKind


# ---------------------------------------------------------------------------
# FactsKnowledgeBase
# ---------------------------------------------------------------------------

class FactsKnowledgeBase:
    """
    Baza wiedzy oparta o fakty i domknięcie Datalog.

    Użycie::

        kb = FactsKnowledgeBase(
            entities=[Entity("ex:A", "A", EntityKind.CLASS), ...],
            subclass_of=[("ex:A", "ex:B")],
        )
        kb.is_entailed(SubClassOf(NamedEntity("ex:A"), NamedEntity("ex:B")))
    """

    def __init__(
        self,
        entities:      Iterable[Entity],
        subclass_of:   Iterable[tuple[str, str]] = (),
        equivalent_to: Iterable[tuple[str, str]] = (),
        instance_of:   Iterable[tuple[str, str]] = (),
    ) -> None:
        self._entities: dict[str, Entity] = {e.identifier: e for e in entities}

        edb: Facts = {
            "class":         {(i,) for i, e in self._entities.items() if e.kind is EntityKind.CLASS},
            "subclass_of":   {tuple(p) for p in subclass_of},
            "equivalent_to": {tuple(p) for p in equivalent_to},
            "instance_of":   {tuple(p) for p in instance_of},
        }
        self._evaluator = Evaluator([parse_rule(r) for r in CLOSURE_RULES], edb)
        self._evaluator.evaluate()

    # ------------------------------------------------------------------
    # LabelSource
    # ------------------------------------------------------------------

    def forward_labels(self) -> dict[str, str]:
        return {i: e.label for i, e in self._entities.items() if e.label}

    @property
    def entities(self) -> list[Entity]:
        return list(self._entities.values())

    def classify(self, identifier: str) -> EntityKind | None:
        entity = self._entities.get(identifier)
        return entity.kind if entity else None

    # ------------------------------------------------------------------
    # Zbiory pomocnicze na faktach wyprowadzonych
    # ------------------------------------------------------------------

    def _classes(self) -> set[str]:
        return {i for i, e in self._entities.items() if e.kind is EntityKind.CLASS}

    def _below(self, identifier: str) -> set[str]:
        """Klasy X takie, że X ⊑ identifier (łącznie z nią samą)."""
        return {s["?X"] for s in self._evaluator.query("sub", ("?X", identifier))}

    def _above(self, identifier: str) -> set[str]:
        """Klasy Y takie, że identifier ⊑ Y (łącznie z nią samą)."""
        return {s["?Y"] for s in self._evaluator.query("sub", (identifier, "?Y"))}

    def _sub_or_equal(self, expr: Expression) -> set[str]:
        """Klasy nazwane zawarte w wyrażeniu."""
        if isinstance(expr, NamedEntity):
            return self._below(expr.identifier)
        result = self._classes()
        for operand in expr.operands:
            result &= self._sub_or_equal(operand)
        return result

    def _super_or_equal(self, expr: Expression) -> set[str]:
        """Klasy nazwane zawierające wyrażenie."""
        if isinstance(expr, NamedEntity):
            return self._above(expr.identifier)
        result: set[str] = set()
        for operand in expr.operands:
            result |= self._super_or_equal(operand)
        return result

    def _is_strict_sub(self, a: str, b: str) -> bool:
        return self._evaluator.holds("strict_sub", a, b)

    # ------------------------------------------------------------------
    # KnowledgeBase
    # ------------------------------------------------------------------

    def equivalent_classes(self, expr: Expression) -> set[str]:
        return self._sub_or_equal(expr) & self._super_or_equal(expr)

    def subclasses_of(self, expr: Expression, direct: bool) -> set[str]:
        if isinstance(expr, NamedEntity) and direct:
            return {s["?X"] for s in self._evaluator.query("direct_sub", ("?X", expr.identifier))}
        strict = self._sub_or_equal(expr) - self.equivalent_classes(expr)
        if not direct:
            return strict
        # maksymalne elementy zbioru podklas właściwych
        return {x for x in strict if not any(self._is_strict_sub(x, y) for y in strict)}

    def superclasses_of(self, expr: Expression, direct: bool) -> set[str]:
        if isinstance(expr, NamedEntity) and direct:
            return {s["?Y"] for s in self._evaluator.query("direct_sub", (expr.identifier, "?Y"))}
        strict = self._super_or_equal(expr) - self.equivalent_classes(expr)
        if not direct:
            return strict
        # minimalne elementy zbioru nadklas właściwych
        return {y for y in strict if not any(self._is_strict_sub(x, y) for x in strict)}

    def instances_of(self, expr: Expression, direct: bool) -> set[str]:
        if isinstance(expr, NamedEntity):
            pred = "direct_type" if direct else "type"
            return {s["?I"] for s in self._evaluator.query(pred, ("?I", expr.identifier))}
        members: set[str] | None = None
        for operand in expr.operands:
            found = self.instances_of(operand, direct=False)
            members = found if members is None else members & found
        members = members or set()
        if not direct:
            return members
        below = self.subclasses_of(expr, direct=False)
        return {
            i for i in members
            if not any(self._evaluator.holds("type", i, c) for c in below)
        }

    def is_entailed(self, axiom: Axiom) -> bool:
        if isinstance(axiom, SubClassOf):
            return self._entails_sub(axiom.sub, axiom.sup)
        if isinstance(axiom, EquivalentClasses):
            return (
                self._entails_sub(axiom.first, axiom.second)
                and self._entails_sub(axiom.second, axiom.first)
            )
        raise TypeError(f"Nieobsługiwany aksjomat: {axiom!r}")

    def _entails_sub(self, sub: Expression, sup: Expression) -> bool:
        # sub ⊑ (B1 and B2 ...) ⇔ sub ⊑ każdego Bi
        if isinstance(sup, Intersection):
            return all(self._entails_sub(sub, operand) for operand in sup.operands)
        # (A1 and A2 ...) ⊑ B ⇐ któryś Ai ⊑ B
        if isinstance(sub, Intersection):
            return any(self._entails_sub(operand, sup) for operand in sub.operands)
        return self._evaluator.holds("sub", sub.identifier, sup.identifier)
