"""
rule_model/kinds.py — typy reguł kolumnowych i ich kategorie.

RuleKind     — zamknięty zbiór nazw typów reguł używanych w wierszu reguł
RuleCategory — QUERY (wymaga zapytania do bazy wiedzy) | PRESENCE (tylko
               sprawdzenie, czy komórka jest pusta)

Kategoria jest czystą funkcją typu: statyczna tabela RULE_CATEGORIES,
budowana raz przy imporcie modułu.
"""

from __future__ import annotations

from enum import StrEnum


class RuleCategory(StrEnum):
    """Kategoria reguły."""
    QUERY    = "query"
    PRESENCE = "presence"


class RuleKind(StrEnum):
    """Typy reguł rozpoznawane w specyfikacji kolumny."""
    DIRECT_SUPERCLASS_OF = "direct-superclass-of"
    SUPERCLASS_OF        = "superclass-of"
    EQUIVALENT_TO        = "equivalent-to"
    DIRECT_SUBCLASS_OF   = "direct-subclass-of"
    SUBCLASS_OF          = "subclass-of"
    DIRECT_INSTANCE_OF   = "direct-instance-of"
    INSTANCE_OF          = "instance-of"
    IS_REQUIRED          = "is-required"
    IS_EXCLUDED          = "is-excluded"


RULE_CATEGORIES: dict[RuleKind, RuleCategory] = {
    RuleKind.DIRECT_SUPERCLASS_OF: RuleCategory.QUERY,
    RuleKind.SUPERCLASS_OF:        RuleCategory.QUERY,
    RuleKind.EQUIVALENT_TO:        RuleCategory.QUERY,
    RuleKind.DIRECT_SUBCLASS_OF:   RuleCategory.QUERY,
    RuleKind.SUBCLASS_OF:          RuleCategory.QUERY,
    RuleKind.DIRECT_INSTANCE_OF:   RuleCategory.QUERY,
    RuleKind.INSTANCE_OF:          RuleCategory.QUERY,
    RuleKind.IS_REQUIRED:          RuleCategory.PRESENCE,
    RuleKind.IS_EXCLUDED:          RuleCategory.PRESENCE,
}

QUERY_KINDS: frozenset[RuleKind] = frozenset(
    k for k, c in RULE_CATEGORIES.items() if c is RuleCategory.QUERY
)


def lookup_kind(name: str) -> RuleKind | None:
    """Zwraca RuleKind dla nazwy typu (np. 'subclass-of') lub None."""
    try:
        return RuleKind(name)
    except ValueError:
        return None


def category_of(kind: RuleKind) -> RuleCategory:
    return RULE_CATEGORIES[kind]


def query_kind_names() -> list[str]:
    """Posortowane nazwy typów z kategorii QUERY (do komunikatów)."""
    return sorted(str(k) for k in QUERY_KINDS)
