"""
Struktury danych dla reguł kolumnowych.

ColumnRuleSet — reguły jednej kolumny: pary (surowy typ, treść) w kolejności
                deklaracji; typ może być złożony, np. "subclass-of|equivalent-to"
ParsedRule    — klauzula główna + lista klauzul warunkowych (when)
WhenClause    — (podmiot, typ złożony, aksjomat)
"""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Iterator
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Aliasy typów
# ---------------------------------------------------------------------------

# Typy rozdzielone '|', np. "subclass-of|equivalent-to"; pierwszy jest typem głównym
CompoundKind: TypeAlias = str


# ---------------------------------------------------------------------------
# WhenClause / ParsedRule
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class WhenClause:
    """
    Warunek, który musi być spełniony, zanim oceniona zostanie klauzula główna.

    - subject: podmiot — pojedynczy token lub fraza w apostrofach ('a b')
    - kind:    typ złożony z kategorii QUERY
    - axiom:   treść aksjomatu (może zawierać wildcardy %N)
    """
    subject: str
    kind: CompoundKind
    axiom: str

    def __str__(self) -> str:
        return f"{self.subject} {self.kind} {self.axiom}"


@dataclass(slots=True)
class ParsedRule:
    """Reguła po rozdzieleniu: main (klauzula główna) + when (warunki, w kolejności)."""
    main: str
    when: list[WhenClause] = field(default_factory=list)

    @property
    def is_conditional(self) -> bool:
        return bool(self.when)


# ---------------------------------------------------------------------------
# ColumnRuleSet
# ---------------------------------------------------------------------------

class ColumnRuleSet:
    """
    Reguły przypisane jednej kolumnie, w kolejności deklaracji.

    Budowany raz z wiersza reguł (parse_column_rules), potem tylko do odczytu.
    Kilka reguł tego samego typu w jednej kolumnie jest dozwolone, każda
    jest oceniana niezależnie, w miejscu, w którym ją zadeklarowano.
    """

    def __init__(self) -> None:
        self._rules: list[tuple[CompoundKind, str]] = []

    def add(self, kind: CompoundKind, content: str) -> None:
        self._rules.append((kind, content))

    def rules(self, kind: CompoundKind) -> list[str]:
        return [content for k, content in self._rules if k == kind]

    def pairs(self) -> Iterator[tuple[CompoundKind, str]]:
        """Pary (typ, treść) dokładnie w kolejności deklaracji."""
        yield from self._rules

    def as_dict(self) -> dict[CompoundKind, list[str]]:
        out: dict[CompoundKind, list[str]] = {}
        for kind, content in self._rules:
            out.setdefault(kind, []).append(content)
        return out

    def __len__(self) -> int:
        return len(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def __contains__(self, kind: object) -> bool:
        return any(k == kind for k, _ in self._rules)

    def __repr__(self) -> str:
        return f"ColumnRuleSet({self._rules!r})"
