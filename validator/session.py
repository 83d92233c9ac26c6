"""
validator/session.py — sesja walidacji: indeks etykiet + uchwyty współpracowników.

ValidationSession jest tworzona raz na przebieg i przekazywana jawnie do
dyspozytora i sterownika. Parser wyrażeń i baza wiedzy są pożyczone —
sesja ich nie zamyka.
"""

from __future__ import annotations

from typing import TypeAlias

from dataclasses import dataclass, field

from kb import (
    ExpressionParser,
    KnowledgeBase,
    LabelExpressionParser,
    LabelIndex,
    LabelSource,
)
from rule_model import Diagnostic, Reporter


class SetupError(RuntimeError):
    """Nie można przygotować przebiegu walidacji (baza wiedzy, etykiety, tabela)."""


QueryKey: TypeAlias = tuple[str, str, str]

# Wynik zapytania razem z diagnostykami zebranymi podczas jego obliczania
QueryAnswer: TypeAlias = tuple[bool, tuple[Diagnostic, ...]]


@dataclass
class ValidationSession:
    """
    - labels:        indeks etykiet (tylko do odczytu)
    - parser:        parser wyrażeń klasowych
    - kb:            wyrocznia bazy wiedzy
    - cache_queries: czy zapamiętywać wyniki identycznych zapytań
                     (podmiot, aksjomat, typ) w obrębie przebiegu; wraz
                     z wynikiem zapamiętywane są jego diagnostyki
    """

    labels: LabelIndex
    parser: ExpressionParser
    kb: KnowledgeBase
    cache_queries: bool = True
    _cache: dict[QueryKey, QueryAnswer] = field(default_factory=dict, repr=False)

    @classmethod
    def open(
        cls,
        kb: KnowledgeBase,
        reporter: Reporter,
        label_source: LabelSource | None = None,
        parser: ExpressionParser | None = None,
        cache_queries: bool = True,
    ) -> "ValidationSession":
        """
        Buduje sesję: indeks etykiet ze źródła (domyślnie sama baza wiedzy)
        i parser (domyślnie LabelExpressionParser).

        Raises:
            SetupError gdy źródło etykiet nie jest dostępne.
        """
        source = label_source if label_source is not None else kb
        if not hasattr(source, "forward_labels"):
            raise SetupError("Brak źródła etykiet: obiekt nie udostępnia forward_labels().")
        try:
            labels = LabelIndex.from_source(source, reporter)
        except (OSError, ValueError) as exc:
            raise SetupError(f"Nie można zbudować indeksu etykiet: {exc}") from exc

        return cls(
            labels=labels,
            parser=parser if parser is not None else LabelExpressionParser(labels),
            kb=kb,
            cache_queries=cache_queries,
        )

    # ------------------------------------------------------------------
    # Cache zapytań
    # ------------------------------------------------------------------

    def cached(self, key: QueryKey) -> QueryAnswer | None:
        if not self.cache_queries:
            return None
        return self._cache.get(key)

    def remember(self, key: QueryKey, answer: QueryAnswer) -> None:
        if self.cache_queries:
            self._cache[key] = answer
