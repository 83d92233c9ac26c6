"""
kb/label_index.py — dwukierunkowy indeks etykiet bazy wiedzy.

LabelIndex buduje z mapy identyfikator -> etykieta dwa słowniki:
  _by_id:    identyfikator -> etykieta
  _by_label: etykieta      -> identyfikator

Kolizje etykiet (dwa identyfikatory, ta sama etykieta) nie są błędem:
zostaje identyfikator wstawiony jako ostatni, a do raportu trafia
ostrzeżenie W_LABEL_DUPLICATE.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rule_model import ErrorCode, Reporter

if TYPE_CHECKING:
    from .knowledge_base import LabelSource


def short_form(identifier: str) -> str:
    """
    Krótka forma identyfikatora: fragment po ostatnim '#' lub '/'.

        "http://purl.obolibrary.org/obo/UBERON_0000955" → "UBERON_0000955"
        "http://example.org/onto#Neuron"                → "Neuron"
    """
    for sep in ("#", "/"):
        if sep in identifier:
            tail = identifier.rsplit(sep, 1)[1]
            if tail:
                return tail
    return identifier


@dataclass(frozen=True, slots=True)
class LabelCollision:
    """Etykieta przypisana wielu identyfikatorom: kept wygrał z dropped."""
    label: str
    dropped: str
    kept: str


class LabelIndex:
    """
    Indeks etykiet do szybkiego wyszukiwania przez interpolację i dyspozytor.

    Atrybuty publiczne:
      collisions — lista LabelCollision wykrytych przy budowie indeksu
    """

    def __init__(
        self,
        forward: Mapping[str, str],
        reporter: Reporter | None = None,
    ) -> None:
        self._by_id: dict[str, str] = dict(forward)
        self._by_label: dict[str, str] = {}
        self._by_short: dict[str, str] = {}
        self.collisions: list[LabelCollision] = []

        for identifier, label in self._by_id.items():
            previous = self._by_label.get(label)
            if previous is not None and previous != identifier:
                self.collisions.append(LabelCollision(label, previous, identifier))
                if reporter is not None:
                    reporter.warning(
                        ErrorCode.LABEL_DUPLICATE,
                        f'Zduplikowana etykieta "{label}". '
                        f'Nadpisuję "{previous}" wartością "{identifier}".',
                        label=label,
                        dropped=previous,
                        kept=identifier,
                    )
            self._by_label[label] = identifier
            # pierwsza krótka forma wygrywa, jak przy liniowym przeszukaniu
            self._by_short.setdefault(short_form(identifier), identifier)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def has_label(self, label: str) -> bool:
        return label in self._by_label

    def identifier_of(self, label: str) -> str | None:
        """Identyfikator dla etykiety (po rozwiązaniu kolizji)."""
        return self._by_label.get(label)

    def label_of_identifier(self, identifier: str) -> str | None:
        """Etykieta dla pełnego identyfikatora."""
        return self._by_id.get(identifier)

    def find_label(self, term: str) -> str | None:
        """
        Etykieta dla terminu będącego identyfikatorem — pełnym
        lub w krótkiej formie. None gdy termin nie jest znanym identyfikatorem.
        """
        if term in self._by_id:
            return self._by_id[term]
        identifier = self._by_short.get(term)
        if identifier is not None:
            return self._by_id[identifier]
        return None

    def resolve_identifier(self, term: str) -> str | None:
        """Identyfikator dla etykiety, pełnego identyfikatora lub krótkiej formy."""
        if term in self._by_label:
            return self._by_label[term]
        if term in self._by_id:
            return term
        return self._by_short.get(term)

    def labels(self) -> Iterator[tuple[str, str]]:
        """Pary (etykieta, identyfikator) posortowane po etykiecie."""
        for label in sorted(self._by_label):
            yield label, self._by_label[label]

    def __len__(self) -> int:
        return len(self._by_id)

    # ------------------------------------------------------------------
    # Konstruktory fabryczne
    # ------------------------------------------------------------------

    @classmethod
    def from_source(cls, source: LabelSource, reporter: Reporter | None = None) -> LabelIndex:
        """Buduje indeks z obiektu udostępniającego forward_labels()."""
        return cls(source.forward_labels(), reporter)
