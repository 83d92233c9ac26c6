"""
rule_lang/wildcards.py — interpolacja wildcardów %N względem wiersza.

%N (N od 1) wskazuje komórkę N bieżącego wiersza. Wartość komórki, jeśli
jest znaną etykietą lub identyfikatorem, trafia do tekstu jako 'etykieta';
w przeciwnym razie jako (wartość) — termin nierozpoznany.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from kb.label_index import LabelIndex
from rule_model import ErrorCode, Reporter

_WILDCARD_RE = re.compile(r"%\d+")
_WILDCARD_TOKEN_RE = re.compile(r"%(\d+)")


def resolve_wildcard(token: str, row: Sequence[str], reporter: Reporter) -> str | None:
    """
    Zawartość komórki wskazanej przez wildcard (po strip()).

    None gdy: token ma zły format (błąd), indeks wykracza poza wiersz
    (błąd), komórka jest pusta (ostrzeżenie).
    """
    m = _WILDCARD_TOKEN_RE.fullmatch(token.strip())
    if not m:
        reporter.error(
            ErrorCode.WILDCARD_MALFORMED,
            f'Nieprawidłowy wildcard: "{token}".',
            wildcard=token,
        )
        return None

    index = int(m.group(1)) - 1
    if index < 0 or index >= len(row):
        reporter.error(
            ErrorCode.WILDCARD_OUT_OF_RANGE,
            f'Reguła: "{token}" wskazuje kolumnę spoza wiersza (długość wiersza: {len(row)}).',
            wildcard=token,
            row_length=len(row),
        )
        return None

    term = (row[index] or "").strip()
    if not term:
        reporter.warning(
            ErrorCode.WILDCARD_EMPTY,
            f"Nie udało się pobrać etykiety z wildcardu {token}: "
            f"komórka {index + 1} tego wiersza jest pusta.",
            wildcard=token,
        )
        return None

    return term


def label_of(term: str | None, labels: LabelIndex) -> str | None:
    """
    Etykieta dla terminu: etykiety, pełnego identyfikatora lub krótkiej formy.

    Zdejmuje jedną warstwę apostrofów ('A' → A). None gdy termin nieznany.
    """
    if term is None:
        return None

    if term.startswith("'"):
        term = term[1:]
    if term.endswith("'"):
        term = term[:-1]

    if labels.has_label(term):
        return term
    return labels.find_label(term)


def interpolate(
    text: str,
    row: Sequence[str],
    labels: LabelIndex,
    reporter: Reporter,
) -> str:
    """
    Zastępuje każde %N w tekście zawartością komórki N.

        "%1 and %2", ["Foo", "Bar"]  → "'Foo' and 'Bar'"     (obie etykiety znane)
        "%1 and %2", ["Foo", "Baz"]  → "'Foo' and (Baz)"     (Baz nieznane)
    """
    if not text.strip():
        return text.strip()

    out: list[str] = []
    pos = 0
    for m in _WILDCARD_RE.finditer(text):
        term = resolve_wildcard(m.group(), row, reporter)
        label = label_of(term, labels)
        out.append(text[pos:m.start()])
        if label is not None:
            out.append(f"'{label}'")
        else:
            out.append(f"({term or ''})")
        pos = m.end()
    out.append(text[pos:])
    return "".join(out)
