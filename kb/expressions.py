"""
kb/expressions.py — wyrażenia klasowe i aksjomaty przekazywane do bazy wiedzy.

Expression:
  NamedEntity(identifier)        — nazwana klasa lub instancja
  Intersection(operands)         — przecięcie wyrażeń ("A and B")

Axiom:
  SubClassOf(sub, sup)           — sub ⊑ sup
  EquivalentClasses(first, second) — first ≡ second

LabelExpressionParser — referencyjny parser: termin nazwany (etykieta
w apostrofach, etykieta bez apostrofów, pełny identyfikator, krótka forma)
lub przecięcie takich terminów połączonych słowem 'and', z grupowaniem
w nawiasach ( ... ).
"""

from __future__ import annotations

from typing import TypeAlias

import re
from dataclasses import dataclass

from .label_index import LabelIndex


class ExpressionParseError(ValueError):
    """Tekst nie jest poprawnym wyrażeniem klasowym."""


# ---------------------------------------------------------------------------
# Wyrażenia
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class NamedEntity:
    identifier: str

    def __str__(self) -> str:
        return self.identifier


@dataclass(frozen=True, slots=True)
class Intersection:
    operands: tuple[Expression, ...]

    def __str__(self) -> str:
        return " and ".join(str(o) for o in self.operands)


Expression: TypeAlias = NamedEntity | Intersection


@dataclass(frozen=True, slots=True)
class SubClassOf:
    sub: Expression
    sup: Expression

    def __str__(self) -> str:
        return f"{self.sub} SubClassOf {self.sup}"


@dataclass(frozen=True, slots=True)
class EquivalentClasses:
    first: Expression
    second: Expression

    def __str__(self) -> str:
        return f"{self.first} EquivalentTo {self.second}"


Axiom: TypeAlias = SubClassOf | EquivalentClasses


# ---------------------------------------------------------------------------
# Parser referencyjny
# ---------------------------------------------------------------------------

# Token: fraza w apostrofach, nawias albo ciąg znaków bez białych znaków i nawiasów
_TOKEN_RE = re.compile(r"'[^']*'|[()]|[^\s()]+")


class LabelExpressionParser:
    """
    Parser wyrażeń oparty o indeks etykiet.

    Gramatyka:
        wyrażenie := termin ('and' termin)*
        termin    := '(' wyrażenie ')' | nazwa

    Zagnieżdżone przecięcia są spłaszczane: "(A and B) and C" daje
    Intersection((A, B, C)).

    Użycie:
        parser = LabelExpressionParser(label_index)
        expr   = parser.parse("'nerve cell' and (Neuron and Cell)")
    """

    def __init__(self, labels: LabelIndex) -> None:
        self._labels = labels

    def parse(self, text: str) -> Expression:
        """
        Parsuje tekst na Expression.

        Raises:
            ExpressionParseError gdy tekst jest pusty, zawiera nieznany termin,
            niezrównoważone nawiasy albo terminy niepołączone słowem 'and'.
        """
        tokens = _TOKEN_RE.findall(text.strip())
        if not tokens:
            raise ExpressionParseError("Puste wyrażenie.")

        expr, pos = self._parse_conjunction(tokens, 0)
        if pos < len(tokens):
            raise ExpressionParseError(f"Nieoczekiwany token: {tokens[pos]}")
        return expr

    def _parse_conjunction(self, tokens: list[str], pos: int) -> tuple[Expression, int]:
        operands: list[Expression] = []
        while True:
            term, pos = self._parse_term(tokens, pos)
            if isinstance(term, Intersection):
                operands.extend(term.operands)
            else:
                operands.append(term)
            if pos < len(tokens) and tokens[pos].lower() == "and":
                pos += 1
                continue
            break

        if len(operands) == 1:
            return operands[0], pos
        return Intersection(tuple(operands)), pos

    def _parse_term(self, tokens: list[str], pos: int) -> tuple[Expression, int]:
        if pos >= len(tokens):
            raise ExpressionParseError("Oczekiwano terminu, otrzymano koniec wyrażenia.")

        token = tokens[pos]
        if token == "(":
            expr, pos = self._parse_conjunction(tokens, pos + 1)
            if pos >= len(tokens) or tokens[pos] != ")":
                raise ExpressionParseError("Brak nawiasu zamykającego.")
            return expr, pos + 1
        if token == ")" or token.lower() == "and":
            raise ExpressionParseError(f"Oczekiwano terminu, otrzymano: {token}")

        return self._named(token), pos + 1

    def _named(self, token: str) -> NamedEntity:
        if len(token) >= 2 and token.startswith("'") and token.endswith("'"):
            name = token[1:-1]
        else:
            name = token
        identifier = self._labels.resolve_identifier(name)
        if identifier is None:
            raise ExpressionParseError(f"Nieznany termin: {token}")
        return NamedEntity(identifier)
