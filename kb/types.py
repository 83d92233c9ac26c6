"""Atomy i reguły programu domknięcia (kb/engine.py)."""

from __future__ import annotations

from typing import TypeAlias

from dataclasses import dataclass

# predykat -> zbiór uziemionych krotek argumentów
Facts: TypeAlias = dict[str, set[tuple[str, ...]]]


@dataclass(frozen=True, slots=True)
class Atom:
    """pred(arg, ...) albo not pred(arg, ...); zmienne mają prefiks '?'."""
    pred: str
    args: tuple[str, ...]
    negated: bool = False

    def is_ground(self) -> bool:
        return not any(a.startswith("?") for a in self.args)

    def __str__(self) -> str:
        text = f"{self.pred}({', '.join(self.args)})"
        return f"not {text}" if self.negated else text


@dataclass(frozen=True, slots=True)
class Rule:
    """głowa :- ciało; puste ciało oznacza fakt."""
    head: Atom
    body: tuple[Atom, ...] = ()

    def __str__(self) -> str:
        if self.body:
            return f"{self.head} :- {', '.join(map(str, self.body))}."
        return f"{self.head}."
