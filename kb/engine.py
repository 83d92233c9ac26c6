"""
kb/engine.py — domknięcie bazy wiedzy: Datalog bottom-up ze stratyfikowaną negacją.

Fakty są zawsze uziemione, więc dopasowanie atomu do faktu jest
jednostronne: zmienne (prefiks '?') występują tylko we wzorcu.

Ewaluacja w obrębie warstwy jest półnaiwna (semi-naive): w każdej rundzie
reguła musi użyć co najmniej jednego faktu wyprowadzonego w poprzedniej
rundzie, dzięki czemu reguły przechodniości nie przeliczają całego
domknięcia od nowa.

Negacja (NAF) wymaga, by wszystkie zmienne negowanego atomu były związane
przez wcześniejsze atomy pozytywne reguły (safe Datalog).
"""

from __future__ import annotations

from typing import TypeAlias

import re
from collections.abc import Iterable, Iterator

from .types import Atom, Facts, Rule

Binding: TypeAlias = dict[str, str]


def _is_var(term: str) -> bool:
    return term.startswith("?")


# ---------------------------------------------------------------------------
# Parsowanie
# ---------------------------------------------------------------------------

# [not] pred(arg, arg, ...)
_ATOM_RE = re.compile(r"^\s*(not\s+)?([A-Za-z_]\w*)\s*\(([^()]*)\)\s*$")

# Atom ciała; przecinki wewnątrz nawiasów nie rozdzielają atomów
_BODY_ATOM_RE = re.compile(r"(?:not\s+)?[A-Za-z_]\w*\s*\([^()]*\)")


def parse_atom(text: str) -> Atom:
    """
    "sub(?A, ?B)"       → Atom("sub", ("?A", "?B"))
    "not same(?A, ?B)"  → Atom("same", ("?A", "?B"), negated=True)

    Raises:
        ValueError gdy tekst nie jest atomem.
    """
    m = _ATOM_RE.match(text)
    if m is None:
        raise ValueError(f"Nieprawidłowy atom: '{text}'")
    negated, pred, raw_args = m.groups()
    args = tuple(a.strip() for a in raw_args.split(",") if a.strip())
    return Atom(pred=pred, args=args, negated=negated is not None)


def parse_rule(text: str) -> Rule:
    """
    Parsuje regułę "głowa :- atom, atom, ..." albo fakt "głowa."

    Raises:
        ValueError gdy głowa lub któryś atom ciała jest niepoprawny.
    """
    head_text, _, body_text = text.strip().removesuffix(".").partition(":-")
    head = parse_atom(head_text)
    body = tuple(parse_atom(a) for a in _BODY_ATOM_RE.findall(body_text))
    if body_text.strip() and not body:
        raise ValueError(f"Nieprawidłowe ciało reguły: '{body_text.strip()}'")
    return Rule(head=head, body=body)


# ---------------------------------------------------------------------------
# Stratyfikacja
# ---------------------------------------------------------------------------

def compute_strata(rules: Iterable[Rule]) -> dict[str, int]:
    """
    Numer warstwy dla każdego predykatu.

    Głowa leży co najmniej na warstwie każdego predykatu pozytywnego
    z ciała i ściśle powyżej każdego predykatu negowanego.

    Raises:
        ValueError gdy program ma cykl przez negację.
    """
    edges: list[tuple[str, str, int]] = []   # (głowa, predykat ciała, min. różnica)
    preds: set[str] = set()
    for rule in rules:
        preds.add(rule.head.pred)
        for atom in rule.body:
            preds.add(atom.pred)
            edges.append((rule.head.pred, atom.pred, 1 if atom.negated else 0))

    strata = dict.fromkeys(preds, 0)
    # warstwa nie przekracza liczby predykatów, jeśli program jest stratyfikowalny
    for _ in range(len(preds) + 1):
        changed = False
        for head, dep, gap in edges:
            if strata[head] < strata[dep] + gap:
                strata[head] = strata[dep] + gap
                changed = True
        if not changed:
            return strata

    raise ValueError("Program nie jest stratyfikowalny: cykl przez negację (not).")


# ---------------------------------------------------------------------------
# Dopasowanie
# ---------------------------------------------------------------------------

def _match(args: tuple[str, ...], fact: tuple[str, ...], binding: Binding) -> Binding | None:
    """Rozszerza wiązanie tak, by atom o argumentach args pasował do faktu."""
    if len(args) != len(fact):
        return None
    out = binding
    for term, value in zip(args, fact):
        if _is_var(term):
            bound = out.get(term)
            if bound is None:
                if out is binding:
                    out = dict(binding)
                out[term] = value
            elif bound != value:
                return None
        elif term != value:
            return None
    return out


def _ground(args: tuple[str, ...], binding: Binding) -> tuple[str, ...]:
    return tuple(binding.get(a, a) if _is_var(a) else a for a in args)


def _solve(
    body: tuple[Atom, ...],
    facts: Facts,
    binding: Binding,
    delta: Facts | None = None,
    delta_at: int = -1,
) -> Iterator[Binding]:
    """
    Wiązania spełniające ciało reguły.

    Gdy podano delta, atom na pozycji delta_at jest dopasowywany tylko do
    faktów z delty (nowych w poprzedniej rundzie).
    """
    if not body:
        yield binding
        return

    atom, rest = body[0], body[1:]
    if atom.negated:
        key = _ground(atom.args, binding)
        if any(_is_var(k) for k in key):
            raise ValueError(f"Niebezpieczna negacja: {atom} (niezwiązane zmienne przy {binding})")
        if key not in facts.get(atom.pred, ()):
            yield from _solve(rest, facts, binding, delta, delta_at - 1)
        return

    source = delta if delta is not None and delta_at == 0 else facts
    for fact in source.get(atom.pred, ()):
        extended = _match(atom.args, fact, binding)
        if extended is not None:
            yield from _solve(rest, facts, extended, delta, delta_at - 1)


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------

class Evaluator:
    """
    Ewaluator programu Datalog nad zbiorem faktów bazowych.

    Użycie::

        ev = Evaluator([parse_rule("sub(?A, ?C) :- sub(?A, ?B), sub(?B, ?C).")], facts)
        ev.evaluate()
        ev.holds("sub", "a", "c")
    """

    def __init__(self, rules: Iterable[Rule], facts: Facts) -> None:
        self._rules = list(rules)
        self._strata = compute_strata(self._rules)
        self._facts: Facts = {pred: set(rows) for pred, rows in facts.items()}

    def evaluate(self) -> Facts:
        """Wyprowadza wszystkie fakty, warstwa po warstwie; zwraca kopię zbioru faktów."""
        by_stratum: dict[int, list[Rule]] = {}
        for rule in self._rules:
            by_stratum.setdefault(self._strata[rule.head.pred], []).append(rule)
        for level in sorted(by_stratum):
            self._saturate(by_stratum[level])
        return {pred: set(rows) for pred, rows in self._facts.items()}

    def _saturate(self, rules: list[Rule]) -> None:
        heads = {r.head.pred for r in rules}

        # runda 0: pełne dopasowanie
        delta: Facts = {}
        for rule in rules:
            for binding in _solve(rule.body, self._facts, {}):
                self._derive(rule, binding, delta)

        # kolejne rundy: co najmniej jeden atom rekurencyjny z delty
        while delta:
            self._merge(delta)
            fresh: Facts = {}
            for rule in rules:
                positions = [
                    i for i, atom in enumerate(rule.body)
                    if not atom.negated and atom.pred in heads
                ]
                for i in positions:
                    for binding in _solve(rule.body, self._facts, {}, delta, i):
                        self._derive(rule, binding, fresh)
            delta = fresh

    def _derive(self, rule: Rule, binding: Binding, into: Facts) -> None:
        fact = _ground(rule.head.args, binding)
        if any(_is_var(t) for t in fact):
            return
        pred = rule.head.pred
        if fact not in self._facts.get(pred, ()):
            into.setdefault(pred, set()).add(fact)

    def _merge(self, delta: Facts) -> None:
        for pred, rows in delta.items():
            self._facts.setdefault(pred, set()).update(rows)

    # ------------------------------------------------------------------
    # Zapytania
    # ------------------------------------------------------------------

    def query(self, pred: str, args: tuple[str, ...]) -> list[Binding]:
        """Wiązania zmiennych wzorca pred(args) dla wyprowadzonych faktów."""
        return [
            b for fact in self._facts.get(pred, ())
            if (b := _match(args, fact, {})) is not None
        ]

    def holds(self, pred: str, *args: str) -> bool:
        """Czy uziemiony fakt pred(args) jest wyprowadzony."""
        return tuple(args) in self._facts.get(pred, ())
