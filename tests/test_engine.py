# tests/test_engine.py
import pytest

from kb import Atom, Evaluator, parse_atom, parse_rule
from kb.engine import compute_strata


def test_parse_atom():
    assert parse_atom("sub(?A, ?B)") == Atom("sub", ("?A", "?B"))
    negated = parse_atom("not same(?A, ?B)")
    assert negated.negated
    assert negated.pred == "same"


def test_parse_atom_invalid():
    with pytest.raises(ValueError):
        parse_atom("sub ?A ?B")


def test_parse_rule():
    rule = parse_rule("strict_sub(?A, ?B) :- sub(?A, ?B), not same(?A, ?B).")
    assert rule.head == Atom("strict_sub", ("?A", "?B"))
    assert len(rule.body) == 2
    assert rule.body[1].negated


def test_parse_fact():
    rule = parse_rule("class(a).")
    assert rule.body == ()
    assert rule.head.is_ground()


def test_strata_negation_raises_level():
    rules = [
        parse_rule("same(?A, ?B) :- sub(?A, ?B), sub(?B, ?A)."),
        parse_rule("strict_sub(?A, ?B) :- sub(?A, ?B), not same(?A, ?B)."),
    ]
    strata = compute_strata(rules)
    assert strata["strict_sub"] > strata["same"]


def test_not_stratifiable():
    with pytest.raises(ValueError):
        compute_strata([parse_rule("p(?X) :- q(?X), not p(?X).")])


def test_transitive_closure():
    rules = [
        parse_rule("sub(?A, ?B) :- subclass_of(?A, ?B)."),
        parse_rule("sub(?A, ?C) :- sub(?A, ?B), sub(?B, ?C)."),
    ]
    ev = Evaluator(rules, {"subclass_of": {("a", "b"), ("b", "c")}})
    ev.evaluate()
    assert ev.holds("sub", "a", "c")
    assert not ev.holds("sub", "c", "a")
    assert {s["?X"] for s in ev.query("sub", ("?X", "c"))} == {"a", "b"}


def test_unsafe_negation():
    ev = Evaluator(
        [parse_rule("p(?X) :- not q(?X), r(?X).")],
        {"r": {("a",)}},
    )
    with pytest.raises(ValueError):
        ev.evaluate()
