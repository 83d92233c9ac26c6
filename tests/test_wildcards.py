# tests/test_wildcards.py
import pytest

from kb import LabelIndex
from rule_lang import interpolate, label_of, resolve_wildcard
from rule_model import ErrorCode


@pytest.fixture
def foo_bar() -> LabelIndex:
    return LabelIndex({"http://example.org/onto#Foo": "Foo", "http://example.org/onto#Bar": "Bar"})


def test_interpolate_known_labels(foo_bar, reporter):
    assert interpolate("%1 is-a %2", ["Foo", "Bar"], foo_bar, reporter) == "'Foo' is-a 'Bar'"


def test_interpolate_unknown_term_is_parenthesized(reporter):
    labels = LabelIndex({"http://example.org/onto#Foo": "Foo"})
    assert interpolate("%1 is-a %2", ["Foo", "Bar"], labels, reporter) == "'Foo' is-a (Bar)"


def test_interpolate_full_identifier(foo_bar, reporter):
    row = ["http://example.org/onto#Foo", "Bar"]
    assert interpolate("%1 and %2", row, foo_bar, reporter) == "'Foo' and 'Bar'"


def test_interpolate_keeps_text_around_wildcards(foo_bar, reporter):
    assert interpolate("(%1) and x", ["'Foo'"], foo_bar, reporter) == "('Foo') and x"
    assert interpolate("no wildcards", ["Foo"], foo_bar, reporter) == "no wildcards"


def test_interpolate_blank_input(foo_bar, reporter, report):
    assert interpolate("   ", ["Foo"], foo_bar, reporter) == ""
    assert report.diagnostics == []


def test_interpolate_empty_cell(foo_bar, reporter, report):
    assert interpolate("%2", ["Foo", "  "], foo_bar, reporter) == "()"
    assert [d.code for d in report.warnings] == [ErrorCode.WILDCARD_EMPTY]


def test_resolve_out_of_range(reporter, report):
    assert resolve_wildcard("%5", ["a", "b", "c"], reporter) is None
    assert [d.code for d in report.errors] == [ErrorCode.WILDCARD_OUT_OF_RANGE]


def test_resolve_zero_is_out_of_range(reporter, report):
    assert resolve_wildcard("%0", ["a"], reporter) is None
    assert report.codes() == [ErrorCode.WILDCARD_OUT_OF_RANGE]


def test_resolve_malformed(reporter, report):
    assert resolve_wildcard("%x", ["a"], reporter) is None
    assert report.codes() == [ErrorCode.WILDCARD_MALFORMED]


def test_resolve_strips_cell(reporter):
    assert resolve_wildcard("%1", ["  Foo "], reporter) == "Foo"


def test_label_of(foo_bar):
    assert label_of("'Foo'", foo_bar) == "Foo"
    assert label_of("Foo", foo_bar) == "Foo"
    assert label_of("http://example.org/onto#Bar", foo_bar) == "Bar"
    assert label_of("Baz", foo_bar) is None
    assert label_of(None, foo_bar) is None


def test_label_of_short_form():
    labels = LabelIndex({"http://x.org/o#Foo": "foo"})
    assert label_of("Foo", labels) == "foo"
