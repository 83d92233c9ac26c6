# tests/test_label_index.py
from typing import get_type_hints

from kb import LabelIndex, LabelSource, short_form
from rule_model import ErrorCode


def test_short_form():
    assert short_form("http://a.org/b#C") == "C"
    assert short_form("http://a.org/b/C") == "C"
    assert short_form("C") == "C"


def test_duplicate_label_last_wins(reporter, report):
    index = LabelIndex({"ex:1": "x", "ex:2": "x"}, reporter)
    assert index.identifier_of("x") == "ex:2"
    [collision] = index.collisions
    assert (collision.label, collision.dropped, collision.kept) == ("x", "ex:1", "ex:2")
    assert [d.code for d in report.warnings] == [ErrorCode.LABEL_DUPLICATE]


def test_duplicate_label_without_reporter():
    index = LabelIndex({"ex:1": "x", "ex:2": "x"})
    assert len(index.collisions) == 1
    assert len(index) == 2


def test_resolve_identifier(labels):
    ns = "http://example.org/onto#"
    assert labels.resolve_identifier("neuron") == ns + "Neuron"
    assert labels.resolve_identifier(ns + "Glia") == ns + "Glia"
    assert labels.resolve_identifier("MotorNeuron") == ns + "MotorNeuron"
    assert labels.resolve_identifier("nothing") is None


def test_lookups(labels):
    ns = "http://example.org/onto#"
    assert labels.has_label("nerve cell")
    assert labels.label_of_identifier(ns + "Cell") == "cell"
    assert labels.find_label("NerveCell") == "nerve cell"
    assert labels.find_label("nerve cell") is None


def test_labels_sorted(labels):
    names = [label for label, _ in labels.labels()]
    assert names == sorted(names)
    assert "motor neuron" in names


def test_from_source(fake_labels):
    index = LabelIndex.from_source(fake_labels({"ex:A": "A"}))
    assert index.identifier_of("A") == "ex:A"


def test_from_source_accepts_label_source():
    hints = get_type_hints(LabelIndex.from_source, localns={"LabelSource": LabelSource})
    assert hints["source"] is LabelSource
