# tests/conftest.py
import pytest

from kb import (
    Entity,
    EntityKind,
    FactsKnowledgeBase,
    LabelExpressionParser,
    LabelIndex,
)
from rule_model import Reporter, ValidationReport
from validator import ValidationSession

EX = "http://example.org/onto#"


def ex(name: str) -> str:
    return EX + name


@pytest.fixture
def kb() -> FactsKnowledgeBase:
    """
    Mała ontologia:

        Cell ⊒ Neuron ⊒ MotorNeuron
        Cell ⊒ Glia
        NerveCell ≡ Neuron
        n1 : MotorNeuron,  g1 : Glia
    """
    return FactsKnowledgeBase(
        entities=[
            Entity(ex("Cell"),        "cell",         EntityKind.CLASS),
            Entity(ex("Neuron"),      "neuron",       EntityKind.CLASS),
            Entity(ex("MotorNeuron"), "motor neuron", EntityKind.CLASS),
            Entity(ex("Glia"),        "glia",         EntityKind.CLASS),
            Entity(ex("NerveCell"),   "nerve cell",   EntityKind.CLASS),
            Entity(ex("n1"),          "n1",           EntityKind.INSTANCE),
            Entity(ex("g1"),          "g1",           EntityKind.INSTANCE),
        ],
        subclass_of=[
            (ex("Neuron"), ex("Cell")),
            (ex("MotorNeuron"), ex("Neuron")),
            (ex("Glia"), ex("Cell")),
        ],
        equivalent_to=[(ex("NerveCell"), ex("Neuron"))],
        instance_of=[(ex("n1"), ex("MotorNeuron")), (ex("g1"), ex("Glia"))],
    )


@pytest.fixture
def ab_kb() -> FactsKnowledgeBase:
    """A ⊑ B — dwie klasy z etykietami 'A' i 'B'."""
    return FactsKnowledgeBase(
        entities=[
            Entity(ex("A"), "A", EntityKind.CLASS),
            Entity(ex("B"), "B", EntityKind.CLASS),
        ],
        subclass_of=[(ex("A"), ex("B"))],
    )


@pytest.fixture
def report() -> ValidationReport:
    return ValidationReport()


@pytest.fixture
def reporter(report: ValidationReport) -> Reporter:
    return Reporter(report)


@pytest.fixture
def labels(kb: FactsKnowledgeBase) -> LabelIndex:
    return LabelIndex.from_source(kb)


@pytest.fixture
def parser(labels: LabelIndex) -> LabelExpressionParser:
    return LabelExpressionParser(labels)


@pytest.fixture
def session(kb: FactsKnowledgeBase, reporter: Reporter) -> ValidationSession:
    return ValidationSession.open(kb, reporter)


class FakeOracle:
    """
    Wyrocznia do testów dyspozytora: każda klasa jest w relacji
    równoważności z każdym wyrażeniem, żadna inna relacja nie zachodzi.
    Zapisuje wywołane metody.
    """

    def __init__(self, classes: dict[str, EntityKind]) -> None:
        self._classes = classes
        self.calls: list[str] = []

    def classify(self, identifier):
        return self._classes.get(identifier)

    def subclasses_of(self, expr, direct):
        self.calls.append("subclasses_of")
        return set()

    def superclasses_of(self, expr, direct):
        self.calls.append("superclasses_of")
        return set()

    def equivalent_classes(self, expr):
        self.calls.append("equivalent_classes")
        return {i for i, k in self._classes.items() if k is EntityKind.CLASS}

    def instances_of(self, expr, direct):
        self.calls.append("instances_of")
        return set()

    def is_entailed(self, axiom):
        self.calls.append("is_entailed")
        return False


class FakeLabels:
    """Źródło etykiet bez bazy wiedzy."""

    def __init__(self, forward: dict[str, str]) -> None:
        self._forward = forward

    def forward_labels(self):
        return dict(self._forward)


@pytest.fixture
def fake_oracle():
    return FakeOracle


@pytest.fixture
def fake_labels():
    return FakeLabels
