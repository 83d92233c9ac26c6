# tests/test_dispatcher.py
import pytest

from kb import EntityKind
from rule_model import ErrorCode, WhenClause
from validator import QueryDispatcher, SetupError, ValidationSession


@pytest.fixture
def dispatcher(session) -> QueryDispatcher:
    return QueryDispatcher(session)


# ---------------------------------------------------------------------------
# Klasy nazwane
# ---------------------------------------------------------------------------

def test_class_subclass_of(dispatcher, reporter):
    assert dispatcher.dispatch("'motor neuron'", "'cell'", [], "subclass-of", reporter)
    assert not dispatcher.dispatch("'cell'", "'neuron'", [], "subclass-of", reporter)


def test_class_direct_kinds(dispatcher, reporter):
    assert dispatcher.dispatch("neuron", "'cell'", [], "direct-subclass-of", reporter)
    assert not dispatcher.dispatch("'motor neuron'", "'cell'", [], "direct-subclass-of", reporter)
    assert dispatcher.dispatch("'cell'", "glia", [], "direct-superclass-of", reporter)


def test_compound_kind_is_disjunction(dispatcher, reporter):
    assert not dispatcher.dispatch("'nerve cell'", "'neuron'", [], "subclass-of", reporter)
    assert dispatcher.dispatch("'nerve cell'", "'neuron'", [], "subclass-of|equivalent-to", reporter)


def test_unknown_element_is_skipped(dispatcher, reporter, report):
    assert dispatcher.dispatch("'neuron'", "'cell'", [], "bogus|subclass-of", reporter)
    assert ErrorCode.KIND_UNKNOWN in report.codes()


# ---------------------------------------------------------------------------
# Instancje
# ---------------------------------------------------------------------------

def test_instance_queries(dispatcher, reporter):
    assert dispatcher.dispatch("n1", "'neuron'", [], "instance-of", reporter)
    assert not dispatcher.dispatch("n1", "'neuron'", [], "direct-instance-of", reporter)
    assert dispatcher.dispatch("n1", "'motor neuron'", [], "direct-instance-of", reporter)


def test_class_kind_on_instance_is_unsupported(dispatcher, reporter, report):
    assert not dispatcher.dispatch("n1", "'cell'", [], "subclass-of", reporter)
    assert ErrorCode.QUERY_UNSUPPORTED in report.codes()


# ---------------------------------------------------------------------------
# Wyrażenia
# ---------------------------------------------------------------------------

def test_generalized_query(dispatcher, reporter):
    assert dispatcher.dispatch("neuron and glia", "'cell'", [], "subclass-of", reporter)
    assert dispatcher.dispatch("neuron and cell", "neuron", [], "equivalent-to", reporter)
    assert not dispatcher.dispatch("neuron and cell", "glia", [], "superclass-of", reporter)


def test_grouped_axiom_from_interpolation(dispatcher, reporter, report):
    assert dispatcher.dispatch("'motor neuron'", "(neuron and cell)", [], "subclass-of", reporter)
    assert dispatcher.dispatch("(neuron and cell)", "'nerve cell'", [], "equivalent-to", reporter)
    assert ErrorCode.EXPRESSION_PARSE not in report.codes()


def test_generalized_instance_kind_unsupported(dispatcher, reporter, report):
    assert not dispatcher.dispatch("neuron and glia", "'cell'", [], "instance-of", reporter)
    assert ErrorCode.QUERY_UNSUPPORTED in report.codes()


def test_unparseable_axiom(dispatcher, reporter, report):
    assert not dispatcher.dispatch("'neuron'", "'unknown thing'", [], "subclass-of", reporter)
    assert ErrorCode.EXPRESSION_PARSE in report.codes()


def test_unparseable_subject(dispatcher, reporter, report):
    assert not dispatcher.dispatch("zzz", "'cell'", [], "subclass-of", reporter)
    assert ErrorCode.EXPRESSION_PARSE in report.codes()


def test_parse_expression_retries_with_quotes(dispatcher, reporter, report):
    assert dispatcher.parse_expression("motor neuron", reporter) is not None
    assert report.errors == []


# ---------------------------------------------------------------------------
# Wyrocznia testowa
# ---------------------------------------------------------------------------

@pytest.fixture
def oracle(fake_oracle):
    return fake_oracle({"ex:A": EntityKind.CLASS, "ex:B": EntityKind.CLASS})


@pytest.fixture
def oracle_session(oracle, fake_labels, reporter):
    return ValidationSession.open(oracle, reporter, label_source=fake_labels({"ex:A": "A", "ex:B": "B"}))


def test_disjunction_tries_elements_in_order(oracle, oracle_session, reporter):
    dispatcher = QueryDispatcher(oracle_session)
    assert dispatcher.dispatch("'A'", "'B'", [], "subclass-of|superclass-of|equivalent-to", reporter)
    assert oracle.calls == ["subclasses_of", "superclasses_of", "equivalent_classes"]


def test_disjunction_false_when_no_element_holds(oracle_session, reporter):
    dispatcher = QueryDispatcher(oracle_session)
    assert not dispatcher.dispatch("'A'", "'B'", [], "subclass-of|superclass-of", reporter)


def test_cache_avoids_repeated_queries(oracle, oracle_session, reporter):
    dispatcher = QueryDispatcher(oracle_session)
    dispatcher.dispatch("'A'", "'B'", [], "subclass-of", reporter)
    dispatcher.dispatch("'A'", "'B'", [], "subclass-of", reporter)
    assert oracle.calls == ["subclasses_of"]


def test_cache_disabled(oracle, fake_labels, reporter):
    session = ValidationSession.open(
        oracle, reporter, label_source=fake_labels({"ex:A": "A", "ex:B": "B"}), cache_queries=False
    )
    dispatcher = QueryDispatcher(session)
    dispatcher.dispatch("'A'", "'B'", [], "subclass-of", reporter)
    dispatcher.dispatch("'A'", "'B'", [], "subclass-of", reporter)
    assert oracle.calls == ["subclasses_of", "subclasses_of"]


def test_cache_hit_replays_diagnostics_at_current_position(dispatcher, reporter, report):
    assert not dispatcher.dispatch("'neuron'", "'unknown thing'", [], "subclass-of", reporter.at(1, 1))
    assert not dispatcher.dispatch("'neuron'", "'unknown thing'", [], "subclass-of", reporter.at(2, 1))
    positions = [
        (d.position.row, d.position.column)
        for d in report.errors if d.code is ErrorCode.EXPRESSION_PARSE
    ]
    assert positions == [(1, 1), (1, 1), (2, 1), (2, 1)]


def test_unclassifiable_subject(fake_oracle, fake_labels, reporter, report):
    session = ValidationSession.open(fake_oracle({}), reporter, label_source=fake_labels({"ex:X": "X"}))
    assert not QueryDispatcher(session).dispatch("'X'", "'X'", [], "subclass-of", reporter)
    assert ErrorCode.SUBJECT_UNCLASSIFIABLE in report.codes()


def test_session_without_label_source(kb, reporter):
    with pytest.raises(SetupError):
        ValidationSession.open(kb, reporter, label_source=object())


# ---------------------------------------------------------------------------
# Klauzule warunkowe
# ---------------------------------------------------------------------------

def test_when_clause_satisfied(dispatcher, reporter, report):
    clauses = [WhenClause("%1", "subclass-of", "'cell'")]
    assert dispatcher.evaluate_when_clauses(clauses, ["'motor neuron'"], reporter)
    assert ErrorCode.WHEN_SATISFIED in report.codes()


def test_when_clause_unsatisfied_short_circuits(dispatcher, reporter, report):
    clauses = [
        WhenClause("%1", "subclass-of", "'neuron'"),
        WhenClause("%1", "bogus", "'cell'"),
    ]
    assert not dispatcher.evaluate_when_clauses(clauses, ["'glia'"], reporter)
    assert ErrorCode.WHEN_UNSATISFIED in report.codes()
    assert ErrorCode.WHEN_KIND_NOT_QUERY not in report.codes()


def test_when_clause_presence_kind_rejected(dispatcher, reporter, report):
    clauses = [WhenClause("%1", "subclass-of|is-required", "'cell'")]
    assert not dispatcher.evaluate_when_clauses(clauses, ["'neuron'"], reporter)
    assert ErrorCode.WHEN_KIND_NOT_QUERY in report.codes()


def test_when_clause_blank_subject_skipped(dispatcher, reporter):
    clauses = [WhenClause("  ", "subclass-of", "'cell'")]
    assert dispatcher.evaluate_when_clauses(clauses, [], reporter)


def test_empty_when_list(dispatcher, reporter):
    assert dispatcher.evaluate_when_clauses([], [], reporter)
