# tests/test_rule_parser.py
import pytest

from rule_lang import (
    is_recognized_kind,
    parse_column_rules,
    parse_rule_row,
    parse_when_clause,
    primary_kind,
    separate_rule,
    split_compound,
)
from rule_model import (
    ErrorCode,
    RuleCategory,
    RuleKind,
    Severity,
    WhenClause,
    category_of,
    lookup_kind,
    query_kind_names,
)


# ---------------------------------------------------------------------------
# Typy reguł
# ---------------------------------------------------------------------------

def test_lookup_kind_known_and_unknown():
    assert lookup_kind("subclass-of") is RuleKind.SUBCLASS_OF
    assert lookup_kind("is-required") is RuleKind.IS_REQUIRED
    assert lookup_kind("bogus-of") is None


def test_categories():
    assert category_of(RuleKind.INSTANCE_OF) is RuleCategory.QUERY
    assert category_of(RuleKind.IS_EXCLUDED) is RuleCategory.PRESENCE
    assert len(query_kind_names()) == 7
    assert "is-required" not in query_kind_names()


def test_public_names_are_exported():
    import rule_model

    assert all(hasattr(rule_model, name) for name in rule_model.__all__)


def test_split_compound():
    assert split_compound("a|b|c") == ["a", "b", "c"]
    assert split_compound(" subclass-of | equivalent-to ") == ["subclass-of", "equivalent-to"]
    assert primary_kind("superclass-of|equivalent-to") == "superclass-of"


def test_recognized_kind_uses_primary_only():
    assert is_recognized_kind("subclass-of|bogus")
    assert not is_recognized_kind("bogus|subclass-of")


# ---------------------------------------------------------------------------
# parse_column_rules
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("spec", ["", "   ", "# komentarz", "## cała kolumna; subclass-of 'x'", " ; ; # a ; #b"])
def test_comments_and_blanks_give_empty_rule_set(spec, reporter, report):
    rules = parse_column_rules(spec, reporter)
    assert not rules
    assert len(rules) == 0
    assert report.errors == []


def test_presence_kind_defaults_to_true(reporter):
    rules = parse_column_rules("is-required", reporter)
    assert rules.as_dict() == {"is-required": ["true"]}


def test_query_kind_without_content_is_dropped(reporter, report):
    rules = parse_column_rules("subclass-of ; is-excluded", reporter)
    assert rules.as_dict() == {"is-excluded": ["true"]}
    assert report.codes() == [ErrorCode.RULE_MALFORMED]


def test_rules_keep_declaration_order(reporter):
    rules = parse_column_rules("subclass-of 'cell'; is-required; subclass-of 'glia'", reporter)
    assert list(rules.pairs()) == [
        ("subclass-of", "'cell'"),
        ("is-required", "true"),
        ("subclass-of", "'glia'"),
    ]
    assert rules.rules("subclass-of") == ["'cell'", "'glia'"]
    assert "is-required" in rules


def test_repeated_kind_stays_in_place(reporter):
    rules = parse_column_rules("is-excluded; subclass-of 'x'; is-excluded no", reporter)
    assert list(rules.pairs()) == [
        ("is-excluded", "true"),
        ("subclass-of", "'x'"),
        ("is-excluded", "no"),
    ]
    assert rules.as_dict() == {"is-excluded": ["true", "no"], "subclass-of": ["'x'"]}
    assert len(rules) == 3


def test_unknown_kind_is_accepted_syntactically(reporter, report):
    rules = parse_column_rules("bogus-of 'x'", reporter)
    assert rules.as_dict() == {"bogus-of": ["'x'"]}
    assert report.errors == []


# ---------------------------------------------------------------------------
# separate_rule / parse_when_clause
# ---------------------------------------------------------------------------

def test_parse_when_clause_quoted_subject():
    clause = parse_when_clause("'motor neuron' subclass-of|equivalent-to 'cell'")
    assert clause == WhenClause("'motor neuron'", "subclass-of|equivalent-to", "'cell'")
    assert parse_when_clause("justone") is None


def test_separate_rule_without_when(reporter, report):
    parsed = separate_rule("'cell'", "subclass-of", reporter)
    assert parsed.main == "'cell'"
    assert parsed.when == []
    assert not parsed.is_conditional
    assert ErrorCode.NO_WHEN_CLAUSES in report.codes()


def test_separate_rule_with_two_when_clauses(reporter):
    parsed = separate_rule(
        "'cell' (when %1 subclass-of 'neuron' & %2 instance-of 'glia')",
        "subclass-of",
        reporter,
    )
    assert parsed.main == "'cell'"
    assert parsed.when == [
        WhenClause("%1", "subclass-of", "'neuron'"),
        WhenClause("%2", "instance-of", "'glia'"),
    ]


def test_when_without_main_is_error_for_query_rule(reporter, report):
    rule = "(when %1 subclass-of 'cell')"
    parsed = separate_rule(rule, "subclass-of", reporter)
    assert parsed.main == rule
    assert parsed.when == []
    assert ErrorCode.WHEN_WITHOUT_MAIN in report.codes()


def test_when_without_main_defaults_to_true_for_presence_rule(reporter, report):
    parsed = separate_rule("(when %1 subclass-of 'cell')", "is-required", reporter)
    assert parsed.main == "true"
    assert parsed.when == [WhenClause("%1", "subclass-of", "'cell'")]
    assert report.errors == []


def test_main_clause_glued_to_when_block_is_not_a_main_clause(reporter, report):
    rule = "'cell'(when %1 subclass-of 'x')"
    parsed = separate_rule(rule, "subclass-of", reporter)
    assert parsed.main == rule
    assert parsed.when == []
    assert ErrorCode.WHEN_WITHOUT_MAIN in report.codes()


def test_glued_presence_rule_defaults_to_true(reporter, report):
    parsed = separate_rule("no(when %1 subclass-of 'x')", "is-excluded", reporter)
    assert parsed.main == "true"
    assert parsed.when == [WhenClause("%1", "subclass-of", "'x'")]
    assert report.errors == []


def test_malformed_when_clause_returns_rule_unchanged(reporter, report):
    rule = "'cell' (when justone)"
    parsed = separate_rule(rule, "subclass-of", reporter)
    assert parsed.main == rule
    assert parsed.when == []
    assert ErrorCode.WHEN_CLAUSE_MALFORMED in report.codes()


def test_trailing_text_after_when_block_is_warned(reporter, report):
    parsed = separate_rule("'cell' (when %1 subclass-of 'x') extra", "subclass-of", reporter)
    assert parsed.main == "'cell'"
    assert len(parsed.when) == 1
    assert [d.code for d in report.warnings] == [ErrorCode.TRAILING_TEXT]


# ---------------------------------------------------------------------------
# parse_rule_row
# ---------------------------------------------------------------------------

def test_rule_row_is_indexed_by_position(reporter):
    sets = parse_rule_row(["id", "parent", "id"], ["", "subclass-of %1"], reporter)
    assert len(sets) == 3
    assert not sets[0]
    assert sets[1].as_dict() == {"subclass-of": ["%1"]}
    assert not sets[2]


def test_rule_row_errors_carry_column(reporter, report):
    parse_rule_row(["a", "b"], ["", "subclass-of"], reporter)
    [err] = report.errors
    assert err.severity is Severity.ERROR
    assert err.position.column == 2
    assert err.position.row is None
    assert str(err).startswith("W kolumnie 2: ")
