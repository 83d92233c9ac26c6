"""
rule_lang — język reguł kolumnowych: gramatyka i interpolacja wildcardów.

Publiczne API:
  parse_column_rules(spec, reporter)       -> ColumnRuleSet
  split_compound / primary_kind / is_recognized_kind
  separate_rule(rule, primary, reporter)   -> ParsedRule
  parse_when_clause(text)                  -> WhenClause | None
  parse_rule_row(header, rule_row, reporter) -> list[ColumnRuleSet]
  resolve_wildcard(token, row, reporter)   -> str | None
  label_of(term, labels)                   -> str | None
  interpolate(text, row, labels, reporter) -> str
"""

from .parser import (
    PRESENCE_DEFAULT,
    parse_column_rules,
    split_compound,
    primary_kind,
    is_recognized_kind,
    separate_rule,
    parse_when_clause,
    parse_rule_row,
)
from .wildcards import resolve_wildcard, label_of, interpolate

__all__ = [
    "PRESENCE_DEFAULT",
    "parse_column_rules",
    "split_compound",
    "primary_kind",
    "is_recognized_kind",
    "separate_rule",
    "parse_when_clause",
    "parse_rule_row",
    "resolve_wildcard",
    "label_of",
    "interpolate",
]
