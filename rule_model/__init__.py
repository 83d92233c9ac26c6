"""
rule_model — struktury danych języka reguł kolumnowych.

Użycie:
  from rule_model import RuleKind, ColumnRuleSet, ParsedRule, Reporter, ...

Moduły:
  kinds       — RuleKind, RuleCategory, tabela kategorii
  rules       — ColumnRuleSet, ParsedRule, WhenClause
  diagnostics — Severity, ErrorCode, Position, Diagnostic, ValidationReport,
                Reporter, DiagnosticSink
"""

from .kinds import (
    RuleCategory,
    RuleKind,
    RULE_CATEGORIES,
    QUERY_KINDS,
    lookup_kind,
    category_of,
    query_kind_names,
)
from .rules import (
    CompoundKind,
    WhenClause,
    ParsedRule,
    ColumnRuleSet,
)
from .diagnostics import (
    Severity,
    ErrorCode,
    Position,
    Diagnostic,
    DiagnosticSink,
    ValidationReport,
    Reporter,
)

__all__ = [
    # kinds
    "RuleCategory",
    "RuleKind",
    "RULE_CATEGORIES",
    "QUERY_KINDS",
    "lookup_kind",
    "category_of",
    "query_kind_names",
    # rules
    "CompoundKind",
    "WhenClause",
    "ParsedRule",
    "ColumnRuleSet",
    # diagnostics
    "Severity",
    "ErrorCode",
    "Position",
    "Diagnostic",
    "DiagnosticSink",
    "ValidationReport",
    "Reporter",
]
