"""
validator — walidacja tabeli względem reguł kolumnowych i bazy wiedzy.

Interfejs publiczny:
  ValidationSession  — indeks etykiet + parser + baza wiedzy na jeden przebieg
  QueryDispatcher    — reguły QUERY → zapytania do bazy wiedzy
  evaluate_presence  — reguły obecności (is-required, is-excluded)
  TableValidator     — sterownik: wiersze → kolumny → reguły → alternatywy
  validate(rows, session, sink=None)

Typowe użycie:
    from kb import load_kb_json
    from rule_model import Reporter, ValidationReport
    from validator import ValidationSession, validate

    report  = ValidationReport()
    session = ValidationSession.open(load_kb_json("kb.json"), Reporter(report))
    validate(rows, session, report)
    for f in report.failures:
        print(f)
"""

from .session import SetupError, ValidationSession
from .dispatcher import QueryDispatcher
from .presence import FALSY, TRUTHY, evaluate_presence
from .table_validator import TableValidator, validate

__all__ = [
    "SetupError",
    "ValidationSession",
    "QueryDispatcher",
    "TRUTHY",
    "FALSY",
    "evaluate_presence",
    "TableValidator",
    "validate",
]
