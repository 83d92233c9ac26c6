"""
validator/table_validator.py — sterownik walidacji tabeli.

TableValidator.validate(rows, sink=None) -> ValidationReport

Tabela:
  wiersz 0 — nagłówek (nazwy kolumn)
  wiersz 1 — specyfikacje reguł kolumn
  wiersze 2.. — dane; w diagnostykach numerowane od 1

Kolejność: wiersze → kolumny (wg nagłówka) → reguły kolumny (wg deklaracji)
→ alternatywy komórki rozdzielone '|'.
"""

from __future__ import annotations

from collections.abc import Sequence

from rule_lang import (
    interpolate,
    is_recognized_kind,
    parse_rule_row,
    primary_kind,
    separate_rule,
    split_compound,
)
from rule_model import (
    ColumnRuleSet,
    DiagnosticSink,
    ErrorCode,
    Reporter,
    RuleCategory,
    ValidationReport,
    category_of,
    lookup_kind,
)

from .dispatcher import QueryDispatcher
from .presence import evaluate_presence
from .session import SetupError, ValidationSession


class TableValidator:
    """
    Walidator tabeli dla jednej sesji.

    Użycie:
        session   = ValidationSession.open(kb, Reporter(report))
        validator = TableValidator(session)
        report    = validator.validate(rows, report)
    """

    def __init__(self, session: ValidationSession) -> None:
        self._session = session
        self._dispatcher = QueryDispatcher(session)

    @property
    def dispatcher(self) -> QueryDispatcher:
        return self._dispatcher

    # ------------------------------------------------------------------
    # Publiczny interfejs
    # ------------------------------------------------------------------

    def validate(
        self,
        rows: Sequence[Sequence[str]],
        sink: DiagnosticSink | None = None,
    ) -> DiagnosticSink:
        """
        Waliduje całą tabelę; naruszenia trafiają do kanału niepowodzeń sink.

        Raises:
            SetupError gdy brakuje wiersza nagłówka lub wiersza reguł.
        """
        if sink is None:
            sink = ValidationReport()
        if len(rows) < 2:
            raise SetupError(
                "Tabela musi zawierać wiersz nagłówka i wiersz specyfikacji reguł."
            )

        column_rules = parse_rule_row(rows[0], rows[1], Reporter(sink))

        for row_no, row in enumerate(rows[2:], start=1):
            row = list(row)
            for col_no, rules in enumerate(column_rules, start=1):
                # kolumny bez reguł to kolumny komentarzy
                if not rules:
                    continue
                cell = row[col_no - 1] if col_no - 1 < len(row) else ""
                self.validate_cell(cell, rules, row, Reporter(sink).at(row_no, col_no))

        return sink

    # ------------------------------------------------------------------
    # Komórka / reguła
    # ------------------------------------------------------------------

    def validate_cell(
        self,
        cell: str,
        rules: ColumnRuleSet,
        row: Sequence[str],
        reporter: Reporter,
    ) -> None:
        alternatives = split_compound(cell.strip())
        for kind, content in rules.pairs():
            for alternative in alternatives:
                self.validate_rule(alternative, content, row, kind, reporter)

    def validate_rule(
        self,
        cell: str,
        rule: str,
        row: Sequence[str],
        kind: str,
        reporter: Reporter,
    ) -> None:
        if not is_recognized_kind(kind):
            reporter.error(ErrorCode.KIND_UNKNOWN, f'Nierozpoznany typ reguły "{kind}".', kind=kind)
            return

        primary = primary_kind(kind)
        parsed = separate_rule(rule, primary, reporter)

        if not self._dispatcher.evaluate_when_clauses(parsed.when, row, reporter):
            reporter.info(
                ErrorCode.WHEN_UNSATISFIED,
                "Nie wszystkie klauzule warunkowe są spełnione. Pomijam klauzulę główną.",
            )
            return

        primary_rule = lookup_kind(primary)
        if category_of(primary_rule) is not RuleCategory.QUERY:
            violation = evaluate_presence(parsed.main, primary_rule, cell, reporter)
            if violation is not None:
                reporter.fail(violation)
            return

        # pusta komórka to sprawa reguł obecności
        if not cell.strip():
            return

        axiom = interpolate(parsed.main, row, self._session.labels, reporter)
        reporter.info(ErrorCode.INTERPOLATED, f'Zinterpolowano "{parsed.main}" do "{axiom}".')

        if self._dispatcher.dispatch(cell, axiom, row, kind, reporter):
            reporter.info(ErrorCode.RULE_PASSED, f'Zwalidowano: "{cell} {kind} {parsed.main}".')
            return

        reporter.fail(reporter.violation(
            ErrorCode.QUERY_FAILED,
            f'Walidacja nie powiodła się dla reguły: "{cell} {kind} {parsed.main}".',
            cell=cell,
            kind=kind,
            rule=parsed.main,
        ))


def validate(
    rows: Sequence[Sequence[str]],
    session: ValidationSession,
    sink: DiagnosticSink | None = None,
) -> DiagnosticSink:
    """Waliduje tabelę (nagłówek, wiersz reguł, dane) w ramach sesji."""
    return TableValidator(session).validate(rows, sink)
