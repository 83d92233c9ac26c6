"""
validator/dispatcher.py — kierowanie reguł QUERY do bazy wiedzy.

QueryDispatcher.dispatch(subject, axiom, row, compound, reporter) -> bool

Podmiot rozwiązany do etykiety jest klasyfikowany przez bazę wiedzy:
  instancja nazwana  → instance-of / direct-instance-of
  klasa nazwana      → subclass-of / superclass-of (+ direct-*) / equivalent-to
Podmiot bez etykiety jest parsowany jako wyrażenie i sprawdzany przez
wynikanie aksjomatu (subclass-of / superclass-of / equivalent-to).

Typ złożony "a|b|c" jest alternatywą: wystarczy jeden spełniony element.
Elementy nierozpoznane lub nieobsługiwane dla danego kształtu podmiotu są
raportowane i pomijane.
"""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Callable, Sequence

from kb import (
    EntityKind,
    EquivalentClasses,
    Expression,
    ExpressionParseError,
    SubClassOf,
)
from rule_lang import interpolate, label_of, split_compound
from rule_model import (
    ErrorCode,
    Reporter,
    RuleCategory,
    RuleKind,
    ValidationReport,
    WhenClause,
    category_of,
    lookup_kind,
    query_kind_names,
)

from .session import ValidationSession

Handlers: TypeAlias = dict[RuleKind, Callable[[], bool]]


class QueryDispatcher:
    """
    Dyspozytor zapytań dla jednej sesji walidacji.

    Użycie:
        dispatcher = QueryDispatcher(session)
        ok = dispatcher.dispatch("'neuron'", "'cell'", row, "subclass-of", reporter)
    """

    def __init__(self, session: ValidationSession) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Klauzule warunkowe
    # ------------------------------------------------------------------

    def evaluate_when_clauses(
        self,
        clauses: Sequence[WhenClause],
        row: Sequence[str],
        reporter: Reporter,
    ) -> bool:
        """
        Koniunkcja warunków w kolejności deklaracji; False przy pierwszym
        niespełnionym. Podmiot pusty po interpolacji — warunek pomijany.
        """
        labels = self._session.labels
        for clause in clauses:
            subject = interpolate(clause.subject, row, labels, reporter).strip()
            reporter.info(
                ErrorCode.INTERPOLATED,
                f'Zinterpolowano "{clause.subject}" do "{subject}".',
            )
            if not subject:
                continue

            for element in split_compound(clause.kind):
                kind = lookup_kind(element)
                if kind is None or category_of(kind) is not RuleCategory.QUERY:
                    reporter.error(
                        ErrorCode.WHEN_KIND_NOT_QUERY,
                        f'W klauzuli "{clause.kind}": w klauzuli warunkowej dozwolone są '
                        f"tylko typy: {', '.join(query_kind_names())}.",
                        kind=clause.kind,
                    )
                    return False

            axiom = interpolate(clause.axiom, row, labels, reporter)
            reporter.info(
                ErrorCode.INTERPOLATED,
                f'Zinterpolowano "{clause.axiom}" do "{axiom}".',
            )

            if not self.dispatch(subject, axiom, row, clause.kind, reporter):
                reporter.info(
                    ErrorCode.WHEN_UNSATISFIED,
                    f'Klauzula warunkowa "{subject} {clause.kind} {clause.axiom}" nie jest spełniona.',
                )
                return False
            reporter.info(
                ErrorCode.WHEN_SATISFIED,
                f'Spełniona klauzula warunkowa "{subject} {clause.kind} {clause.axiom}".',
            )
        return True

    # ------------------------------------------------------------------
    # Zapytanie
    # ------------------------------------------------------------------

    def dispatch(
        self,
        subject: str,
        axiom: str,
        row: Sequence[str],
        compound: str,
        reporter: Reporter,
    ) -> bool:
        """Czy podmiot spełnia aksjomat dla któregokolwiek typu z compound."""
        reporter.debug(
            f'dispatch(): podmiot "{subject}", aksjomat "{axiom}", typ "{compound}".',
            row=list(row),
        )
        if not self._session.cache_queries:
            return self._dispatch(subject, axiom, compound, reporter)

        key = (subject, axiom, compound)
        answer = self._session.cached(key)
        if answer is None:
            trace = ValidationReport()
            result = self._dispatch(subject, axiom, compound, Reporter(trace))
            answer = (result, tuple(trace.diagnostics))
            self._session.remember(key, answer)

        # diagnostyki zapytania trafiają pod bieżącą pozycję, także przy trafieniu w cache
        result, diagnostics = answer
        for d in diagnostics:
            reporter.log(d.severity, d.code, d.message, **(d.details or {}))
        return result

    def _dispatch(self, subject: str, axiom: str, compound: str, reporter: Reporter) -> bool:
        rule_expr = self.parse_expression(axiom, reporter)
        if rule_expr is None:
            reporter.error(
                ErrorCode.EXPRESSION_PARSE,
                f'Nie można sparsować reguły "{compound} {axiom}".',
            )
            return False

        labels = self._session.labels
        subject_label = label_of(subject, labels)
        if subject_label is None:
            subject_expr = self.parse_expression(subject, reporter)
            if subject_expr is None:
                reporter.error(
                    ErrorCode.EXPRESSION_PARSE,
                    f'Nie można sparsować podmiotu "{subject}".',
                )
                return False
            return self._generalized_query(subject_expr, rule_expr, compound, reporter)

        identifier = labels.identifier_of(subject_label)
        shape = self._session.kb.classify(identifier) if identifier else None
        if shape is EntityKind.INSTANCE:
            return self._instance_query(identifier, rule_expr, compound, reporter)
        if shape is EntityKind.CLASS:
            return self._class_query(identifier, rule_expr, compound, reporter)

        reporter.error(
            ErrorCode.SUBJECT_UNCLASSIFIABLE,
            f'Podczas walidacji "{subject}" względem "{compound} {axiom}": '
            f'"{identifier}" nie jest ani klasą, ani instancją.',
            identifier=identifier,
        )
        return False

    def parse_expression(self, text: str, reporter: Reporter) -> Expression | None:
        """Parsuje wyrażenie; przy błędzie ponawia z tekstem w apostrofach."""
        parser = self._session.parser
        try:
            return parser.parse(text)
        except ExpressionParseError as exc:
            try:
                return parser.parse(f"'{text}'")
            except ExpressionParseError:
                reporter.error(
                    ErrorCode.EXPRESSION_PARSE,
                    f'Nie można ustalić wyrażenia z "{text}": {exc}',
                    text=text,
                )
                return None

    # ------------------------------------------------------------------
    # Formy zapytań
    # ------------------------------------------------------------------

    def _instance_query(
        self,
        individual: str,
        rule_expr: Expression,
        compound: str,
        reporter: Reporter,
    ) -> bool:
        kb = self._session.kb
        handlers: Handlers = {
            RuleKind.INSTANCE_OF:        lambda: individual in kb.instances_of(rule_expr, False),
            RuleKind.DIRECT_INSTANCE_OF: lambda: individual in kb.instances_of(rule_expr, True),
        }
        return self._any_satisfied(compound, handlers, f"instancji {individual}", reporter)

    def _class_query(
        self,
        cls: str,
        rule_expr: Expression,
        compound: str,
        reporter: Reporter,
    ) -> bool:
        kb = self._session.kb
        handlers: Handlers = {
            RuleKind.SUBCLASS_OF:          lambda: cls in kb.subclasses_of(rule_expr, False),
            RuleKind.DIRECT_SUBCLASS_OF:   lambda: cls in kb.subclasses_of(rule_expr, True),
            RuleKind.SUPERCLASS_OF:        lambda: cls in kb.superclasses_of(rule_expr, False),
            RuleKind.DIRECT_SUPERCLASS_OF: lambda: cls in kb.superclasses_of(rule_expr, True),
            RuleKind.EQUIVALENT_TO:        lambda: cls in kb.equivalent_classes(rule_expr),
        }
        return self._any_satisfied(compound, handlers, f"klasy {cls}", reporter)

    def _generalized_query(
        self,
        subject_expr: Expression,
        rule_expr: Expression,
        compound: str,
        reporter: Reporter,
    ) -> bool:
        kb = self._session.kb
        handlers: Handlers = {
            RuleKind.SUBCLASS_OF:   lambda: kb.is_entailed(SubClassOf(subject_expr, rule_expr)),
            RuleKind.SUPERCLASS_OF: lambda: kb.is_entailed(SubClassOf(rule_expr, subject_expr)),
            RuleKind.EQUIVALENT_TO: lambda: kb.is_entailed(EquivalentClasses(subject_expr, rule_expr)),
        }
        return self._any_satisfied(compound, handlers, f"wyrażenia {subject_expr}", reporter)

    def _any_satisfied(
        self,
        compound: str,
        handlers: Handlers,
        subject_desc: str,
        reporter: Reporter,
    ) -> bool:
        # TODO: gdy żaden element typu złożonego nie pasuje do kształtu podmiotu,
        # zgłaszać błąd konfiguracji reguły zamiast zwykłego False.
        for element in split_compound(compound):
            kind = lookup_kind(element)
            if kind is None:
                reporter.error(
                    ErrorCode.KIND_UNKNOWN,
                    f'Typ zapytania "{element}" nie jest rozpoznany w regule "{compound}".',
                    kind=element,
                )
                continue

            check = handlers.get(kind)
            if check is None:
                reporter.error(
                    ErrorCode.QUERY_UNSUPPORTED,
                    f"Walidacja {kind} nie jest możliwa dla {subject_desc}.",
                    kind=str(kind),
                )
                continue

            if check():
                return True
        return False
