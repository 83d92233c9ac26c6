"""
rule_model/diagnostics.py — kody diagnostyk, pozycja w tabeli i raport walidacji.

Diagnostic       — pojedynczy komunikat: poziom, kod, treść, pozycja, szczegóły
Position         — (wiersz, kolumna), 1-based; wiersz liczony od pierwszego
                   wiersza danych
ValidationReport — domyślny odbiornik: kanał diagnostyk + kanał naruszeń
Reporter         — jawny kontekst (odbiornik + pozycja) przekazywany do
                   każdej funkcji, która może zgłosić diagnostykę
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Protocol


class Severity(StrEnum):
    """Poziom diagnostyki."""
    DEBUG   = "debug"
    INFO    = "info"
    WARNING = "warning"
    ERROR   = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.DEBUG:   0,
    Severity.INFO:    1,
    Severity.WARNING: 2,
    Severity.ERROR:   3,
}


class ErrorCode(StrEnum):
    """Stałe kody diagnostyk."""

    # Specyfikacja reguł kolumny
    RULE_MALFORMED            = "E_RULE_MALFORMED"
    KIND_UNKNOWN              = "E_KIND_UNKNOWN"
    WHEN_CLAUSE_MALFORMED     = "E_WHEN_CLAUSE_MALFORMED"
    WHEN_WITHOUT_MAIN         = "E_WHEN_WITHOUT_MAIN"
    WHEN_KIND_NOT_QUERY       = "E_WHEN_KIND_NOT_QUERY"
    TRAILING_TEXT             = "W_TRAILING_TEXT"

    # Wildcardy %N
    WILDCARD_MALFORMED        = "E_WILDCARD_MALFORMED"
    WILDCARD_OUT_OF_RANGE     = "E_WILDCARD_OUT_OF_RANGE"
    WILDCARD_EMPTY            = "W_WILDCARD_EMPTY"

    # Zapytania do bazy wiedzy
    EXPRESSION_PARSE          = "E_EXPRESSION_PARSE"
    SUBJECT_UNCLASSIFIABLE    = "E_SUBJECT_UNCLASSIFIABLE"
    QUERY_UNSUPPORTED         = "E_QUERY_UNSUPPORTED"

    # Reguły obecności
    PRESENCE_VALUE_INVALID    = "E_PRESENCE_VALUE_INVALID"
    PRESENCE_NOT_IMPLEMENTED  = "E_PRESENCE_NOT_IMPLEMENTED"

    # Indeks etykiet
    LABEL_DUPLICATE           = "W_LABEL_DUPLICATE"

    # Ślad przebiegu
    NO_WHEN_CLAUSES           = "I_NO_WHEN_CLAUSES"
    INTERPOLATED              = "I_INTERPOLATED"
    WHEN_SATISFIED            = "I_WHEN_SATISFIED"
    WHEN_UNSATISFIED          = "I_WHEN_UNSATISFIED"
    PRESENCE_INERT            = "I_PRESENCE_INERT"
    RULE_PASSED               = "I_RULE_PASSED"
    TRACE                     = "D_TRACE"

    # Naruszenia (kanał niepowodzeń)
    CELL_EMPTY_REQUIRED       = "V_CELL_EMPTY_REQUIRED"
    CELL_NOT_EXCLUDED         = "V_CELL_NOT_EXCLUDED"
    QUERY_FAILED              = "V_QUERY_FAILED"


# ---------------------------------------------------------------------------
# Position / Diagnostic
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Position:
    """
    Miejsce w tabeli, którego dotyczy diagnostyka.

    - row:    numer wiersza danych (1 = pierwszy wiersz po wierszu reguł)
    - column: numer kolumny (1-based)
    """
    row: int | None = None
    column: int | None = None

    def prefix(self) -> str:
        if self.row is not None and self.column is not None:
            return f"W wierszu {self.row}, kolumnie {self.column}: "
        if self.column is not None:
            return f"W kolumnie {self.column}: "
        if self.row is not None:
            return f"W wierszu {self.row}: "
        return ""


@dataclass(slots=True)
class Diagnostic:
    """
    Pojedyncza diagnostyka.

    - severity: poziom (debug / info / warning / error)
    - code:     stały identyfikator klasy komunikatu (ErrorCode)
    - message:  czytelny opis
    - position: pozycja w tabeli (None dla błędów poza tabelą)
    - details:  opcjonalny słownik z dodatkowymi danymi
    """
    severity: Severity
    code: ErrorCode
    message: str
    position: Position | None = None
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        prefix = self.position.prefix() if self.position else ""
        return f"{prefix}{self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": str(self.severity),
            "code":     str(self.code),
            "message":  self.message,
            "row":      self.position.row if self.position else None,
            "column":   self.position.column if self.position else None,
            "details":  self.details,
        }


# ---------------------------------------------------------------------------
# Odbiornik diagnostyk
# ---------------------------------------------------------------------------

class DiagnosticSink(Protocol):
    def emit(self, diagnostic: Diagnostic) -> None:
        ...

    def record_failure(self, diagnostic: Diagnostic) -> None:
        ...


@dataclass(slots=True)
class ValidationReport:
    """
    Wynik przebiegu walidacji tabeli.

    - diagnostics: kanał komunikatów (ślad, ostrzeżenia, błędy reguł)
    - failures:    kanał naruszeń — komórki niespełniające reguł
    """
    diagnostics: list[Diagnostic] = field(default_factory=list)
    failures: list[Diagnostic] = field(default_factory=list)

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def record_failure(self, diagnostic: Diagnostic) -> None:
        self.failures.append(diagnostic)

    @property
    def is_valid(self) -> bool:
        """True gdy brak naruszeń (błędy reguł nie wpływają)."""
        return not self.failures

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    def by_severity(self, minimum: Severity) -> list[Diagnostic]:
        """Diagnostyki o poziomie >= minimum."""
        return [d for d in self.diagnostics if d.severity.rank >= minimum.rank]

    def codes(self) -> list[ErrorCode]:
        return [d.code for d in self.diagnostics]

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid":    self.is_valid,
            "failures":    [d.to_dict() for d in self.failures],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


# ---------------------------------------------------------------------------
# Reporter
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Reporter:
    """
    Odbiornik + bieżąca pozycja w tabeli.

    Niemutowalny: sterownik tworzy nowy Reporter dla każdej komórki
    (Reporter.at), zamiast przestawiać współdzielony stan.
    """
    sink: DiagnosticSink
    position: Position = Position()

    def at(self, row: int | None = None, column: int | None = None) -> Reporter:
        return replace(self, position=Position(row=row, column=column))

    def log(self, severity: Severity, code: ErrorCode, message: str, **details: Any) -> None:
        self.sink.emit(Diagnostic(
            severity=severity,
            code=code,
            message=message,
            position=self.position,
            details=details or None,
        ))

    def debug(self, message: str, **details: Any) -> None:
        self.log(Severity.DEBUG, ErrorCode.TRACE, message, **details)

    def info(self, code: ErrorCode, message: str, **details: Any) -> None:
        self.log(Severity.INFO, code, message, **details)

    def warning(self, code: ErrorCode, message: str, **details: Any) -> None:
        self.log(Severity.WARNING, code, message, **details)

    def error(self, code: ErrorCode, message: str, **details: Any) -> None:
        self.log(Severity.ERROR, code, message, **details)

    def violation(self, code: ErrorCode, message: str, **details: Any) -> Diagnostic:
        """Buduje (bez zapisu) naruszenie z bieżącą pozycją."""
        return Diagnostic(
            severity=Severity.ERROR,
            code=code,
            message=message,
            position=self.position,
            details=details or None,
        )

    def fail(self, diagnostic: Diagnostic) -> None:
        self.sink.record_failure(diagnostic)
