"""
rule_lang/parser.py — gramatyka specyfikacji reguł kolumny.

Specyfikacja kolumny (komórka wiersza reguł):

    <typ> <treść> ; <typ> <treść> ; # komentarz ; ...

    typ    — nazwa typu lub typ złożony "a|b|c" (alternatywa)
    treść  — aksjomat, opcjonalnie z blokiem warunkowym:
             <klauzula główna> (when <podmiot> <typ> <aksjomat> & ...)

Publiczne API:
  parse_column_rules(spec, reporter)          -> ColumnRuleSet
  split_compound(kind_text)                   -> list[str]
  primary_kind(kind_text)                     -> str
  is_recognized_kind(kind_text)               -> bool
  separate_rule(rule, primary, reporter)      -> ParsedRule
  parse_when_clause(text)                     -> WhenClause | None
  parse_rule_row(header, rule_row, reporter)  -> list[ColumnRuleSet]
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from rule_model import (
    ColumnRuleSet,
    ErrorCode,
    ParsedRule,
    Reporter,
    RuleCategory,
    WhenClause,
    category_of,
    lookup_kind,
)

# Reguły rozdzielone średnikami
_CLAUSE_SPLIT_RE = re.compile(r"\s*;\s*")

# Typy złożone rozdzielone pionowymi kreskami
_PIPE_SPLIT_RE = re.compile(r"\s*\|\s*")

# Pierwszy blok "(when ...)" i tekst za nim
_WHEN_BLOCK_RE = re.compile(r"\(\s*when\s+(.+)\)(.*)")

# Podklauzule warunku rozdzielone '&'
_AMP_SPLIT_RE = re.compile(r"\s*&\s*")

# <podmiot> <typ> <aksjomat>; podmiot: token bez białych znaków lub 'fraza'
_WHEN_CLAUSE_RE = re.compile(r"^([^'\s]+|'[^']+')\s+([a-z\-|]+)\s+(.*)$")

PRESENCE_DEFAULT = "true"


# ---------------------------------------------------------------------------
# Typy reguł
# ---------------------------------------------------------------------------

def split_compound(kind_text: str) -> list[str]:
    """'a | b|c' → ['a', 'b', 'c']; element 0 to typ główny."""
    return _PIPE_SPLIT_RE.split(kind_text.strip())


def primary_kind(kind_text: str) -> str:
    return split_compound(kind_text)[0]


def is_recognized_kind(kind_text: str) -> bool:
    """Czy typ główny należy do zamkniętego zbioru RuleKind."""
    return lookup_kind(primary_kind(kind_text)) is not None


def _is_presence(kind_text: str) -> bool:
    kind = lookup_kind(primary_kind(kind_text))
    return kind is not None and category_of(kind) is RuleCategory.PRESENCE


# ---------------------------------------------------------------------------
# Specyfikacja kolumny
# ---------------------------------------------------------------------------

def parse_column_rules(spec: str, reporter: Reporter) -> ColumnRuleSet:
    """
    Parsuje specyfikację reguł jednej kolumny.

    Pomija: pustą specyfikację, specyfikację zaczynającą się od '##',
    puste reguły i reguły zaczynające się od '#'. Reguła bez treści jest
    dozwolona tylko dla typów PRESENCE (treść domyślna "true"); pozostałe
    są odrzucane z błędem E_RULE_MALFORMED. Nieznane typy są przyjmowane —
    sprawdza je dopiero walidacja komórki.
    """
    rules = ColumnRuleSet()
    stripped = spec.strip()
    if not stripped or stripped.startswith("##"):
        return rules

    for clause in _CLAUSE_SPLIT_RE.split(stripped):
        clause = clause.strip()
        if not clause or clause.startswith("#"):
            continue

        parts = clause.split(None, 1)
        kind = parts[0]
        if len(parts) == 2:
            content = parts[1].strip()
        elif _is_presence(kind):
            content = PRESENCE_DEFAULT
        else:
            reporter.error(
                ErrorCode.RULE_MALFORMED,
                f"Nieprawidłowa reguła: {clause}",
                rule=clause,
            )
            continue

        rules.add(kind, content)

    return rules


# ---------------------------------------------------------------------------
# Klauzule warunkowe
# ---------------------------------------------------------------------------

def parse_when_clause(text: str) -> WhenClause | None:
    """'<podmiot> <typ> <aksjomat>' → WhenClause; None gdy nie pasuje."""
    m = _WHEN_CLAUSE_RE.match(text.strip())
    if not m:
        return None
    return WhenClause(subject=m.group(1), kind=m.group(2), axiom=m.group(3))


def separate_rule(rule: str, primary: str, reporter: Reporter) -> ParsedRule:
    """
    Rozdziela regułę na klauzulę główną i klauzule warunkowe.

    Klauzula główna to tekst przed "(when", oddzielony od niego odstępem.
    Gdy rozkład się nie powiedzie (błędna podklauzula, brak klauzuli
    głównej przy regule QUERY), zwraca regułę bez zmian z pustą listą
    warunków.
    """
    m = _WHEN_BLOCK_RE.search(rule)
    if not m:
        reporter.info(
            ErrorCode.NO_WHEN_CLAUSES,
            f'Brak klauzul warunkowych w regule: "{rule}".',
        )
        return ParsedRule(main=rule)

    presence = _is_presence(primary)
    head = rule[:m.start()]
    main = head.strip()
    if main and not head[-1].isspace():
        # "x(when ...)": klauzula główna musi być oddzielona odstępem
        main = ""
    if not main and not presence:
        reporter.error(
            ErrorCode.WHEN_WITHOUT_MAIN,
            f'Reguła "{rule}" ma klauzulę warunkową, ale nie ma klauzuli głównej.',
            rule=rule,
        )
        return ParsedRule(main=rule)

    trailing = m.group(2).strip()
    if trailing:
        reporter.warning(
            ErrorCode.TRAILING_TEXT,
            f'Pomijam tekst "{trailing}" na końcu reguły "{rule}".',
            trailing=trailing,
        )

    clauses: list[WhenClause] = []
    for sub in _AMP_SPLIT_RE.split(m.group(1).strip()):
        clause = parse_when_clause(sub)
        if clause is None:
            reporter.error(
                ErrorCode.WHEN_CLAUSE_MALFORMED,
                f'Nie można rozłożyć klauzuli warunkowej: "{sub}".',
                clause=sub,
            )
            return ParsedRule(main=rule)
        clauses.append(clause)

    return ParsedRule(main=main or PRESENCE_DEFAULT, when=clauses)


def parse_rule_row(
    header: Sequence[str],
    rule_row: Sequence[str],
    reporter: Reporter,
) -> list[ColumnRuleSet]:
    """
    Zbiory reguł wszystkich kolumn, indeksowane pozycją kolumny (nie nazwą
    z nagłówka — zduplikowane nazwy kolumn nie sklejają reguł). Brakujące
    komórki wiersza reguł oznaczają kolumnę bez reguł.
    """
    out: list[ColumnRuleSet] = []
    for i in range(len(header)):
        spec = rule_row[i] if i < len(rule_row) else ""
        out.append(parse_column_rules(spec or "", reporter.at(column=i + 1)))
    return out
