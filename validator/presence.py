"""
validator/presence.py — reguły obecności (is-required, is-excluded).

Treść reguły obecności musi być wartością logiczną:
  prawda: true, t, 1, yes, y
  fałsz:  false, f, 0, no, n   (reguła nieaktywna)
"""

from __future__ import annotations

from rule_model import Diagnostic, ErrorCode, Reporter, RuleKind

TRUTHY: frozenset[str] = frozenset({"true", "t", "1", "yes", "y"})
FALSY:  frozenset[str] = frozenset({"false", "f", "0", "no", "n"})


def evaluate_presence(
    content: str,
    kind: RuleKind,
    cell: str,
    reporter: Reporter,
) -> Diagnostic | None:
    """
    Sprawdza komórkę względem reguły obecności.

    Returns:
        Naruszenie (do zapisania w kanale niepowodzeń) albo None.
    """
    value = content.strip().lower()
    if value not in TRUTHY and value not in FALSY:
        reporter.error(
            ErrorCode.PRESENCE_VALUE_INVALID,
            f'Nieprawidłowa reguła: "{content}" dla typu {kind}. Dozwolone: '
            f"{', '.join(sorted(TRUTHY))}, {', '.join(sorted(FALSY))}.",
            rule=content,
        )
        return None

    if value in FALSY:
        reporter.info(ErrorCode.PRESENCE_INERT, f'Brak czego walidować dla reguły "{kind} {content}".')
        return None

    match kind:
        case RuleKind.IS_REQUIRED:
            if not cell.strip():
                return reporter.violation(
                    ErrorCode.CELL_EMPTY_REQUIRED,
                    f'Komórka jest pusta, a reguła "{kind} {content}" na to nie pozwala.',
                    rule=f"{kind} {content}",
                )
        case RuleKind.IS_EXCLUDED:
            if cell.strip():
                return reporter.violation(
                    ErrorCode.CELL_NOT_EXCLUDED,
                    f'Komórka nie jest pusta ("{cell}"), a reguła "{kind} {content}" '
                    f"na to nie pozwala.",
                    rule=f"{kind} {content}",
                    cell=cell,
                )
        case _:
            reporter.error(
                ErrorCode.PRESENCE_NOT_IMPLEMENTED,
                f'Walidacja obecności dla typu "{kind}" nie jest jeszcze zaimplementowana.',
            )
            return None

    reporter.info(ErrorCode.RULE_PASSED, f'Spełniona reguła "{kind} {content}".')
    return None
