"""Komenda: ock query — pojedyncze zapytanie do bazy wiedzy w języku reguł."""

from __future__ import annotations

import argparse

from rich.console import Console

from ock._config import load_settings
from ock._table import load_kb_or_exit
from rule_model import Reporter, Severity, ValidationReport
from validator import QueryDispatcher, SetupError, ValidationSession

console = Console()


def run(args: argparse.Namespace) -> None:
    settings = load_settings()
    kb = load_kb_or_exit(console, args.kb or settings.kb_path)

    report = ValidationReport()
    reporter = Reporter(report)
    try:
        session = ValidationSession.open(kb, reporter, cache_queries=False)
    except SetupError as exc:
        console.print(f"[red]Błąd przygotowania:[/red] {exc}")
        raise SystemExit(1)

    dispatcher = QueryDispatcher(session)
    ok = dispatcher.dispatch(args.subject, args.axiom, [], args.kind, reporter)

    console.print(
        f"\nZapytanie: [bold cyan]{args.subject} {args.kind} {args.axiom}[/bold cyan]"
    )
    if ok:
        console.print("  [green]PRAWDA[/green]")
    else:
        console.print("  [red]FAŁSZ[/red]")

    for d in report.by_severity(Severity.WARNING):
        style = "red" if d.severity is Severity.ERROR else "yellow"
        console.print(f"  [{style}]·[/{style}] [dim]{d.code}[/dim]  {d.message}")

    if not ok:
        raise SystemExit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "query",
        help="Sprawdza pojedyncze zapytanie: PODMIOT TYP AKSJOMAT.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wykonuje jedno zapytanie tak, jak dla komórki tabeli: podmiot jest
rozwiązywany do etykiety (klasa / instancja) albo parsowany jako wyrażenie.
Typ może być złożony (alternatywa), np. "subclass-of|equivalent-to".

Przykłady:
  ock query neuron subclass-of cell --kb kb.json
  ock query "'nerve cell'" "subclass-of|equivalent-to" "'cell'" --kb kb.json
  ock query n1 instance-of neuron --kb kb.json
        """,
    )
    p.add_argument("subject", metavar="PODMIOT", help="Etykieta, identyfikator lub wyrażenie.")
    p.add_argument("kind",    metavar="TYP",     help="Typ reguły (może być złożony: a|b).")
    p.add_argument("axiom",   metavar="AKSJOMAT", help="Wyrażenie klasowe po prawej stronie.")
    p.add_argument(
        "--kb", "-k",
        default=None,
        metavar="PLIK",
        help="Baza wiedzy (JSON). Domyślnie: zmienna OCK_KB.",
    )
    p.set_defaults(func=run)
