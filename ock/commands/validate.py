"""Komenda: ock validate — waliduje tabelę względem reguł kolumn i bazy wiedzy."""

from __future__ import annotations

import argparse
import json

from rich import box
from rich.console import Console
from rich.table import Table

from ock._config import load_settings
from ock._table import load_kb_or_exit, load_table_or_exit
from rule_model import Reporter, Severity, ValidationReport
from validator import SetupError, ValidationSession, validate

console = Console()

SEVERITY_STYLE: dict[Severity, str] = {
    Severity.DEBUG:   "dim",
    Severity.INFO:    "cyan",
    Severity.WARNING: "yellow",
    Severity.ERROR:   "red",
}


def _fmt_pos(value: int | None) -> str:
    return "—" if value is None else str(value)


def _show_failures(report: ValidationReport) -> None:
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Wiersz",   style="cyan", no_wrap=True, justify="right")
    table.add_column("Kolumna",  style="cyan", no_wrap=True, justify="right")
    table.add_column("Kod",      style="yellow", no_wrap=True)
    table.add_column("Komunikat")

    for f in report.failures:
        pos = f.position
        table.add_row(
            _fmt_pos(pos.row if pos else None),
            _fmt_pos(pos.column if pos else None),
            f.code,
            f.message,
        )
    console.print(table)


def _show_diagnostics(report: ValidationReport, minimum: Severity) -> None:
    shown = report.by_severity(minimum)
    if not shown:
        return
    console.print(f"[bold]Diagnostyki[/bold] [dim](poziom >= {minimum})[/dim]:")
    for d in shown:
        style = SEVERITY_STYLE[d.severity]
        console.print(f"  [{style}]{d.severity:<7}[/{style}] [dim]{d.code}[/dim]  {d}")


def run(args: argparse.Namespace) -> None:
    settings = load_settings()

    rows = load_table_or_exit(console, args.table, args.delimiter or settings.delimiter)
    kb   = load_kb_or_exit(console, args.kb or settings.kb_path)

    minimum = Severity(args.min_severity) if args.min_severity else settings.min_severity
    use_cache = settings.query_cache and not args.no_cache

    report = ValidationReport()
    try:
        session = ValidationSession.open(kb, Reporter(report), cache_queries=use_cache)
        validate(rows, session, report)
    except SetupError as exc:
        console.print(f"[red]Błąd przygotowania walidacji:[/red] {exc}")
        raise SystemExit(1)

    n_data = max(len(rows) - 2, 0)
    if report.is_valid:
        console.print(
            f"[green]OK[/green]  Tabela [bold]{args.table}[/bold] "
            f"({n_data} wierszy danych) spełnia wszystkie reguły."
        )
    else:
        console.print(
            f"[red]BŁĄD[/red]  Tabela [bold]{args.table}[/bold] — "
            f"{len(report.failures)} naruszeń w {n_data} wierszach danych."
        )
        _show_failures(report)

    _show_diagnostics(report, minimum)

    if args.json_output:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))

    if not report.is_valid:
        raise SystemExit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "validate",
        help="Waliduje tabelę (CSV/TSV) względem reguł kolumn i bazy wiedzy.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Waliduje tabelę: wiersz 1 to nagłówek, wiersz 2 to specyfikacje reguł
kolumn, kolejne wiersze to dane.

Typy reguł:
  subclass-of, direct-subclass-of, superclass-of, direct-superclass-of,
  equivalent-to, instance-of, direct-instance-of   (zapytania do bazy wiedzy)
  is-required, is-excluded                         (obecność treści)

Przykłady:
  ock validate tabela.csv --kb kb.json
  ock validate tabela.tsv --kb kb.json --min-severity info
  ock validate tabela.csv --kb kb.json --json-output
        """,
    )
    p.add_argument(
        "table",
        metavar="PLIK_TABELI",
        help="Ścieżka do tabeli CSV lub TSV.",
    )
    p.add_argument(
        "--kb", "-k",
        default=None,
        metavar="PLIK",
        help="Baza wiedzy (JSON). Domyślnie: zmienna OCK_KB.",
    )
    p.add_argument(
        "--delimiter", "-d",
        default=None,
        metavar="ZNAK",
        help="Separator kolumn (domyślnie: tabulator dla .tsv, przecinek dla pozostałych).",
    )
    p.add_argument(
        "--min-severity",
        choices=[s.value for s in Severity],
        default=None,
        help="Najniższy poziom wypisywanych diagnostyk (domyślnie: OCK_MIN_SEVERITY lub warning).",
    )
    p.add_argument(
        "--no-cache",
        action="store_true",
        help="Nie zapamiętuj wyników identycznych zapytań do bazy wiedzy.",
    )
    p.add_argument(
        "--json-output",
        action="store_true",
        help="Wypisz raport walidacji jako JSON na stdout.",
    )
    p.set_defaults(func=run)
