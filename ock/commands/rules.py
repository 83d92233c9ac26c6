"""Komenda: ock rules — pokazuje, jak sparsowano wiersz specyfikacji reguł tabeli."""

from __future__ import annotations

import argparse

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ock._config import load_settings
from ock._table import load_table_or_exit
from rule_lang import is_recognized_kind, parse_rule_row, primary_kind, separate_rule
from rule_model import Reporter, Severity, ValidationReport

console = Console(width=200)


def _fmt_when(clauses) -> str:
    if not clauses:
        return "[dim]—[/dim]"
    return "\n".join(f"{c.subject} [yellow]{c.kind}[/yellow] {c.axiom}" for c in clauses)


def run(args: argparse.Namespace) -> None:
    settings = load_settings()
    rows = load_table_or_exit(console, args.table, args.delimiter or settings.delimiter)
    if len(rows) < 2:
        console.print("[red]Tabela musi zawierać wiersz nagłówka i wiersz reguł.[/red]")
        raise SystemExit(1)

    report = ValidationReport()
    reporter = Reporter(report)
    header = rows[0]
    column_rules = parse_rule_row(header, rows[1], reporter)

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
    )
    table.add_column("KOL",        no_wrap=True, justify="right")
    table.add_column("NAGŁÓWEK",   no_wrap=True, max_width=24, style="bold")
    table.add_column("TYP",        no_wrap=True)
    table.add_column("KLAUZULA GŁÓWNA", max_width=60)
    table.add_column("WHEN",       max_width=70)

    n_rules = 0
    for col_no, rules in enumerate(column_rules, start=1):
        for kind, content in rules.pairs():
            n_rules += 1
            col_reporter = reporter.at(column=col_no)
            if is_recognized_kind(kind):
                kind_txt = Text(kind, style="green")
                parsed = separate_rule(content, primary_kind(kind), col_reporter)
                main, when = parsed.main, _fmt_when(parsed.when)
            else:
                kind_txt = Text(f"{kind} (nieznany)", style="red")
                main, when = content, "[dim]—[/dim]"
            table.add_row(str(col_no), header[col_no - 1], kind_txt, main, when)

    if n_rules == 0:
        console.print("[yellow]Brak reguł w wierszu specyfikacji.[/yellow]")
    else:
        console.print()
        console.print(table)
        console.print(f"  [dim]{n_rules} reguł w {sum(1 for r in column_rules if r)} kolumnach[/dim]\n")

    problems = report.by_severity(Severity.WARNING)
    for d in problems:
        style = "red" if d.severity is Severity.ERROR else "yellow"
        console.print(f"  [{style}]·[/{style}] [dim]{d.code}[/dim]  {d}")

    if any(d.severity is Severity.ERROR for d in problems):
        raise SystemExit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "rules",
        help="Pokazuje sparsowane reguły kolumn tabeli i błędy ich składni.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Parsuje wiersz specyfikacji reguł (drugi wiersz tabeli) i wypisuje dla
każdej kolumny: typ reguły, klauzulę główną i klauzule warunkowe (when).
Nie wymaga bazy wiedzy.

Przykłady:
  ock rules tabela.csv
  ock rules tabela.tsv
        """,
    )
    p.add_argument(
        "table",
        metavar="PLIK_TABELI",
        help="Ścieżka do tabeli CSV lub TSV.",
    )
    p.add_argument(
        "--delimiter", "-d",
        default=None,
        metavar="ZNAK",
        help="Separator kolumn (domyślnie: wg rozszerzenia pliku).",
    )
    p.set_defaults(func=run)
