"""Komenda: ock labels — listuje indeks etykiet bazy wiedzy i kolizje etykiet."""

from __future__ import annotations

import argparse

from rich import box
from rich.console import Console
from rich.table import Table

from kb import LabelIndex, short_form
from ock._config import load_settings
from ock._table import load_kb_or_exit

console = Console(width=200)


def run(args: argparse.Namespace) -> None:
    settings = load_settings()
    kb = load_kb_or_exit(console, args.kb or settings.kb_path)
    index = LabelIndex.from_source(kb)

    needle = (args.search or "").lower()
    rows = [
        (label, identifier, str(kb.classify(identifier) or "?"))
        for label, identifier in index.labels()
        if not needle or needle in label.lower() or needle in identifier.lower()
    ]

    if not rows:
        console.print("[yellow]Brak etykiet spełniających kryteria.[/yellow]")
    else:
        table = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold white")
        table.add_column("ETYKIETA",      style="bold", no_wrap=True)
        table.add_column("KRÓTKA FORMA",  style="cyan", no_wrap=True)
        table.add_column("RODZAJ",        no_wrap=True)
        table.add_column("IDENTYFIKATOR", style="dim")
        for label, identifier, kind in rows:
            table.add_row(label, short_form(identifier), kind, identifier)
        console.print()
        console.print(table)
        console.print(f"  [dim]{len(rows)} etykiet[/dim]\n")

    if index.collisions:
        console.print(f"[yellow]Kolizje etykiet ({len(index.collisions)}):[/yellow]")
        for c in index.collisions:
            console.print(
                f"  [yellow]·[/yellow] \"{c.label}\": [dim]{c.dropped}[/dim] → [bold]{c.kept}[/bold]"
            )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "labels",
        help="Listuje etykiety bazy wiedzy i wykryte kolizje etykiet.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Listuje indeks etykiet (etykieta → identyfikator) zbudowany z bazy wiedzy.
Etykieta przypisana kilku identyfikatorom wskazuje ostatni z nich;
kolizje są wypisywane na końcu.

Przykłady:
  ock labels --kb kb.json
  ock labels --kb kb.json --search neuron
        """,
    )
    p.add_argument(
        "--kb", "-k",
        default=None,
        metavar="PLIK",
        help="Baza wiedzy (JSON). Domyślnie: zmienna OCK_KB.",
    )
    p.add_argument(
        "--search", "-s",
        metavar="TEKST",
        help="Filtruj po fragmencie etykiety lub identyfikatora.",
    )
    p.set_defaults(func=run)
