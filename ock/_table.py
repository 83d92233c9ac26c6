"""Wczytywanie tabeli reguł (CSV / TSV) i bazy wiedzy dla komend CLI."""

from __future__ import annotations

import csv
import json
import pathlib

from rich.console import Console

from kb import FactsKnowledgeBase, KnowledgeBaseFormatError, load_kb_json


def guess_delimiter(path: pathlib.Path) -> str:
    return "\t" if path.suffix.lower() in {".tsv", ".tab"} else ","


def read_table(path: pathlib.Path, delimiter: str | None = None) -> list[list[str]]:
    """Wiersze tabeli jako listy napisów (nagłówek, reguły, dane)."""
    delim = delimiter or guess_delimiter(path)
    with path.open(encoding="utf-8", newline="") as f:
        return [list(row) for row in csv.reader(f, delimiter=delim)]


def load_table_or_exit(console: Console, path_str: str, delimiter: str | None) -> list[list[str]]:
    path = pathlib.Path(path_str)
    if not path.exists():
        console.print(f"[red]Brak pliku tabeli:[/red] {path}")
        raise SystemExit(1)
    try:
        return read_table(path, delimiter)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        console.print(f"[red]Błąd wczytywania tabeli:[/red] {exc}")
        raise SystemExit(1)


def load_kb_or_exit(console: Console, path_str: str | None) -> FactsKnowledgeBase:
    if not path_str:
        console.print("[red]Nie podano bazy wiedzy:[/red] użyj --kb lub ustaw OCK_KB.")
        raise SystemExit(1)
    path = pathlib.Path(path_str)
    if not path.exists():
        console.print(f"[red]Brak pliku bazy wiedzy:[/red] {path}")
        raise SystemExit(1)
    try:
        return load_kb_json(path)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Błąd parsowania JSON:[/red] {exc}")
        raise SystemExit(1)
    except KnowledgeBaseFormatError as exc:
        console.print(f"[red]{exc}[/red]")
        for e in exc.errors:
            console.print(f"  [yellow]·[/yellow] {e}")
        raise SystemExit(1)
