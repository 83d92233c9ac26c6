"""
ock — narzędzie CLI dla OntoCheck.

Użycie:
  ock <komenda> [opcje]

Komendy:
  validate   Waliduje tabelę (CSV/TSV) względem reguł kolumn i bazy wiedzy.
  rules      Pokazuje sparsowane reguły kolumn tabeli i błędy ich składni.
  labels     Listuje etykiety bazy wiedzy i kolizje etykiet.
  query      Sprawdza pojedyncze zapytanie: PODMIOT TYP AKSJOMAT.
"""

from __future__ import annotations

import argparse
import sys

# Konsola Windows bywa w cp1252; polskie znaki w pomocy argparse i w tabelach
# rich wymagają UTF-8.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from ock.commands import labels, query, rules, validate

COMMANDS = (validate, rules, labels, query)

ENV_HELP = """\
Zmienne środowiskowe (także z pliku .env w katalogu projektu):
  OCK_KB             domyślny plik bazy wiedzy (JSON)
  OCK_DELIMITER      separator tabeli ("\\t" = tabulator)
  OCK_MIN_SEVERITY   debug | info | warning | error   (domyślnie: warning)
  OCK_QUERY_CACHE    1 / 0 — cache identycznych zapytań (domyślnie: 1)
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ock",
        description="OntoCheck: walidacja tabel względem reguł kolumn i bazy wiedzy.",
        epilog=ENV_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version="ock 0.1.0")

    subparsers = parser.add_subparsers(title="komendy", metavar="<komenda>", dest="command")
    subparsers.required = True
    for command in COMMANDS:
        command.add_parser(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
