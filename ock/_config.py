"""Ustawienia CLI — zmienne środowiskowe, opcjonalnie z pliku .env w katalogu projektu."""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass

from dotenv import load_dotenv

from rule_model import Severity

ROOT = pathlib.Path(__file__).resolve().parent.parent

_TRUE = {"1", "true", "t", "yes", "y", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    """
    - kb_path:       domyślny plik bazy wiedzy (OCK_KB)
    - delimiter:     separator tabeli (OCK_DELIMITER); None = wg rozszerzenia pliku
    - min_severity:  najniższy poziom diagnostyk wypisywany przez CLI (OCK_MIN_SEVERITY)
    - query_cache:   cache identycznych zapytań w przebiegu (OCK_QUERY_CACHE)
    """
    kb_path: str | None
    delimiter: str | None
    min_severity: Severity
    query_cache: bool


def load_settings(env_file: pathlib.Path | None = None) -> Settings:
    load_dotenv(env_file or ROOT / ".env", override=False)

    severity = os.getenv("OCK_MIN_SEVERITY", "warning").strip().lower()
    try:
        min_severity = Severity(severity)
    except ValueError:
        min_severity = Severity.WARNING

    delimiter = os.getenv("OCK_DELIMITER") or None
    if delimiter == "\\t":
        delimiter = "\t"

    return Settings(
        kb_path      = os.getenv("OCK_KB") or None,
        delimiter    = delimiter,
        min_severity = min_severity,
        query_cache  = os.getenv("OCK_QUERY_CACHE", "1").strip().lower() in _TRUE,
    )
