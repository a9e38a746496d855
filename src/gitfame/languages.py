from __future__ import annotations

import functools
import json
from pathlib import Path

LANGUAGE_TABLE_PATH = Path(__file__).resolve().parent / "language_extensions.json"


@functools.lru_cache(maxsize=1)
def _load_table_text() -> str:
    return LANGUAGE_TABLE_PATH.read_text(encoding="utf-8")


def load_language_table() -> list[dict]:
    """Entries look like {"name": "Go", "type": "programming", "extensions": [".go"]}."""
    return json.loads(_load_table_text())


def find_language(name: str, table: list[dict] | None = None) -> dict | None:
    """Case-insensitive lookup by language name; None when the table has no such language."""
    key = name.strip().lower()
    for entry in table if table is not None else load_language_table():
        if str(entry.get("name", "")).lower() == key:
            return entry
    return None
