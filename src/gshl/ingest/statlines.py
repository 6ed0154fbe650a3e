"""Load stat-line exports (one CSV row per player/team performance)."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional


def clean_row(row: Mapping[Optional[str], Optional[str]]) -> Dict[str, str]:
    """Drop blank cells so field presence means the sheet filled it in."""

    cleaned: Dict[str, str] = {}
    for key, value in row.items():
        if key is None or value is None:
            continue
        name = key.strip()
        text = value.strip() if isinstance(value, str) else value
        if name and text != "":
            cleaned[name] = text
    return cleaned


def read_stat_lines(rows: Iterable[Mapping[Optional[str], Optional[str]]]) -> List[Dict[str, str]]:
    return [clean_row(row) for row in rows]


def load_stat_lines(path: Path) -> List[Dict[str, str]]:
    with Path(path).open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        return read_stat_lines(reader)
