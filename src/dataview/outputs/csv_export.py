"""Write list-view rows to CSV."""

from __future__ import annotations

import csv
import logging
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Sequence

from ..accessors import resolve_path
from ..models import ColumnSpec

logger = logging.getLogger(__name__)


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (set, frozenset, list, tuple)):
        return ", ".join(str(v) for v in value)
    return value


def row_values(record: Any, columns: Sequence[ColumnSpec]) -> list[Any]:
    """Flat cell values of *record* for *columns* (None -> "")."""
    return [_cell(resolve_path(record, c.key)) for c in columns]


def export_csv(rows: Iterable[Any], columns: Sequence[ColumnSpec], path: str | Path) -> Path:
    """Write a header line plus one line per record; returns the path."""
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(dest, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([c.title for c in columns])
        for record in rows:
            writer.writerow(row_values(record, columns))
            count += 1
    logger.info("Exported %d rows to %s", count, dest)
    return dest
