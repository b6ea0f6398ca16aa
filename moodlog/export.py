"""
moodlog.export — Write mood records to CSV or JSON files.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List

from moodlog.core.errors import ValidationError
from moodlog.core.types import MoodRecord

log = logging.getLogger(__name__)

EXPORT_FIELDS: List[str] = [
    "id",
    "timestamp",
    "mood_value",
    "emoji",
    "description",
    "note",
]

FORMATS = ("csv", "json")


def export_json(records: Iterable[MoodRecord], path: Path) -> int:
    """Write *records* as a JSON array.  Returns the number written."""
    rows = [r.to_dict() for r in records]
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(rows, f, ensure_ascii=False, indent=2)
    log.info("Exported %d mood records to %s", len(rows), path)
    return len(rows)


def export_csv(records: Iterable[MoodRecord], path: Path) -> int:
    """Write *records* as CSV with a header row.  Returns the number written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=EXPORT_FIELDS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for record in records:
            row = record.to_dict()
            row["note"] = row["note"] or ""
            writer.writerow(row)
            count += 1
    log.info("Exported %d mood records to %s", count, path)
    return count


def export_records(records: Iterable[MoodRecord], path: Path, fmt: str) -> int:
    """Dispatch on *fmt* (``"csv"`` or ``"json"``)."""
    fmt = fmt.lower()
    if fmt == "csv":
        return export_csv(records, path)
    if fmt == "json":
        return export_json(records, path)
    raise ValidationError(f"Unknown export format {fmt!r}; expected one of {FORMATS}")
