from __future__ import annotations

import csv
from dataclasses import dataclass
import io

from csv2graph.errors import TabularParseError


@dataclass(frozen=True)
class Table:
    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


def read_table(text: str) -> Table:
    reader = csv.reader(io.StringIO(text))
    try:
        records = [tuple(record) for record in reader if record]
    except csv.Error as exc:
        raise TabularParseError(f"CSV read error at line {reader.line_num}: {exc}") from exc
    if not records:
        raise TabularParseError("CSV input has no header row")
    header = tuple(name.strip() for name in records[0])
    return Table(header=header, rows=tuple(records[1:]))
