from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Sequence

import numpy as np

from csv2graph.errors import CellParseError, NoDataToPlotError, NoSeriesSelectedError, UnknownColumnError


LOGGER = logging.getLogger(__name__)
ROW_NUMBER_LABEL = "Row Number"


@dataclass(frozen=True)
class Column:
    name: str
    index: int


@dataclass(frozen=True)
class Series:
    name: str
    x: np.ndarray
    y: np.ndarray

    def __len__(self) -> int:
        return int(self.x.size)

    @property
    def empty(self) -> bool:
        return self.x.size == 0

    def points(self) -> list[tuple[float, float]]:
        return list(zip(self.x.tolist(), self.y.tolist()))


@dataclass
class DataBounds:
    xmin: float = math.inf
    xmax: float = -math.inf
    ymin: float = math.inf
    ymax: float = -math.inf

    def include_x(self, x: float) -> None:
        self.xmin = min(self.xmin, x)
        self.xmax = max(self.xmax, x)

    def include_y(self, y: float) -> None:
        self.ymin = min(self.ymin, y)
        self.ymax = max(self.ymax, y)


@dataclass(frozen=True)
class Extraction:
    series: tuple[Series, ...]
    x_label: str
    bounds: DataBounds


def resolve_columns(header: Sequence[str], names: Sequence[str], *, xdata: bool) -> list[Column]:
    positions: dict[str, int] = {}
    for i, name in enumerate(header):
        positions.setdefault(name, i)

    resolved: list[Column] = []
    for name in names:
        if name not in positions:
            raise UnknownColumnError(name)
        index = positions[name]
        # Column 0 is the X source and cannot also be plotted as Y.
        if xdata and index == 0:
            continue
        resolved.append(Column(name=name, index=index))
    if not resolved:
        raise NoSeriesSelectedError()
    return resolved


def parse_cell(row: Sequence[str], column: Column, row_number: int) -> float:
    if column.index >= len(row):
        raise CellParseError(row_number, column.name, None)
    raw = row[column.index]
    try:
        value = float(raw.strip())
    except ValueError as exc:
        raise CellParseError(row_number, column.name, raw) from exc
    if not math.isfinite(value):
        raise CellParseError(row_number, column.name, raw)
    return value


def extract_series(
    header: Sequence[str],
    rows: Sequence[Sequence[str]],
    columns: Sequence[str],
    *,
    xdata: bool,
    skip: int = 1,
    max_range: float | None = None,
) -> Extraction:
    """Turn parsed CSV rows into one point sequence per requested column.

    Rows are sampled by raw row index (``index % skip == 0``) before the
    ``max_range`` filter is applied, and a row whose X exceeds ``max_range`` is
    dropped for every series at once since they share the X axis.
    """
    if skip < 1:
        raise ValueError("skip must be >= 1")
    y_columns = resolve_columns(header, columns, xdata=xdata)
    x_column = Column(name=header[0], index=0) if xdata else None

    xs: list[list[float]] = [[] for _ in y_columns]
    ys: list[list[float]] = [[] for _ in y_columns]
    bounds = DataBounds()
    retained = 0
    filtered = 0

    for row_index, row in enumerate(rows):
        if skip > 1 and row_index % skip != 0:
            continue
        row_number = row_index + 1
        x = parse_cell(row, x_column, row_number) if x_column is not None else float(row_number)
        if max_range is not None and x > max_range:
            filtered += 1
            continue
        retained += 1
        bounds.include_x(x)
        for i, column in enumerate(y_columns):
            y = parse_cell(row, column, row_number)
            xs[i].append(x)
            ys[i].append(y)
            bounds.include_y(y)

    LOGGER.debug(
        "extracted series: rows=%d retained=%d filtered=%d columns=%s",
        len(rows),
        retained,
        filtered,
        [c.name for c in y_columns],
    )

    series = tuple(
        Series(
            name=column.name,
            x=np.asarray(xs[i], dtype=np.float64),
            y=np.asarray(ys[i], dtype=np.float64),
        )
        for i, column in enumerate(y_columns)
    )
    if all(s.empty for s in series):
        raise NoDataToPlotError()
    x_label = header[0] if xdata else ROW_NUMBER_LABEL
    return Extraction(series=series, x_label=x_label, bounds=bounds)
