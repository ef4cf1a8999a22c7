from __future__ import annotations


class PlotError(ValueError):
    """Base class for every input-driven failure of a render request."""


class InvalidOptionsError(PlotError):
    pass


class InvalidSizeError(PlotError):
    pass


class InvalidRangeError(PlotError):
    pass


class TabularParseError(PlotError):
    pass


class UnknownColumnError(PlotError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Column '{name}' not found")
        self.name = name


class NoSeriesSelectedError(PlotError):
    def __init__(self, message: str = "No Y columns specified") -> None:
        super().__init__(message)


class NoDataToPlotError(PlotError):
    def __init__(self, message: str = "No data to plot after filter/skip") -> None:
        super().__init__(message)


class CellParseError(PlotError):
    def __init__(self, row: int, column: str, raw: str | None) -> None:
        if raw is None:
            message = f"Missing value in column '{column}' at row {row}"
        else:
            message = f"Cannot parse {raw!r} in column '{column}' at row {row} as a number"
        super().__init__(message)
        self.row = row
        self.column = column
        self.raw = raw


class EncodingError(PlotError):
    pass
