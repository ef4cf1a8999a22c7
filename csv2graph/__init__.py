from csv2graph.chart import ChartLayout, compose_chart
from csv2graph.errors import (
    CellParseError,
    EncodingError,
    InvalidOptionsError,
    InvalidRangeError,
    InvalidSizeError,
    NoDataToPlotError,
    NoSeriesSelectedError,
    PlotError,
    TabularParseError,
    UnknownColumnError,
)
from csv2graph.extract import DataBounds, Extraction, Series, extract_series
from csv2graph.options import ChartConfig, PlotOptions, parse_range, parse_size
from csv2graph.render import PlotResult, generate_plot, generate_plot_json, render_chart
from csv2graph.scales import Viewport, compute_viewport

__all__ = [
    "CellParseError",
    "ChartConfig",
    "ChartLayout",
    "DataBounds",
    "EncodingError",
    "Extraction",
    "InvalidOptionsError",
    "InvalidRangeError",
    "InvalidSizeError",
    "NoDataToPlotError",
    "NoSeriesSelectedError",
    "PlotError",
    "PlotOptions",
    "PlotResult",
    "Series",
    "TabularParseError",
    "UnknownColumnError",
    "Viewport",
    "compose_chart",
    "compute_viewport",
    "extract_series",
    "generate_plot",
    "generate_plot_json",
    "parse_range",
    "parse_size",
    "render_chart",
]
