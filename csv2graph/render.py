from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Mapping

import numpy as np

from csv2graph.chart import ChartLayout, compose_chart
from csv2graph.encode import encode_image
from csv2graph.errors import PlotError
from csv2graph.extract import extract_series
from csv2graph.options import ChartConfig, PlotOptions
from csv2graph.scales import compute_viewport
from csv2graph.tabular import read_table


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlotResult:
    base64_image: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.base64_image is None) == (self.error is None):
            raise ValueError("PlotResult must carry exactly one of base64_image or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, str]:
        if self.error is not None:
            return {"error": self.error}
        return {"base64Image": self.base64_image or ""}


def render_canvas(csv_text: str, config: ChartConfig, *, layout: ChartLayout | None = None) -> np.ndarray:
    layout = layout or ChartLayout()
    # Fail on undersized images before any parsing work.
    layout.plot_rect(config.width, config.height)
    table = read_table(csv_text)
    extraction = extract_series(
        table.header,
        table.rows,
        config.columns,
        xdata=config.xdata,
        skip=config.skip,
        max_range=config.max_range,
    )
    viewport = compute_viewport(extraction.bounds, config.x_range)
    LOGGER.debug(
        "rendering %dx%d chart: series=%d viewport=%s",
        config.width,
        config.height,
        len(extraction.series),
        viewport,
    )
    return compose_chart(
        extraction,
        viewport,
        width=config.width,
        height=config.height,
        title=config.title,
        layout=layout,
    )


def render_chart(csv_text: str, options: PlotOptions | Mapping[str, Any]) -> str:
    """Render ``csv_text`` and return the chart as base64 encoded PNG text.

    Raises a :class:`~csv2graph.errors.PlotError` subclass for any invalid
    option, unknown column, unparsable cell or empty result.
    """
    if not isinstance(options, PlotOptions):
        options = PlotOptions.from_mapping(options)
    config = options.validate()
    return encode_image(render_canvas(csv_text, config))


def generate_plot(csv_text: str, options: PlotOptions | Mapping[str, Any]) -> PlotResult:
    try:
        return PlotResult(base64_image=render_chart(csv_text, options))
    except PlotError as exc:
        LOGGER.warning("plot generation failed: %s", exc)
        return PlotResult(error=str(exc))


def generate_plot_json(csv_text: str, options_json: str) -> dict[str, str]:
    try:
        options = PlotOptions.from_json(options_json)
    except PlotError as exc:
        LOGGER.warning("plot generation failed: %s", exc)
        return PlotResult(error=str(exc)).to_dict()
    return generate_plot(csv_text, options).to_dict()
