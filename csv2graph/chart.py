from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from csv2graph.errors import InvalidSizeError
from csv2graph.extract import Extraction
from csv2graph.palette import series_color
from csv2graph.raster import (
    draw_disc,
    draw_hline,
    draw_markers,
    draw_polyline,
    draw_rect_outline,
    draw_text,
    draw_vline,
    new_canvas,
    text_size,
)
from csv2graph.raster.canvas import RGBA
from csv2graph.scales import PlotRect, Viewport, build_transform, format_ticks_for_axis, map_to_pixels, tick_values


Y_AXIS_LABEL = "Values"
ELLIPSIS = "..."


@dataclass(frozen=True)
class ChartLayout:
    margin: int = 60
    legend_width: int = 120
    divisions: int = 5
    marker_radius: int = 3
    tick_len: int = 5
    tick_pad: int = 3
    label_gap: int = 6
    tick_font_px: float = 11.0
    label_font_px: float = 12.0
    min_title_font_px: float = 12.0
    max_title_font_px: float = 24.0
    legend_pad: int = 6
    legend_gap: int = 4
    background: RGBA = (255, 255, 255, 255)
    foreground: RGBA = (0, 0, 0, 255)
    grid_color: RGBA = (200, 200, 200, 255)
    legend_border: RGBA = (100, 100, 100, 255)

    def plot_rect(self, width: int, height: int) -> PlotRect:
        plot_w = width - 2 * self.margin - self.legend_width
        plot_h = height - 2 * self.margin
        if plot_w < 2 or plot_h < 2:
            raise InvalidSizeError(f"image size {width}x{height} too small for chart margins")
        return PlotRect(x0=self.margin, y0=self.margin, width=plot_w, height=plot_h)

    def title_font_px(self, width: int) -> float:
        return max(self.min_title_font_px, min(self.max_title_font_px, width * 0.03))


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs


def _fit_text(text: str, max_w: int, font_size_px: float) -> str:
    if text_size(text, font_size_px=font_size_px)[0] <= max_w:
        return text
    for end in range(len(text) - 1, 0, -1):
        candidate = text[:end] + ELLIPSIS
        if text_size(candidate, font_size_px=font_size_px)[0] <= max_w:
            return candidate
    return ELLIPSIS


def compose_chart(
    extraction: Extraction,
    viewport: Viewport,
    *,
    width: int,
    height: int,
    title: str,
    layout: ChartLayout | None = None,
) -> np.ndarray:
    """Rasterise a complete chart into a fresh ``(height, width, 4)`` RGBA buffer.

    Drawing happens in one pass and later steps paint over earlier ones: grid,
    then axis baselines, title and axis descriptions, series lines and markers,
    and finally the legend.
    """
    layout = layout or ChartLayout()
    rect = layout.plot_rect(width, height)
    transform = build_transform(viewport, rect)
    canvas = new_canvas(width, height, color=layout.background)

    tick_x = tick_values(viewport.xmin, viewport.xmax, layout.divisions)
    tick_y = tick_values(viewport.ymin, viewport.ymax, layout.divisions)
    grid_px, _ = map_to_pixels(tick_x, np.full(tick_x.shape, viewport.ymin), transform)
    _, grid_py = map_to_pixels(np.full(tick_y.shape, viewport.xmin), tick_y, transform)

    for px in grid_px.tolist():
        draw_vline(canvas, px, rect.y0, rect.bottom, layout.grid_color)
    for py in grid_py.tolist():
        draw_hline(canvas, rect.x0, rect.right, py, layout.grid_color)

    max_x_tick_h = 0
    for px, label in zip(grid_px.tolist(), format_ticks_for_axis(tick_x), strict=False):
        draw_vline(canvas, px, rect.bottom, rect.bottom + layout.tick_len, layout.foreground)
        tw, th = text_size(label, font_size_px=layout.tick_font_px)
        max_x_tick_h = max(max_x_tick_h, th)
        draw_text(
            canvas,
            px - tw // 2,
            rect.bottom + layout.tick_len + layout.tick_pad,
            label,
            layout.foreground,
            font_size_px=layout.tick_font_px,
        )

    max_y_tick_w = 0
    for py, label in zip(grid_py.tolist(), format_ticks_for_axis(tick_y), strict=False):
        draw_hline(canvas, rect.x0 - layout.tick_len, rect.x0, py, layout.foreground)
        tw, th = text_size(label, font_size_px=layout.tick_font_px)
        max_y_tick_w = max(max_y_tick_w, tw)
        draw_text(
            canvas,
            rect.x0 - layout.tick_len - layout.tick_pad - tw,
            py - th // 2,
            label,
            layout.foreground,
            font_size_px=layout.tick_font_px,
        )

    # Baselines go over the grid.
    draw_hline(canvas, rect.x0, rect.right, rect.bottom, layout.foreground)
    draw_vline(canvas, rect.x0, rect.y0, rect.bottom, layout.foreground)

    title_px = layout.title_font_px(width)
    title_w, title_h = text_size(title, font_size_px=title_px)
    draw_text(
        canvas,
        (width - title_w) // 2,
        max(0, (layout.margin - title_h) // 2),
        title,
        layout.foreground,
        font_size_px=title_px,
    )

    x_desc_w, _ = text_size(extraction.x_label, font_size_px=layout.label_font_px)
    draw_text(
        canvas,
        rect.x0 + (rect.width - x_desc_w) // 2,
        rect.bottom + layout.tick_len + layout.tick_pad + max_x_tick_h + layout.label_gap,
        extraction.x_label,
        layout.foreground,
        font_size_px=layout.label_font_px,
    )
    y_desc_w, y_desc_h = text_size(Y_AXIS_LABEL, font_size_px=layout.label_font_px, rotate_deg=90)
    y_desc_x = rect.x0 - layout.tick_len - layout.tick_pad - max_y_tick_w - layout.label_gap - y_desc_w
    draw_text(
        canvas,
        max(0, y_desc_x),
        rect.y0 + (rect.height - y_desc_h) // 2,
        Y_AXIS_LABEL,
        layout.foreground,
        font_size_px=layout.label_font_px,
        rotate_deg=90,
    )

    for i, series in enumerate(extraction.series):
        if series.empty:
            continue
        color = series_color(i)
        visible = (
            (series.x >= viewport.xmin)
            & (series.x <= viewport.xmax)
            & (series.y >= viewport.ymin)
            & (series.y <= viewport.ymax)
        )
        px, py = map_to_pixels(series.x, series.y, transform)
        for start, end in _contiguous_true_runs(visible):
            draw_polyline(canvas, px[start:end], py[start:end], color)
        draw_markers(canvas, px[visible], py[visible], color, radius=layout.marker_radius)

    _draw_legend(canvas, extraction, rect, layout, width=width)
    return canvas


def _draw_legend(canvas: np.ndarray, extraction: Extraction, rect: PlotRect, layout: ChartLayout, *, width: int) -> None:
    entries = extraction.series
    if not entries:
        return
    box_x0 = rect.right + layout.legend_pad * 2
    box_x1 = width - layout.legend_pad * 2
    if box_x1 <= box_x0:
        return
    font_px = layout.tick_font_px
    swatch = layout.marker_radius * 2 + 1
    text_x = box_x0 + layout.legend_pad + swatch + layout.legend_gap
    max_text_w = max(1, box_x1 - layout.legend_pad - text_x)
    _, line_h = text_size("Ag", font_size_px=font_px)
    item_h = max(swatch, line_h)
    box_y0 = rect.y0
    box_y1 = box_y0 + layout.legend_pad * 2 + len(entries) * item_h + (len(entries) - 1) * layout.legend_gap
    draw_rect_outline(canvas, box_x0, box_y0, box_x1, box_y1, layout.legend_border)

    for i, series in enumerate(entries):
        row_top = box_y0 + layout.legend_pad + i * (item_h + layout.legend_gap)
        row_mid = row_top + item_h // 2
        draw_disc(canvas, box_x0 + layout.legend_pad + layout.marker_radius, row_mid, layout.marker_radius, series_color(i))
        label = _fit_text(series.name, max_text_w, font_px)
        _, th = text_size(label, font_size_px=font_px)
        draw_text(canvas, text_x, row_mid - th // 2, label, layout.foreground, font_size_px=font_px)
