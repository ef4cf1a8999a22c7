from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import math
import sys

import numpy as np

from csv2graph.errors import InvalidRangeError
from csv2graph.extract import DataBounds


_PIXEL_LIMIT = float(2**31)


@dataclass(frozen=True)
class Viewport:
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    def __post_init__(self) -> None:
        values = (self.xmin, self.xmax, self.ymin, self.ymax)
        if not all(math.isfinite(v) for v in values):
            raise InvalidRangeError(f"viewport bounds must be finite: {values}")
        if self.xmax <= self.xmin or self.ymax <= self.ymin:
            raise InvalidRangeError(f"viewport span must be > 0: {values}")
        if not (math.isfinite(self.x_span) and math.isfinite(self.y_span)):
            raise InvalidRangeError(f"viewport span is too wide to plot: {values}")

    @property
    def x_span(self) -> float:
        return self.xmax - self.xmin

    @property
    def y_span(self) -> float:
        return self.ymax - self.ymin


@dataclass(frozen=True)
class PlotRect:
    x0: int
    y0: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x0 + self.width

    @property
    def bottom(self) -> int:
        return self.y0 + self.height


@dataclass(frozen=True)
class PlotTransform:
    sx: float
    tx: float
    sy: float
    ty: float


def _axis_range(vmin: float, vmax: float, margin_ratio: float) -> tuple[float, float]:
    if not (math.isfinite(vmin) and math.isfinite(vmax)) or vmin >= vmax:
        vmin, vmax = 0.0, 1.0
    pad = (vmax - vmin) * margin_ratio
    eps = sys.float_info.epsilon
    lo, hi = vmin - pad - eps, vmax + pad + eps
    if not (math.isfinite(lo) and math.isfinite(hi) and math.isfinite(hi - lo)):
        raise InvalidRangeError(f"Data range [{vmin:g}, {vmax:g}] is too wide to plot")
    return lo, hi


def compute_viewport(
    bounds: DataBounds,
    x_override: tuple[float, float] | None = None,
    *,
    margin_ratio: float = 0.05,
) -> Viewport:
    """Resolve the data-space rectangle drawn on the canvas.

    Degenerate axes (no points, a single value, or non-finite bounds) fall back
    to ``[0, 1]`` before the margin is applied, so the result always has a
    positive span. An explicit X override is used verbatim.
    """
    xmin, xmax = _axis_range(bounds.xmin, bounds.xmax, margin_ratio)
    ymin, ymax = _axis_range(bounds.ymin, bounds.ymax, margin_ratio)
    if x_override is not None:
        xmin, xmax = float(x_override[0]), float(x_override[1])
    return Viewport(xmin=xmin, xmax=xmax, ymin=ymin, ymax=ymax)


def build_transform(viewport: Viewport, rect: PlotRect) -> PlotTransform:
    if rect.width <= 1 or rect.height <= 1:
        raise ValueError("plot rect width/height must be > 1")
    sx = rect.width / viewport.x_span
    tx = rect.x0 - viewport.xmin * sx
    sy = -rect.height / viewport.y_span
    ty = rect.bottom + viewport.ymin * rect.height / viewport.y_span
    return PlotTransform(sx=sx, tx=tx, sy=sy, ty=ty)


def map_to_pixels(x: np.ndarray, y: np.ndarray, transform: PlotTransform) -> tuple[np.ndarray, np.ndarray]:
    # Clamp far off-canvas points so the int64 cast stays defined.
    px = np.rint(np.clip(x * transform.sx + transform.tx, -_PIXEL_LIMIT, _PIXEL_LIMIT)).astype(np.int64)
    py = np.rint(np.clip(y * transform.sy + transform.ty, -_PIXEL_LIMIT, _PIXEL_LIMIT)).astype(np.int64)
    return px, py


def tick_values(vmin: float, vmax: float, divisions: int = 5) -> np.ndarray:
    if divisions <= 0:
        raise ValueError("divisions must be > 0")
    return np.linspace(vmin, vmax, divisions + 1, dtype=np.float64)


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or abs_v < 1e-4):
        return f"{value:.2e}"

    d = Decimal(repr(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _decimals_from_step(step: float) -> int:
    # Enough decimals to tell neighbouring ticks apart, at most 6.
    if step <= 0 or not np.isfinite(step):
        return 6
    exp = math.floor(math.log10(step))
    return max(1, min(6, 1 - exp))
