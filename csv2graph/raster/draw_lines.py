from __future__ import annotations

import numpy as np

from csv2graph.raster.canvas import RGBA, draw_pixel


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA) -> None:
    if xs.size < 2:
        return
    for i in range(xs.size - 1):
        draw_line(dst, int(xs[i]), int(ys[i]), int(xs[i + 1]), int(ys[i + 1]), color)


def draw_line(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """One pixel wide Bresenham segment, endpoints included."""
    height, width = dst.shape[:2]
    # Both ends off the same side of the canvas: nothing to draw.
    if (x0 < 0 and x1 < 0) or (y0 < 0 and y1 < 0) or (x0 >= width and x1 >= width) or (y0 >= height and y1 >= height):
        return

    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        draw_pixel(dst, x0, y0, color)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
