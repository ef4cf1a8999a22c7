from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width and height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    fill(canvas, color)
    return canvas


def fill(dst: np.ndarray, color: RGBA) -> None:
    dst[:, :] = np.asarray(color, dtype=np.uint8)


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    if color[3] == 255:
        dst[y, x] = color
        return
    a = color[3] / 255.0
    inv = 1.0 - a
    current = dst[y, x, :3].astype(np.float32)
    dst[y, x, 0:3] = (np.asarray(color[0:3], dtype=np.float32) * a + current * inv).astype(np.uint8)
    dst[y, x, 3] = 255


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    _blend_segment(dst[y, xa : xb + 1], color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    _blend_segment(dst[ya : yb + 1, x], color)


def draw_rect_outline(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    draw_hline(dst, x0, x1, y0, color)
    draw_hline(dst, x0, x1, y1, color)
    draw_vline(dst, x0, y0, y1, color)
    draw_vline(dst, x1, y0, y1, color)


def _blend_segment(segment: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    inv = 1.0 - a
    segment[:, :3] = (np.asarray(color[0:3], dtype=np.float32) * a + segment[:, :3].astype(np.float32) * inv).astype(np.uint8)
    segment[:, 3] = 255
