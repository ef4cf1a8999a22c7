from __future__ import annotations

import numpy as np

from csv2graph.raster.canvas import RGBA


def draw_markers(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, radius: int = 3) -> None:
    for x, y in zip(xs.tolist(), ys.tolist(), strict=False):
        draw_disc(dst, int(x), int(y), radius, color)


def draw_disc(dst: np.ndarray, cx: int, cy: int, radius: int, color: RGBA) -> None:
    r = max(0, int(radius))
    x0 = max(0, cx - r)
    y0 = max(0, cy - r)
    x1 = min(dst.shape[1], cx + r + 1)
    y1 = min(dst.shape[0], cy + r + 1)
    if x0 >= x1 or y0 >= y1:
        return
    yy, xx = np.mgrid[y0:y1, x0:x1]
    inside = (xx - cx) ** 2 + (yy - cy) ** 2 <= r * r
    patch = dst[y0:y1, x0:x1]
    a = color[3] / 255.0
    rgb = np.asarray(color[:3], dtype=np.float32)
    blended = rgb * a + patch[:, :, :3].astype(np.float32) * (1.0 - a)
    patch[inside, :3] = blended[inside].astype(np.uint8)
    patch[inside, 3] = 255
