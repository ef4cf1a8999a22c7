from __future__ import annotations

import colorsys

from csv2graph.raster.canvas import RGBA


PALETTE_SIZE = 8
_SATURATION = 0.7
_VALUE = 0.9


def _hsv_palette(n: int) -> tuple[RGBA, ...]:
    colors: list[RGBA] = []
    for i in range(n):
        r, g, b = colorsys.hsv_to_rgb(i / n, _SATURATION, _VALUE)
        colors.append((int(r * 255), int(g * 255), int(b * 255), 255))
    return tuple(colors)


PALETTE: tuple[RGBA, ...] = _hsv_palette(PALETTE_SIZE)


def series_color(index: int) -> RGBA:
    return PALETTE[index % len(PALETTE)]
