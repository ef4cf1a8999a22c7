from __future__ import annotations

from functools import lru_cache
import os
import threading

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from csv2graph.raster.canvas import RGBA


DEFAULT_FONT_SIZE_PX = 12.0
FONT_PATH_ENV = "CSV2GRAPH_FONT_PATH"

_Font = ImageFont.FreeTypeFont | ImageFont.ImageFont

_FONTS: dict[int, _Font] = {}
_FONTS_LOCK = threading.Lock()


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> None:
    """Stamp ``text`` with the top-left corner of its bounding box at ``(x, y)``."""
    if not text:
        return
    mask = _render_mask(text, _font_size(font_size_px))
    mask = _rotate_mask(mask, rotate_deg=rotate_deg)
    _blend_mask(dst, x, y, mask, color)


def text_size(
    text: str,
    *,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> tuple[int, int]:
    font = load_font(_font_size(font_size_px))
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    w = max(0, int(right - left))
    h = max(1, int(bottom - top))
    turns = _normalize_quarter_turns(rotate_deg)
    if turns % 2 == 1:
        return (h, w)
    return (w, h)


def load_font(size_px: int) -> _Font:
    """Return the process-wide font for ``size_px``, loading it on first use."""
    font = _FONTS.get(size_px)
    if font is not None:
        return font
    with _FONTS_LOCK:
        font = _FONTS.get(size_px)
        if font is None:
            font = _open_font(size_px)
            _FONTS[size_px] = font
    return font


def _open_font(size_px: int) -> _Font:
    path = os.environ.get(FONT_PATH_ENV, "").strip()
    if path:
        return ImageFont.truetype(path, size=size_px)
    return ImageFont.load_default(size=size_px)


def _font_size(font_size_px: float) -> int:
    return max(1, int(round(font_size_px)))


@lru_cache(maxsize=256)
def _render_mask(text: str, size_px: int) -> np.ndarray:
    font = load_font(size_px)
    left, top, right, bottom = font.getbbox(text)
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    draw.text((-left, -top), text, fill=255, font=font)
    mask = np.asarray(image, dtype=np.uint8)
    mask.setflags(write=False)
    return mask


def _blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    h, w = mask.shape
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    cov = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    if not np.any(src_alpha > 0):
        return

    patch = dst[y0:y1, x0:x1]
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    dst_rgb = patch[:, :, :3].astype(np.float32)
    out_rgb = src_rgb * src_alpha[:, :, None] + dst_rgb * (1.0 - src_alpha[:, :, None])
    patch[:, :, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
    patch[:, :, 3] = 255


def _normalize_quarter_turns(rotate_deg: int) -> int:
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    return (rotate_deg // 90) % 4


def _rotate_mask(mask: np.ndarray, *, rotate_deg: int) -> np.ndarray:
    turns = _normalize_quarter_turns(rotate_deg)
    if turns == 0:
        return mask
    return np.rot90(mask, k=turns)
