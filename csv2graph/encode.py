from __future__ import annotations

import base64
import io

import numpy as np
from PIL import Image

from csv2graph.errors import EncodingError


def encode_png(canvas: np.ndarray) -> bytes:
    if canvas.dtype != np.uint8:
        raise EncodingError(f"canvas must be uint8, got {canvas.dtype}")
    if canvas.ndim != 3 or canvas.shape[2] != 4:
        raise EncodingError(f"canvas must have shape (H, W, 4), got {canvas.shape}")
    height, width, _ = canvas.shape
    if height == 0 or width == 0:
        raise EncodingError("canvas must not be empty")
    rgb = np.ascontiguousarray(canvas[:, :, :3])
    if rgb.nbytes != width * height * 3:
        raise EncodingError(f"canvas buffer length mismatch: {rgb.nbytes} != {width * height * 3}")

    buf = io.BytesIO()
    try:
        Image.fromarray(rgb).save(buf, format="PNG", optimize=False)
    except (OSError, ValueError) as exc:
        raise EncodingError(f"Encode PNG error: {exc}") from exc
    return buf.getvalue()


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def encode_image(canvas: np.ndarray) -> str:
    return encode_base64(encode_png(canvas))
