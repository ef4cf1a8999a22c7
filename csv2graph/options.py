from __future__ import annotations

from dataclasses import dataclass, field
import json
import math
from typing import Any, Mapping

from csv2graph.errors import InvalidOptionsError, InvalidRangeError, InvalidSizeError


DEFAULT_SIZE = "768x512"
DEFAULT_TITLE = "Scatter Plot from CSV"

# Upper bound on the RGBA canvas one request may allocate.
MAX_IMAGE_SIDE = 16384
MAX_IMAGE_PIXELS = 8192 * 4096

_OPTION_KEYS = {
    "columns": "columns",
    "title": "title",
    "size": "size",
    "maxRange": "max_range",
    "skip": "skip",
    "xdata": "xdata",
    "xscale": "xscale",
}


def parse_size(text: str) -> tuple[int, int]:
    parts = text.split("x")
    if len(parts) != 2:
        raise InvalidSizeError(f"Invalid size format: '{text}'. Expected 'WIDTHxHEIGHT'.")
    if not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidSizeError(f"Invalid size '{text}': width and height must be unsigned integers")
    width, height = int(parts[0]), int(parts[1])
    if width <= 0 or height <= 0:
        raise InvalidSizeError(f"Invalid size '{text}': width and height must be > 0")
    if width > MAX_IMAGE_SIDE or height > MAX_IMAGE_SIDE or width * height > MAX_IMAGE_PIXELS:
        raise InvalidSizeError(f"Buffer size limit exceeded for {width}x{height}")
    return width, height


def parse_range(text: str | None) -> tuple[float, float] | None:
    if text is None or not text.strip():
        return None
    parts = text.split(",")
    if len(parts) != 2:
        raise InvalidRangeError(f"Invalid xscale format: '{text}'. Expected 'START,END'.")
    try:
        start = float(parts[0].strip())
        end = float(parts[1].strip())
    except ValueError as exc:
        raise InvalidRangeError(f"Invalid xscale value in '{text}': {exc}") from exc
    if not (math.isfinite(start) and math.isfinite(end)):
        raise InvalidRangeError(f"Invalid xscale range '{text}': values must be finite")
    if start >= end:
        raise InvalidRangeError("Invalid xscale range: start value must be less than end value.")
    return start, end


@dataclass(frozen=True)
class ChartConfig:
    columns: tuple[str, ...]
    title: str
    width: int
    height: int
    max_range: float | None
    skip: int
    xdata: bool
    x_range: tuple[float, float] | None


@dataclass(frozen=True)
class PlotOptions:
    """Render request as received from the caller, before validation."""

    columns: tuple[str, ...] = field(default_factory=tuple)
    title: str = DEFAULT_TITLE
    size: str = DEFAULT_SIZE
    max_range: float | None = None
    skip: int = 1
    xdata: bool = False
    xscale: str | None = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "PlotOptions":
        unknown = sorted(set(mapping) - set(_OPTION_KEYS))
        if unknown:
            raise InvalidOptionsError(f"Unknown option(s): {', '.join(unknown)}")
        kwargs: dict[str, Any] = {}
        for key, attr in _OPTION_KEYS.items():
            if key in mapping and mapping[key] is not None:
                kwargs[attr] = mapping[key]

        columns = kwargs.get("columns", ())
        if not isinstance(columns, (list, tuple)) or not all(isinstance(c, str) for c in columns):
            raise InvalidOptionsError("'columns' must be a list of strings")
        kwargs["columns"] = tuple(columns)
        for key in ("title", "size", "xscale"):
            if key in kwargs and not isinstance(kwargs[key], str):
                raise InvalidOptionsError(f"'{key}' must be a string")
        if "max_range" in kwargs:
            value = kwargs["max_range"]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidOptionsError("'maxRange' must be a number")
            kwargs["max_range"] = float(value)
        if "skip" in kwargs:
            value = kwargs["skip"]
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidOptionsError("'skip' must be an unsigned integer")
        if "xdata" in kwargs and not isinstance(kwargs["xdata"], bool):
            raise InvalidOptionsError("'xdata' must be a boolean")
        return cls(**kwargs)

    @classmethod
    def from_json(cls, text: str) -> "PlotOptions":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidOptionsError(f"Failed to parse options JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise InvalidOptionsError("Failed to parse options JSON: expected an object")
        return cls.from_mapping(payload)

    def validate(self) -> ChartConfig:
        if not self.columns:
            raise InvalidOptionsError("no columns specified to plot")
        if self.skip < 1:
            raise InvalidOptionsError(f"skip must be >= 1, got {self.skip}")
        if self.max_range is not None and math.isnan(self.max_range):
            raise InvalidOptionsError("maxRange must not be NaN")
        width, height = parse_size(self.size)
        return ChartConfig(
            columns=tuple(self.columns),
            title=self.title,
            width=width,
            height=height,
            max_range=self.max_range,
            skip=self.skip,
            xdata=self.xdata,
            x_range=parse_range(self.xscale),
        )
