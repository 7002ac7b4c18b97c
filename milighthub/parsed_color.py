"""Colours given in JSON requests, with their hue and saturation."""

from __future__ import annotations

import colorsys
import math
import re
from dataclasses import dataclass
from typing import Any

from milighthub.int_parsing import hex_str_to_bytes

_DECIMAL = re.compile(r"\s*([+-]?\d+)")


def _round(x: float) -> int:
    magnitude = int(math.floor(abs(x) + 0.5))
    return -magnitude if x < 0 else magnitude


def _atoi(s: str) -> int:
    match = _DECIMAL.match(s)
    return int(match.group(1)) if match else 0


@dataclass(frozen=True)
class ParsedColor:
    """An RGB colour together with its hue (degrees) and saturation (percent)."""

    hue: int
    r: int
    g: int
    b: int
    saturation: int


def parsed_color_from_rgb(r: int, g: int, b: int) -> ParsedColor:
    """Build a colour from RGB components, computing hue and saturation."""
    h, s, _ = colorsys.rgb_to_hsv((r & 0xFF) / 255.0, (g & 0xFF) / 255.0, (b & 0xFF) / 255.0)
    return ParsedColor(
        hue=_round(h * 360) & 0xFFFF,
        r=r,
        g=g,
        b=b,
        saturation=_round(s * 100) & 0xFF,
    )


def parsed_color_from_json(value: Any) -> ParsedColor:
    """Parse a colour from a JSON value.

    Accepts an object with ``r``, ``g`` and ``b`` keys, a ``#RRGGBB`` string,
    or a comma-separated ``r,g,b`` string. Raises ValueError otherwise.
    """
    if isinstance(value, dict):
        r, g, b = (int(value.get(key) or 0) & 0xFFFF for key in ("r", "g", "b"))
    elif isinstance(value, str):
        if value.startswith("#") and len(value) == 7:
            r, g, b = hex_str_to_bytes(value[1:], 3)
        else:
            parts = [_atoi(token) & 0xFF for token in value.split(",") if token][:3]
            parts += [0] * (3 - len(parts))
            r, g, b = parts
    else:
        raise ValueError(f"unknown format for color: {value!r}")
    return parsed_color_from_rgb(r, g, b)