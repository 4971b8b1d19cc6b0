"""CSS color parsing for pen and background colors.

Provides:
    - parse_color(): CSS color string → RGBA floats in [0, 1]

Supported inputs:
    - Named colors ("black", "navy", ...) and "transparent"
    - Hex: #rgb, #rgba, #rrggbb, #rrggbbaa
    - rgb(r, g, b), rgba(r, g, b, a) with fractional alpha (CSS semantics)
    - hsl(...), hsv(...) as understood by Pillow

Invariants:
    - Colors stay as the caller's strings everywhere except the raster backend;
      the vector backend writes them through verbatim.
    - Output channels are straight (non-premultiplied) sRGB values.
"""

import re
from typing import Tuple

from PIL import ImageColor

RGBA = Tuple[float, float, float, float]

# CSS rgba() allows a fractional alpha (0.5) or a percentage (50%);
# Pillow only accepts integer alpha, so this form is handled here.
_RGBA_FUNC = re.compile(
    r"^rgba\(\s*(\d+(?:\.\d+)?)\s*,\s*(\d+(?:\.\d+)?)\s*,\s*(\d+(?:\.\d+)?)\s*,"
    r"\s*(\d*\.?\d+)(%?)\s*\)$"
)


def parse_color(value: str) -> RGBA:
    """Parse a CSS color string into RGBA floats.

    Parameters
    ----------
    value : str
        CSS color, e.g. "black", "#ff000080", "rgba(0,0,0,0.5)"

    Returns
    -------
    Tuple[float, float, float, float]
        (r, g, b, a), each in [0, 1]

    Raises
    ------
    ValueError
        If the string is not a recognised color

    Examples
    --------
    >>> parse_color("rgba(0,0,0,0)")
    (0.0, 0.0, 0.0, 0.0)
    >>> parse_color("#fff")
    (1.0, 1.0, 1.0, 1.0)
    """
    text = value.strip().lower()

    if text == "transparent":
        return (0.0, 0.0, 0.0, 0.0)

    match = _RGBA_FUNC.match(text)
    if match:
        r, g, b, a, pct = match.groups()
        alpha = float(a) / 100.0 if pct else float(a)
        return (
            _clamp(float(r) / 255.0),
            _clamp(float(g) / 255.0),
            _clamp(float(b) / 255.0),
            _clamp(alpha),
        )

    try:
        r, g, b, a = ImageColor.getcolor(text, "RGBA")
    except ValueError as e:
        raise ValueError(f"Unrecognised color: {value!r}") from e

    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


def _clamp(v: float) -> float:
    return max(0.0, min(1.0, v))
