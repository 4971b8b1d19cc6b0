"""Vector backend: one SVG cubic path per segment.

Architecture:
    - ``SvgDocument`` wraps an ``svgwrite.Drawing`` (viewBox 0 0 W H) and exposes
      the three operations the renderer needs: append a path, append a
      circle, serialize
    - ``VectorRenderer`` writes each segment's four control points directly
      (``M start C c1 c2 end``) instead of stamping

Stroke width:
    stroke-width = end_width · VECTOR_WIDTH_MULTIPLIER (2.25)

    The raster backend stamps discs of *radius* width; an SVG stroke width is
    a diameter-like quantity. 2.25 is an empirical match, not a unit
    conversion.

Dots are circles of radius ``style.dot_radius``.

Colors are written verbatim, so svgwrite's attribute validation is disabled
(``debug=False``): CSS forms such as ``rgba(0,0,0,0.5)`` are valid for
browsers but not for svgwrite's SVG 1.1 checker.
"""

import logging
from typing import Optional, Sequence

import svgwrite

from inkpad.rendering.base import StrokeRenderer
from inkpad.stroke_fitting.model import CurveSegment, Point, StyleOptions

logger = logging.getLogger(__name__)

VECTOR_WIDTH_MULTIPLIER = 2.25

COORD_PRECISION = 3


class SvgDocument:
    """Vector document sink.

    Parameters
    ----------
    width, height : int
        Document size; also the viewBox extent
    background_color : str, optional
        If given, a full-size background rect is emitted first
    """

    def __init__(self, width: int, height: int, background_color: Optional[str] = None):
        self.width = width
        self.height = height
        self._drawing = svgwrite.Drawing(size=(width, height), profile='full', debug=False)
        self._drawing.viewbox(0, 0, width, height)
        self.element_count = 0

        if background_color is not None:
            self._drawing.add(
                self._drawing.rect(insert=(0, 0), size=(width, height), fill=background_color)
            )

    def append_path(self, d: str, **attributes) -> None:
        """Append a <path>; attribute names use underscores (stroke_width)."""
        self._drawing.add(self._drawing.path(d=d, **attributes))
        self.element_count += 1

    def append_circle(self, center: Sequence[float], r: float, **attributes) -> None:
        self._drawing.add(self._drawing.circle(center=tuple(center), r=r, **attributes))
        self.element_count += 1

    def tostring(self) -> str:
        return self._drawing.tostring()


def _fmt(value: float) -> str:
    return f"{value:.{COORD_PRECISION}f}"


def segment_path_data(segment: CurveSegment) -> str:
    """SVG path data for one segment: ``M sx,sy C c1x,c1y c2x,c2y ex,ey``."""
    (sx, sy), (c1x, c1y), (c2x, c2y), (ex, ey) = segment.control_points
    return (
        f"M {_fmt(sx)},{_fmt(sy)} "
        f"C {_fmt(c1x)},{_fmt(c1y)} "
        f"{_fmt(c2x)},{_fmt(c2y)} "
        f"{_fmt(ex)},{_fmt(ey)}"
    )


class VectorRenderer(StrokeRenderer):
    """Writes directives into an ``SvgDocument``.

    Parameters
    ----------
    document : SvgDocument
        Target document
    width_multiplier : float
        stroke-width / end_width, default 2.25
    """

    def __init__(self, document: SvgDocument, width_multiplier: float = VECTOR_WIDTH_MULTIPLIER):
        if width_multiplier <= 0:
            raise ValueError(f"width_multiplier must be > 0, got {width_multiplier}")
        self.document = document
        self.width_multiplier = width_multiplier

    def draw_curve(self, segment: CurveSegment, style: StyleOptions) -> None:
        self.document.append_path(
            segment_path_data(segment),
            stroke_width=_fmt(segment.end_width * self.width_multiplier),
            stroke=style.pen_color,
            fill='none',
            stroke_linecap='round',
        )

    def draw_dot(self, point: Point, style: StyleOptions) -> None:
        self.document.append_circle(
            (point.x, point.y),
            r=style.dot_radius,
            fill=style.pen_color,
        )
