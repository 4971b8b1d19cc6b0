"""Raster backend: variable-width strokes as stamped discs.

Architecture:
    - ``RasterSurface`` owns an (H, W, 4) float32 RGBA buffer, straight alpha
      in [0, 1], and exposes path-style primitives (begin_path / arc / fill)
    - A path is a uint8 coverage mask; every ``arc`` stamps an anti-aliased
      filled disc into it with ``cv2.circle`` (sub-pixel precision via
      ``shift``), and ``fill`` composites the whole mask once (source-over)
    - ``RasterRenderer`` walks each segment in ``ceil(length) * density``
      parametric steps and stamps one disc per step

Because a segment is one path filled once, overlapping stamps read as a solid
stroke instead of stacking translucent layers.

Width profile along a segment:
    width(t) = min(start_width + t³ · (end_width - start_width), max_width)

Usage:
    surface = RasterSurface(300, 150, background_color="white")
    RasterRenderer(surface).render(replay(groups))
    fs.atomic_save_image(surface.to_rgba8(), "signature.png")
"""

import logging
import math
from typing import Optional

import cv2
import numpy as np

from inkpad.rendering.base import StrokeRenderer
from inkpad.stroke_fitting.model import CurveSegment, Point, StyleOptions
from inkpad.utils import color as color_utils
from inkpad.utils import geometry

logger = logging.getLogger(__name__)

# Stamps per pixel of estimated arc length. With 1 the discs leave visible
# gaps on sharp turns.
SAMPLING_DENSITY = 2

# Fractional bits for cv2 drawing coordinates (1/16 px).
SUBPIXEL_BITS = 4

# Largest coordinate or radius (px) handed to cv2; larger values overflow its
# int32 fixed-point arithmetic.
FIXED_POINT_LIMIT = (1 << 31) >> (SUBPIXEL_BITS + 2)

# Segments needing more stamps than this are off-surface outliers (a stray
# sample millions of pixels away) and are skipped.
MAX_SEGMENT_STAMPS = 1 << 20


class RasterSurface:
    """In-memory RGBA drawing surface.

    Parameters
    ----------
    width, height : int
        Surface size in pixels
    background_color : str
        CSS color used by ``fill_background``; transparent by default
    """

    def __init__(self, width: int, height: int, background_color: str = "rgba(0,0,0,0)"):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self.background_color = background_color
        self.pixels = np.zeros((height, width, 4), dtype=np.float32)

        self._fill_rgba = color_utils.parse_color("black")
        self._path_mask = None
        self.fill_background()

    def fill_background(self, color: Optional[str] = None) -> None:
        """Overwrite every pixel with ``color`` (default: the surface background)."""
        if color is not None:
            self.background_color = color
        self.pixels[...] = color_utils.parse_color(self.background_color)
        self._path_mask = None

    def set_fill_color(self, color: str) -> None:
        self._fill_rgba = color_utils.parse_color(color)

    def begin_path(self) -> None:
        """Start a new, empty path (discards an unfilled one)."""
        self._path_mask = np.zeros((self.height, self.width), dtype=np.uint8)

    def arc(self, x: float, y: float, radius: float) -> None:
        """Add a full disc centred at (x, y) to the current path.

        Discs that miss the surface are dropped. Discs too far out for cv2's
        int32 fixed-point coordinates are rasterised directly (no
        anti-aliasing); at that scale the visible edge is a straight line.
        """
        if self._path_mask is None:
            self.begin_path()

        nearest_x = min(max(x, 0.0), float(self.width))
        nearest_y = min(max(y, 0.0), float(self.height))
        if math.hypot(x - nearest_x, y - nearest_y) > radius:
            return

        if max(abs(x), abs(y), radius) > FIXED_POINT_LIMIT:
            rows, cols = np.ogrid[:self.height, :self.width]
            inside = np.hypot(cols - x, rows - y) <= radius
            self._path_mask[inside] = 255
            return

        scale = 1 << SUBPIXEL_BITS
        cv2.circle(
            self._path_mask,
            (int(round(x * scale)), int(round(y * scale))),
            max(int(round(radius * scale)), 0),
            255,
            thickness=-1,
            lineType=cv2.LINE_AA,
            shift=SUBPIXEL_BITS,
        )

    def fill(self) -> None:
        """Composite the current path with the fill color and clear the path."""
        if self._path_mask is None:
            return

        coverage = self._path_mask.astype(np.float32) / 255.0
        self._path_mask = None

        src = np.asarray(self._fill_rgba, dtype=np.float32)
        src_a = coverage * src[3]
        dst_a = self.pixels[..., 3]

        out_a = src_a + dst_a * (1.0 - src_a)
        out_rgb = (
            src[:3] * src_a[..., np.newaxis]
            + self.pixels[..., :3] * (dst_a * (1.0 - src_a))[..., np.newaxis]
        )
        out_rgb = np.divide(
            out_rgb,
            out_a[..., np.newaxis],
            out=np.zeros_like(out_rgb),
            where=out_a[..., np.newaxis] > 0,
        )

        self.pixels[..., :3] = out_rgb
        self.pixels[..., 3] = out_a

    def to_rgba8(self) -> np.ndarray:
        """Return the surface as (H, W, 4) uint8 RGBA."""
        return np.clip(np.round(self.pixels * 255.0), 0, 255).astype(np.uint8)


class RasterRenderer(StrokeRenderer):
    """Stamps directives onto a ``RasterSurface``.

    Parameters
    ----------
    surface : RasterSurface
        Target surface; anything exposing begin_path / arc / set_fill_color /
        fill works
    sampling_density : int
        Stamps per pixel of arc length, default 2
    """

    def __init__(self, surface: RasterSurface, sampling_density: int = SAMPLING_DENSITY):
        if sampling_density < 1:
            raise ValueError(f"sampling_density must be >= 1, got {sampling_density}")
        self.surface = surface
        self.sampling_density = sampling_density

    def stamp_count(self, segment: CurveSegment) -> int:
        """Stamps for one segment; 0 if its length is not finite or exceeds MAX_SEGMENT_STAMPS."""
        length = segment.length()
        if not math.isfinite(length):
            return 0
        steps = math.ceil(length) * self.sampling_density
        return steps if steps <= MAX_SEGMENT_STAMPS else 0

    def draw_curve(self, segment: CurveSegment, style: StyleOptions) -> None:
        steps = self.stamp_count(segment)
        if steps == 0 and segment.length() > 0:
            logger.debug(f"Skipping segment with arc length {segment.length():.3g} px")
            return

        surface = self.surface
        surface.begin_path()
        surface.set_fill_color(style.pen_color)

        if steps > 0:
            t = np.arange(steps, dtype=np.float64) / steps
            centers = geometry.bezier_cubic_eval(*segment.control_points, t)
            widths = np.minimum(
                segment.start_width + t ** 3 * (segment.end_width - segment.start_width),
                style.max_width,
            )
            for (x, y), width in zip(centers, widths):
                surface.arc(float(x), float(y), float(width))

        surface.fill()

    def draw_dot(self, point: Point, style: StyleOptions) -> None:
        surface = self.surface
        surface.begin_path()
        surface.arc(point.x, point.y, style.dot_radius)
        surface.set_fill_color(style.pen_color)
        surface.fill()
