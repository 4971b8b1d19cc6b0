"""Incremental curve fitting from a stream of pointer samples.

Architecture:
    - Sliding window of the last <= 4 accepted samples
    - First sample of a group → ``Dot`` directive
    - Third sample → the first sample is duplicated to the front, so the
      first segment appears without waiting for a fourth sample
    - Full window → one ``Curve`` between window[1] and window[2], then the
      oldest sample is dropped

Width model:
    v      = w · velocity(window[1] → window[2]) + (1 - w) · v_prev
    width  = max(max_width / (v + 1), min_width)

    The segment starts at the previous segment's end width, so consecutive
    segments join without a width step. The very first start width is the
    midpoint (min_width + max_width) / 2.

Invariants:
    - One fitter per in-progress stroke; nothing is shared across strokes
    - Rejected samples never reach the window
    - No exceptions for non-finite samples; they surface as degenerate
      segments that renderers omit
    - Given the same samples, the emitted segments are bit-for-bit identical
      (same float operations in the same order), which is what makes replay
      match live drawing

Usage:
    fitter = CurveFitter(style, velocity_filter_weight=0.7, min_distance=5.0)
    for sample in samples:
        directive = fitter.update(sample)
        if directive is not None:
            renderer.render([directive])
"""

import logging
from typing import List, Optional, Tuple

from inkpad.stroke_fitting.model import Curve, CurveSegment, Directive, Dot, Point, StyleOptions

logger = logging.getLogger(__name__)

DEFAULT_VELOCITY_FILTER_WEIGHT = 0.7
WINDOW_SIZE = 4


def stroke_width(velocity: float, min_width: float, max_width: float) -> float:
    """Map smoothed pointer speed to a stroke radius.

    Parameters
    ----------
    velocity : float
        Smoothed speed in px/ms, >= 0
    min_width, max_width : float
        Radius bounds

    Returns
    -------
    float
        Non-increasing in velocity; equals max_width at rest and never drops
        below min_width.
    """
    return max(max_width / (velocity + 1), min_width)


class CurveFitter:
    """Per-stroke fitter state: sample window, smoothed velocity and last width.

    Parameters
    ----------
    style : StyleOptions
        Style of the owning group; fixes the width bounds for the whole stroke.
    velocity_filter_weight : float
        Exponential smoothing weight in (0, 1]; 1 disables smoothing.
    min_distance : float, optional
        Samples within this distance (inclusive) of the last accepted sample
        are rejected. ``None`` accepts everything, which is what replay of
        already-filtered data needs.
    """

    def __init__(
        self,
        style: StyleOptions,
        velocity_filter_weight: float = DEFAULT_VELOCITY_FILTER_WEIGHT,
        min_distance: Optional[float] = None
    ):
        if not 0.0 < velocity_filter_weight <= 1.0:
            raise ValueError(
                f"velocity_filter_weight must be in (0, 1], got {velocity_filter_weight}"
            )
        if min_distance is not None and min_distance < 0:
            raise ValueError(f"min_distance must be >= 0, got {min_distance}")

        self.style = style
        self.velocity_filter_weight = velocity_filter_weight
        self.min_distance = min_distance
        self.reset()

    def reset(self) -> None:
        """Forget all samples; called whenever a new group begins."""
        self._window: List[Point] = []
        self._last_velocity = 0.0
        self._last_width = self.style.mid_width

    @property
    def window(self) -> Tuple[Point, ...]:
        return tuple(self._window)

    @property
    def last_point(self) -> Optional[Point]:
        return self._window[-1] if self._window else None

    @property
    def last_velocity(self) -> float:
        return self._last_velocity

    @property
    def last_width(self) -> float:
        return self._last_width

    def accepts(self, point: Point) -> bool:
        """False if ``point`` is too close to the last accepted sample."""
        last = self.last_point
        if last is None or self.min_distance is None:
            return True
        return not point.distance_to(last) <= self.min_distance

    def update(self, point: Point) -> Optional[Directive]:
        """Filter then fit one sample; rejected samples return None."""
        if not self.accepts(point):
            logger.debug(f"Rejected sample ({point.x:.2f}, {point.y:.2f}) within min_distance")
            return None
        return self.add_point(point)

    def add_point(self, point: Point) -> Optional[Directive]:
        """Append an accepted sample and emit the directive it completes, if any.

        Returns
        -------
        Dot
            For the first sample of the group
        Curve
            Once three or more samples are known
        None
            For the second sample
        """
        window = self._window
        window.append(point)

        if len(window) == 1:
            return Dot(style=self.style, point=point)

        if len(window) < WINDOW_SIZE - 1:
            return None

        if len(window) == WINDOW_SIZE - 1:
            window.insert(0, window[0])

        start_width, end_width = self._curve_widths(window[1], window[2])
        segment = CurveSegment.from_points(window, start_width, end_width)

        del window[0]

        return Curve(style=self.style, segment=segment)

    def _curve_widths(self, start: Point, end: Point) -> Tuple[float, float]:
        w = self.velocity_filter_weight
        velocity = w * end.velocity_from(start) + (1 - w) * self._last_velocity

        new_width = stroke_width(velocity, self.style.min_width, self.style.max_width)
        widths = (self._last_width, new_width)

        self._last_velocity = velocity
        self._last_width = new_width

        return widths
