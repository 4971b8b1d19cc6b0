"""Rendering strategy shared by the raster and vector backends.

Both backends consume the identical directive stream; only ``draw_dot`` and
``draw_curve`` differ. Degenerate geometry is filtered here once so the two
backends apply the same omission policy:

    - ``Curve`` with any non-finite control coordinate or width → skipped
    - ``Dot`` at a non-finite position → skipped

Skipping never aborts the remaining directives.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from inkpad.stroke_fitting.model import Curve, CurveSegment, Directive, Dot, Point, StyleOptions
from inkpad.utils import geometry

logger = logging.getLogger(__name__)


class StrokeRenderer(ABC):
    """Consumes ``Dot`` / ``Curve`` directives and draws them on a backend."""

    def render(self, directives: Iterable[Directive]) -> int:
        """Draw directives in order.

        Returns
        -------
        int
            Number of directives drawn (skipped degenerate ones excluded)
        """
        drawn = 0
        for directive in directives:
            if isinstance(directive, Curve):
                if directive.segment.is_degenerate:
                    logger.debug(f"Skipping degenerate segment: {directive.segment}")
                    continue
                self.draw_curve(directive.segment, directive.style)
            elif isinstance(directive, Dot):
                if not geometry.all_finite(directive.point.x, directive.point.y):
                    logger.debug(f"Skipping dot at non-finite position: {directive.point}")
                    continue
                self.draw_dot(directive.point, directive.style)
            else:
                raise TypeError(f"Unknown directive type: {type(directive).__name__}")
            drawn += 1
        return drawn

    @abstractmethod
    def draw_dot(self, point: Point, style: StyleOptions) -> None:
        ...

    @abstractmethod
    def draw_curve(self, segment: CurveSegment, style: StyleOptions) -> None:
        ...
