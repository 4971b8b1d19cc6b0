"""Deterministic replay of stored point groups into directives.

Replay drives the same ``CurveFitter`` code path as live drawing, with a
fresh fitter per group, so a stored signature re-renders to exactly the
segments that were drawn live. It is the single source of directives for
canvas re-rendering and vector export.

Groups never share fitter state, so replay of independent groups can run in
any order or in parallel; the generator below simply walks them in order.
"""

import logging
from typing import Iterable, Iterator

from inkpad.stroke_fitting.fitter import DEFAULT_VELOCITY_FILTER_WEIGHT, CurveFitter
from inkpad.stroke_fitting.model import Directive, Dot, PointGroup

logger = logging.getLogger(__name__)


def replay_group(
    group: PointGroup,
    velocity_filter_weight: float = DEFAULT_VELOCITY_FILTER_WEIGHT
) -> Iterator[Directive]:
    """Yield the directives live drawing produced for one group.

    Parameters
    ----------
    group : PointGroup
        Stored stroke; must hold at least one point
    velocity_filter_weight : float
        Must match the weight used while drawing live

    Yields
    ------
    Directive
        ``Dot`` first, then ``len(points) - 2`` ``Curve`` directives
        (a single-point group yields only its ``Dot``)

    Raises
    ------
    ValueError
        If the group has no points
    """
    if not group.points:
        raise ValueError("Cannot replay a point group with no points")

    if group.is_dot:
        yield Dot(style=group.style, point=group.points[0])
        return

    # Stored points were already distance-filtered when captured.
    fitter = CurveFitter(group.style, velocity_filter_weight, min_distance=None)
    for point in group.points:
        directive = fitter.add_point(point)
        if directive is not None:
            yield directive


def replay(
    groups: Iterable[PointGroup],
    velocity_filter_weight: float = DEFAULT_VELOCITY_FILTER_WEIGHT
) -> Iterator[Directive]:
    """Yield directives for every group, in stored (chronological) order."""
    for index, group in enumerate(groups):
        logger.debug(f"Replaying group {index} ({len(group.points)} point(s))")
        yield from replay_group(group, velocity_filter_weight)
