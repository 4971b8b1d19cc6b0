"""Stroke fitting: sample model, incremental curve fitter and replay."""

from .fitter import CurveFitter, stroke_width
from .model import (
    Curve,
    CurveSegment,
    Directive,
    Dot,
    Point,
    PointGroup,
    StyleOptions,
    dump_groups,
    groups_from_records,
    groups_to_records,
    load_groups,
)
from .replay import replay, replay_group

__all__ = [
    'Curve',
    'CurveFitter',
    'CurveSegment',
    'Directive',
    'Dot',
    'Point',
    'PointGroup',
    'StyleOptions',
    'dump_groups',
    'groups_from_records',
    'groups_to_records',
    'load_groups',
    'replay',
    'replay_group',
    'stroke_width',
]
