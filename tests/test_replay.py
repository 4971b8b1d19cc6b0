"""Test deterministic replay of stored groups.

Tests for inkpad.stroke_fitting.replay:
    - Replay reproduces live drawing exactly (same directives, same floats)
    - Determinism across runs
    - Single-point and two-point groups
    - Empty groups fail fast
    - Degenerate groups don't stop later groups

Run:
    pytest tests/test_replay.py -v
"""

import numpy as np
import pytest

from inkpad.stroke_fitting.fitter import CurveFitter
from inkpad.stroke_fitting.model import Curve, Dot, Point, PointGroup, StyleOptions
from inkpad.stroke_fitting.replay import replay, replay_group


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def style():
    return StyleOptions(pen_color="black", min_width=0.7, max_width=3.0)


def raw_samples(n, seed=0):
    """Jittery samples including some closer than 5 px and repeated timestamps."""
    rng = np.random.default_rng(seed)
    x, y, t = 20.0, 80.0, 1000
    samples = []
    for _ in range(n):
        samples.append(Point(x, y, float(rng.uniform(0.0, 1.0)), t))
        x += float(rng.uniform(-2.0, 12.0))
        y += float(rng.uniform(-8.0, 8.0))
        t += int(rng.integers(0, 20))
    return samples


def draw_live(samples, style, weight=0.7, min_distance=5.0):
    """Feed samples the way the pad does; return (group, directives)."""
    fitter = CurveFitter(style, weight, min_distance)
    group = PointGroup(style=style)
    directives = []
    for sample in samples:
        if not fitter.accepts(sample):
            continue
        directive = fitter.add_point(sample)
        group.points.append(sample)
        if directive is not None:
            directives.append(directive)
    return group, directives


# ============================================================================
# LIVE / REPLAY EQUIVALENCE
# ============================================================================

def test_replay_matches_live(style):
    group, live = draw_live(raw_samples(60), style)

    assert len(group.points) < 60
    assert list(replay_group(group)) == live


def test_replay_matches_live_custom_weight(style):
    group, live = draw_live(raw_samples(40, seed=3), style, weight=0.3)
    assert list(replay_group(group, velocity_filter_weight=0.3)) == live


def test_replay_multiple_groups_in_order(style):
    other = StyleOptions(pen_color="red", dot_size=2.0)
    g1, live1 = draw_live(raw_samples(20, seed=1), style)
    g2, live2 = draw_live(raw_samples(20, seed=2), other)

    assert list(replay([g1, g2])) == live1 + live2


def test_replay_is_deterministic(style):
    group, _ = draw_live(raw_samples(30), style)
    assert list(replay([group])) == list(replay([group]))


def test_replay_curve_count(style):
    group, _ = draw_live(raw_samples(30), style)
    directives = list(replay_group(group))

    assert isinstance(directives[0], Dot)
    assert sum(isinstance(d, Curve) for d in directives) == len(group.points) - 2


# ============================================================================
# SMALL / EMPTY GROUPS
# ============================================================================

def test_single_point_group_yields_dot(style):
    group = PointGroup(style=style, points=[Point(5.0, 5.0, 0.0, 10)])
    directives = list(replay_group(group))

    assert directives == [Dot(style=style, point=Point(5.0, 5.0, 0.0, 10))]


def test_two_point_group_yields_only_dot(style):
    group = PointGroup(style=style, points=[Point(5.0, 5.0, 0.0, 10), Point(15.0, 5.0, 0.0, 20)])
    directives = list(replay_group(group))

    assert len(directives) == 1
    assert isinstance(directives[0], Dot)


def test_empty_group_raises(style):
    with pytest.raises(ValueError):
        list(replay([PointGroup(style=style)]))


# ============================================================================
# DEGENERATE GROUPS
# ============================================================================

def test_degenerate_group_does_not_stop_later_groups(style):
    stuck = PointGroup(style=style, points=[Point(1.0, 1.0, 0.0, t) for t in (0, 10, 20, 30)])
    good, live = draw_live(raw_samples(10), style)

    directives = list(replay([stuck, good]))

    stuck_curves = [d for d in directives[:3] if isinstance(d, Curve)]
    assert len(stuck_curves) == 2
    assert all(d.segment.is_degenerate for d in stuck_curves)
    assert directives[3:] == live


def test_replay_does_not_filter_stored_points(style):
    # Points closer than the live min_distance still replay as stored
    points = [Point(float(i), 0.0, 0.0, i * 10) for i in range(6)]
    group = PointGroup(style=style, points=points)

    curves = [d for d in replay_group(group) if isinstance(d, Curve)]
    assert len(curves) == 4
