"""Geometric operations for ink strokes.

Provides:
    - Cubic Bézier evaluation (Bernstein form)
    - Polyline length and sampled Bézier arc length
    - Tangent control-point estimation for a point triple
    - Finiteness checks for degenerate geometry

Used by:
    - Curve model: segment construction and arc-length estimate
    - Raster renderer: stamp positions along a segment

All coordinates are canvas pixels (top-left origin, +Y down).
Functions never raise on non-finite input; NaN/inf propagate to the caller,
which decides whether to omit the geometry.
"""

import math
from typing import Sequence, Tuple

import numpy as np

XY = Tuple[float, float]

# Number of chords used to approximate a segment's arc length.
ARC_LENGTH_STEPS = 10


def bezier_cubic_eval(
    p1: Sequence[float],
    p2: Sequence[float],
    p3: Sequence[float],
    p4: Sequence[float],
    t: np.ndarray
) -> np.ndarray:
    """Evaluate cubic Bézier curve at parameter t.

    Parameters
    ----------
    p1, p2, p3, p4 : sequence of float
        Control points (x, y)
    t : np.ndarray
        Parameter values in [0, 1], scalar or shape (N,)

    Returns
    -------
    np.ndarray
        Points on curve, shape (N, 2), float64

    Notes
    -----
    Standard cubic Bézier formula:
    B(t) = (1-t)³·p1 + 3(1-t)²t·p2 + 3(1-t)t²·p3 + t³·p4
    """
    t = np.atleast_1d(np.asarray(t, dtype=np.float64))[:, np.newaxis]
    u = 1.0 - t

    # Bernstein polynomials
    b0 = u ** 3
    b1 = 3.0 * (u ** 2) * t
    b2 = 3.0 * u * (t ** 2)
    b3 = t ** 3

    return (
        b0 * np.asarray(p1, dtype=np.float64)
        + b1 * np.asarray(p2, dtype=np.float64)
        + b2 * np.asarray(p3, dtype=np.float64)
        + b3 * np.asarray(p4, dtype=np.float64)
    )


def polyline_length(points: np.ndarray) -> float:
    """Compute total length of polyline.

    Parameters
    ----------
    points : np.ndarray
        Polyline vertices, shape (N, 2)

    Returns
    -------
    float
        Sum of Euclidean distances between consecutive points (0.0 if N < 2)
    """
    if points.shape[0] < 2:
        return 0.0

    diffs = np.diff(points, axis=0)
    return float(np.hypot(diffs[:, 0], diffs[:, 1]).sum())


def bezier_cubic_length(
    p1: Sequence[float],
    p2: Sequence[float],
    p3: Sequence[float],
    p4: Sequence[float],
    steps: int = ARC_LENGTH_STEPS
) -> float:
    """Approximate arc length of a cubic Bézier by chord summation.

    Parameters
    ----------
    p1, p2, p3, p4 : sequence of float
        Control points (x, y)
    steps : int
        Number of chords, default 10

    Returns
    -------
    float
        Approximate length (always <= true length)

    Notes
    -----
    The exact length is an elliptic integral. The estimate only paces raster
    stamping, so a coarse chord sum is enough.
    """
    t = np.linspace(0.0, 1.0, steps + 1)
    return polyline_length(bezier_cubic_eval(p1, p2, p3, p4, t))


def tangent_control_points(s1: XY, s2: XY, s3: XY) -> Tuple[XY, XY]:
    """Estimate the two control points around s2 for a smooth curve through s1, s2, s3.

    Parameters
    ----------
    s1, s2, s3 : (float, float)
        Three consecutive samples

    Returns
    -------
    ((float, float), (float, float))
        (c1, c2): c1 is the control point leading into s2 from the s1 side,
        c2 the one leaving s2 toward s3.

    Notes
    -----
    The chord midpoints m1 = (s1+s2)/2 and m2 = (s2+s3)/2 are blended with
    k = l2 / (l1 + l2), where l1, l2 are the chord lengths, and the pair is
    translated so the blend point lands on s2. Neighbouring segments share the
    tangent line through s2, so the joined curve is tangent-continuous.

    If all three samples coincide, k is NaN and so are both control points.
    """
    dx1 = s1[0] - s2[0]
    dy1 = s1[1] - s2[1]
    dx2 = s2[0] - s3[0]
    dy2 = s2[1] - s3[1]

    m1 = ((s1[0] + s2[0]) / 2.0, (s1[1] + s2[1]) / 2.0)
    m2 = ((s2[0] + s3[0]) / 2.0, (s2[1] + s3[1]) / 2.0)

    l1 = math.sqrt(dx1 * dx1 + dy1 * dy1)
    l2 = math.sqrt(dx2 * dx2 + dy2 * dy2)

    dxm = m1[0] - m2[0]
    dym = m1[1] - m2[1]

    total = l1 + l2
    k = l2 / total if total else math.nan

    cm = (m2[0] + dxm * k, m2[1] + dym * k)
    tx = s2[0] - cm[0]
    ty = s2[1] - cm[1]

    return (m1[0] + tx, m1[1] + ty), (m2[0] + tx, m2[1] + ty)


def all_finite(*values: float) -> bool:
    """True if every value is a finite float (no NaN, no ±inf)."""
    return all(math.isfinite(v) for v in values)
