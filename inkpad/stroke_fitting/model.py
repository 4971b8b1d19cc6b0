"""Stroke data model -- samples, styles, curve segments and directives.

Every value here is an immutable, slotted dataclass except ``PointGroup``,
whose point list grows while its stroke is being drawn and is never touched
again afterwards.

Directives
----------
The fitter and the replayer emit ``Dot`` and ``Curve`` directives; rendering
backends consume them without knowing where they came from, so the live path
and the replay path share one geometry.

Persisted form
--------------
A signature is an ordered list of point groups in plain records::

    {"style": {"pen_color": "black", "dot_size": 0.0,
               "min_width": 0.5, "max_width": 2.5},
     "points": [{"x": 1.0, "y": 2.0, "pressure": 0.5, "time": 1000}, ...]}
"""

from __future__ import annotations

import math
import numbers
from abc import ABC
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Iterable, Sequence

from inkpad.utils import fs, geometry, validators

# Clamp for the time delta between two samples; samples sharing a
# timestamp (or arriving out of order) never divide by zero.
MIN_TIME_DELTA_MS = 1


# ---------------------------------------------------------------------------
# Samples
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """One pointer sample.

    Parameters
    ----------
    x, y : float
        Canvas position in pixels.
    pressure : float
        Normalised pressure, clamped into [0, 1]; 0 when the device reports
        none or reports a non-finite value.
    time : int
        Timestamp in milliseconds; fractional timestamps are truncated.

    Raises
    ------
    ValueError
        If ``time`` is NaN or infinite.
    """

    x: float
    y: float
    pressure: float = 0.0
    time: int = 0

    def __post_init__(self) -> None:
        # Same ranges PointV1 accepts
        pressure = float(self.pressure)
        if not math.isfinite(pressure):
            pressure = 0.0
        object.__setattr__(self, "pressure", min(max(pressure, 0.0), 1.0))

        if not isinstance(self.time, numbers.Integral):
            if not math.isfinite(self.time):
                raise ValueError(f"time must be finite, got {self.time}")
            object.__setattr__(self, "time", int(self.time))

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def velocity_from(self, start: Point) -> float:
        """Speed in px/ms travelling from ``start`` to this point."""
        dt = max(self.time - start.time, MIN_TIME_DELTA_MS)
        return self.distance_to(start) / dt

    @property
    def xy(self) -> tuple[float, float]:
        return (self.x, self.y)

    def to_record(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "pressure": self.pressure, "time": self.time}


# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StyleOptions:
    """Pen style captured into a group when its stroke begins.

    Parameters
    ----------
    pen_color : str
        CSS color string, written verbatim into vector output.
    dot_size : float
        Radius of a tap; ``0`` means use the width midpoint.
    min_width, max_width : float
        Bounds of the velocity-driven stroke radius.
    """

    pen_color: str = "black"
    dot_size: float = 0.0
    min_width: float = 0.5
    max_width: float = 2.5

    def __post_init__(self) -> None:
        if self.dot_size < 0:
            raise ValueError(f"dot_size must be >= 0, got {self.dot_size}")
        if self.min_width <= 0:
            raise ValueError(f"min_width must be > 0, got {self.min_width}")
        if self.max_width < self.min_width:
            raise ValueError(
                f"max_width ({self.max_width}) must be >= min_width ({self.min_width})"
            )

    @property
    def mid_width(self) -> float:
        return (self.min_width + self.max_width) / 2

    @property
    def dot_radius(self) -> float:
        return self.dot_size if self.dot_size > 0 else self.mid_width

    def to_record(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Curve segment
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CurveSegment:
    """One cubic Bézier segment with a start/end width pair.

    Width interpolates between ``start_width`` and ``end_width`` in parameter
    space (see the raster renderer for the exact profile).
    """

    start_point: tuple[float, float]
    control1: tuple[float, float]
    control2: tuple[float, float]
    end_point: tuple[float, float]
    start_width: float
    end_width: float

    @classmethod
    def from_points(
        cls,
        points: Sequence[Point],
        start_width: float,
        end_width: float,
    ) -> CurveSegment:
        """Build the segment between ``points[1]`` and ``points[2]`` of a 4-point window.

        The outer samples only shape the tangents at both ends, which makes
        consecutive segments meet without a kink.
        """
        if len(points) != 4:
            raise ValueError(f"Curve construction needs 4 points, got {len(points)}")

        s0, s1, s2, s3 = (p.xy for p in points)
        _, c2 = geometry.tangent_control_points(s0, s1, s2)
        c3, _ = geometry.tangent_control_points(s1, s2, s3)

        return cls(
            start_point=s1,
            control1=c2,
            control2=c3,
            end_point=s2,
            start_width=start_width,
            end_width=end_width,
        )

    @property
    def control_points(
        self,
    ) -> tuple[tuple[float, float], tuple[float, float], tuple[float, float], tuple[float, float]]:
        return (self.start_point, self.control1, self.control2, self.end_point)

    @property
    def is_degenerate(self) -> bool:
        """True if any control coordinate or width is NaN/inf."""
        coords = [c for point in self.control_points for c in point]
        return not geometry.all_finite(*coords, self.start_width, self.end_width)

    def length(self) -> float:
        """Arc-length estimate used to pace raster stamping."""
        return geometry.bezier_cubic_length(*self.control_points)


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Directive(ABC):
    """Base class for renderable units emitted by fitting and replay."""

    style: StyleOptions


@dataclass(frozen=True, slots=True)
class Dot(Directive):
    """Draw a filled disc at ``point`` (first sample of a group)."""

    point: Point


@dataclass(frozen=True, slots=True)
class Curve(Directive):
    """Draw one variable-width curve segment."""

    segment: CurveSegment


# ---------------------------------------------------------------------------
# Point groups
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class PointGroup:
    """All samples of one stroke plus the style it was drawn with."""

    style: StyleOptions
    points: list[Point] = field(default_factory=list)

    @property
    def is_dot(self) -> bool:
        return len(self.points) == 1

    def copy(self) -> PointGroup:
        return PointGroup(style=self.style, points=list(self.points))

    def to_record(self) -> dict[str, Any]:
        return {
            "style": self.style.to_record(),
            "points": [p.to_record() for p in self.points],
        }

    @classmethod
    def from_model(cls, model: validators.PointGroupV1) -> PointGroup:
        return cls(
            style=StyleOptions(**model.style.model_dump()),
            points=[Point(**p.model_dump()) for p in model.points],
        )

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> PointGroup:
        """Validate one plain record.

        Raises
        ------
        ValueError
            If a field is missing or out of range, or the group has no points.
        """
        return groups_from_records([record])[0]


def groups_to_records(groups: Iterable[PointGroup]) -> list[dict[str, Any]]:
    return [g.to_record() for g in groups]


def groups_from_records(records: Iterable[dict[str, Any]]) -> list[PointGroup]:
    """Validate and convert plain records; the whole batch fails on the first bad group."""
    parsed = validators.parse_strokes({"groups": list(records)})
    return [PointGroup.from_model(g) for g in parsed.groups]


def dump_groups(groups: Iterable[PointGroup], path: str | Path) -> None:
    """Write groups as a strokes.v1 YAML file (atomically)."""
    fs.atomic_yaml_dump(
        {"schema": "strokes.v1", "groups": groups_to_records(groups)},
        path,
    )


def load_groups(path: str | Path) -> list[PointGroup]:
    """Load and validate a strokes.v1 YAML file."""
    parsed = validators.validate_strokes_file(path)
    return [PointGroup.from_model(g) for g in parsed.groups]
