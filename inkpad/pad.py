"""Signature pad: live stroke capture, persistence and replay rendering.

The pad is the boundary the embedding application talks to. Event capture
glue feeds it samples through ``begin_stroke`` / ``update_stroke`` /
``end_stroke``; each accepted sample runs through the stroke's
``CurveFitter`` and the resulting directive is stamped onto the pad's raster
surface immediately.

State:
    - ``style``: current pen style, read only when a stroke begins; changing
      it never affects groups that already exist
    - groups: ordered ``PointGroup`` list, the only durable state
    - one ``CurveFitter`` for the stroke in progress, discarded at stroke end

Rendering a stored signature (``render``, ``to_svg``, ``to_data_url``) goes
through ``replay``, the same path ``load_strokes`` uses to redraw the
surface.

Usage:
    pad = SignaturePad(400, 200, min_distance=5.0)
    pad.begin_stroke(Point(10, 10, 0.5, 1000))
    pad.update_stroke(Point(20, 15, 0.5, 1016))
    pad.end_stroke(Point(30, 18, 0.5, 1032))
    svg = pad.to_svg()
    records = groups_to_records(pad.get_strokes())
"""

import base64
import dataclasses
import logging
from typing import Iterable, List, Optional, Union

from inkpad.rendering.raster import SAMPLING_DENSITY, RasterRenderer, RasterSurface
from inkpad.rendering.vector import VECTOR_WIDTH_MULTIPLIER, SvgDocument, VectorRenderer
from inkpad.stroke_fitting.fitter import DEFAULT_VELOCITY_FILTER_WEIGHT, CurveFitter
from inkpad.stroke_fitting.model import Directive, Point, PointGroup, StyleOptions
from inkpad.stroke_fitting.replay import replay
from inkpad.utils import fs, validators

logger = logging.getLogger(__name__)

DEFAULT_MIN_DISTANCE = 5.0
DEFAULT_BACKGROUND = "rgba(0,0,0,0)"

BACKENDS = ("raster", "vector")


class SignaturePad:
    """Stateful front end over fitter, replayer and both rendering backends.

    Parameters
    ----------
    width, height : int
        Surface size in pixels
    style : StyleOptions, optional
        Initial pen style (defaults: black, widths 0.5-2.5, dot_size 0)
    velocity_filter_weight : float
        Width smoothing weight in (0, 1]
    min_distance : float
        Jitter rejection radius in pixels
    background_color : str
        CSS color for ``clear``; transparent by default
    sampling_density : int
        Raster stamps per pixel of arc length
    vector_width_multiplier : float
        SVG stroke-width / segment end width
    """

    def __init__(
        self,
        width: int = 300,
        height: int = 150,
        *,
        style: Optional[StyleOptions] = None,
        velocity_filter_weight: float = DEFAULT_VELOCITY_FILTER_WEIGHT,
        min_distance: float = DEFAULT_MIN_DISTANCE,
        background_color: str = DEFAULT_BACKGROUND,
        sampling_density: int = SAMPLING_DENSITY,
        vector_width_multiplier: float = VECTOR_WIDTH_MULTIPLIER
    ):
        if not 0.0 < velocity_filter_weight <= 1.0:
            raise ValueError(
                f"velocity_filter_weight must be in (0, 1], got {velocity_filter_weight}"
            )
        if min_distance < 0:
            raise ValueError(f"min_distance must be >= 0, got {min_distance}")

        self.width = width
        self.height = height
        self.velocity_filter_weight = velocity_filter_weight
        self.min_distance = min_distance
        self.background_color = background_color
        self.sampling_density = sampling_density
        self.vector_width_multiplier = vector_width_multiplier

        self._style = style or StyleOptions()
        self._surface = RasterSurface(width, height, background_color)
        self._renderer = RasterRenderer(self._surface, sampling_density)

        self._groups: List[PointGroup] = []
        self._fitter: Optional[CurveFitter] = None
        self._is_empty = True

    @classmethod
    def from_config(cls, cfg: validators.PadConfigV1) -> "SignaturePad":
        """Build a pad from a validated pad.v1 config."""
        return cls(
            cfg.canvas.width,
            cfg.canvas.height,
            style=StyleOptions(**cfg.style.model_dump()),
            velocity_filter_weight=cfg.velocity_filter_weight,
            min_distance=cfg.min_distance,
            background_color=cfg.background_color,
            sampling_density=cfg.render.sampling_density,
            vector_width_multiplier=cfg.render.vector_width_multiplier,
        )

    # ------------------------------------------------------------------
    # Style
    # ------------------------------------------------------------------

    @property
    def style(self) -> StyleOptions:
        return self._style

    @style.setter
    def style(self, style: StyleOptions) -> None:
        if not isinstance(style, StyleOptions):
            raise TypeError(f"style must be StyleOptions, got {type(style).__name__}")
        self._style = style

    def set_style(self, **changes) -> StyleOptions:
        """Replace individual style fields; takes effect at the next stroke."""
        self.style = dataclasses.replace(self._style, **changes)
        return self._style

    # ------------------------------------------------------------------
    # Surface state
    # ------------------------------------------------------------------

    @property
    def surface(self) -> RasterSurface:
        return self._surface

    @property
    def is_drawing(self) -> bool:
        return self._fitter is not None

    def is_empty(self) -> bool:
        return self._is_empty

    def clear(self) -> None:
        """Erase the surface and drop every group, including one in progress."""
        self._surface.fill_background(self.background_color)
        self._groups = []
        self._fitter = None
        self._is_empty = True

    # ------------------------------------------------------------------
    # Live input
    # ------------------------------------------------------------------

    def begin_stroke(self, sample: Point) -> Optional[Directive]:
        """Open a new group with the current style and feed its first sample."""
        group = PointGroup(style=self._style)
        self._groups.append(group)
        self._fitter = CurveFitter(group.style, self.velocity_filter_weight, self.min_distance)
        logger.debug(f"Stroke {len(self._groups) - 1} began at ({sample.x:.1f}, {sample.y:.1f})")
        return self.update_stroke(sample)

    def update_stroke(self, sample: Point) -> Optional[Directive]:
        """Feed one sample to the stroke in progress.

        Without a stroke in progress (e.g. ``clear`` ran mid-stroke) this
        begins one instead.

        Returns
        -------
        Directive or None
            What was drawn for this sample; None for rejected samples and
            the second sample of a stroke
        """
        if self._fitter is None:
            return self.begin_stroke(sample)

        if not self._fitter.accepts(sample):
            return None

        directive = self._fitter.add_point(sample)
        self._groups[-1].points.append(sample)

        if directive is not None and self._renderer.render((directive,)):
            self._is_empty = False

        return directive

    def end_stroke(self, sample: Point) -> Optional[Directive]:
        """Feed the final sample and close the group."""
        directive = self.update_stroke(sample)
        group = self._groups[-1]
        self._fitter = None
        logger.debug(f"Stroke {len(self._groups) - 1} ended with {len(group.points)} point(s)")
        return directive

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def get_strokes(self) -> List[PointGroup]:
        """Copies of all groups in chronological order."""
        return [g.copy() for g in self._groups]

    def load_strokes(self, groups: Iterable[PointGroup], clear: bool = True) -> None:
        """Replace (or extend) the stored groups and draw them.

        Parameters
        ----------
        groups : iterable of PointGroup
            Groups to load; copied, so later changes by the caller don't leak in
        clear : bool
            True replaces everything (and erases the surface); False appends

        Raises
        ------
        ValueError
            If any group has no points; nothing is changed in that case
        """
        loaded = [g.copy() for g in groups]
        for index, group in enumerate(loaded):
            if not group.points:
                raise ValueError(f"Point group {index} has no points")

        if clear:
            self.clear()

        self._fitter = None
        if self._renderer.render(replay(loaded, self.velocity_filter_weight)):
            self._is_empty = False
        self._groups.extend(loaded)

        logger.info(f"Loaded {len(loaded)} group(s) ({'replace' if clear else 'append'})")

    # ------------------------------------------------------------------
    # Rendering / export
    # ------------------------------------------------------------------

    def render(
        self,
        groups: Optional[Iterable[PointGroup]] = None,
        backend: str = "raster",
        *,
        include_background: bool = False
    ) -> Union[RasterSurface, str]:
        """Replay groups (default: the pad's own) onto a fresh backend.

        Parameters
        ----------
        groups : iterable of PointGroup, optional
            Groups to render; defaults to ``get_strokes()``
        backend : str
            "raster" returns a new ``RasterSurface``; "vector" returns an SVG string
        include_background : bool
            Vector only: emit a background rect in ``background_color``

        Raises
        ------
        ValueError
            Unknown backend or a group with no points
        """
        if backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got {backend!r}")

        groups = self._groups if groups is None else list(groups)
        directives = replay(groups, self.velocity_filter_weight)

        if backend == "raster":
            surface = RasterSurface(self.width, self.height, self.background_color)
            RasterRenderer(surface, self.sampling_density).render(directives)
            return surface

        document = SvgDocument(
            self.width,
            self.height,
            self.background_color if include_background else None,
        )
        drawn = VectorRenderer(document, self.vector_width_multiplier).render(directives)
        logger.debug(f"Vector export: {drawn} element(s)")
        return document.tostring()

    def to_svg(self, include_background: bool = False) -> str:
        return self.render(backend="vector", include_background=include_background)

    def to_png(self) -> bytes:
        """PNG bytes of the live surface."""
        return fs.encode_image(self._surface.to_rgba8(), "PNG")

    def to_data_url(self, mime: str = "image/png", include_background: bool = False) -> str:
        """Base64 data URL for "image/png" (live surface) or "image/svg+xml" (replay)."""
        if mime == "image/svg+xml":
            payload = self.to_svg(include_background).encode("utf-8")
        elif mime == "image/png":
            payload = self.to_png()
        else:
            raise ValueError(f"Unsupported mime type: {mime}")

        return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"
