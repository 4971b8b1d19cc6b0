"""inkpad: smooth variable-width signature strokes from pointer samples.

This package fits sparse, irregularly-timed pointer samples into
tangent-continuous cubic Bézier segments whose width follows pointer speed,
and renders them either as stamped raster discs or as SVG paths.

Architecture layers (strict one-way dependency):
    scripts/ → inkpad/pad.py → inkpad/{rendering,stroke_fitting}/ → inkpad/utils/

Key invariants:
    - Geometry in canvas pixels, time in integer milliseconds
    - Style is captured per point group when its stroke begins
    - Live drawing and replay share one fitter code path (identical segments)
    - Degenerate (non-finite) geometry is omitted at render time, never raised
    - YAML-only configs and strokes files
"""

from .pad import SignaturePad
from .stroke_fitting.model import Point, PointGroup, StyleOptions

__version__ = "1.0.0"

__all__ = ['SignaturePad', 'Point', 'PointGroup', 'StyleOptions', '__version__']
