"""Rendering backends: raster disc stamping and SVG paths over one directive stream."""

from .base import StrokeRenderer
from .raster import SAMPLING_DENSITY, RasterRenderer, RasterSurface
from .vector import VECTOR_WIDTH_MULTIPLIER, SvgDocument, VectorRenderer

__all__ = [
    'RasterRenderer',
    'RasterSurface',
    'SAMPLING_DENSITY',
    'StrokeRenderer',
    'SvgDocument',
    'VECTOR_WIDTH_MULTIPLIER',
    'VectorRenderer',
]
