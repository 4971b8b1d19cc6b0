"""Test the SVG backend.

Tests for inkpad.rendering.vector:
    - Path data format (M start C c1 c2 end, 3 decimals)
    - stroke-width = end_width · 2.25, round caps, no fill
    - Dots as circles (dot_size, else width midpoint)
    - Degenerate segments omitted, later ones kept
    - Document size, viewBox and optional background rect

Run:
    pytest tests/test_vector.py -v
"""

import re
import xml.etree.ElementTree as ET

import pytest

from inkpad.rendering.vector import SvgDocument, VectorRenderer, segment_path_data
from inkpad.stroke_fitting.model import Curve, CurveSegment, Dot, Point, StyleOptions


def elements(svg, tag):
    """All elements with local name ``tag`` (namespace ignored)."""
    root = ET.fromstring(svg)
    return [el for el in root.iter() if el.tag.split('}')[-1] == tag]


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def style():
    return StyleOptions(pen_color="navy", min_width=0.5, max_width=2.5)


@pytest.fixture
def segment():
    return CurveSegment((0.0, 0.0), (5.0, 0.0), (5.0, 0.0), (10.0, 0.0), 1.5, 1.2)


@pytest.fixture
def document():
    return SvgDocument(300, 150)


# ============================================================================
# PATH DATA
# ============================================================================

def test_segment_path_data(segment):
    assert segment_path_data(segment) == (
        "M 0.000,0.000 C 5.000,0.000 5.000,0.000 10.000,0.000"
    )


def test_segment_path_data_rounds_to_three_decimals():
    seg = CurveSegment((1.23456, 2.0), (3.0, 4.00049), (5.5, 6.25), (7.0, 8.0), 1.0, 1.0)
    assert segment_path_data(seg) == "M 1.235,2.000 C 3.000,4.000 5.500,6.250 7.000,8.000"


# ============================================================================
# CURVES
# ============================================================================

def test_curve_path_attributes(document, style, segment):
    VectorRenderer(document).render([Curve(style=style, segment=segment)])
    paths = elements(document.tostring(), 'path')

    assert len(paths) == 1
    path = paths[0]
    assert path.get('d') == segment_path_data(segment)
    assert path.get('stroke') == "navy"
    assert path.get('fill') == "none"
    assert path.get('stroke-linecap') == "round"
    assert float(path.get('stroke-width')) == pytest.approx(1.2 * 2.25, abs=1e-3)


def test_custom_width_multiplier(document, style, segment):
    VectorRenderer(document, width_multiplier=2.0).render([Curve(style=style, segment=segment)])
    path = elements(document.tostring(), 'path')[0]
    assert float(path.get('stroke-width')) == pytest.approx(2.4)


def test_color_written_verbatim(document, segment):
    style = StyleOptions(pen_color="rgba(10,20,30,0.5)")
    VectorRenderer(document).render([Curve(style=style, segment=segment)])
    assert elements(document.tostring(), 'path')[0].get('stroke') == "rgba(10,20,30,0.5)"


def test_degenerate_segment_omitted(document, style, segment):
    bad = CurveSegment((0.0, 0.0), (float('nan'), 1.0), (2.0, 2.0), (3.0, 3.0), 1.0, 1.0)
    directives = [
        Curve(style=style, segment=segment),
        Curve(style=style, segment=bad),
        Curve(style=style, segment=segment),
    ]

    drawn = VectorRenderer(document).render(directives)
    svg = document.tostring()

    assert drawn == 2
    assert document.element_count == 2
    assert len(elements(svg, 'path')) == 2
    assert 'nan' not in svg.lower()


# ============================================================================
# DOTS
# ============================================================================

def test_dot_uses_width_midpoint(document, style):
    VectorRenderer(document).render([Dot(style=style, point=Point(12.5, 40.0))])
    circles = elements(document.tostring(), 'circle')

    assert len(circles) == 1
    assert float(circles[0].get('cx')) == 12.5
    assert float(circles[0].get('cy')) == 40.0
    assert float(circles[0].get('r')) == 1.5
    assert circles[0].get('fill') == "navy"


def test_dot_uses_dot_size(document):
    style = StyleOptions(dot_size=4.0)
    VectorRenderer(document).render([Dot(style=style, point=Point(1.0, 1.0))])
    assert float(elements(document.tostring(), 'circle')[0].get('r')) == 4.0


def test_non_finite_dot_omitted(document, style):
    drawn = VectorRenderer(document).render([Dot(style=style, point=Point(float('nan'), 1.0))])
    assert drawn == 0
    assert elements(document.tostring(), 'circle') == []


# ============================================================================
# DOCUMENT
# ============================================================================

def test_document_size_and_viewbox(document):
    root = ET.fromstring(document.tostring())

    assert root.tag.split('}')[-1] == 'svg'
    assert root.get('width') == "300"
    assert root.get('height') == "150"
    assert [float(v) for v in re.split(r'[\s,]+', root.get('viewBox'))] == [0, 0, 300, 150]


def test_no_background_rect_by_default(document):
    assert elements(document.tostring(), 'rect') == []


def test_background_rect():
    svg = SvgDocument(300, 150, background_color="white").tostring()
    rects = elements(svg, 'rect')

    assert len(rects) == 1
    assert rects[0].get('fill') == "white"
    assert rects[0].get('width') == "300"


def test_elements_in_directive_order(document, style, segment):
    VectorRenderer(document).render([
        Dot(style=style, point=Point(0.0, 0.0)),
        Curve(style=style, segment=segment),
    ])
    root = ET.fromstring(document.tostring())
    drawn = [el.tag.split('}')[-1] for el in root if el.tag.split('}')[-1] in ('path', 'circle')]

    assert drawn == ['circle', 'path']


def test_invalid_width_multiplier(document):
    with pytest.raises(ValueError):
        VectorRenderer(document, width_multiplier=0.0)
