"""
Tests for arcs, ellipses, images and their SVG elements.
"""

import sys
import os
import math

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from dxf_svg.curves import image_placement, is_full_turn, path_from_arc, path_from_ellipse
from dxf_svg.elements import SvgElementBuilder
from dxf_svg.entities import Arc, Circle, Ellipse, Image, Insert, Line, Spline, UnsupportedEntity
from dxf_svg.path import ArcTo, MoveTo


def test_is_full_turn():
    assert is_full_turn(0.0, math.tau)
    assert not is_full_turn(0.0, math.pi)
    assert not is_full_turn(0.1, math.tau + 0.1)


def test_quarter_arc():
    path = path_from_arc(Arc((0, 0), 1.0, 0.0, 90.0))

    assert len(path) == 2
    assert path[0] == MoveTo(1.0, 0.0)
    arc = path[1]
    assert isinstance(arc, ArcTo)
    assert (arc.rx, arc.ry, arc.x_axis_rotation) == (1.0, 1.0, 0.0)
    assert arc.is_large_arc is False
    assert arc.is_sweep_positive is True
    assert arc.x == pytest.approx(0.0, abs=1e-12)
    assert arc.y == pytest.approx(1.0)


def test_three_quarter_arc_is_large():
    path = path_from_arc(Arc((0, 0), 2.0, 0.0, 270.0))
    assert path[1].is_large_arc is True
    assert path[1].y == pytest.approx(-2.0)


def test_arc_crossing_zero_wraps_forward():
    path = path_from_arc(Arc((0, 0), 1.0, 350.0, 10.0))

    assert len(path) == 2
    assert path[1].is_large_arc is False
    assert path[1].x == pytest.approx(math.cos(math.radians(10.0)))
    assert path[1].y == pytest.approx(math.sin(math.radians(10.0)))


def test_half_turn_is_split():
    path = path_from_arc(Arc((0, 0), 1.0, 0.0, 180.0))

    assert len(path) == 3
    middle, end = path[1], path[2]
    assert middle.x == pytest.approx(0.0, abs=1e-12)
    assert middle.y == pytest.approx(1.0)
    assert end.x == pytest.approx(-1.0)
    assert not middle.is_large_arc and not end.is_large_arc


def test_rotated_ellipse_arc():
    path = path_from_ellipse((0, 0), (0, 2), 0.5, 0.0, math.pi / 2.0)

    start = path[0]
    assert start.x == pytest.approx(0.0, abs=1e-12)
    assert start.y == pytest.approx(2.0)

    arc = path[1]
    assert arc.rx == pytest.approx(2.0)
    assert arc.ry == pytest.approx(1.0)
    assert arc.x_axis_rotation == pytest.approx(90.0)
    # the minor axis is the major axis turned a quarter counter-clockwise
    assert arc.x == pytest.approx(-1.0)
    assert arc.y == pytest.approx(0.0, abs=1e-12)


def test_image_placement_moves_anchor_to_top_left():
    image = Image((10, 20), (1, 0), (0, 1), (100, 50), "pic.png")
    placement = image_placement(image)

    assert placement.width == 100.0
    assert placement.height == 50.0
    assert placement.rotation == 0.0
    assert (placement.insert_point.x, placement.insert_point.y) == (10.0, 70.0)


def test_rotated_image_placement():
    image = Image((0, 0), (0, 2), (-1, 0), (10, 10), "pic.png")
    placement = image_placement(image)

    assert placement.width == pytest.approx(20.0)
    assert placement.height == pytest.approx(10.0)
    assert placement.display_rotation_degrees == pytest.approx(-90.0)
    assert placement.insert_point.x == pytest.approx(-10.0)
    assert placement.insert_point.y == pytest.approx(0.0, abs=1e-12)


def test_circle_element():
    element = SvgElementBuilder({}).build(Circle((1, 2), 5.0))

    assert element.tag == "ellipse"
    assert element.get("cx") == "1.0"
    assert element.get("cy") == "2.0"
    assert element.get("rx") == "5.0"
    assert element.get("ry") == "5.0"
    assert element.get("fill-opacity") == "0"
    assert element.get("stroke-width") == "1.0px"
    assert element.get("vector-effect") == "non-scaling-stroke"
    assert element.get("stroke") is None


def test_full_turn_arc_renders_as_ellipse():
    element = SvgElementBuilder({}).build(Arc((0, 0), 3.0, 0.0, 360.0))
    assert element.tag == "ellipse"
    assert element.get("rx") == "3.0"


def test_full_rotated_ellipse_keeps_rotation():
    element = SvgElementBuilder({}).build(Ellipse((0, 0), (0, 2), 0.5))

    assert element.tag == "ellipse"
    assert element.get("rx") == "2.0"
    assert element.get("ry") == "1.0"
    assert element.get("transform") == "rotate(90.0 0.0 0.0)"


def test_partial_ellipse_renders_as_path():
    element = SvgElementBuilder({}).build(Ellipse((0, 0), (2, 0), 0.5, 0.0, math.pi / 2.0))
    assert element.tag == "path"
    assert element.get("d").startswith("M 2.0 0.0 A 2.0 1.0 0.0 0 1 ")


def test_line_element_thickness_and_color():
    builder = SvgElementBuilder({})

    thick = builder.build(Line((0, 0), (1, 1), thickness=3.0, color=1))
    assert thick.tag == "line"
    assert (thick.get("x1"), thick.get("y1"), thick.get("x2"), thick.get("y2")) == ("0.0", "0.0", "1.0", "1.0")
    assert thick.get("stroke-width") == "3.0px"
    assert thick.get("stroke") == "#FF0000"

    by_layer = builder.build(Line((0, 0), (1, 1), color=256))
    assert by_layer.get("stroke") is None
    assert by_layer.get("stroke-width") == "1.0px"


def test_image_element_uses_resolved_href():
    builder = SvgElementBuilder({"pic.png": "data:image/png;base64,AAAA"})
    element = builder.build(Image((0, 0), (1, 0), (0, 1), (4, 2), "pic.png"))

    assert element.tag == "image"
    assert element.get("href") == "data:image/png;base64,AAAA"
    assert element.get("width") == "4.0"
    assert element.get("height") == "2.0"
    assert element.get("transform") == "translate(0.0 2.0) scale(1 -1) rotate(0.0)"


def test_spline_element_is_a_cubic_path():
    element = SvgElementBuilder({}).build(Spline(3, [(0, 0), (1, 2), (3, 2), (4, 0)]))
    assert element.get("d") == "M 0.0 0.0 C 1.0 2.0 3.0 2.0 4.0 0.0"


def test_insert_group():
    insert = Insert((10, 20), 2.0, 2.0, "BOLT", [Circle((0, 0), 1.0), UnsupportedEntity("TEXT")], color=5)
    group = SvgElementBuilder({}).build(insert)

    assert group.tag == "g"
    assert group.get("class") == "dxf-insert BOLT"
    assert group.get("transform") == "translate(10.0 20.0) scale(2.0 2.0)"
    assert group.get("stroke") == "#0000FF"
    assert [child.tag for child in group] == ["ellipse"]


def test_unsupported_entity_has_no_element():
    assert SvgElementBuilder({}).build(UnsupportedEntity("HATCH")) is None
