"""
Tests for building the drawing model from ezdxf documents.
"""

import sys
import os
import math

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import ezdxf
import pytest

from dxf_svg import (
    Arc,
    Circle,
    Ellipse,
    GeometryError,
    Image,
    Insert,
    Line,
    Polyline,
    Spline,
    UnsupportedEntity,
    drawing_from_document,
    drawing_rect_from_document,
    load_drawing,
)


def entities_of(doc):
    return list(drawing_from_document(doc).entities)


def test_layers_and_colors():
    doc = ezdxf.new()
    doc.layers.add("WALLS", color=1)
    doc.modelspace().add_line((0, 0), (10, 0), dxfattribs={"layer": "WALLS", "color": 5})

    drawing = drawing_from_document(doc)
    layers = {layer.name: layer for layer in drawing.layers}

    assert layers["WALLS"].color == 1
    line = drawing.entities[0]
    assert isinstance(line, Line)
    assert line.layer == "WALLS"
    assert line.color == 5
    assert (line.p2.x, line.p2.y) == (10.0, 0.0)


def test_switched_off_layer_keeps_color():
    doc = ezdxf.new()
    layer = doc.layers.add("OFF", color=3)
    layer.off()

    layers = {layer.name: layer for layer in drawing_from_document(doc).layers}
    assert layers["OFF"].color == 3


def test_curve_entities():
    doc = ezdxf.new()
    msp = doc.modelspace()
    msp.add_circle((5, 5), 2)
    msp.add_arc((0, 0), 3, 10, 80)
    msp.add_ellipse((0, 0), major_axis=(2, 0), ratio=0.5)

    circle, arc, ellipse = entities_of(doc)

    assert isinstance(circle, Circle)
    assert circle.radius == 2.0
    assert circle.color == 256
    assert isinstance(arc, Arc)
    assert (arc.start_angle, arc.end_angle) == (10.0, 80.0)
    assert isinstance(ellipse, Ellipse)
    assert ellipse.minor_axis_ratio == 0.5
    assert ellipse.start_param == pytest.approx(0.0)
    assert ellipse.end_param == pytest.approx(math.tau)


def test_lwpolyline_keeps_bulges():
    doc = ezdxf.new()
    doc.modelspace().add_lwpolyline([(0, 0, 1.0), (10, 0, 0.0), (10, 10, 0.0)], format="xyb", close=True)

    polyline = entities_of(doc)[0]

    assert isinstance(polyline, Polyline)
    assert polyline.is_closed
    assert [(v.x, v.y, v.bulge) for v in polyline.vertices] == [
        (0.0, 0.0, 1.0), (10.0, 0.0, 0.0), (10.0, 10.0, 0.0)
    ]


def test_polyline_2d():
    doc = ezdxf.new()
    doc.modelspace().add_polyline2d([(0, 0), (5, 0), (5, 5)])

    polyline = entities_of(doc)[0]
    assert isinstance(polyline, Polyline)
    assert not polyline.is_closed
    assert len(polyline.vertices) == 3


def test_image_entity():
    doc = ezdxf.new()
    image_def = doc.add_image_def(filename="plan.png", size_in_pixel=(100, 50))
    doc.modelspace().add_image(image_def, insert=(1, 2), size_in_units=(10, 5))

    image = entities_of(doc)[0]

    assert isinstance(image, Image)
    assert image.file_path == "plan.png"
    assert (image.image_size.x, image.image_size.y) == (100.0, 50.0)
    assert image.u_vector.x == pytest.approx(0.1)
    assert (image.location.x, image.location.y) == (1.0, 2.0)


def test_block_reference_is_expanded():
    doc = ezdxf.new()
    block = doc.blocks.new("BOLT", base_point=(1, 1))
    block.add_circle((1, 1), 0.5)
    doc.modelspace().add_blockref("BOLT", (5, 5), dxfattribs={"xscale": 2, "yscale": 2, "rotation": 30})

    insert = entities_of(doc)[0]

    assert isinstance(insert, Insert)
    assert insert.name == "BOLT"
    assert (insert.x_scale, insert.y_scale, insert.rotation) == (2.0, 2.0, 30.0)
    assert (insert.base_point.x, insert.base_point.y) == (1.0, 1.0)
    assert [type(child) for child in insert.entities] == [Circle]


def test_block_cycle_raises():
    doc = ezdxf.new()
    first = doc.blocks.new("FIRST")
    second = doc.blocks.new("SECOND")
    first.add_blockref("SECOND", (0, 0))
    second.add_blockref("FIRST", (0, 0))
    doc.modelspace().add_blockref("FIRST", (0, 0))

    with pytest.raises(GeometryError):
        drawing_from_document(doc)


def test_splines():
    doc = ezdxf.new()
    msp = doc.modelspace()
    msp.add_open_spline([(0, 0), (1, 2), (3, 2), (4, 0), (6, 1)], degree=3)
    msp.add_spline(fit_points=[(0, 0), (2, 3), (5, 1), (8, 4)])

    controlled, fitted = entities_of(doc)

    assert isinstance(controlled, Spline)
    assert controlled.degree == 3
    assert len(controlled.control_points) == 5
    assert len(controlled.knot_values) == 9
    assert isinstance(fitted, Spline)
    assert len(fitted.control_points) >= 4
    assert len(fitted.knot_values) == len(fitted.control_points) + fitted.degree + 1


def test_unsupported_entity():
    doc = ezdxf.new()
    doc.modelspace().add_text("note", dxfattribs={"layer": "NOTES"})

    entity = entities_of(doc)[0]
    assert entity == UnsupportedEntity("TEXT", layer="NOTES", color=256)


def test_extents_from_header():
    doc = ezdxf.new()
    doc.modelspace().add_line((0, 0), (1, 1))
    doc.header["$EXTMIN"] = (-1, -2, 0)
    doc.header["$EXTMAX"] = (3, 4, 0)

    rect = drawing_rect_from_document(doc)
    assert (rect.left, rect.bottom, rect.width, rect.height) == (-1.0, -2.0, 4.0, 6.0)


def test_extents_computed_when_header_is_unset():
    doc = ezdxf.new()
    doc.modelspace().add_line((0, 0), (10, 5))

    rect = drawing_rect_from_document(doc)
    assert (rect.left, rect.bottom) == pytest.approx((0.0, 0.0))
    assert (rect.width, rect.height) == pytest.approx((10.0, 5.0))


def test_empty_document_has_no_extents():
    with pytest.raises(GeometryError):
        drawing_rect_from_document(ezdxf.new())


def test_load_drawing(tmp_path):
    doc = ezdxf.new()
    doc.modelspace().add_circle((0, 0), 1)
    file_path = tmp_path / "circle.dxf"
    doc.saveas(file_path)

    drawing, rect = load_drawing(str(file_path))

    assert isinstance(drawing.entities[0], Circle)
    assert rect.width == pytest.approx(2.0)
