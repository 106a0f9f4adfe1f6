"""
ezdxf adapter: builds the converter's drawing model from a DXF document.

Reading the DXF file format itself is left to ezdxf. This module only maps the
ezdxf entities onto the neutral model in ``entities.py`` and expands block
references into nested inserts.
"""

import logging
import math
from typing import List, Optional, Tuple

import ezdxf
from ezdxf import bbox
from ezdxf.document import Drawing as DxfDocument
from ezdxf.math import Vec2

from .curves import normalize_vertices
from .entities import (
    Arc,
    Circle,
    Drawing,
    Ellipse,
    Image,
    Insert,
    Layer,
    Line,
    Polyline,
    PolylineVertex,
    Spline,
    UnsupportedEntity,
)
from .errors import GeometryError
from .transforms import DrawingRect

logger = logging.getLogger(__name__)

# header extents of a drawing that never had them computed
UNSET_EXTENTS = 1e20


def load_drawing(file_path: str) -> Tuple[Drawing, DrawingRect]:
    """Read a DXF file and return its model space drawing and extents."""
    doc = ezdxf.readfile(file_path)
    logger.info(f"Loaded DXF file {file_path} (version {doc.dxfversion})")
    return drawing_from_document(doc), drawing_rect_from_document(doc)


def drawing_from_document(doc: DxfDocument) -> Drawing:
    layers = [
        Layer(layer.dxf.name, _layer_color(layer))
        for layer in doc.layers
    ]
    entities = [
        entity_from_dxf(entity, doc)
        for entity in doc.modelspace()
    ]
    logger.debug(f"Mapped {len(entities)} entities on {len(layers)} layers")
    return Drawing(layers, entities)


def _layer_color(layer) -> Optional[int]:
    # negative colors mark layers that are switched off
    color = abs(layer.dxf.get("color", 7))
    return color if 1 <= color <= 255 else None


def _common(entity) -> dict:
    return {
        "layer": entity.dxf.get("layer", "0"),
        "color": entity.dxf.get("color", 256),
    }


def entity_from_dxf(entity, doc: DxfDocument, block_stack: Tuple[str, ...] = ()):
    """Map one ezdxf entity; kinds without an SVG counterpart become ``UnsupportedEntity``."""
    dxftype = entity.dxftype()
    common = _common(entity)

    if dxftype == "ARC":
        return Arc(
            Vec2(entity.dxf.center),
            entity.dxf.radius,
            entity.dxf.start_angle,
            entity.dxf.end_angle,
            thickness=entity.dxf.get("thickness", 0.0),
            **common,
        )
    elif dxftype == "CIRCLE":
        return Circle(
            Vec2(entity.dxf.center),
            entity.dxf.radius,
            thickness=entity.dxf.get("thickness", 0.0),
            **common,
        )
    elif dxftype == "ELLIPSE":
        return Ellipse(
            Vec2(entity.dxf.center),
            Vec2(entity.dxf.major_axis),
            entity.dxf.ratio,
            entity.dxf.get("start_param", 0.0),
            entity.dxf.get("end_param", math.tau),
            **common,
        )
    elif dxftype == "LINE":
        return Line(
            Vec2(entity.dxf.start),
            Vec2(entity.dxf.end),
            thickness=entity.dxf.get("thickness", 0.0),
            **common,
        )
    elif dxftype == "LWPOLYLINE":
        vertices = normalize_vertices(entity.get_points("xyb"))
        return Polyline(_vertices(vertices), entity.closed, **common)
    elif dxftype == "POLYLINE" and (entity.is_2d_polyline or entity.is_3d_polyline):
        vertices = normalize_vertices(entity.vertices)
        return Polyline(_vertices(vertices), entity.is_closed, **common)
    elif dxftype == "IMAGE":
        image_def = entity.image_def
        return Image(
            Vec2(entity.dxf.insert),
            Vec2(entity.dxf.u_pixel),
            Vec2(entity.dxf.v_pixel),
            Vec2(entity.dxf.image_size),
            image_def.dxf.filename if image_def is not None else "",
            **common,
        )
    elif dxftype == "INSERT":
        return _insert_from_dxf(entity, doc, block_stack, common)
    elif dxftype == "SPLINE":
        return _spline_from_dxf(entity, common)

    return UnsupportedEntity(dxftype, **common)


def _vertices(vertices) -> List[PolylineVertex]:
    return [PolylineVertex(x, y, bulge) for x, y, bulge in vertices]


def _insert_from_dxf(entity, doc: DxfDocument, block_stack: Tuple[str, ...], common: dict) -> Insert:
    name = entity.dxf.name
    if name in block_stack:
        raise GeometryError(f"Block '{name}' references itself through {' -> '.join(block_stack)}")

    block = doc.blocks.get(name)
    children = []
    base_point = Vec2(0, 0)
    if block is None:
        logger.warning(f"INSERT references undefined block '{name}'")
    else:
        base_point = Vec2(block.block.dxf.get("base_point", (0, 0, 0)))
        children = [entity_from_dxf(child, doc, block_stack + (name,)) for child in block]

    return Insert(
        Vec2(entity.dxf.insert),
        entity.dxf.get("xscale", 1.0),
        entity.dxf.get("yscale", 1.0),
        name,
        children,
        rotation=entity.dxf.get("rotation", 0.0),
        base_point=base_point,
        **common,
    )


def _spline_from_dxf(entity, common: dict) -> Spline:
    control_points = list(entity.control_points)
    knots = list(entity.knots)
    degree = entity.dxf.degree
    if not control_points and len(entity.fit_points):
        # fit point splines carry no control polygon; let ezdxf construct one
        tool = entity.construction_tool()
        degree = tool.degree
        control_points = list(tool.control_points)
        knots = list(tool.knots())
    return Spline(degree, [Vec2(p) for p in control_points], knots, **common)


def drawing_rect_from_document(doc: DxfDocument) -> DrawingRect:
    """Drawing extents from the $EXTMIN/$EXTMAX header, or computed when the header has none."""
    extmin = doc.header.get("$EXTMIN", (UNSET_EXTENTS, UNSET_EXTENTS, UNSET_EXTENTS))
    extmax = doc.header.get("$EXTMAX", (-UNSET_EXTENTS, -UNSET_EXTENTS, -UNSET_EXTENTS))
    x_min, y_min = extmin[0], extmin[1]
    x_max, y_max = extmax[0], extmax[1]

    if not (x_max > x_min and y_max > y_min) or abs(x_min) >= UNSET_EXTENTS:
        extents = bbox.extents(doc.modelspace())
        if not extents.has_data:
            raise GeometryError("Drawing has no extents")
        x_min, y_min = extents.extmin.x, extents.extmin.y
        x_max, y_max = extents.extmax.x, extents.extmax.y

    logger.debug(f"Drawing bounds: ({x_min:.2f}, {y_min:.2f}) to ({x_max:.2f}, {y_max:.2f})")
    return DrawingRect(x_min, y_min, x_max - x_min, y_max - y_min)
