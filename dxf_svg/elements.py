"""
Per-entity SVG elements.

Entities are simply flattened into the drawing plane; the transform stack built
around the world group takes care of mapping them into the viewport.
"""

import logging
import math
import xml.etree.ElementTree as ET
from typing import Mapping, Optional

from .colors import ColorLookup, default_color_lookup, is_index_color, to_rgb_string
from .curves import (
    image_placement,
    is_full_turn,
    path_from_arc,
    path_from_ellipse_entity,
    path_from_polyline,
    path_from_spline,
)
from .entities import Arc, Circle, Ellipse, Image, Insert, Line, Polyline, Spline
from .formatting import format_number, format_pair
from .path import Path
from .transforms import insert_transform

logger = logging.getLogger(__name__)

MIN_STROKE_WIDTH = 1.0


class SvgElementBuilder:
    """Builds the element for one entity, or ``None`` when the entity kind has no SVG form."""

    def __init__(self, image_hrefs: Mapping[str, str], color_lookup: ColorLookup = default_color_lookup):
        self.image_hrefs = image_hrefs
        self.color_lookup = color_lookup

    def build(self, entity) -> Optional[ET.Element]:
        if isinstance(entity, Arc):
            return self.arc(entity)
        elif isinstance(entity, Circle):
            return self.circle(entity)
        elif isinstance(entity, Ellipse):
            return self.ellipse(entity)
        elif isinstance(entity, Image):
            return self.image(entity)
        elif isinstance(entity, Line):
            return self.line(entity)
        elif isinstance(entity, Polyline):
            return self.polyline(entity)
        elif isinstance(entity, Insert):
            return self.insert(entity)
        elif isinstance(entity, Spline):
            return self.spline(entity)

        kind = getattr(entity, "kind", type(entity).__name__)
        logger.debug(f"Skipping unsupported entity {kind} on layer {getattr(entity, 'layer', '?')}")
        return None

    def arc(self, arc: Arc) -> ET.Element:
        if is_full_turn(math.radians(arc.start_angle), math.radians(arc.end_angle)):
            element = _ellipse_element(arc.center, arc.radius, arc.radius, 0.0)
        else:
            element = _path_element(path_from_arc(arc))
        return self._finish(element, arc.color, arc.thickness)

    def circle(self, circle: Circle) -> ET.Element:
        element = _ellipse_element(circle.center, circle.radius, circle.radius, 0.0)
        return self._finish(element, circle.color, circle.thickness)

    def ellipse(self, ellipse: Ellipse) -> ET.Element:
        if is_full_turn(ellipse.start_param, ellipse.end_param):
            rx = ellipse.major_axis.magnitude
            element = _ellipse_element(
                ellipse.center,
                rx,
                rx * ellipse.minor_axis_ratio,
                math.degrees(ellipse.major_axis.angle),
            )
        else:
            element = _path_element(path_from_ellipse_entity(ellipse))
        return self._finish(element, ellipse.color, MIN_STROKE_WIDTH)

    def image(self, image: Image) -> ET.Element:
        placement = image_placement(image)
        element = ET.Element("image", {
            "href": self.image_hrefs.get(image.file_path, image.file_path),
            "width": format_number(placement.width),
            "height": format_number(placement.height),
            "transform": (
                f"translate({format_pair(placement.insert_point.x, placement.insert_point.y)}) "
                f"scale(1 -1) rotate({format_number(placement.display_rotation_degrees)})"
            ),
        })
        self._add_stroke(element, image.color)
        _add_vector_effect(element)
        return element

    def line(self, line: Line) -> ET.Element:
        element = ET.Element("line", {
            "x1": format_number(line.p1.x),
            "y1": format_number(line.p1.y),
            "x2": format_number(line.p2.x),
            "y2": format_number(line.p2.y),
        })
        self._add_stroke(element, line.color)
        _add_stroke_width(element, line.thickness)
        _add_vector_effect(element)
        return element

    def polyline(self, polyline: Polyline) -> ET.Element:
        return self._finish(_path_element(path_from_polyline(polyline)), polyline.color, MIN_STROKE_WIDTH)

    def spline(self, spline: Spline) -> ET.Element:
        return self._finish(_path_element(path_from_spline(spline)), spline.color, MIN_STROKE_WIDTH)

    def insert(self, insert: Insert) -> ET.Element:
        group = ET.Element("g", {
            "class": f"dxf-insert {insert.name}",
            "transform": insert_transform(insert),
        })
        self._add_stroke(group, insert.color)
        for child in insert.entities:
            element = self.build(child)
            if element is not None:
                group.append(element)
        return group

    def _finish(self, element: ET.Element, color: Optional[int], stroke_width: float) -> ET.Element:
        self._add_stroke(element, color)
        _add_stroke_width(element, stroke_width)
        _add_vector_effect(element)
        return element

    def _add_stroke(self, element: ET.Element, color: Optional[int]) -> None:
        if is_index_color(color):
            element.set("stroke", to_rgb_string(color, self.color_lookup))


def _path_element(path: Path) -> ET.Element:
    return ET.Element("path", {"d": path.to_svg(), "fill-opacity": "0"})


def _ellipse_element(center, rx: float, ry: float, rotation: float) -> ET.Element:
    element = ET.Element("ellipse", {
        "cx": format_number(center.x),
        "cy": format_number(center.y),
        "rx": format_number(rx),
        "ry": format_number(ry),
    })
    if rotation:
        element.set(
            "transform",
            f"rotate({format_number(rotation)} {format_pair(center.x, center.y)})",
        )
    element.set("fill-opacity", "0")
    return element


def _add_stroke_width(element: ET.Element, stroke_width: float) -> None:
    element.set("stroke-width", f"{format_number(max(stroke_width, MIN_STROKE_WIDTH))}px")


def _add_vector_effect(element: ET.Element) -> None:
    element.set("vector-effect", "non-scaling-stroke")
