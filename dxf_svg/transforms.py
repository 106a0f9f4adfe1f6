"""
Coordinate transforms between drawing space and the SVG viewport.

The world group is wrapped, outermost first, in:

1. axis correction (drawing y grows upward, SVG y grows downward),
2. display panning (identity at first render),
3. display scaling (uniform fit-to-viewport scale),
4. the initial offset moving the drawing's lower-left corner to the origin.

Panning and scaling carry CSS classes so interactive controls can adjust them.
"""

import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from .entities import Insert
from .errors import GeometryError
from .formatting import format_number, format_pair


@dataclass(frozen=True)
class DrawingRect:
    left: float
    bottom: float
    width: float
    height: float


@dataclass(frozen=True)
class ViewportRect:
    width: float
    height: float
    left: float = 0.0
    bottom: float = 0.0


@dataclass(frozen=True)
class TransformDefaults:
    """Initial pan offset and scale, shared by the static render and interactive controls."""

    x_translate: float
    y_translate: float
    x_scale: float
    y_scale: float


def fit_scale(drawing: DrawingRect, viewport: ViewportRect) -> float:
    """Largest uniform scale at which the drawing rectangle fits inside the viewport."""
    for name, value in (
        ("drawing width", drawing.width),
        ("drawing height", drawing.height),
        ("viewport width", viewport.width),
        ("viewport height", viewport.height),
    ):
        if not math.isfinite(value) or value <= 0.0:
            raise GeometryError(f"Invalid {name}: {value!r}")

    drawing_aspect = drawing.width / drawing.height
    viewport_aspect = viewport.width / viewport.height
    if viewport_aspect < drawing_aspect:
        return viewport.width / drawing.width
    return viewport.height / drawing.height


def compute_transform_defaults(drawing: DrawingRect, viewport: ViewportRect) -> TransformDefaults:
    scale = fit_scale(drawing, viewport)
    return TransformDefaults(-drawing.left, -drawing.bottom, scale, scale)


def build_transform_stack(viewport: ViewportRect, defaults: TransformDefaults, world: ET.Element) -> ET.Element:
    """Wrap ``world`` in the nested transform groups and return the outermost group."""
    offset = ET.Element("g", {
        "transform": f"translate({format_pair(defaults.x_translate, defaults.y_translate)})",
    })
    offset.append(world)

    scale = ET.Element("g", {
        "transform": f"scale({format_pair(defaults.x_scale, defaults.y_scale)})",
        "class": "svg-scale",
    })
    scale.append(ET.Comment(" this group handles initial translation offset "))
    scale.append(offset)

    pan = ET.Element("g", {"transform": "translate(0 0)", "class": "svg-translate"})
    pan.append(ET.Comment(" this group handles display scaling "))
    pan.append(scale)

    axis = ET.Element("g", {"transform": f"translate(0 {format_number(viewport.height)}) scale(1 -1)"})
    axis.append(ET.Comment(" this group handles display panning "))
    axis.append(pan)
    return axis


def insert_transform(insert: Insert) -> str:
    """Placement of a block reference inside its parent's coordinate space."""
    parts = [f"translate({format_pair(insert.location.x, insert.location.y)})"]
    if insert.rotation:
        parts.append(f"rotate({format_number(insert.rotation)})")
    parts.append(f"scale({format_pair(insert.x_scale, insert.y_scale)})")
    if insert.base_point.x or insert.base_point.y:
        parts.append(f"translate({format_pair(-insert.base_point.x, -insert.base_point.y)})")
    return " ".join(parts)
