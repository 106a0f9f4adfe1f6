"""
Curve compiler: turns CAD curve descriptions into SVG path segments.

Polyline bulges, elliptical arcs and B-splines have no direct SVG equivalent,
so each is rebuilt from ``M``/``L``/``A``/``C`` commands in drawing coordinates.
The y-axis flip is applied later by the transform stack, which is why arcs that
run counter-clockwise in the drawing are emitted with a positive sweep flag.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from ezdxf.math import Vec2

from .entities import Arc, Ellipse, Image, PolylineVertex, Spline
from .errors import GeometryError
from .path import ArcTo, CubicBezierTo, LineTo, MoveTo, Path, PathSegment
from .spline import Bezier2, Spline2

CLOSE_TOLERANCE = 1e-9
ONE_DEGREE = math.pi / 180.0

Vertex = Tuple[float, float, float]


def is_close(a: float, b: float, tol: float = CLOSE_TOLERANCE) -> bool:
    return abs(a - b) <= tol


def is_full_turn(start_param: float, end_param: float) -> bool:
    """True when a parameter range is exactly one revolution starting at zero."""
    return is_close(start_param, 0.0) and is_close(end_param, math.tau)


def path_from_ellipse(
    center,
    major_axis,
    minor_axis_ratio: float,
    start_param: float,
    end_param: float,
) -> Path:
    """
    Build an elliptical arc path running counter-clockwise from ``start_param`` to ``end_param``.

    Args:
        center: Ellipse center.
        major_axis: Vector from the center to the end of the major axis; its direction
            carries the ellipse rotation.
        minor_axis_ratio: Minor axis length divided by major axis length.
        start_param: Start parameter in radians.
        end_param: End parameter in radians; wrapped forward past ``start_param``.
    """
    center = Vec2(center)
    major = Vec2(major_axis)
    minor = major.orthogonal(ccw=True) * minor_axis_ratio

    while end_param < start_param:
        end_param += math.tau

    rx = major.magnitude
    ry = rx * minor_axis_ratio
    rotation = math.degrees(major.angle)

    def point_at(param: float) -> Vec2:
        return center + major * math.cos(param) + minor * math.sin(param)

    start = point_at(start_param)
    segments: List[PathSegment] = [MoveTo(start.x, start.y)]

    enclosed = end_param - start_param
    if abs(enclosed - math.pi) <= ONE_DEGREE or enclosed >= math.tau - ONE_DEGREE:
        # near half and full turns are split so the large-arc flag is never ambiguous
        middle = point_at((start_param + end_param) / 2.0)
        end = point_at(end_param)
        segments.append(ArcTo(rx, ry, rotation, False, True, middle.x, middle.y))
        segments.append(ArcTo(rx, ry, rotation, False, True, end.x, end.y))
    else:
        end = point_at(end_param)
        segments.append(ArcTo(rx, ry, rotation, enclosed > math.pi, True, end.x, end.y))

    return Path(segments)


def path_from_arc(arc: Arc) -> Path:
    return path_from_ellipse(
        arc.center,
        Vec2(arc.radius, 0.0),
        1.0,
        math.radians(arc.start_angle),
        math.radians(arc.end_angle),
    )


def path_from_ellipse_entity(ellipse: Ellipse) -> Path:
    return path_from_ellipse(
        ellipse.center,
        ellipse.major_axis,
        ellipse.minor_axis_ratio,
        ellipse.start_param,
        ellipse.end_param,
    )


def normalize_vertices(vertices: Iterable) -> List[Vertex]:
    """
    Reduce polyline vertices of any supported shape to ``(x, y, bulge)`` triples.

    Accepts ``PolylineVertex``, ``(x, y)``, ``(x, y, bulge)``, the
    ``(x, y, start_width, end_width, bulge)`` tuples of lightweight polylines and
    ezdxf ``VERTEX`` entities carrying ``dxf.location`` and ``dxf.bulge``.
    """
    normalized = []
    for vertex in vertices:
        if isinstance(vertex, PolylineVertex):
            normalized.append((vertex.x, vertex.y, vertex.bulge))
        elif hasattr(vertex, "dxf"):
            location = vertex.dxf.location
            normalized.append((location.x, location.y, vertex.dxf.get("bulge", 0.0)))
        elif len(vertex) == 2:
            normalized.append((vertex[0], vertex[1], 0.0))
        elif len(vertex) == 5:
            normalized.append((vertex[0], vertex[1], vertex[4]))
        else:
            normalized.append((vertex[0], vertex[1], vertex[2]))
    return [(float(x), float(y), float(bulge)) for x, y, bulge in normalized]


def segment_from_vertices(last: Vertex, following: Vertex) -> PathSegment:
    """
    Segment from ``last`` to ``following`` using the bulge stored on ``last``.

    The bulge is tan(θ/4) of the included angle θ; its sign picks the direction.
    Given the chord of length d, the radius is the hypotenuse of the right
    triangle formed by the center, the chord midpoint and one end point:
    r = (d / 2) / sin(θ / 2).
    """
    last_x, last_y, bulge = last
    next_x, next_y = following[0], following[1]
    distance = math.hypot(next_x - last_x, next_y - last_y)
    if is_close(bulge, 0.0) or is_close(distance, 0.0):
        # line or a really short arc
        return LineTo(next_x, next_y)

    included_angle = math.atan(abs(bulge)) * 4.0
    is_large_arc = included_angle > math.pi
    is_counter_clockwise = bulge > 0.0
    radius = (distance / 2.0) / math.sin(included_angle / 2.0)
    return ArcTo(radius, radius, 0.0, is_large_arc, is_counter_clockwise, next_x, next_y)


def path_from_polyline(polyline) -> Path:
    """Path through every vertex, plus the closing edge when the polyline is closed."""
    vertices = normalize_vertices(polyline.vertices)
    if not vertices:
        raise GeometryError("Polyline has no vertices")

    first = vertices[0]
    segments: List[PathSegment] = [MoveTo(first[0], first[1])]
    last = first
    for following in vertices[1:]:
        segments.append(segment_from_vertices(last, following))
        last = following

    if polyline.is_closed:
        segments.append(segment_from_vertices(last, first))

    return Path(segments)


def path_from_beziers(beziers: Sequence[Bezier2]) -> Path:
    """Chain Bezier curves, starting a new subpath wherever the chain is broken."""
    if not beziers:
        raise GeometryError("Cannot build a path from an empty Bezier list")

    first = beziers[0]
    segments: List[PathSegment] = [MoveTo(first.start.x, first.start.y)]
    last = first.start
    for bezier in beziers:
        if not bezier.start.isclose(last, abs_tol=CLOSE_TOLERANCE):
            segments.append(MoveTo(bezier.start.x, bezier.start.y))
        segments.append(
            CubicBezierTo(
                bezier.control1.x, bezier.control1.y,
                bezier.control2.x, bezier.control2.y,
                bezier.end.x, bezier.end.y,
            )
        )
        last = bezier.end

    return Path(segments)


def path_from_spline(spline: Spline) -> Path:
    beziers = Spline2(spline.degree, spline.control_points, spline.knot_values).to_beziers()
    return path_from_beziers(beziers)


@dataclass(frozen=True)
class ImagePlacement:
    width: float
    height: float
    rotation: float
    insert_point: Vec2

    @property
    def display_rotation_degrees(self) -> float:
        # rotation is applied after the local y-flip, so it runs the other way
        return -math.degrees(self.rotation)


def image_placement(image: Image) -> ImagePlacement:
    """
    Size, rotation and anchor of a raster image.

    SVG anchors an image at its top-left corner while the drawing anchors it at the
    bottom-left, so the anchor is moved ``height`` units along the image's up vector.
    """
    width = image.u_vector.magnitude * image.image_size.x
    height = image.v_vector.magnitude * image.image_size.y
    rotation = math.atan2(image.u_vector.y, image.u_vector.x)
    up = Vec2(-math.sin(rotation), math.cos(rotation)) * height
    return ImagePlacement(width, height, rotation, image.location + up)
