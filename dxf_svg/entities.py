"""
Read-only drawing model consumed by the converter.

Every entity is a frozen dataclass; together they form the closed ``Entity`` union.
Points are ``ezdxf.math.Vec2`` instances, but plain ``(x, y)`` tuples are accepted
by the constructors and coerced.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from ezdxf.math import Vec2

BYBLOCK = 0
BYLAYER = 256


def _coerce_point(instance, name: str) -> None:
    value = getattr(instance, name)
    if not isinstance(value, Vec2):
        object.__setattr__(instance, name, Vec2(value))


@dataclass(frozen=True)
class PolylineVertex:
    x: float
    y: float
    bulge: float = 0.0


@dataclass(frozen=True)
class Arc:
    center: Vec2
    radius: float
    start_angle: float
    end_angle: float
    thickness: float = 0.0
    layer: str = "0"
    color: Optional[int] = None

    def __post_init__(self):
        _coerce_point(self, "center")


@dataclass(frozen=True)
class Circle:
    center: Vec2
    radius: float
    thickness: float = 0.0
    layer: str = "0"
    color: Optional[int] = None

    def __post_init__(self):
        _coerce_point(self, "center")


@dataclass(frozen=True)
class Ellipse:
    center: Vec2
    major_axis: Vec2
    minor_axis_ratio: float
    start_param: float = 0.0
    end_param: float = math.tau
    layer: str = "0"
    color: Optional[int] = None

    def __post_init__(self):
        _coerce_point(self, "center")
        _coerce_point(self, "major_axis")

    @property
    def minor_axis(self) -> Vec2:
        return self.major_axis.orthogonal(ccw=True) * self.minor_axis_ratio


@dataclass(frozen=True)
class Line:
    p1: Vec2
    p2: Vec2
    thickness: float = 0.0
    layer: str = "0"
    color: Optional[int] = None

    def __post_init__(self):
        _coerce_point(self, "p1")
        _coerce_point(self, "p2")


@dataclass(frozen=True)
class Polyline:
    """Lightweight and elevation-bearing polylines, reduced to (x, y, bulge) vertices."""

    vertices: Tuple[PolylineVertex, ...]
    is_closed: bool = False
    layer: str = "0"
    color: Optional[int] = None

    def __post_init__(self):
        vertices = []
        for vertex in self.vertices:
            if isinstance(vertex, PolylineVertex):
                vertices.append(vertex)
            else:
                vertices.append(PolylineVertex(*vertex))
        object.__setattr__(self, "vertices", tuple(vertices))


@dataclass(frozen=True)
class Image:
    location: Vec2
    u_vector: Vec2
    v_vector: Vec2
    image_size: Vec2
    file_path: str
    layer: str = "0"
    color: Optional[int] = None

    def __post_init__(self):
        for name in ("location", "u_vector", "v_vector", "image_size"):
            _coerce_point(self, name)


@dataclass(frozen=True)
class Insert:
    """A block reference; ``entities`` live in the block's own coordinate space."""

    location: Vec2
    x_scale: float = 1.0
    y_scale: float = 1.0
    name: str = ""
    entities: Tuple["Entity", ...] = ()
    rotation: float = 0.0
    base_point: Vec2 = Vec2(0, 0)
    layer: str = "0"
    color: Optional[int] = None

    def __post_init__(self):
        _coerce_point(self, "location")
        _coerce_point(self, "base_point")
        object.__setattr__(self, "entities", tuple(self.entities))


@dataclass(frozen=True)
class Spline:
    degree: int
    control_points: Tuple[Vec2, ...]
    knot_values: Tuple[float, ...] = ()
    layer: str = "0"
    color: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "control_points", tuple(Vec2(p) for p in self.control_points))
        object.__setattr__(self, "knot_values", tuple(float(k) for k in self.knot_values))


@dataclass(frozen=True)
class UnsupportedEntity:
    """Source entity kind without an SVG counterpart (TEXT, HATCH, ...)."""

    kind: str
    layer: str = "0"
    color: Optional[int] = None


Entity = Union[Arc, Circle, Ellipse, Line, Polyline, Image, Insert, Spline, UnsupportedEntity]


@dataclass(frozen=True)
class Layer:
    name: str
    color: Optional[int] = None


@dataclass(frozen=True)
class Drawing:
    layers: Tuple[Layer, ...] = ()
    entities: Tuple[Entity, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "layers", tuple(self.layers))
        object.__setattr__(self, "entities", tuple(self.entities))

    def layers_in_order(self) -> List[Layer]:
        """Declared layers plus any layer only referenced by an entity, sorted by name."""
        layers = {layer.name: layer for layer in self.layers}
        for entity in self.entities:
            if entity.layer not in layers:
                layers[entity.layer] = Layer(entity.layer)
        return [layers[name] for name in sorted(layers)]

    def entities_on_layer(self, layer_name: str) -> Iterable[Entity]:
        return (entity for entity in self.entities if entity.layer == layer_name)
