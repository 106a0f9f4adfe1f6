"""
SVG path commands produced by the curve compiler.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

from .errors import GeometryError
from .formatting import format_number


def _flag(value: bool) -> str:
    return "1" if value else "0"


@dataclass(frozen=True)
class MoveTo:
    x: float
    y: float

    def to_svg(self) -> str:
        return f"M {format_number(self.x)} {format_number(self.y)}"


@dataclass(frozen=True)
class LineTo:
    x: float
    y: float

    def to_svg(self) -> str:
        return f"L {format_number(self.x)} {format_number(self.y)}"


@dataclass(frozen=True)
class ArcTo:
    rx: float
    ry: float
    x_axis_rotation: float
    is_large_arc: bool
    is_sweep_positive: bool
    x: float
    y: float

    def to_svg(self) -> str:
        return (
            f"A {format_number(self.rx)} {format_number(self.ry)} "
            f"{format_number(self.x_axis_rotation)} "
            f"{_flag(self.is_large_arc)} {_flag(self.is_sweep_positive)} "
            f"{format_number(self.x)} {format_number(self.y)}"
        )


@dataclass(frozen=True)
class CubicBezierTo:
    c1x: float
    c1y: float
    c2x: float
    c2y: float
    x: float
    y: float

    def to_svg(self) -> str:
        return (
            f"C {format_number(self.c1x)} {format_number(self.c1y)} "
            f"{format_number(self.c2x)} {format_number(self.c2y)} "
            f"{format_number(self.x)} {format_number(self.y)}"
        )


PathSegment = Union[MoveTo, LineTo, ArcTo, CubicBezierTo]


class Path:
    """An ordered, immutable run of path segments that always starts with a MoveTo."""

    __slots__ = ("_segments",)

    def __init__(self, segments: Iterable[PathSegment]):
        segments = tuple(segments)
        if not segments:
            raise GeometryError("A path needs at least one segment")
        if not isinstance(segments[0], MoveTo):
            raise GeometryError(f"A path must start with MoveTo, got {type(segments[0]).__name__}")
        self._segments = segments

    @property
    def segments(self) -> Tuple[PathSegment, ...]:
        return self._segments

    def __iter__(self) -> Iterator[PathSegment]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index):
        return self._segments[index]

    def __eq__(self, other) -> bool:
        return isinstance(other, Path) and self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)

    def __repr__(self) -> str:
        return f"Path({list(self._segments)!r})"

    def to_svg(self) -> str:
        """Value for the ``d`` attribute."""
        return " ".join(segment.to_svg() for segment in self._segments)

    __str__ = to_svg
