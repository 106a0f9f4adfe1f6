"""
DXF to SVG conversion package.

This package turns a read-only 2D drawing model (layers plus arcs, circles,
ellipses, lines, polylines, images, block inserts and splines) into an SVG
document, optionally wrapped in an HTML fragment with pan/zoom controls.

Key entry points:
- DxfToSvgConverter.convert(drawing, options): async conversion to a ConvertedDrawing.
- load_drawing(path): read a DXF file with ezdxf into the drawing model.
- create_data_uri_resolver(fetch_bytes): embed referenced images as data URIs.
"""

from .compositor import ConvertedDrawing, ConverterOptions, DxfToSvgConverter, convert_drawing
from .dxf_reader import drawing_from_document, drawing_rect_from_document, load_drawing
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
from .errors import ConversionError, GeometryError, ImageResolutionError
from .resolvers import (
    create_data_uri_resolver,
    create_file_fetcher,
    create_http_fetcher,
    identity_resolver,
)
from .transforms import DrawingRect, TransformDefaults, ViewportRect

__all__ = [
    "Arc",
    "Circle",
    "ConversionError",
    "ConvertedDrawing",
    "ConverterOptions",
    "Drawing",
    "DrawingRect",
    "DxfToSvgConverter",
    "Ellipse",
    "GeometryError",
    "Image",
    "ImageResolutionError",
    "Insert",
    "Layer",
    "Line",
    "Polyline",
    "PolylineVertex",
    "Spline",
    "TransformDefaults",
    "UnsupportedEntity",
    "ViewportRect",
    "convert_drawing",
    "create_data_uri_resolver",
    "create_file_fetcher",
    "create_http_fetcher",
    "drawing_from_document",
    "drawing_rect_from_document",
    "identity_resolver",
    "load_drawing",
]
