"""
Exceptions raised while converting a drawing to SVG.

Unsupported entity kinds are not errors; they simply produce no element.
"""


class GeometryError(Exception):
    """Malformed geometric input (empty polyline, invalid spline, zero-sized rectangle, ...)."""
    pass


class ConversionError(Exception):
    """A conversion could not be completed."""
    pass


class ImageResolutionError(ConversionError):
    """An image reference could not be resolved; the whole conversion is aborted."""

    def __init__(self, file_path: str, message: str):
        super().__init__(f"Failed to resolve image '{file_path}': {message}")
        self.file_path = file_path
