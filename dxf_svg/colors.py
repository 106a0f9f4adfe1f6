"""
AutoCAD color index (ACI) resolution.

Only the indices 1..255 name a real color. 0 (BYBLOCK), 256 (BYLAYER) and
missing colors defer to the enclosing group and render as automatic black when
they have to be spelled out.
"""

from typing import Callable, Optional, Tuple

from ezdxf.colors import aci2rgb

RGB = Tuple[int, int, int]
ColorLookup = Callable[[int], RGB]

AUTO_COLOR = "#000000"


def default_color_lookup(index: int) -> RGB:
    r, g, b = aci2rgb(index)
    return r, g, b


def is_index_color(color: Optional[int]) -> bool:
    return color is not None and 1 <= color <= 255


def to_rgb_string(color: Optional[int], lookup: ColorLookup = default_color_lookup) -> str:
    """``#RRGGBB`` for an index color, automatic black for anything else."""
    if not is_index_color(color):
        return AUTO_COLOR
    r, g, b = lookup(color)
    return f"#{r:02X}{g:02X}{b:02X}"
