"""
HTML embedding of a converted drawing.

When a drawing is converted for embedding in a page, the SVG is wrapped in a
``div`` together with its stylesheet and a small script providing zoom, pan and
layer visibility controls. The script is initialised with the same translate and
scale values used by the static render so both agree on the initial view.
"""

from typing import Iterable

from jinja2 import Environment, PackageLoader, select_autoescape

from .formatting import format_number
from .transforms import TransformDefaults

_environment = Environment(
    loader=PackageLoader("dxf_svg", "templates"),
    autoescape=select_autoescape(["html"]),
    keep_trailing_newline=True,
)


def render_html_div(svg_markup: str, svg_id: str, layer_names: Iterable[str], defaults: TransformDefaults) -> str:
    template = _environment.get_template("drawing.html")
    return template.render(
        svg_id=svg_id,
        svg_markup=svg_markup,
        layer_names=list(layer_names),
        default_x_translate=format_number(defaults.x_translate),
        default_y_translate=format_number(defaults.y_translate),
        default_x_scale=format_number(defaults.x_scale),
        default_y_scale=format_number(defaults.y_scale),
    )
