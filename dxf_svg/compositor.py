"""
Scene compositor: assembles the SVG document for a whole drawing.

Layers are emitted in name order, twice: first a group per layer holding only
its images, then a group per layer holding everything else, so lines drawn on
top of raster images stay visible.

Image references are resolved asynchronously. To keep the output in document
order no matter which resolution finishes first, every image path in the
drawing (including inside block references) is collected up front, all of them
are resolved concurrently, and the tree is then built synchronously from the
resolved map.
"""

import asyncio
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .colors import ColorLookup, default_color_lookup, to_rgb_string
from .elements import SvgElementBuilder
from .entities import Drawing, Image, Insert
from .errors import ConversionError, ImageResolutionError
from .formatting import format_number
from .html_wrapper import render_html_div
from .resolvers import ImageHrefResolver, identity_resolver
from .transforms import (
    DrawingRect,
    TransformDefaults,
    ViewportRect,
    build_transform_stack,
    compute_transform_defaults,
)
from .writer import to_string

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


@dataclass
class ConverterOptions:
    drawing_rect: DrawingRect
    viewport_rect: ViewportRect
    svg_id: Optional[str] = None
    image_href_resolver: Optional[ImageHrefResolver] = None
    color_lookup: ColorLookup = field(default=default_color_lookup)

    async def resolve_image_href(self, path: str) -> str:
        resolver = self.image_href_resolver or identity_resolver
        return await resolver(path)


@dataclass
class ConvertedDrawing:
    """The SVG tree plus the values an embedding page needs to drive pan/zoom controls."""

    svg: ET.Element
    layer_names: List[str]
    defaults: TransformDefaults
    svg_id: Optional[str] = None

    @property
    def is_embedded(self) -> bool:
        return bool(self.svg_id and self.svg_id.strip())

    def to_markup(self) -> str:
        """Serialized SVG, or the HTML wrapper around it when an embedding id was given."""
        svg_markup = to_string(self.svg)
        if not self.is_embedded:
            return svg_markup
        return render_html_div(svg_markup, self.svg_id, self.layer_names, self.defaults)


def iter_image_paths(entities: Iterable) -> Iterable[str]:
    for entity in entities:
        if isinstance(entity, Image):
            yield entity.file_path
        elif isinstance(entity, Insert):
            yield from iter_image_paths(entity.entities)


async def resolve_image_hrefs(drawing: Drawing, options: ConverterOptions) -> Dict[str, str]:
    """Resolve every distinct image path concurrently; any failure aborts the conversion."""
    paths = list(dict.fromkeys(iter_image_paths(drawing.entities)))
    if not paths:
        return {}

    async def resolve(path: str) -> str:
        try:
            return await options.resolve_image_href(path)
        except ConversionError:
            raise
        except Exception as e:
            raise ImageResolutionError(path, str(e)) from e

    tasks = [asyncio.ensure_future(resolve(path)) for path in paths]
    try:
        hrefs = await asyncio.gather(*tasks)
    except Exception:
        # stop the resolutions still running before the error propagates
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    logger.debug(f"Resolved {len(paths)} image reference(s)")
    return dict(zip(paths, hrefs))


class DxfToSvgConverter:
    """Converts a drawing model into an SVG document tree."""

    async def convert(self, drawing: Drawing, options: ConverterOptions) -> ConvertedDrawing:
        defaults = compute_transform_defaults(options.drawing_rect, options.viewport_rect)
        layers = drawing.layers_in_order()
        image_hrefs = await resolve_image_hrefs(drawing, options)
        builder = SvgElementBuilder(image_hrefs, options.color_lookup)

        world = ET.Element("g")

        # do images first so lines and text appear on top...
        for layer in layers:
            world.append(ET.Comment(f" layer '{layer.name}' images "))
            group = self._layer_group(layer, options)
            for entity in drawing.entities_on_layer(layer.name):
                if isinstance(entity, Image):
                    element = builder.build(entity)
                    if element is not None:
                        group.append(element)
            if len(group):
                world.append(group)

        # ...now do everything else
        element_count = 0
        for layer in layers:
            world.append(ET.Comment(f" layer '{layer.name}' "))
            group = self._layer_group(layer, options)
            for entity in drawing.entities_on_layer(layer.name):
                if isinstance(entity, Image):
                    continue
                element = builder.build(entity)
                if element is not None:
                    group.append(element)
                    element_count += 1
            world.append(group)

        root = self._svg_root(options.viewport_rect)
        root.append(ET.Comment(" this group corrects for the y-axis going in different directions "))
        root.append(build_transform_stack(options.viewport_rect, defaults, world))

        logger.info(
            f"Converted {element_count} element(s) and {len(image_hrefs)} image(s) "
            f"on {len(layers)} layer(s), scale {format_number(defaults.x_scale)}"
        )
        return ConvertedDrawing(
            svg=root,
            layer_names=[layer.name for layer in layers],
            defaults=defaults,
            svg_id=options.svg_id,
        )

    def convert_sync(self, drawing: Drawing, options: ConverterOptions) -> ConvertedDrawing:
        """Run :meth:`convert` on a private event loop, for callers without one."""
        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(self.convert(drawing, options))
        finally:
            loop.close()

    @staticmethod
    def _layer_group(layer, options: ConverterOptions) -> ET.Element:
        color = to_rgb_string(layer.color, options.color_lookup)
        return ET.Element("g", {
            "stroke": color,
            "fill": color,
            "class": f"dxf-layer {layer.name}",
        })

    @staticmethod
    def _svg_root(viewport: ViewportRect) -> ET.Element:
        width = format_number(viewport.width)
        height = format_number(viewport.height)
        return ET.Element("svg", {
            "xmlns": SVG_NAMESPACE,
            "width": width,
            "height": height,
            "viewBox": f"{format_number(viewport.left)} {format_number(viewport.bottom)} {width} {height}",
            "version": "1.1",
            "class": "dxf-drawing",
        })


async def convert_drawing(drawing: Drawing, options: ConverterOptions) -> ConvertedDrawing:
    return await DxfToSvgConverter().convert(drawing, options)
