#!/usr/bin/env python3
"""
DXF to SVG - Command Line Converter

Reads a DXF file with ezdxf and writes the model space as an SVG document.

Usage:
    python dxf_to_svg.py input.dxf [output.svg] [width height]

If no output path is given, the SVG is written next to the input with an .svg
extension. The viewport defaults to DEFAULT_VIEWPORT_WIDTH x DEFAULT_VIEWPORT_HEIGHT.
"""

import logging
import os
import sys

from deployment_config import DeploymentConfig
from dxf_svg import (
    ConverterOptions,
    ConversionError,
    DxfToSvgConverter,
    GeometryError,
    ViewportRect,
    create_data_uri_resolver,
    create_file_fetcher,
    load_drawing,
)
from dxf_svg.writer import save_to
from enhanced_error_handler import configure_logging

logger = logging.getLogger(__name__)

USAGE = "Usage: python dxf_to_svg.py input.dxf [output.svg] [width height]"


def parse_arguments(argv):
    """Split ``argv`` into input path, output path and viewport size."""
    if not argv:
        raise ValueError(USAGE)

    input_path = argv[0]
    rest = list(argv[1:])
    output_path = None
    if rest and not _is_number(rest[0]):
        output_path = rest.pop(0)
    if output_path is None:
        output_path = os.path.splitext(input_path)[0] + ".svg"

    if len(rest) == 0:
        width, height = DeploymentConfig.DEFAULT_VIEWPORT_WIDTH, DeploymentConfig.DEFAULT_VIEWPORT_HEIGHT
    elif len(rest) == 2:
        width, height = float(rest[0]), float(rest[1])
    else:
        raise ValueError(USAGE)

    return input_path, output_path, width, height


def _is_number(text):
    try:
        float(text)
        return True
    except ValueError:
        return False


def convert_file(input_path, output_path, width, height, embed_images=False):
    drawing, drawing_rect = load_drawing(input_path)
    options = ConverterOptions(drawing_rect=drawing_rect, viewport_rect=ViewportRect(width, height))
    if embed_images:
        image_root = DeploymentConfig.IMAGE_ROOT or os.path.dirname(os.path.abspath(input_path))
        options.image_href_resolver = create_data_uri_resolver(
            create_file_fetcher(image_root, allow_outside_root=True)
        )

    result = DxfToSvgConverter().convert_sync(drawing, options)
    save_to(result.svg, output_path)
    logger.info(f"Wrote {output_path} ({len(result.layer_names)} layer(s))")
    return result


def main(argv=None):
    """Main function to run the converter."""
    configure_logging(DeploymentConfig.LOG_LEVEL, DeploymentConfig.LOG_FILE)
    argv = sys.argv[1:] if argv is None else argv

    try:
        input_path, output_path, width, height = parse_arguments(argv)
    except ValueError as e:
        print(e)
        return 2

    if not os.path.exists(input_path):
        print(f"✗ File not found: {input_path}")
        print(USAGE)
        return 1

    try:
        convert_file(input_path, output_path, width, height, DeploymentConfig.EMBED_IMAGES)
    except (GeometryError, ConversionError, IOError) as e:
        logger.error(f"Conversion of {input_path} failed: {e}")
        return 1

    print(f"✓ Converted {input_path} -> {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
