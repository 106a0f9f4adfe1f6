"""
DXF to SVG API - Flask blueprint exposing the converter over HTTP.

Endpoints:
- GET  /api/dxf-svg/status   service information and supported entity kinds
- POST /api/dxf-svg/convert  multipart DXF upload, returns SVG (or an HTML fragment
  when an svg_id is given)
"""

import asyncio
import logging
import os
import tempfile

import ezdxf
from flask import Blueprint, Response, jsonify, request

from deployment_config import DeploymentConfig
from dxf_svg import (
    ConverterOptions,
    DxfToSvgConverter,
    ViewportRect,
    create_data_uri_resolver,
    create_file_fetcher,
    drawing_from_document,
    drawing_rect_from_document,
)
from enhanced_error_handler import (
    create_error_response,
    error_handler,
    handle_conversion_errors,
    log_performance,
)

logger = logging.getLogger(__name__)

SUPPORTED_ENTITIES = [
    'ARC', 'CIRCLE', 'ELLIPSE', 'IMAGE', 'INSERT', 'LINE', 'LWPOLYLINE', 'POLYLINE', 'SPLINE'
]

# Create Blueprint for DXF to SVG API
dxf_svg_bp = Blueprint('dxf_svg', __name__, url_prefix='/api/dxf-svg')


@dxf_svg_bp.route('/status', methods=['GET'])
def get_status():
    """Service information for health checks and clients."""
    return jsonify({
        'success': True,
        'service': 'dxf-svg',
        'ezdxf_version': ezdxf.__version__,
        'supported_entities': SUPPORTED_ENTITIES,
        'default_viewport': {
            'width': DeploymentConfig.DEFAULT_VIEWPORT_WIDTH,
            'height': DeploymentConfig.DEFAULT_VIEWPORT_HEIGHT
        },
        'embed_images': DeploymentConfig.EMBED_IMAGES,
        'errors': error_handler.get_error_stats()
    })


def _form_float(name, default):
    value = request.form.get(name)
    if value is None or value == '':
        return default
    return float(value)


def _form_bool(name, default):
    value = request.form.get(name)
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _read_document(file_data):
    # ezdxf detects the encoding itself when reading from disk
    fd, temp_path = tempfile.mkstemp(suffix='.dxf')
    try:
        with os.fdopen(fd, 'wb') as temp_file:
            temp_file.write(file_data)
        return ezdxf.readfile(temp_path)
    finally:
        os.unlink(temp_path)


@dxf_svg_bp.route('/convert', methods=['POST'])
@handle_conversion_errors
@log_performance
def convert_dxf_to_svg():
    """
    Convert an uploaded DXF file to SVG.

    Expected: multipart/form-data with a 'file' field containing the DXF, and the
    optional fields 'width', 'height', 'svg_id' and 'embed_images'.
    """
    if 'file' not in request.files:
        return create_error_response('No file provided', 400)

    file = request.files['file']
    if not file.filename:
        return create_error_response('No file selected', 400)
    if not DeploymentConfig.allowed_file(file.filename):
        return create_error_response(f'Unsupported file type: {file.filename}', 400)

    try:
        width = _form_float('width', DeploymentConfig.DEFAULT_VIEWPORT_WIDTH)
        height = _form_float('height', DeploymentConfig.DEFAULT_VIEWPORT_HEIGHT)
    except ValueError:
        return create_error_response('Viewport width and height must be numbers', 400)

    svg_id = request.form.get('svg_id') or None
    # clients may opt out of embedding, never into it; files are only read under IMAGE_ROOT
    embed_images = (DeploymentConfig.EMBED_IMAGES and DeploymentConfig.IMAGE_ROOT is not None
                    and _form_bool('embed_images', True))

    try:
        doc = _read_document(file.read())
    except (IOError, ezdxf.DXFStructureError) as e:
        error_handler.log_error('file_error', e, {'filename': file.filename})
        return create_error_response(f'Invalid DXF file: {e}', 400)

    drawing = drawing_from_document(doc)
    options = ConverterOptions(
        drawing_rect=drawing_rect_from_document(doc),
        viewport_rect=ViewportRect(width, height),
        svg_id=svg_id,
    )
    if embed_images:
        options.image_href_resolver = create_data_uri_resolver(
            create_file_fetcher(DeploymentConfig.IMAGE_ROOT)
        )

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        result = loop.run_until_complete(DxfToSvgConverter().convert(drawing, options))
    finally:
        asyncio.set_event_loop(None)
        loop.close()

    logger.info(f"Converted {file.filename} with {len(result.layer_names)} layer(s)")
    mimetype = 'text/html' if result.is_embedded else 'image/svg+xml'
    return Response(result.to_markup(), mimetype=mimetype)


def register_dxf_svg_api(app):
    """Register the DXF to SVG API with the Flask app."""
    app.register_blueprint(dxf_svg_bp)
    logger.info("DXF to SVG API registered successfully")
