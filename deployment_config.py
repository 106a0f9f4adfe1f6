"""
Deployment Configuration for the DXF to SVG conversion service
Values are read from the environment (see dxf_svg.env) with sensible defaults
"""

import os
from pathlib import Path


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class DeploymentConfig:
    """Conversion service configuration"""

    # Server Configuration
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', 5000))
    DEBUG = _env_bool('DEBUG', False)

    # File Upload Configuration
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 50 * 1024 * 1024))  # 50MB max file size
    ALLOWED_EXTENSIONS = {'dxf'}

    # Conversion Configuration
    DEFAULT_VIEWPORT_WIDTH = float(os.environ.get('DEFAULT_VIEWPORT_WIDTH', 800))
    DEFAULT_VIEWPORT_HEIGHT = float(os.environ.get('DEFAULT_VIEWPORT_HEIGHT', 600))
    IMAGE_ROOT = os.environ.get('IMAGE_ROOT') or None  # relative IMAGE paths are read from here
    EMBED_IMAGES = _env_bool('EMBED_IMAGES', False)

    # Logging Configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE') or None

    @classmethod
    def allowed_file(cls, filename):
        return '.' in filename and filename.rsplit('.', 1)[1].lower() in cls.ALLOWED_EXTENSIONS

    @classmethod
    def validate_config(cls):
        """Validate configuration settings"""
        errors = []

        if not 0 < cls.PORT < 65536:
            errors.append(f"PORT out of range: {cls.PORT}")

        if cls.DEFAULT_VIEWPORT_WIDTH <= 0 or cls.DEFAULT_VIEWPORT_HEIGHT <= 0:
            errors.append(
                f"Default viewport must be positive: {cls.DEFAULT_VIEWPORT_WIDTH}x{cls.DEFAULT_VIEWPORT_HEIGHT}"
            )

        if cls.IMAGE_ROOT and not Path(cls.IMAGE_ROOT).is_dir():
            errors.append(f"IMAGE_ROOT is not a directory: {cls.IMAGE_ROOT}")

        if cls.LOG_LEVEL.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"Unknown LOG_LEVEL: {cls.LOG_LEVEL}")

        return errors


# Environment variables template
ENV_TEMPLATE = """
# DXF to SVG service environment variables
# Copy these to your environment or dxf_svg.env

# Server Configuration
PORT=5000
HOST=0.0.0.0
DEBUG=false

# Conversion
DEFAULT_VIEWPORT_WIDTH=800
DEFAULT_VIEWPORT_HEIGHT=600
EMBED_IMAGES=false
# IMAGE_ROOT=images

# Logging
LOG_LEVEL=INFO
# LOG_FILE=dxf_svg.log
"""
