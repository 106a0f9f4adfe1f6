import logging

# Load environment variables from dxf_svg.env before the configuration is read
from dotenv import load_dotenv
load_dotenv('dxf_svg.env')

from flask import Flask, jsonify

from deployment_config import DeploymentConfig
from dxf_svg_api import register_dxf_svg_api
from enhanced_error_handler import configure_logging, create_error_response

logger = logging.getLogger(__name__)


def create_app(config=None):
    """Build the Flask application with the conversion API registered."""
    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = DeploymentConfig.MAX_CONTENT_LENGTH
    if config:
        app.config.update(config)

    register_dxf_svg_api(app)

    @app.route('/')
    def index():
        return jsonify({
            'service': 'dxf-svg',
            'endpoints': ['/api/dxf-svg/status', '/api/dxf-svg/convert']
        })

    @app.errorhandler(413)
    def file_too_large(error):
        return create_error_response(
            f'File exceeds the {DeploymentConfig.MAX_CONTENT_LENGTH // (1024 * 1024)}MB upload limit', 413
        )

    return app


if __name__ == '__main__':
    configure_logging(DeploymentConfig.LOG_LEVEL, DeploymentConfig.LOG_FILE)

    for problem in DeploymentConfig.validate_config():
        logger.warning(f"Configuration problem: {problem}")

    app = create_app()
    app.run(debug=DeploymentConfig.DEBUG, host=DeploymentConfig.HOST, port=DeploymentConfig.PORT)
