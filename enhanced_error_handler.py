"""
Error Handling Module for the DXF to SVG conversion service
Provides logging setup, error tracking and HTTP error mapping for conversion routes
"""

import logging
import traceback
import sys
from typing import Dict, Any, Optional
from functools import wraps
from datetime import datetime

from dxf_svg.errors import GeometryError, ImageResolutionError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def configure_logging(level: str = 'INFO', log_file: Optional[str] = None):
    """Configure root logging once: console handler plus optional file handler"""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )


class ErrorHandler:
    """Counts conversion failures per category and flags categories that keep failing"""

    DEFAULT_THRESHOLDS = {
        'geometry_error': 20,
        'image_error': 10,
        'file_error': 15,
        'processing_error': 10
    }

    def __init__(self, thresholds: Optional[Dict[str, int]] = None):
        self.error_counts = {}
        self.category_counts = {}
        self.error_thresholds = dict(thresholds or self.DEFAULT_THRESHOLDS)
        self.last_errors = {}

    def log_error(self, error_type: str, error: Exception, context: Dict[str, Any] = None) -> int:
        """Log error with context, returns how often its category has failed"""
        error_key = f"{error_type}_{type(error).__name__}"
        self.error_counts[error_key] = self.error_counts.get(error_key, 0) + 1
        count = self.category_counts.get(error_type, 0) + 1
        self.category_counts[error_type] = count

        self.last_errors[error_type] = {
            'timestamp': datetime.now().isoformat(),
            'error_class': type(error).__name__,
            'error_message': str(error),
            'context': context or {}
        }

        logger.error(f"Error {error_key}: {error} (count {self.error_counts[error_key]})")
        logger.debug(traceback.format_exc())

        # warn once, when the threshold is first reached
        if count == self.threshold_for(error_type):
            logger.critical(f"Error threshold exceeded for {error_type}: {count} occurrences")
        return count

    def threshold_for(self, error_type: str) -> int:
        return self.error_thresholds.get(error_type, 10)

    def over_threshold(self):
        return sorted(
            error_type for error_type, count in self.category_counts.items()
            if count >= self.threshold_for(error_type)
        )

    def get_error_stats(self) -> Dict[str, Any]:
        return {
            'error_counts': dict(self.error_counts),
            'total_errors': sum(self.error_counts.values()),
            'error_thresholds': dict(self.error_thresholds),
            'over_threshold': self.over_threshold(),
            'last_errors': dict(self.last_errors)
        }


# Global error handler instance
error_handler = ErrorHandler()


def create_error_response(error_message: str, error_code: int = 500, details: Dict[str, Any] = None) -> tuple:
    """Create standardized error response"""
    response = {
        'success': False,
        'error': error_message,
        'timestamp': datetime.now().isoformat(),
        'details': details or {}
    }
    return response, error_code


def handle_conversion_errors(func):
    """Map conversion failures of a Flask route onto HTTP error responses"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except GeometryError as e:
            error_handler.log_error('geometry_error', e, {'function': func.__name__})
            return create_error_response(f"Invalid drawing geometry: {e}", 400)
        except ImageResolutionError as e:
            error_handler.log_error('image_error', e, {'function': func.__name__})
            return create_error_response(str(e), 502, {'file_path': e.file_path})
        except Exception as e:
            error_handler.log_error('processing_error', e, {'function': func.__name__})
            return create_error_response('Conversion failed', 500)
    return wrapper


def log_performance(func):
    """Decorator to log function performance"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = datetime.now()
        try:
            result = func(*args, **kwargs)
            duration = (datetime.now() - start_time).total_seconds()
            logger.info(f"Function {func.__name__} completed in {duration:.2f}s")
            return result
        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            logger.error(f"Function {func.__name__} failed after {duration:.2f}s: {e}")
            raise
    return wrapper
