"""
Tests for error tracking, HTTP error mapping and logging setup.
"""

import sys
import os
import logging

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from dxf_svg.errors import GeometryError, ImageResolutionError
from enhanced_error_handler import (
    ErrorHandler,
    configure_logging,
    create_error_response,
    error_handler,
    handle_conversion_errors,
    log_performance,
)


def test_counts_per_error_class_and_category():
    handler = ErrorHandler()

    assert handler.log_error('geometry_error', GeometryError("empty polyline")) == 1
    assert handler.log_error('geometry_error', ValueError("bad knot")) == 2

    stats = handler.get_error_stats()
    assert stats['error_counts'] == {'geometry_error_GeometryError': 1, 'geometry_error_ValueError': 1}
    assert stats['total_errors'] == 2
    assert stats['last_errors']['geometry_error']['error_message'] == "bad knot"
    assert stats['over_threshold'] == []


def test_threshold_is_reported_once(caplog):
    handler = ErrorHandler({'image_error': 2})

    with caplog.at_level(logging.ERROR, logger='enhanced_error_handler'):
        for _ in range(4):
            handler.log_error('image_error', ImageResolutionError("a.png", "missing"), {'function': 'convert'})

    critical = [record for record in caplog.records if record.levelno == logging.CRITICAL]
    assert len(critical) == 1
    assert "image_error" in critical[0].getMessage()
    assert handler.over_threshold() == ['image_error']
    assert handler.get_error_stats()['last_errors']['image_error']['context'] == {'function': 'convert'}


def test_unknown_category_uses_default_threshold():
    handler = ErrorHandler()
    assert handler.threshold_for('network_error') == 10
    assert handler.threshold_for('file_error') == 15


def test_create_error_response():
    body, status = create_error_response("Nope", 404, {'file_path': 'a.png'})

    assert status == 404
    assert body['success'] is False
    assert body['error'] == "Nope"
    assert body['details'] == {'file_path': 'a.png'}
    assert 'timestamp' in body


@pytest.mark.parametrize("error, status", [
    (GeometryError("zero-sized drawing"), 400),
    (ImageResolutionError("logo.png", "not found"), 502),
    (RuntimeError("boom"), 500),
])
def test_conversion_errors_map_to_status(error, status):
    @handle_conversion_errors
    def route():
        raise error

    before = error_handler.get_error_stats()['total_errors']
    body, code = route()

    assert code == status
    assert body['success'] is False
    assert error_handler.get_error_stats()['total_errors'] == before + 1
    if status == 502:
        assert body['details'] == {'file_path': 'logo.png'}
    if status == 500:
        assert "boom" not in body['error']


def test_successful_route_is_untouched():
    @handle_conversion_errors
    @log_performance
    def route(value):
        return value * 2

    assert route(21) == 42
    assert route.__name__ == 'route'


def test_log_performance_reraises():
    @log_performance
    def broken():
        raise KeyError("missing")

    with pytest.raises(KeyError):
        broken()


def test_configure_logging_writes_file(tmp_path):
    log_file = tmp_path / "service.log"
    try:
        configure_logging('debug', str(log_file))
        assert logging.getLogger().level == logging.DEBUG
        logging.getLogger('dxf_svg.test').info("converted plan.dxf")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "converted plan.dxf" in log_file.read_text()
    finally:
        configure_logging('INFO')
