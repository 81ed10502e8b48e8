import io
import json
import logging

from widgetbridge.app import create_app
from widgetbridge.common.config import BridgeConfig
from widgetbridge.common.logging import JsonLogFormatter, bind_request_id, get_request_id, log_event


def _capture_logger(name: str):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonLogFormatter(service="widgetbridge-test", env="test", version="0.0.1"))
    logger = logging.getLogger(name)
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger, stream


def test_log_event_emits_one_json_line_with_core_fields():
    logger, stream = _capture_logger("widgetbridge.test.core")

    log_event(logger, "callback.dropped", severity="INFO", widget="acc", reason="stale_index_reference")

    lines = stream.getvalue().strip().splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    for key in ("timestamp", "severity", "service", "env", "version", "request_id", "event_type", "message"):
        assert key in payload
    assert payload["event_type"] == "callback.dropped"
    assert payload["severity"] == "INFO"
    assert payload["service"] == "widgetbridge-test"
    assert payload["widget"] == "acc"
    assert payload["reason"] == "stale_index_reference"
    assert payload["request_id"] is None


def test_bound_request_id_is_attached():
    logger, stream = _capture_logger("widgetbridge.test.rid")

    with bind_request_id(request_id="req-123") as rid:
        assert get_request_id() == "req-123"
        log_event(logger, "feed.served", severity="DEBUG", rows=3)

    assert rid == "req-123"
    assert get_request_id() is None
    payload = json.loads(stream.getvalue().strip())
    assert payload["request_id"] == "req-123"
    assert payload["severity"] == "DEBUG"
    assert payload["rows"] == 3


def test_request_middleware_follows_config():
    with_mw = create_app(config=BridgeConfig(log_requests=True), configure_logging=False)
    without_mw = create_app(config=BridgeConfig(log_requests=False), configure_logging=False)

    assert len(with_mw.user_middleware) == 1
    assert len(without_mw.user_middleware) == 0
