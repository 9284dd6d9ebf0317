"""Settings & Structured Logging — env-driven config and the JSON formatter."""

import json
import logging
import sys

from supplychain.config import Settings, get_settings
from supplychain.core.domain_types import ErrorKind
from supplychain.core.errors import ClassifiedError, ErrorContext
from supplychain.infrastructure.observability import JSONFormatter, setup_logging


def test_defaults_route_locally():
    settings = Settings(_env_file=None)
    assert settings.remote_enabled is False
    assert settings.discovery_enabled is False
    assert settings.remote_url == ""


def test_url_settings_lose_trailing_slashes():
    settings = Settings(
        _env_file=None,
        remote_url="http://peer:8080//",
        ledger_gateway_url="http://gateway:8800/",
    )
    assert settings.remote_url == "http://peer:8080"
    assert settings.ledger_gateway_url == "http://gateway:8800"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("REMOTE_ENABLED", "true")
    monkeypatch.setenv("REMOTE_URL", "http://peer-b/")
    monkeypatch.setenv("DISCOVERY_CACHE_TTL_SECONDS", "5")
    settings = Settings(_env_file=None)
    assert settings.remote_enabled is True
    assert settings.remote_url == "http://peer-b"
    assert settings.discovery_cache_ttl_seconds == 5.0


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "supplychain.test", logging.WARNING, __file__, 1, "readProduct failed", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_known_extras():
    line = JSONFormatter().format(_record(
        operation="readProduct", error_kind="not_found", status_code=404, unrelated="x",
    ))
    log = json.loads(line)
    assert log["level"] == "WARNING"
    assert log["logger"] == "supplychain.test"
    assert log["message"] == "readProduct failed"
    assert log["operation"] == "readProduct"
    assert log["error_kind"] == "not_found"
    assert log["status_code"] == 404
    assert "unrelated" not in log


def test_json_formatter_omits_missing_extras():
    log = json.loads(JSONFormatter().format(_record()))
    assert "operation" not in log
    assert "timestamp" in log


def test_json_formatter_renders_enum_extras_as_values():
    log = json.loads(JSONFormatter().format(_record(error_kind=ErrorKind.UPSTREAM)))
    assert log["error_kind"] == "upstream"


def test_json_formatter_fills_error_keys_from_logged_exception():
    cause = RuntimeError("gateway down")
    try:
        raise ClassifiedError(
            ErrorKind.UNKNOWN, "Shipment not found", cause=cause,
            context=ErrorContext(operation="getShipment", context_id="S1"),
        )
    except ClassifiedError:
        record = _record(path="/assets/queryShipment/S1")
        record.exc_info = sys.exc_info()

    log = json.loads(JSONFormatter().format(record))
    assert log["error_kind"] == "unknown"
    assert log["error_code"] == "UNKNOWN"
    assert log["status_code"] == 500
    assert log["operation"] == "getShipment"
    assert log["cause"] == "RuntimeError"
    assert "exception" in log


def test_explicit_extras_win_over_exception_fields():
    try:
        raise ClassifiedError(ErrorKind.UPSTREAM, "x", http_status=503)
    except ClassifiedError:
        record = _record(status_code=502)
        record.exc_info = sys.exc_info()
    assert json.loads(JSONFormatter().format(record))["status_code"] == 502


def test_setup_logging_replaces_its_handler_and_quiets_httpx():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("INFO", "text")
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
        assert not isinstance(added[0].formatter, JSONFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for handler in [h for h in root.handlers if h not in before]:
            root.removeHandler(handler)
        root.setLevel(level)
