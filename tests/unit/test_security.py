"""Unit tests for log sanitisation and secure logging setup."""

import io
import logging

import pytest

from ncm_client.utils import security
from ncm_client.utils.security import (
    SanitizingFormatter,
    sanitize_headers,
    sanitize_string,
    setup_secure_logging,
)


@pytest.fixture
def fresh_logging(monkeypatch):
    """Allow setup_secure_logging to run and undo its handler afterwards."""
    monkeypatch.setattr(security, "_LOGGING_CONFIGURED", False)
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, SanitizingFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(logging.NOTSET)
    logging.getLogger("httpcore").setLevel(logging.NOTSET)


@pytest.mark.unit
def test_sanitize_headers_redacts_api_keys(api_keys):
    headers = dict(api_keys, **{"Content-Type": "application/json"})

    sanitized = sanitize_headers(headers)

    for name in api_keys:
        assert sanitized[name].startswith("<REDACTED")
        assert api_keys[name] not in sanitized[name]
    assert sanitized["Content-Type"] == "application/json"
    # original untouched
    assert headers["X-CP-API-KEY"] == api_keys["X-CP-API-KEY"]


@pytest.mark.unit
def test_sanitize_headers_is_case_insensitive():
    assert sanitize_headers({"x-ecm-api-key": "abc"})["x-ecm-api-key"] == (
        "<REDACTED:length=3>"
    )


@pytest.mark.unit
def test_sanitize_headers_empty():
    assert sanitize_headers({}) == {}


@pytest.mark.unit
def test_sanitize_string_redacts_hex_keys_and_uuids():
    text = (
        "key=4b1d77fe271241b1cfafab993ef0891d "
        "id=c71b3e68-33f5-4e69-9853-14989700f204"
    )
    sanitized = sanitize_string(text)
    assert "4b1d77fe271241b1cfafab993ef0891d" not in sanitized
    assert "c71b3e68-33f5-4e69-9853-14989700f204" not in sanitized
    assert sanitized.startswith("key=<api_key:REDACTED>")


@pytest.mark.unit
def test_sanitize_string_leaves_plain_text():
    assert sanitize_string("Routers Operation Successful") == (
        "Routers Operation Successful"
    )


@pytest.mark.unit
def test_formatter_sanitizes_arguments():
    formatter = SanitizingFormatter("%(message)s")
    record = logging.LogRecord(
        "test",
        logging.INFO,
        __file__,
        1,
        "using key %s",
        ("f1ca6cd41f326c00e23322795c063068274caa30",),
        None,
    )
    assert formatter.format(record) == "using key <api_key:REDACTED>"


@pytest.mark.unit
def test_setup_secure_logging_installs_sanitizing_handler(fresh_logging):
    stream = io.StringIO()
    setup_secure_logging("DEBUG", stream=stream)

    logging.getLogger("ncm_client.test").info(
        "key 4b1d77fe271241b1cfafab993ef0891d"
    )

    output = stream.getvalue()
    assert "ncm_client.test - INFO - key <api_key:REDACTED>" in output
    assert logging.getLogger().level == logging.DEBUG


@pytest.mark.unit
def test_setup_secure_logging_is_idempotent(fresh_logging):
    setup_secure_logging("INFO", stream=io.StringIO())
    handlers = list(logging.getLogger().handlers)

    setup_secure_logging("WARNING", stream=io.StringIO())

    assert logging.getLogger().handlers == handlers
    assert logging.getLogger().level == logging.WARNING
