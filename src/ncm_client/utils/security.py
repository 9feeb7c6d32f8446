"""Sanitisation helpers and secure logging setup.

NCM API keys travel as plain request headers, so anything that logs
requests goes through :func:`sanitize_headers`, and the root handler
installed by :func:`setup_secure_logging` redacts key-like strings from
every message.
"""

import copy
import logging
import re
import sys
from typing import Any, Dict, Mapping

# Patterns for sensitive data detection
SENSITIVE_PATTERNS = {
    "bearer_token": re.compile(r"Bearer\s+[A-Za-z0-9_-]+", re.IGNORECASE),
    "api_key": re.compile(r"\b[A-Fa-f0-9]{32,}\b"),
    "uuid_key": re.compile(
        r"\b[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\b",
        re.IGNORECASE,
    ),
}

# Headers that should never be logged
SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "set-cookie",
    "x-cp-api-id",
    "x-cp-api-key",
    "x-ecm-api-id",
    "x-ecm-api-key",
}


def sanitize_string(value: str) -> str:
    """Redact API key material from a string.

    :param value: String to sanitize
    :type value: str
    :return: String with every key-like token replaced
    :rtype: str
    """
    if not value:
        return value
    for pattern_name, pattern in SENSITIVE_PATTERNS.items():
        value = pattern.sub("<{0}:REDACTED>".format(pattern_name), value)
    return value


def sanitize_headers(headers: Mapping[str, Any]) -> Dict[str, Any]:
    """Sanitize HTTP headers for logging.

    :param headers: Mapping of HTTP headers
    :type headers: Mapping[str, Any]
    :return: Copy of the headers with credential values redacted
    :rtype: Dict[str, Any]
    """
    if not headers:
        return {}
    sanitized = copy.deepcopy(dict(headers))
    for key, value in sanitized.items():
        if key.lower() in SENSITIVE_HEADERS:
            if isinstance(value, str) and value:
                sanitized[key] = "<REDACTED:length={0}>".format(len(value))
            else:
                sanitized[key] = "<REDACTED>"
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value)
    return sanitized


class SanitizingFormatter(logging.Formatter):
    """Formatter that redacts API keys from log messages."""

    def format(self, record: logging.LogRecord) -> str:
        if record.args:
            try:
                record.msg = sanitize_string(record.msg % record.args)
                record.args = None
            except (TypeError, ValueError):
                record.msg = sanitize_string(str(record.msg))
                record.args = tuple(
                    sanitize_string(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )
        else:
            record.msg = sanitize_string(str(record.msg))
        return super().format(record)


# Global flag to track if logging has been set up
_LOGGING_CONFIGURED = False


def setup_secure_logging(level: str = "INFO", stream=None) -> None:
    """Set up root logging with automatic sanitization.

    Repeated calls only adjust the level.

    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    :type level: str
    :param stream: Stream for the handler, stderr when None
    :return: None
    :rtype: None
    """
    global _LOGGING_CONFIGURED

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if _LOGGING_CONFIGURED:
        logging.getLogger().setLevel(numeric_level)
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping duplicate setup"
        )
        return

    formatter = SanitizingFormatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    logging.basicConfig(level=numeric_level, handlers=[handler], force=True)

    # httpx logs every request at INFO; keep it for DEBUG runs only
    if numeric_level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
