"""Structured exception classes for the NCM client.

Validation failures are raised synchronously, before any request is
sent. Each concrete error also derives from the builtin exception that
callers of the legacy client caught (``ValueError``, ``TypeError``,
``KeyError``), so existing ``except`` clauses keep working.
"""

import json
from typing import Any, Dict, Iterable, Optional


class NcmClientError(Exception):
    """Base exception for all NCM client errors.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the exception with message, code, and details."""
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, message, and details
        """
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        :return: JSON-encoded string representation of the exception
        """
        return json.dumps(self.to_dict())


class InvalidParameterError(NcmClientError, ValueError):
    """Raised when query parameters fall outside an endpoint's allow-list.

    Every offending parameter is reported, not only the first one found.

    :param message: Description of the validation failure
    :param parameters: Names of the rejected parameters
    """

    def __init__(self, message: str, parameters: Optional[Iterable[str]] = None):
        """Initialize with the message and the rejected parameter names."""
        self.parameters = list(parameters or [])
        details = {}
        if self.parameters:
            details["parameters"] = self.parameters
        super().__init__(message=message, code="INVALID_PARAMETER", details=details)


class InvalidOrderByError(NcmClientError, TypeError):
    """Raised when ``order_by`` is neither a sequence of names nor a string."""

    def __init__(self, message: str, value: Optional[Any] = None):
        details = {}
        if value is not None:
            details["type"] = type(value).__name__
        super().__init__(message=message, code="INVALID_ORDER_BY", details=details)


class UnsupportedFilterTypeError(NcmClientError, TypeError):
    """Raised when an ``__in`` filter value is not a list or comma string."""

    def __init__(self, message: str, value: Optional[Any] = None):
        details = {}
        if value is not None:
            details["type"] = type(value).__name__
        super().__init__(
            message=message, code="UNSUPPORTED_FILTER_TYPE", details=details
        )


class MissingCredentialsError(NcmClientError, KeyError):
    """Raised when one of the four API key fields is absent.

    :param field: Header name of the missing credential
    """

    def __init__(self, field: str):
        """Initialize with the header name that is missing."""
        self.field = field
        super().__init__(
            message="{0} missing. Please ensure all API Keys are present.".format(
                field
            ),
            code="MISSING_CREDENTIALS",
            details={"field": field},
        )


class InvalidCredentialsError(NcmClientError, TypeError):
    """Raised when API keys are supplied in something other than a mapping."""

    def __init__(self, message: str = "API Keys must be passed as a dictionary"):
        super().__init__(message=message, code="INVALID_CREDENTIALS")


class RecordNotFoundError(NcmClientError, ValueError):
    """Raised by scan helpers when no record matches the requested value.

    :param message: Description of what was searched for
    :param resource: Optional resource name that was scanned
    """

    def __init__(self, message: str, resource: Optional[str] = None):
        details = {}
        if resource:
            details["resource"] = resource
        super().__init__(message=message, code="RECORD_NOT_FOUND", details=details)


class ConfigurationError(NcmClientError):
    """Raised for configuration-related errors.

    :param message: Description of the configuration error
    :param setting: Optional name of the problematic setting
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        """Initialize configuration error with message and optional setting."""
        self.setting = setting
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)
