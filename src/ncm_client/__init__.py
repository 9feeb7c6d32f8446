"""Client for the Cradlepoint NCM REST API.

This package wraps the NCM v2 API: it validates query parameters against
a per-endpoint allow-list, splits oversized ``__in`` filters, follows
pagination cursors and returns decoded records.

:var __version__: Current package version
:type __version__: str
"""

from .client import NcmClient
from .core import CallOutcome, ResultSet
from .exceptions import (
    ConfigurationError,
    InvalidCredentialsError,
    InvalidOrderByError,
    InvalidParameterError,
    MissingCredentialsError,
    NcmClientError,
    RecordNotFoundError,
    UnsupportedFilterTypeError,
)

__version__ = "0.2.0"

__all__ = [
    "NcmClient",
    "CallOutcome",
    "ResultSet",
    "NcmClientError",
    "ConfigurationError",
    "InvalidCredentialsError",
    "InvalidOrderByError",
    "InvalidParameterError",
    "MissingCredentialsError",
    "RecordNotFoundError",
    "UnsupportedFilterTypeError",
]
