"""HTTP utilities public API.

Recommended import pattern for consumers:
    from ncm_client.utils.http import NcmSession, RetryPolicy, decode_body
"""

from .retry import (
    DEFAULT_RETRY_ON,
    RetryPolicy,
    RetryTransport,
    parse_retry_after,
)
from .session import NcmSession, create_timeout, decode_body

__all__ = [
    "DEFAULT_RETRY_ON",
    "RetryPolicy",
    "RetryTransport",
    "parse_retry_after",
    "NcmSession",
    "create_timeout",
    "decode_body",
]
