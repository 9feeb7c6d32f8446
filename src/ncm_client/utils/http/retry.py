"""Retrying transport for the NCM HTTP session.

:class:`RetryTransport` wraps an ``httpx`` transport and retries requests
that fail with a retryable status code or a transport-level error. The
delay grows exponentially with jitter, and a ``Retry-After`` header from
the server takes precedence over the computed delay.

Only methods in the policy's ``allowed_methods`` are retried on a status
code or a failure after the request may have reached the server. Other
methods (POST, PATCH) are retried only when the connection could not be
established, so a write is never replayed.

Once retries are exhausted the final response is returned unchanged, so
callers see the last status code rather than an exception. Transport
errors on the final attempt are re-raised.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Callable, FrozenSet, Iterable, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_RETRY_ON = (408, 503, 504)

# Idempotent methods, as urllib3's Retry.DEFAULT_ALLOWED_METHODS
DEFAULT_ALLOWED_METHODS = frozenset(
    {"GET", "HEAD", "PUT", "DELETE", "OPTIONS", "TRACE"}
)

# Failures raised before any byte of the request was sent
CONNECT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


def parse_retry_after(response: httpx.Response) -> Optional[float]:
    """Parse the Retry-After header of a response.

    Supports both delta-seconds and HTTP-date formats.

    :param response: Response to inspect
    :type response: httpx.Response
    :return: Seconds to wait, or None when absent or unparseable
    :rtype: Optional[float]
    """
    retry_after = response.headers.get("retry-after", "").strip()
    if not retry_after:
        return None

    if retry_after.isdigit():
        return float(retry_after)

    try:
        retry_date = parsedate_to_datetime(retry_after)
    except (TypeError, ValueError):
        logger.warning("Failed to parse Retry-After header '%s'", retry_after)
        return None
    if retry_date is None:
        return None
    delay = (retry_date - datetime.now(retry_date.tzinfo)).total_seconds()
    return max(0.0, delay)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration for the session transport.

    :param total: Retries after the first attempt
    :type total: int
    :param backoff_factor: Base delay in seconds; doubles on each retry
    :type backoff_factor: float
    :param status_forcelist: Status codes that trigger a retry
    :type status_forcelist: FrozenSet[int]
    :param max_backoff: Upper bound for a single delay
    :type max_backoff: float
    :param allowed_methods: Methods safe to replay after they were sent
    :type allowed_methods: FrozenSet[str]
    """

    total: int = 5
    backoff_factor: float = 2.0
    status_forcelist: FrozenSet[int] = field(
        default_factory=lambda: frozenset(DEFAULT_RETRY_ON)
    )
    max_backoff: float = 120.0
    allowed_methods: FrozenSet[str] = DEFAULT_ALLOWED_METHODS

    @classmethod
    def build(
        cls,
        total: int,
        backoff_factor: float,
        status_forcelist: Iterable[int],
        max_backoff: float = 120.0,
        allowed_methods: Iterable[str] = DEFAULT_ALLOWED_METHODS,
    ) -> "RetryPolicy":
        return cls(
            total=max(0, int(total)),
            backoff_factor=float(backoff_factor),
            status_forcelist=frozenset(int(code) for code in status_forcelist),
            max_backoff=max_backoff,
            allowed_methods=frozenset(m.upper() for m in allowed_methods),
        )

    def is_method_retryable(self, method: str) -> bool:
        return method.upper() in self.allowed_methods

    def should_retry_status(self, status_code: int, method: str = "GET") -> bool:
        return status_code in self.status_forcelist and self.is_method_retryable(
            method
        )

    def should_retry_error(self, error: Exception, method: str) -> bool:
        """Whether a transport failure may be retried for ``method``."""
        return self.is_method_retryable(method) or isinstance(error, CONNECT_ERRORS)

    def backoff(self, retry_number: int) -> float:
        """Compute the jittered delay before retry ``retry_number``.

        :param retry_number: 1 for the first retry, 2 for the second, ...
        :type retry_number: int
        :return: Delay in seconds
        :rtype: float
        """
        if self.backoff_factor <= 0:
            return 0.0
        delay = min(self.max_backoff, self.backoff_factor * (2 ** (retry_number - 1)))
        jitter = random.uniform(0.8, 1.2)
        return delay * jitter


class RetryTransport(httpx.BaseTransport):
    """Transport that retries transient failures before returning.

    :param policy: Retry configuration
    :type policy: RetryPolicy
    :param transport: Wrapped transport; a default HTTP transport if None
    :type transport: Optional[httpx.BaseTransport]
    :param sleep: Function used to wait between attempts
    :type sleep: Callable[[float], None]
    """

    def __init__(
        self,
        policy: RetryPolicy,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.policy = policy
        self._transport = transport or httpx.HTTPTransport()
        self._sleep = sleep

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        retry_number = 0
        while True:
            try:
                response = self._transport.handle_request(request)
            except httpx.TransportError as e:
                if retry_number >= self.policy.total or not (
                    self.policy.should_retry_error(e, request.method)
                ):
                    logger.warning(
                        "Giving up on %s %s after %d retries: %s",
                        request.method,
                        request.url,
                        retry_number,
                        e,
                    )
                    raise
                retry_number += 1
                delay = self.policy.backoff(retry_number)
                logger.debug(
                    "Retry %d for %s %s after %s, waiting %.2fs",
                    retry_number,
                    request.method,
                    request.url,
                    type(e).__name__,
                    delay,
                )
                self._sleep(delay)
                continue

            if (
                not self.policy.should_retry_status(
                    response.status_code, request.method
                )
                or retry_number >= self.policy.total
            ):
                return response

            retry_number += 1
            delay = parse_retry_after(response)
            if delay is None:
                delay = self.policy.backoff(retry_number)
            else:
                delay = min(delay, self.policy.max_backoff)
            logger.debug(
                "Retry %d for %s %s after HTTP %d, waiting %.2fs",
                retry_number,
                request.method,
                request.url,
                response.status_code,
                delay,
            )
            response.close()
            self._sleep(delay)

    def close(self) -> None:
        self._transport.close()
