"""Long-lived HTTP session shared by every NCM client component.

The session owns one ``httpx.Client`` configured with the retrying
transport, the redirect limit, the JSON content type and the credential
headers. Components read from it; only :meth:`NcmSession.set_api_keys`
changes its state.
"""

import logging
from typing import Any, Callable, Mapping, Optional

import httpx

from ...models import ApiKeys
from ..security import sanitize_headers
from .retry import RetryPolicy, RetryTransport

logger = logging.getLogger(__name__)


def create_timeout(total: float = 30.0, connect: float = 5.0) -> httpx.Timeout:
    """Create the request timeout used by the session.

    :param total: Read, write and pool timeout in seconds
    :type total: float
    :param connect: Connection timeout in seconds
    :type connect: float
    :return: Configured timeout
    :rtype: httpx.Timeout
    """
    return httpx.Timeout(total, connect=min(connect, total))


def decode_body(response: httpx.Response) -> Any:
    """Return the decoded JSON body, or the text when it is not JSON.

    :param response: Response to decode
    :type response: httpx.Response
    :return: Decoded JSON value or raw text
    :rtype: Any
    """
    if not response.content:
        return response.text
    try:
        return response.json()
    except ValueError:
        return response.text


class NcmSession:
    """Authenticated HTTP session for the NCM API.

    :param api_keys: Mapping of the four credential headers, optional
    :type api_keys: Optional[Mapping[str, Any]]
    :param retry_policy: Retry configuration for the transport
    :type retry_policy: Optional[RetryPolicy]
    :param max_redirects: Redirects followed per request
    :type max_redirects: int
    :param timeout: Per-request timeout in seconds
    :type timeout: float
    :param transport: Transport wrapped by the retry layer, for testing
    :type transport: Optional[httpx.BaseTransport]
    :param sleep: Wait function used between retries
    :type sleep: Optional[Callable[[float], None]]
    """

    def __init__(
        self,
        api_keys: Optional[Mapping[str, Any]] = None,
        retry_policy: Optional[RetryPolicy] = None,
        max_redirects: int = 3,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.retry_policy = retry_policy or RetryPolicy()
        retry_kwargs = {"sleep": sleep} if sleep is not None else {}
        self._client = httpx.Client(
            transport=RetryTransport(self.retry_policy, transport, **retry_kwargs),
            headers={"Content-Type": "application/json"},
            timeout=create_timeout(timeout),
            follow_redirects=True,
            max_redirects=max_redirects,
        )
        if api_keys:
            self.set_api_keys(api_keys)

    @property
    def headers(self) -> httpx.Headers:
        """Headers sent with every request, including the API keys."""
        return self._client.headers

    def set_api_keys(self, api_keys: Mapping[str, Any]) -> None:
        """Validate and install the four API key headers.

        Nothing is changed when validation fails.

        :param api_keys: Mapping keyed by credential header name
        :type api_keys: Mapping[str, Any]
        :raises InvalidCredentialsError: If ``api_keys`` is not a mapping
        :raises MissingCredentialsError: If any of the four headers is absent
        """
        keys = ApiKeys.from_mapping(api_keys)
        self._client.headers.update(keys.as_headers())
        logger.debug("API keys set for session")

    def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request through the retrying transport.

        :param method: HTTP verb
        :type method: str
        :param url: Absolute URL
        :type url: str
        :param kwargs: Passed to ``httpx.Client.request`` (params, json, ...)
        :return: Final response after retries
        :rtype: httpx.Response
        :raises httpx.TransportError: If the request failed on every attempt
        """
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s %s params=%s headers=%s",
                method,
                url,
                kwargs.get("params"),
                sanitize_headers(self._client.headers),
            )
        response = self._client.request(method, url, **kwargs)
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response

    def get(self, url: str, **kwargs) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs) -> httpx.Response:
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs) -> httpx.Response:
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs) -> httpx.Response:
        return self.request("DELETE", url, **kwargs)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "NcmSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
