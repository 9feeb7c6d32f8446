"""Paginated collection fetching with ``__in`` filter chunking.

A *pagination walk* requests a collection URL, then follows the
``meta.next`` cursor of each page until the server reports no further
page or the walk has collected ``limit`` records. The limit is checked
between pages, so a walk may overshoot by at most one page.

Membership filters (``<field>__in``) longer than the API's per-request
maximum are split into chunks. One walk is performed for every
combination of chunks, strictly one after another, and the records are
concatenated in walk order. Each walk caps itself at ``limit``; the
combined result is not re-capped.

A walk that meets a non-2xx status, an exhausted transport or an
undecodable body stops quietly. The records gathered so far are kept
and the returned :class:`ResultSet` is flagged ``truncated``.
"""

import itertools
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from ..models import Page
from ..utils.http import NcmSession, decode_body
from .chunking import MAX_FILTER_VALUES, chunk_filter, is_in_filter, render_chunk
from .params import DEFAULT_LIMIT
from .reporting import ResponseReporter

logger = logging.getLogger(__name__)


class ResultSet(list):
    """Records returned by a list call.

    Behaves exactly like the plain list older callers expect, with a few
    attributes describing how it was assembled.

    :ivar truncated: True if any walk stopped on an error
    :ivar walks: Number of pagination walks performed
    :ivar requests: Number of page requests issued
    """

    def __init__(self, records: Iterable[Any] = ()):
        super().__init__(records)
        self.truncated = False
        self.walks = 0
        self.requests = 0

    @property
    def complete(self) -> bool:
        return not self.truncated


class Paginator:
    """Performs pagination walks against collection endpoints.

    :param session: Shared authenticated session
    :type session: NcmSession
    :param reporter: Reporter notified of every successful page
    :type reporter: ResponseReporter
    :param chunk_size: Maximum values per ``__in`` filter request
    :type chunk_size: int
    """

    def __init__(
        self,
        session: NcmSession,
        reporter: ResponseReporter,
        chunk_size: int = MAX_FILTER_VALUES,
    ):
        self.session = session
        self.reporter = reporter
        self.chunk_size = chunk_size

    def fetch(
        self, url: str, label: str, params: Optional[Dict[str, Any]] = None
    ) -> ResultSet:
        """Fetch every record of a collection, honouring ``limit``.

        :param url: Collection URL without a query string
        :type url: str
        :param label: Name of the call for notices
        :type label: str
        :param params: Validated query parameters
        :type params: Optional[Dict[str, Any]]
        :return: Records in walk, page and in-page order
        :rtype: ResultSet
        """
        params = dict(params or {})
        limit = int(params.get("limit", DEFAULT_LIMIT))
        results = ResultSet()

        for walk_params in self._walk_params(params):
            self._walk(url, label, walk_params, limit, results)

        if results.truncated:
            logger.warning(
                "%s: returning %d records from an incomplete fetch",
                label,
                len(results),
            )
        return results

    def _walk_params(self, params: Dict[str, Any]) -> Iterable[Dict[str, Any]]:
        """Yield the query parameters of each walk, one per chunk combination."""
        in_keys = [key for key in params if is_in_filter(key)]
        if not in_keys:
            yield params
            return

        chunked: List[Tuple[str, Any]] = [
            (key, chunk_filter(params[key], self.chunk_size)) for key in in_keys
        ]
        for combination in itertools.product(*(chunks for _, chunks in chunked)):
            walk_params = dict(params)
            for (key, _), chunk in zip(chunked, combination):
                walk_params[key] = render_chunk(chunk)
            yield walk_params

    def _walk(
        self,
        url: str,
        label: str,
        params: Dict[str, Any],
        limit: int,
        results: ResultSet,
    ) -> None:
        """Follow next-page cursors from ``url``, appending into ``results``."""
        results.walks += 1
        collected = 0
        next_url: Optional[str] = url
        query: Optional[Dict[str, Any]] = params

        while next_url and collected < limit:
            try:
                response = self.session.get(next_url, params=query)
            except httpx.TransportError as e:
                logger.warning("%s: request to %s failed: %s", label, next_url, e)
                results.truncated = True
                return
            results.requests += 1

            if not response.is_success:
                self.reporter.report(response.status_code, decode_body(response), label)
                results.truncated = True
                return

            try:
                page = Page.model_validate(response.json())
            except ValueError as e:
                logger.warning("%s: undecodable page from %s: %s", label, next_url, e)
                results.truncated = True
                return

            self.reporter.report(response.status_code, page.data, label)
            results.extend(page.data)
            collected += len(page.data)

            # The cursor URL already carries the query string
            next_url = page.next_url
            query = None
