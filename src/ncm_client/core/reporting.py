"""Interpretation of API status codes.

The reporter turns a status code into a :class:`CallOutcome`, logs a
notice when event logging is on, and returns the normalised value the
calling operation hands back to its caller.
"""

import logging
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "Success"


class CallOutcome(Enum):
    """Outcome tags for a single API response."""

    SUCCESS = "success"
    SUCCESS_WITH_PAYLOAD = "success_with_payload"
    DELETED = "deleted"
    CLIENT_ERROR = "client_error"
    AUTH_ERROR = "auth_error"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"


_OUTCOMES = {
    200: CallOutcome.SUCCESS,
    201: CallOutcome.SUCCESS,
    202: CallOutcome.SUCCESS_WITH_PAYLOAD,
    204: CallOutcome.DELETED,
    400: CallOutcome.CLIENT_ERROR,
    401: CallOutcome.AUTH_ERROR,
    404: CallOutcome.NOT_FOUND,
    500: CallOutcome.SERVER_ERROR,
}

# Outcomes whose return value is the raw response body
_BODY_OUTCOMES = {
    CallOutcome.AUTH_ERROR,
    CallOutcome.NOT_FOUND,
    CallOutcome.SERVER_ERROR,
}


def classify(status_code: int) -> CallOutcome:
    """Map an HTTP status code to its outcome tag."""
    return _OUTCOMES.get(int(status_code), CallOutcome.UNKNOWN)


class ResponseReporter:
    """Logs response notices and normalises return values.

    :param log_events: Emit a notice for each reported response
    :type log_events: bool
    """

    def __init__(self, log_events: bool = True):
        self.log_events = log_events

    def report(self, status_code: int, body: Any, label: str) -> Any:
        """Report one response and return the normalised value.

        :param status_code: HTTP status of the response
        :type status_code: int
        :param body: Decoded response body
        :type body: Any
        :param label: Name of the call, used in the notice
        :type label: str
        :return: ``"Success"`` for 202, the body for 401/404/500, else None
        :rtype: Any
        """
        outcome = classify(status_code)
        if self.log_events:
            self._notify(outcome, status_code, label)
        if outcome is CallOutcome.SUCCESS_WITH_PAYLOAD:
            return SUCCESS_MARKER
        if outcome in _BODY_OUTCOMES:
            return body
        return None

    def _notify(self, outcome: CallOutcome, status_code: int, label: str) -> None:
        if outcome is CallOutcome.SUCCESS:
            if int(status_code) == 201:
                logger.info("%s Added Successfully", label)
            else:
                logger.info("%s Operation Successful", label)
        elif outcome is CallOutcome.SUCCESS_WITH_PAYLOAD:
            logger.info("%s Added Successfully", label)
        elif outcome is CallOutcome.DELETED:
            logger.info("%s Deleted Successfully", label)
        elif outcome is CallOutcome.CLIENT_ERROR:
            logger.warning("%s: Bad Request", label)
        elif outcome is CallOutcome.AUTH_ERROR:
            logger.warning("%s: Unauthorized Access", label)
        elif outcome is CallOutcome.NOT_FOUND:
            logger.warning("%s: Resource Not Found", label)
        elif outcome is CallOutcome.SERVER_ERROR:
            logger.error("%s: HTTP 500 - Server Error", label)
        else:
            logger.warning(
                "%s: HTTP Status Code: %s - No returned data", label, status_code
            )
