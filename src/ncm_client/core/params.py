"""Query parameter validation for collection endpoints.

Every list call passes its keyword arguments through
:func:`validate_params` before any request is made. The function checks
them against the endpoint's allow-list, confirms the session carries all
four API keys and normalises ``limit`` and ``order_by``.
"""

import logging
from typing import Any, Collection, Dict, Mapping

from ..exceptions import (
    InvalidOrderByError,
    InvalidParameterError,
    MissingCredentialsError,
)
from ..models import missing_credential

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 500
UNBOUNDED_LIMIT = 1_000_000
ALL_RECORDS = "all"


def normalize_limit(value: Any) -> int:
    """Turn a caller-supplied ``limit`` into a record count.

    :param value: Integer, integer string, or the ``"all"`` sentinel
    :type value: Any
    :return: Maximum number of records a pagination walk collects
    :rtype: int
    :raises InvalidParameterError: If the value is not an integer or ``"all"``
    """
    if value == ALL_RECORDS:
        return UNBOUNDED_LIMIT
    if isinstance(value, bool):
        raise InvalidParameterError(
            "Invalid 'limit' parameter: {0!r}".format(value), parameters=["limit"]
        )
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(
            "Invalid 'limit' parameter: {0!r}. Must be an integer or 'all'.".format(
                value
            ),
            parameters=["limit"],
        ) from None
    # Zero or less is accepted; the fetcher then sends no request
    return limit


def normalize_order_by(value: Any) -> str:
    """Render ``order_by`` as the comma-joined string the API expects.

    :param value: Sequence of field names or an already joined string
    :type value: Any
    :return: Comma-joined field names, order preserved
    :rtype: str
    :raises InvalidOrderByError: For any other type
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join(str(field) for field in value)
    raise InvalidOrderByError(
        "Invalid 'order_by' parameter. Must be 'list' or 'str'.", value=value
    )


def validate_params(
    raw_params: Mapping[str, Any],
    allowed_params: Collection[str],
    credentials: Mapping[str, Any],
) -> Dict[str, Any]:
    """Validate and normalise keyword arguments for a list call.

    The input mapping is left untouched; a new dictionary is returned
    with ``limit`` always present.

    :param raw_params: Keyword arguments given by the caller
    :type raw_params: Mapping[str, Any]
    :param allowed_params: Parameter names the endpoint accepts
    :type allowed_params: Collection[str]
    :param credentials: Headers of the active session
    :type credentials: Mapping[str, Any]
    :return: Validated query parameters
    :rtype: Dict[str, Any]
    :raises InvalidParameterError: If any parameter is not allowed
    :raises MissingCredentialsError: If an API key header is absent
    :raises InvalidOrderByError: If ``order_by`` has an unsupported type
    """
    bad_params = [key for key in raw_params if key not in allowed_params]
    if bad_params:
        raise InvalidParameterError(
            "Invalid parameters: {0}".format(", ".join(sorted(bad_params))),
            parameters=bad_params,
        )

    missing = missing_credential(credentials)
    if missing:
        raise MissingCredentialsError(missing)

    params = dict(raw_params)
    params["limit"] = normalize_limit(params.get("limit", DEFAULT_LIMIT))
    if "order_by" in params:
        params["order_by"] = normalize_order_by(params["order_by"])

    logger.debug("Validated parameters: %s", sorted(params))
    return params
