"""Pagination, filter chunking and parameter validation engine."""

from .chunking import (
    MAX_FILTER_VALUES,
    ChunkedFilter,
    chunk_filter,
    is_in_filter,
    render_chunk,
)
from .pagination import Paginator, ResultSet
from .params import DEFAULT_LIMIT, UNBOUNDED_LIMIT, validate_params
from .reporting import CallOutcome, ResponseReporter, classify

__all__ = [
    "MAX_FILTER_VALUES",
    "ChunkedFilter",
    "chunk_filter",
    "is_in_filter",
    "render_chunk",
    "Paginator",
    "ResultSet",
    "DEFAULT_LIMIT",
    "UNBOUNDED_LIMIT",
    "validate_params",
    "CallOutcome",
    "ResponseReporter",
    "classify",
]
