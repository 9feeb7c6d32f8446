"""Splitting of oversized ``__in`` filters.

The NCM API accepts at most :data:`MAX_FILTER_VALUES` values in a single
``<field>__in`` filter. Longer filters are split into contiguous chunks
and each chunk is fetched with its own pagination walk.
"""

import math
from typing import Any, Iterator, List, Sequence

from ..exceptions import UnsupportedFilterTypeError

MAX_FILTER_VALUES = 100
IN_FILTER_SUFFIX = "__in"


def is_in_filter(name: str) -> bool:
    """Return True if the parameter name is a membership filter."""
    return name.endswith(IN_FILTER_SUFFIX)


def render_chunk(chunk: Sequence[Any]) -> str:
    """Render a chunk as the comma-joined value sent on the wire.

    :param chunk: Filter values
    :type chunk: Sequence[Any]
    :return: Values joined with ``,``
    :rtype: str
    """
    return ",".join(map(str, chunk))


class ChunkedFilter:
    """Lazy, restartable sequence of filter chunks.

    Iterating twice yields the same chunks; nothing is consumed.

    :param values: Filter values in caller order
    :type values: List[Any]
    :param size: Maximum values per chunk
    :type size: int
    """

    def __init__(self, values: List[Any], size: int = MAX_FILTER_VALUES):
        if size < 1:
            raise ValueError("Chunk size must be at least 1")
        self.values = values
        self.size = size

    def __iter__(self) -> Iterator[List[Any]]:
        for start in range(0, len(self.values), self.size):
            yield self.values[start:start + self.size]

    def __len__(self) -> int:
        return math.ceil(len(self.values) / self.size)

    def __repr__(self) -> str:
        return "ChunkedFilter(values={0}, size={1})".format(
            len(self.values), self.size
        )


def chunk_filter(value: Any, size: int = MAX_FILTER_VALUES) -> ChunkedFilter:
    """Split a filter value into chunks of at most ``size`` values.

    :param value: Comma-joined string or list of scalar values
    :type value: Any
    :param size: Maximum values per chunk
    :type size: int
    :return: Lazy sequence of chunks
    :rtype: ChunkedFilter
    :raises UnsupportedFilterTypeError: If ``value`` is neither str nor list
    """
    if isinstance(value, str):
        values = value.split(",") if value else []
    elif isinstance(value, (list, tuple)):
        values = list(value)
    else:
        raise UnsupportedFilterTypeError(
            "Invalid param format. Must be str or list.", value=value
        )
    return ChunkedFilter(values, size)
