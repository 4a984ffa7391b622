"""
Packed request/error counter.

One int holds two sub-counters separated by decimal place value:

    value = errors * 1000 + requests

Both sub-counters stay in [0, 999]. When an increment would push either
of them past 999 the whole value is halved instead, so the two fields
shrink together and a carry never leaks from requests into errors.
"""

from typing import NamedTuple, Optional


COUNTER_BASE = 1000
MAX_SUBCOUNT = COUNTER_BASE - 1


class RequestCounts(NamedTuple):
    requests: int
    errors: int


def split_counter(value: Optional[int]) -> RequestCounts:
    """Decode a packed counter into its request and error counts."""
    count = value or 0
    return RequestCounts(requests=count % COUNTER_BASE, errors=count // COUNTER_BASE)


def increment_requests(count: Optional[int], is_error: bool) -> int:
    """
    Count one more request, and one more error when ``is_error``.

    Args:
        count: Current packed value, None when nothing was recorded yet
        is_error: Whether the request failed

    Returns:
        The new packed value
    """
    count = count or 0
    requests, errors = split_counter(count)

    overflow = requests == MAX_SUBCOUNT or (is_error and errors == MAX_SUBCOUNT)
    delta = COUNTER_BASE + 1 if is_error else 1

    if overflow:
        return (count + delta) // 2
    return count + delta
