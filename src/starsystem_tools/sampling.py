"""Bounded rejection sampling."""

from __future__ import annotations

from typing import Callable, TypeVar

T = TypeVar('T')


def sample_until(
    draw: Callable[[], T],
    accept: Callable[[T], bool],
    max_attempts: int,
) -> tuple[T, bool]:
    """Draw values until one is accepted or ``max_attempts`` draws were made.

    The last draw is returned even when it was rejected, so callers always
    get a usable (possibly degraded) value.

    Parameters:
        draw: Produces a candidate.
        accept: Predicate on a candidate.
        max_attempts: Upper bound on calls to ``draw`` (>= 1).

    Returns:
        Tuple (value, accepted).

    Raises:
        ValueError: If max_attempts < 1.
    """
    if max_attempts < 1:
        raise ValueError(f'max_attempts must be >= 1, got {max_attempts}')
    for _ in range(max_attempts):
        value = draw()
        if accept(value):
            return value, True
    return value, False
