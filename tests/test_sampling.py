"""Tests for bounded rejection sampling."""

from __future__ import annotations

import itertools

import pytest

from starsystem_tools.sampling import sample_until


def test_returns_first_accepted() -> None:
    counter = itertools.count()
    value, ok = sample_until(lambda: next(counter), lambda v: v >= 3, 100)
    assert (value, ok) == (3, True)


def test_accepts_last_draw_after_cap() -> None:
    """An exhausted search returns its last draw, flagged as rejected."""
    calls: list[int] = []

    def draw() -> int:
        calls.append(len(calls))
        return len(calls)

    value, ok = sample_until(draw, lambda v: False, 10000)
    assert ok is False
    assert value == 10000
    assert len(calls) == 10000


def test_invalid_cap() -> None:
    with pytest.raises(ValueError):
        sample_until(lambda: 1, lambda v: True, 0)
