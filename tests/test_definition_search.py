"""Tests for definition search under the allocation policies."""

from __future__ import annotations

from starsystem_tools.asteroids import AsteroidProviderRegistry
from starsystem_tools.definitions import Definition, DefinitionPool
from starsystem_tools.generator import (
    GenerationContext,
    find_moon_definition,
    find_planet_definition,
)
from starsystem_tools.settings import AllocationPolicy, DefinitionLists, GeneratorSettings


def _ctx(pool: DefinitionPool, policy: AllocationPolicy, seed: int = 1) -> GenerationContext:
    settings = GeneratorSettings(allocation_policy=policy)
    return GenerationContext.create(settings, pool, AsteroidProviderRegistry(), seed)


def test_unique_exhausts_pool(pool: DefinitionPool) -> None:
    """N searches yield N distinct definitions; the next finds nothing."""
    ctx = _ctx(pool, AllocationPolicy.UNIQUE)
    n = len(pool.planets)
    picks = [find_planet_definition(ctx, 1e12) for _ in range(n)]
    assert None not in picks
    assert len({d.subtype_id for d in picks}) == n
    assert find_planet_definition(ctx, 1e12) is None
    assert len(pool.planets) == n


def test_repeatable_keeps_pool(pool: DefinitionPool) -> None:
    ctx = _ctx(pool, AllocationPolicy.REPEATABLE)
    for _ in range(20):
        assert find_planet_definition(ctx, 1e12) is not None
    assert len(ctx.pool.planets) == len(pool.planets)


def test_mandatory_first_drains_mandatory_pool() -> None:
    defs = [Definition('A', 1.0), Definition('B', 1.0), Definition('M1', 1.0), Definition('M2', 1.0)]
    pool = DefinitionPool.from_definitions(defs, DefinitionLists(moons=[], mandatory=['M1', 'M2']))
    ctx = _ctx(pool, AllocationPolicy.MANDATORY_FIRST)
    first = {find_planet_definition(ctx, 1e12).subtype_id for _ in range(2)}
    assert first == {'M1', 'M2'}
    assert ctx.pool.mandatory == []
    third = find_planet_definition(ctx, 1e12)
    assert third is not None
    assert len(ctx.pool.planets) == 3


def test_search_prefers_fitting_definition() -> None:
    """The only definition under the size limit is found."""
    defs = [Definition(f'Big{i}', 1.0) for i in range(5)] + [Definition('Small', 0.01)]
    pool = DefinitionPool.from_definitions(defs, DefinitionLists(moons=[]))
    ctx = _ctx(pool, AllocationPolicy.REPEATABLE)
    for _ in range(5):
        assert find_planet_definition(ctx, 20000.0).subtype_id == 'Small'


def test_search_accepts_oversized_when_nothing_fits() -> None:
    defs = [Definition('Big', 1.0)]
    pool = DefinitionPool.from_definitions(defs, DefinitionLists(moons=[]))
    ctx = _ctx(pool, AllocationPolicy.REPEATABLE)
    assert find_planet_definition(ctx, 1.0).subtype_id == 'Big'


def test_empty_pool_finds_nothing() -> None:
    ctx = _ctx(DefinitionPool(), AllocationPolicy.REPEATABLE)
    assert find_planet_definition(ctx, 1e12) is None
    assert find_moon_definition(ctx, 1e12) is None


def test_moon_search(pool: DefinitionPool) -> None:
    """Moons fit under 75% of the parent; UNIQUE consumes them."""
    ctx = _ctx(pool, AllocationPolicy.UNIQUE)
    # Luna ~37947 m, Pebble ~26833 m; only Pebble fits under 0.75 * 40000.
    assert find_moon_definition(ctx, 40000.0).subtype_id == 'Pebble'
    assert [d.subtype_id for d in ctx.pool.moons] == ['Luna']
    assert find_moon_definition(ctx, 40000.0).subtype_id == 'Luna'
    assert find_moon_definition(ctx, 40000.0) is None


def test_moon_search_repeatable_keeps_pool(pool: DefinitionPool) -> None:
    ctx = _ctx(pool, AllocationPolicy.MANDATORY_FIRST)
    for _ in range(5):
        assert find_moon_definition(ctx, 1e9) is not None
    assert len(ctx.pool.moons) == 2
