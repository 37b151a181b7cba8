"""Shared fixtures: small definition pools, settings and registries."""

from __future__ import annotations

import pytest

from starsystem_tools.asteroids import AsteroidProviderRegistry, default_registry
from starsystem_tools.definitions import Definition, DefinitionPool
from starsystem_tools.settings import AllocationPolicy, DefinitionLists, GeneratorSettings


@pytest.fixture
def small_settings() -> GeneratorSettings:
    """Few bodies, short orbits, unbounded world."""
    return GeneratorSettings(
        min_planets=3,
        max_planets=3,
        min_asteroid_objects=2,
        max_asteroid_objects=2,
        min_orbit_distance=1_000_000,
        max_orbit_distance=2_000_000,
        allocation_policy=AllocationPolicy.UNIQUE,
    )


@pytest.fixture
def planet_defs() -> list[Definition]:
    return [
        Definition('Rocky', 0.5),
        Definition('Temperate', 1.0),
        Definition('Heavy', 1.5),
        Definition('Giant', 1.2),
        Definition('Luna', 0.1),
        Definition('Pebble', 0.05),
        Definition('Star', 4.0, 'Sol'),
    ]


@pytest.fixture
def lists() -> DefinitionLists:
    return DefinitionLists(moons=['Luna', 'Pebble'], suns=['Star'], gas_giants=['Giant'])


@pytest.fixture
def pool(planet_defs: list[Definition], lists: DefinitionLists) -> DefinitionPool:
    return DefinitionPool.from_definitions(planet_defs, lists)


@pytest.fixture
def registry() -> AsteroidProviderRegistry:
    return default_registry()
