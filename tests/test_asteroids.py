"""Tests for asteroid providers, shapes and the provider registry."""

from __future__ import annotations

import math

import numpy as np
import pytest

from starsystem_tools.asteroids import (
    AsteroidProviderRegistry,
    AsteroidRingProvider,
    AsteroidSphereProvider,
    default_registry,
)
from starsystem_tools.asteroids.base import new_object_id, rotation_matrix
from starsystem_tools.asteroids.ring import AsteroidRingData, AsteroidRingShape
from starsystem_tools.asteroids.sphere import AsteroidSphereData, AsteroidSphereShape
from starsystem_tools.constants import ASTEROID_RING_TYPE, ASTEROID_SPHERE_TYPE
from starsystem_tools.geometry import distance
from starsystem_tools.model import AsteroidFormationBody, PlanetBody
from starsystem_tools.settings import GeneratorSettings


def test_rotation_matrix_is_orthonormal() -> None:
    rot = rotation_matrix((10.0, -20.0, 35.0))
    assert np.allclose(rot @ rot.T, np.eye(3))
    assert np.allclose(rotation_matrix((0.0, 0.0, 0.0)), np.eye(3))


def test_new_object_id_is_reproducible() -> None:
    a = new_object_id(np.random.default_rng(1))
    b = new_object_id(np.random.default_rng(1))
    assert a == b
    assert a.version == 4


@pytest.mark.parametrize(
    'point,expected',
    [
        ((1050.0, 0.0, 0.0), (1050.0, 0.0, 0.0)),
        ((2000.0, 0.0, 0.0), (1100.0, 0.0, 0.0)),
        ((0.0, 500.0, 0.0), (0.0, 1000.0, 0.0)),
        ((1050.0, 0.0, 40.0), (1050.0, 0.0, 5.0)),
    ],
)
def test_ring_closest_point(point, expected) -> None:
    shape = AsteroidRingShape(AsteroidRingData(center=(0.0, 0.0, 0.0), radius=1000.0, width=100.0, height=10.0))
    assert shape.closest_point(point) == pytest.approx(expected)


def test_tilted_ring_contains_its_representative_point() -> None:
    data = AsteroidRingData(center=(10.0, 20.0, 30.0), radius=500.0, width=50.0, height=5.0, angle_degrees=(15.0, -10.0, 5.0))
    shape = AsteroidRingShape(data)
    rep = shape.representative_point()
    assert distance(shape.closest_point(rep), rep) == pytest.approx(0.0, abs=1e-6)
    assert distance(rep, data.center) == pytest.approx(525.0)


def test_sphere_closest_point() -> None:
    shape = AsteroidSphereShape(AsteroidSphereData(center=(0.0, 0.0, 0.0), radius=1000.0, thickness=100.0))
    assert shape.closest_point((0.0, 0.0, 2000.0)) == pytest.approx((0.0, 0.0, 1050.0))
    assert shape.closest_point((10.0, 0.0, 0.0)) == pytest.approx((950.0, 0.0, 0.0))
    assert shape.closest_point((1000.0, 0.0, 0.0)) == pytest.approx((1000.0, 0.0, 0.0))
    assert shape.representative_point() == (1000.0, 0.0, 0.0)


def test_belt_generation() -> None:
    provider = AsteroidRingProvider()
    rng = np.random.default_rng(3)
    body = provider.generate_instance(2, None, 5_000_000, rng)
    assert isinstance(body, AsteroidFormationBody)
    assert body.asteroid_type_name == ASTEROID_RING_TYPE
    assert body.display_name == 'Belt Gamma'
    assert body.center_position == (0.0, 0.0, 0.0)
    data = provider.instance(body.id)
    assert data.radius == 5_000_000
    assert 250_000 <= data.width <= 500_000
    assert all(abs(a) <= 5.0 for a in data.angle_degrees)
    assert provider.generate_instance(0, None, 0, rng) is None


def test_ring_needs_parent_diameter() -> None:
    provider = AsteroidRingProvider()
    rng = np.random.default_rng(3)
    assert provider.generate_instance(0, PlanetBody(display_name='P', diameter=0.0), 0, rng) is None


def test_sphere_provider_not_generatable() -> None:
    provider = AsteroidSphereProvider()
    assert provider.type_name() == ASTEROID_SPHERE_TYPE
    assert not provider.is_system_generatable()
    body = provider.generate_instance(0, PlanetBody(display_name='P', diameter=100.0), 0, np.random.default_rng(0))
    assert body.display_name == 'Sphere Alpha'
    assert 150.0 <= provider.instance(body.id).radius <= 300.0


def test_instance_data_survives_reload() -> None:
    provider = AsteroidRingProvider()
    body = provider.generate_instance(0, None, 1_000_000, np.random.default_rng(8))
    saved = provider.instance_data(body)
    original = provider.instance(body.id)

    fresh = AsteroidRingProvider()
    assert fresh.load_instance(body, saved)
    assert fresh.instance(body.id) == original
    assert fresh.shape_for(body).representative_point() == pytest.approx(
        provider.shape_for(body).representative_point()
    )


def test_malformed_instance_data_is_rejected() -> None:
    provider = AsteroidSphereProvider()
    body = AsteroidFormationBody(asteroid_type_name=ASTEROID_SPHERE_TYPE)
    assert not provider.load_instance(body, {'center': [0, 0, 0]})
    assert not provider.load_instance(body, {'center': 'x', 'radius': 1, 'thickness': 1})
    assert provider.shape_for(body) is None
    assert provider.instance_data(body) is None


def test_remove_and_clear_instances() -> None:
    provider = AsteroidRingProvider()
    rng = np.random.default_rng(0)
    a = provider.generate_instance(0, None, 1000.0, rng)
    b = provider.generate_instance(1, None, 2000.0, rng)
    assert provider.remove_instance(a.id)
    assert not provider.remove_instance(a.id)
    assert provider.instance(b.id) is not None
    provider.clear()
    assert provider.instance(b.id) is None


def test_default_registry() -> None:
    settings = GeneratorSettings(min_asteroid_size=10.0, max_asteroid_size=20.0, belt_name_format='Field {number}')
    registry = default_registry(settings)
    assert set(registry.providers_by_type_name) == {ASTEROID_RING_TYPE, ASTEROID_SPHERE_TYPE}
    assert [p.type_name() for p in registry.system_generatable()] == [ASTEROID_RING_TYPE]
    ring = registry.ring_provider()
    body = ring.generate_instance(0, None, 1000.0, np.random.default_rng(0))
    assert body.size_range == (10.0, 20.0)
    assert body.display_name == 'Field 1'
    assert registry.shape_for(body) is not None
    registry.clear_instances()
    assert registry.shape_for(body) is None


def test_registry_unknown_type() -> None:
    registry = AsteroidProviderRegistry()
    assert registry.get(ASTEROID_RING_TYPE) is None
    assert registry.ring_provider() is None
    assert registry.shape_for(AsteroidFormationBody(asteroid_type_name='Nope')) is None


def test_register_replaces_same_type(caplog: pytest.LogCaptureFixture) -> None:
    registry = AsteroidProviderRegistry()
    first = AsteroidRingProvider()
    second = AsteroidRingProvider()
    registry.register(first)
    registry.register(second)
    assert registry.get(ASTEROID_RING_TYPE) is second
    assert 'Replacing' in caplog.text


def test_ring_shape_distance_is_never_negative() -> None:
    shape = AsteroidRingShape(AsteroidRingData(center=(0.0, 0.0, 0.0), radius=10.0, width=5.0, height=1.0))
    for angle in range(0, 360, 30):
        a = math.radians(angle)
        p = (100.0 * math.cos(a), 100.0 * math.sin(a), 3.0)
        assert distance(shape.closest_point(p), p) > 0.0
