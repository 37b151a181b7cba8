"""Asteroid formation providers and their registry."""

from __future__ import annotations

import logging

from starsystem_tools.asteroids.base import AsteroidObjectProvider, AsteroidShape
from starsystem_tools.asteroids.ring import AsteroidRingProvider
from starsystem_tools.asteroids.sphere import AsteroidSphereProvider
from starsystem_tools.constants import ASTEROID_RING_TYPE
from starsystem_tools.model import AsteroidFormationBody
from starsystem_tools.settings import GeneratorSettings

logger = logging.getLogger(__name__)

__all__ = [
    'AsteroidObjectProvider',
    'AsteroidProviderRegistry',
    'AsteroidRingProvider',
    'AsteroidShape',
    'AsteroidSphereProvider',
    'default_registry',
]


class AsteroidProviderRegistry:
    """Providers keyed by type name, in registration order."""

    def __init__(self) -> None:
        self._providers: dict[str, AsteroidObjectProvider] = {}

    def register(self, provider: AsteroidObjectProvider) -> None:
        """Add ``provider`` under its type name, replacing (with a warning) any previous one."""
        name = provider.type_name()
        if name in self._providers:
            logger.warning('Replacing asteroid provider %r', name)
        self._providers[name] = provider

    def get(self, type_name: str) -> AsteroidObjectProvider | None:
        """Provider registered as ``type_name``, or None."""
        return self._providers.get(type_name)

    @property
    def providers_by_type_name(self) -> dict[str, AsteroidObjectProvider]:
        """Copy of the type name to provider mapping."""
        return dict(self._providers)

    def system_generatable(self) -> list[AsteroidObjectProvider]:
        """Providers that opted in to star system generation."""
        return [p for p in self._providers.values() if p.is_system_generatable()]

    def ring_provider(self) -> AsteroidObjectProvider | None:
        """Provider used for planet rings, or None if none is registered."""
        return self._providers.get(ASTEROID_RING_TYPE)

    def shape_for(self, body: AsteroidFormationBody) -> AsteroidShape | None:
        """Shape of ``body`` via its provider; None if type or data is unknown."""
        provider = self._providers.get(body.asteroid_type_name)
        if provider is None:
            return None
        return provider.shape_for(body)

    def clear_instances(self) -> None:
        """Drop the shape data held by every provider."""
        for p in self._providers.values():
            p.clear()


def default_registry(settings: GeneratorSettings | None = None) -> AsteroidProviderRegistry:
    """Registry with the ring and sphere providers configured from ``settings``."""
    settings = settings or GeneratorSettings()
    size_range = (settings.min_asteroid_size, settings.max_asteroid_size)
    registry = AsteroidProviderRegistry()
    registry.register(
        AsteroidRingProvider(
            size_range,
            ring_name_format=settings.ring_name_format,
            belt_name_format=settings.belt_name_format,
        )
    )
    registry.register(AsteroidSphereProvider(size_range))
    return registry
