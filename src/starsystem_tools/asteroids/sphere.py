"""Hollow spherical asteroid shells."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from starsystem_tools.asteroids.base import AsteroidObjectProvider, new_object_id
from starsystem_tools.constants import ASTEROID_SPHERE_TYPE
from starsystem_tools.geometry import ORIGIN, Vec3, vadd, vsub
from starsystem_tools.model import AsteroidFormationBody, PlanetBody
from starsystem_tools.naming import format_name


@dataclass
class AsteroidSphereData:
    """Spherical shell of mean ``radius`` and ``thickness`` around ``center``."""

    center: Vec3
    radius: float
    thickness: float


class AsteroidSphereShape:
    def __init__(self, data: AsteroidSphereData) -> None:
        self.data = data

    def closest_point(self, point: Vec3) -> Vec3:
        d = self.data
        offset = vsub(point, d.center)
        n = math.sqrt(offset[0] ** 2 + offset[1] ** 2 + offset[2] ** 2)
        if n < 1e-9:
            offset, n = (1.0, 0.0, 0.0), 1.0
        inner = max(d.radius - d.thickness / 2.0, 0.0)
        target = min(max(n, inner), d.radius + d.thickness / 2.0)
        s = target / n
        return vadd(d.center, (offset[0] * s, offset[1] * s, offset[2] * s))

    def representative_point(self) -> Vec3:
        return vadd(self.data.center, (self.data.radius, 0.0, 0.0))


class AsteroidSphereProvider(AsteroidObjectProvider[AsteroidSphereData]):
    """Shells placed by hand around planets or the center; never system generated."""

    def __init__(
        self,
        size_range: tuple[float, float] = (256.0, 1024.0),
        name_format: str = 'Sphere {greek}',
    ) -> None:
        super().__init__(size_range)
        self.name_format = name_format

    def type_name(self) -> str:
        return ASTEROID_SPHERE_TYPE

    def is_system_generatable(self) -> bool:
        return False

    def generate_instance(
        self,
        index: int,
        parent: PlanetBody | None,
        orbit_distance: float,
        rng: np.random.Generator,
    ) -> AsteroidFormationBody | None:
        if parent is not None:
            center = parent.center_position
            radius = parent.diameter * rng.uniform(1.5, 3.0)
        else:
            center = ORIGIN
            radius = float(orbit_distance)
        if radius <= 0:
            return None
        data = AsteroidSphereData(
            center=center,
            radius=radius,
            thickness=radius * rng.uniform(0.05, 0.1),
        )
        body = AsteroidFormationBody(
            id=new_object_id(rng),
            display_name=format_name(self.name_format, index),
            center_position=center,
            size_range=self.size_range,
        )
        return self._register(body, data)

    def shape_for_data(self, data: AsteroidSphereData) -> AsteroidSphereShape:
        return AsteroidSphereShape(data)

    def _data_to_dict(self, data: AsteroidSphereData) -> dict[str, Any]:
        return {'center': list(data.center), 'radius': data.radius, 'thickness': data.thickness}

    def _data_from_dict(self, d: dict[str, Any]) -> AsteroidSphereData:
        cx, cy, cz = (float(v) for v in d['center'])
        return AsteroidSphereData(
            center=(cx, cy, cz),
            radius=float(d['radius']),
            thickness=float(d['thickness']),
        )
