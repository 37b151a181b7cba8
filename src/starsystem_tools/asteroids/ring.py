"""Asteroid rings around planets and asteroid belts around the system center."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from starsystem_tools.asteroids.base import (
    AsteroidObjectProvider,
    as_vec3,
    new_object_id,
    rotation_matrix,
)
from starsystem_tools.constants import ASTEROID_RING_TYPE
from starsystem_tools.geometry import ORIGIN, Vec3
from starsystem_tools.model import AsteroidFormationBody, PlanetBody
from starsystem_tools.naming import format_name

# Ring radius and width relative to the parent planet diameter
RING_RADIUS_MIN = 0.75
RING_RADIUS_MAX = 1.5
RING_WIDTH_MIN = 0.1
RING_WIDTH_MAX = 0.2
# Height relative to width
RING_HEIGHT_MIN = 0.1
RING_HEIGHT_MAX = 0.2
RING_MAX_TILT_DEG = 20.0
# Belt width relative to its orbit distance
BELT_WIDTH_MIN = 0.05
BELT_WIDTH_MAX = 0.1
BELT_MAX_TILT_DEG = 5.0


@dataclass
class AsteroidRingData:
    """Annulus from ``radius`` to ``radius + width``, ``height`` thick, tilted."""

    center: Vec3
    radius: float
    width: float
    height: float
    angle_degrees: Vec3 = ORIGIN


class AsteroidRingShape:
    """Shape of a ring: an annular slab in its own tilted XY plane."""

    def __init__(self, data: AsteroidRingData) -> None:
        self.data = data
        self._center = np.asarray(data.center, dtype=np.float64)
        self._rot = rotation_matrix(data.angle_degrees)

    def closest_point(self, point: Vec3) -> Vec3:
        """Nearest point of the slab to ``point`` (the point itself if inside)."""
        d = self.data
        local = self._rot.T @ (np.asarray(point, dtype=np.float64) - self._center)
        r = math.hypot(local[0], local[1])
        if r < 1e-9:
            ux, uy = 1.0, 0.0
        else:
            ux, uy = local[0] / r, local[1] / r
        rc = min(max(r, d.radius), d.radius + d.width)
        zc = min(max(local[2], -d.height / 2.0), d.height / 2.0)
        nearest = np.array([ux * rc, uy * rc, zc], dtype=np.float64)
        return as_vec3(self._center + self._rot @ nearest)

    def representative_point(self) -> Vec3:
        """Point in the middle of the ring band."""
        d = self.data
        local = np.array([d.radius + d.width / 2.0, 0.0, 0.0], dtype=np.float64)
        return as_vec3(self._center + self._rot @ local)


class AsteroidRingProvider(AsteroidObjectProvider[AsteroidRingData]):
    """Rings around a parent planet, belts around the origin otherwise."""

    def __init__(
        self,
        size_range: tuple[float, float] = (256.0, 1024.0),
        ring_name_format: str = '{parent} Ring',
        belt_name_format: str = 'Belt {greek}',
    ) -> None:
        super().__init__(size_range)
        self.ring_name_format = ring_name_format
        self.belt_name_format = belt_name_format

    def type_name(self) -> str:
        return ASTEROID_RING_TYPE

    def is_system_generatable(self) -> bool:
        return True

    def generate_instance(
        self,
        index: int,
        parent: PlanetBody | None,
        orbit_distance: float,
        rng: np.random.Generator,
    ) -> AsteroidFormationBody | None:
        if parent is not None:
            diameter = parent.diameter
            if diameter <= 0:
                return None
            width = diameter * rng.uniform(RING_WIDTH_MIN, RING_WIDTH_MAX)
            data = AsteroidRingData(
                center=parent.center_position,
                radius=diameter * rng.uniform(RING_RADIUS_MIN, RING_RADIUS_MAX),
                width=width,
                height=width * rng.uniform(RING_HEIGHT_MIN, RING_HEIGHT_MAX),
                angle_degrees=(
                    rng.uniform(-RING_MAX_TILT_DEG, RING_MAX_TILT_DEG),
                    rng.uniform(-RING_MAX_TILT_DEG, RING_MAX_TILT_DEG),
                    rng.uniform(-RING_MAX_TILT_DEG, RING_MAX_TILT_DEG),
                ),
            )
            name = format_name(self.ring_name_format, index, parent_name=parent.display_name)
        else:
            if orbit_distance <= 0:
                return None
            width = orbit_distance * rng.uniform(BELT_WIDTH_MIN, BELT_WIDTH_MAX)
            data = AsteroidRingData(
                center=ORIGIN,
                radius=float(orbit_distance),
                width=width,
                height=width * rng.uniform(RING_HEIGHT_MIN, RING_HEIGHT_MAX),
                angle_degrees=(
                    rng.uniform(-BELT_MAX_TILT_DEG, BELT_MAX_TILT_DEG),
                    rng.uniform(-BELT_MAX_TILT_DEG, BELT_MAX_TILT_DEG),
                    0.0,
                ),
            )
            name = format_name(self.belt_name_format, index)
        body = AsteroidFormationBody(
            id=new_object_id(rng),
            display_name=name,
            center_position=data.center,
            size_range=self.size_range,
        )
        return self._register(body, data)

    def shape_for_data(self, data: AsteroidRingData) -> AsteroidRingShape:
        return AsteroidRingShape(data)

    def _data_to_dict(self, data: AsteroidRingData) -> dict[str, Any]:
        return {
            'center': list(data.center),
            'radius': data.radius,
            'width': data.width,
            'height': data.height,
            'angle_degrees': list(data.angle_degrees),
        }

    def _data_from_dict(self, d: dict[str, Any]) -> AsteroidRingData:
        cx, cy, cz = (float(v) for v in d['center'])
        ax, ay, az = (float(v) for v in d.get('angle_degrees', ORIGIN))
        return AsteroidRingData(
            center=(cx, cy, cz),
            radius=float(d['radius']),
            width=float(d['width']),
            height=float(d['height']),
            angle_degrees=(ax, ay, az),
        )
