"""Asteroid formation provider base class and shape contract."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Generic, Protocol, TypeVar

import numpy as np

from starsystem_tools.geometry import Vec3
from starsystem_tools.model import AsteroidFormationBody, PlanetBody

logger = logging.getLogger(__name__)

DataT = TypeVar('DataT')


class AsteroidShape(Protocol):
    """Spatial query surface of an asteroid formation."""

    def closest_point(self, point: Vec3) -> Vec3: ...

    def representative_point(self) -> Vec3: ...


def new_object_id(rng: np.random.Generator) -> uuid.UUID:
    """Random version-4 UUID drawn from ``rng`` (reproducible for a seed)."""
    return uuid.UUID(bytes=rng.bytes(16), version=4)


def rotation_matrix(angles_deg: Vec3) -> np.ndarray:
    """Rotation matrix Rx @ Ry @ Rz for Euler angles in degrees."""
    ax, ay, az = (np.deg2rad(a) for a in angles_deg)
    cx, sx = np.cos(ax), np.sin(ax)
    cy, sy = np.cos(ay), np.sin(ay)
    cz, sz = np.cos(az), np.sin(az)
    rx = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]], dtype=np.float64)
    ry = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]], dtype=np.float64)
    rz = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]], dtype=np.float64)
    return rx @ ry @ rz


def as_vec3(arr: np.ndarray) -> Vec3:
    return (float(arr[0]), float(arr[1]), float(arr[2]))


class AsteroidObjectProvider(ABC, Generic[DataT]):
    """Generates asteroid formations of one type and keeps their shape data.

    The tree body only records type name and piece sizes; each provider
    holds per-instance data keyed by body id and persists it through
    ``instance_data``/``load_instance``.
    """

    def __init__(self, size_range: tuple[float, float] = (256.0, 1024.0)) -> None:
        self.size_range = size_range
        self._instances: dict[uuid.UUID, DataT] = {}

    @abstractmethod
    def type_name(self) -> str:
        """Registry key of this provider."""

    @abstractmethod
    def is_system_generatable(self) -> bool:
        """True if the star system generator may place this formation type."""

    @abstractmethod
    def generate_instance(
        self,
        index: int,
        parent: PlanetBody | None,
        orbit_distance: float,
        rng: np.random.Generator,
    ) -> AsteroidFormationBody | None:
        """Create a new formation, or None if this provider cannot place one."""

    @abstractmethod
    def shape_for_data(self, data: DataT) -> AsteroidShape:
        """Shape for instance data."""

    @abstractmethod
    def _data_to_dict(self, data: DataT) -> dict[str, Any]: ...

    @abstractmethod
    def _data_from_dict(self, d: dict[str, Any]) -> DataT: ...

    def _register(self, body: AsteroidFormationBody, data: DataT) -> AsteroidFormationBody:
        body.asteroid_type_name = self.type_name()
        self._instances[body.id] = data
        return body

    def instance(self, body_id: uuid.UUID) -> DataT | None:
        """Shape data stored for ``body_id``, or None."""
        return self._instances.get(body_id)

    def shape_for(self, body: AsteroidFormationBody) -> AsteroidShape | None:
        """Shape of ``body``, or None when this provider holds no data for it."""
        data = self._instances.get(body.id)
        if data is None:
            return None
        return self.shape_for_data(data)

    def instance_data(self, body: AsteroidFormationBody) -> dict[str, Any] | None:
        """JSON-safe form of the shape data of ``body``, or None if unknown."""
        data = self._instances.get(body.id)
        if data is None:
            return None
        return self._data_to_dict(data)

    def load_instance(self, body: AsteroidFormationBody, d: dict[str, Any]) -> bool:
        """Restore persisted data for ``body``; False (logged) if malformed."""
        try:
            data = self._data_from_dict(d)
        except (KeyError, TypeError, ValueError) as e:
            logger.error('Bad %s data for %s: %s', self.type_name(), body.id, e)
            return False
        self._instances[body.id] = data
        return True

    def remove_instance(self, body_id: uuid.UUID) -> bool:
        """Drop the data of ``body_id``; False if there was none."""
        return self._instances.pop(body_id, None) is not None

    def clear(self) -> None:
        self._instances.clear()
