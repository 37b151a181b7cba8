"""World-scoped persistence of the system tree (SolarSystem.json)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from starsystem_tools.asteroids import AsteroidProviderRegistry
from starsystem_tools.constants import STORAGE_FILE, STORAGE_VERSION
from starsystem_tools.model import (
    AsteroidFormationBody,
    SystemData,
    system_data_from_dict,
    system_data_to_dict,
)

logger = logging.getLogger(__name__)


def storage_path(world_dir: str | Path) -> Path:
    """Path of the system file inside ``world_dir``."""
    return Path(world_dir) / STORAGE_FILE


def _asteroid_data(data: SystemData, registry: AsteroidProviderRegistry | None) -> dict[str, Any]:
    out: dict[str, dict[str, Any]] = {}
    if registry is None:
        return out
    for obj in data.all_objects():
        if not isinstance(obj, AsteroidFormationBody):
            continue
        provider = registry.get(obj.asteroid_type_name)
        if provider is None:
            logger.warning('No provider %r for %s; shape data not saved', obj.asteroid_type_name, obj.id)
            continue
        inst = provider.instance_data(obj)
        if inst is not None:
            out.setdefault(obj.asteroid_type_name, {})[str(obj.id)] = inst
    return out


def save_system_data(
    world_dir: str | Path,
    data: SystemData,
    registry: AsteroidProviderRegistry | None = None,
) -> bool:
    """Write ``data`` (and provider shape data) to the world's system file.

    Returns:
        True on success, False (logged) if the file could not be written.
    """
    path = storage_path(world_dir)
    payload = {
        'version': STORAGE_VERSION,
        'system': system_data_to_dict(data),
        'asteroids': _asteroid_data(data, registry),
    }
    tmp = path.with_suffix(path.suffix + '.tmp')
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open('w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2)
        tmp.replace(path)
    except OSError as e:
        logger.error('Failed to save system data to %s: %s', path, e)
        return False
    logger.debug('Saved %d system objects to %s', data.count(), path)
    return True


def load_system_data(
    world_dir: str | Path,
    registry: AsteroidProviderRegistry | None = None,
) -> SystemData:
    """Read the world's system file.

    A missing, unreadable or malformed file yields an empty SystemData. Shape
    data of asteroid formations is handed back to their providers.
    """
    path = storage_path(world_dir)
    if not path.exists():
        return SystemData()
    try:
        with path.open(encoding='utf-8') as f:
            payload = json.load(f)
        data = system_data_from_dict(payload['system'])
    except (OSError, json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
        logger.error('Failed to load system data from %s: %s', path, e)
        return SystemData()

    if registry is not None:
        asteroids = payload.get('asteroids') or {}
        if not isinstance(asteroids, dict):
            logger.error('Ignoring malformed asteroid data in %s', path)
            asteroids = {}
        for obj in data.all_objects():
            if not isinstance(obj, AsteroidFormationBody):
                continue
            provider = registry.get(obj.asteroid_type_name)
            by_id = asteroids.get(obj.asteroid_type_name) or {}
            inst = by_id.get(str(obj.id)) if isinstance(by_id, dict) else None
            if provider is None or not isinstance(inst, dict):
                logger.warning('No shape data for asteroid object %s (%s)', obj.display_name, obj.asteroid_type_name)
                continue
            provider.load_instance(obj, inst)
    logger.debug('Loaded %d system objects from %s', data.count(), path)
    return data
