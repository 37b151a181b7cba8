"""Generator settings and definition category lists (JSON file or defaults)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class AllocationPolicy(str, Enum):
    """How definition pools change after a definition is picked.

    REPEATABLE leaves pools untouched, UNIQUE removes the picked definition,
    MANDATORY_FIRST drains the mandatory pool before the general pool and
    removes each pick from the pool it came from.
    """

    REPEATABLE = 'repeatable'
    UNIQUE = 'unique'
    MANDATORY_FIRST = 'mandatory_first'


@dataclass
class DefinitionLists:
    """Subtype-id lists that classify and filter planet definitions."""

    blacklist: list[str] = field(default_factory=list)
    moons: list[str] = field(
        default_factory=lambda: ['Moon', 'Titan', 'Europa', 'MoonTutorial']
    )
    suns: list[str] = field(default_factory=list)
    gas_giants: list[str] = field(default_factory=list)
    mandatory: list[str] = field(default_factory=list)


@dataclass
class GeneratorSettings:
    """Read-only generation configuration. Distances are meters.

    ``world_size`` < 0 means unbounded.
    """

    world_size: float = -1.0
    min_planets: int = 5
    max_planets: int = 15
    min_asteroid_objects: int = 5
    max_asteroid_objects: int = 15
    min_orbit_distance: int = 4_000_000
    max_orbit_distance: int = 10_000_000
    planet_size_multiplier: float = 1.0
    planet_size_cap: float = 1_200_000.0
    allocation_policy: AllocationPolicy = AllocationPolicy.UNIQUE
    allow_vanilla_planets: bool = True
    min_asteroid_size: float = 256.0
    max_asteroid_size: float = 1024.0
    planet_name_format: str = '{subtype} {roman}'
    moon_name_format: str = '{parent} {letter}'
    ring_name_format: str = '{parent} Ring'
    belt_name_format: str = 'Belt {greek}'
    definition_lists: DefinitionLists = field(default_factory=DefinitionLists)

    def __post_init__(self) -> None:
        self.allocation_policy = AllocationPolicy(self.allocation_policy)
        if isinstance(self.definition_lists, dict):
            self.definition_lists = DefinitionLists(**self.definition_lists)
        for name in (
            'min_planets',
            'max_planets',
            'min_asteroid_objects',
            'max_asteroid_objects',
            'min_orbit_distance',
            'max_orbit_distance',
        ):
            setattr(self, name, int(getattr(self, name)))
        for lo_name, hi_name in (
            ('min_planets', 'max_planets'),
            ('min_asteroid_objects', 'max_asteroid_objects'),
            ('min_orbit_distance', 'max_orbit_distance'),
            ('min_asteroid_size', 'max_asteroid_size'),
        ):
            lo = getattr(self, lo_name)
            hi = getattr(self, hi_name)
            if lo < 0:
                raise ValueError(f'{lo_name} must be >= 0, got {lo}')
            if hi < lo:
                raise ValueError(f'{hi_name} ({hi}) must be >= {lo_name} ({lo})')
        if self.planet_size_multiplier < 0:
            raise ValueError(f'planet_size_multiplier must be >= 0, got {self.planet_size_multiplier}')
        if self.planet_size_cap < 0:
            raise ValueError(f'planet_size_cap must be >= 0, got {self.planet_size_cap}')

    @property
    def bounded(self) -> bool:
        """True when a world size cap applies."""
        return self.world_size >= 0


def settings_from_dict(data: dict[str, Any]) -> GeneratorSettings:
    """Build GeneratorSettings from a dict; unknown keys are logged and skipped.

    Raises:
        ValueError: If values fail validation.
    """
    known = {f.name for f in fields(GeneratorSettings)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning('Ignoring unknown settings key %r', key)
            continue
        kwargs[key] = value
    lists = kwargs.pop('definition_lists', None)
    if lists is not None:
        list_keys = {f.name for f in fields(DefinitionLists)}
        unknown = set(lists) - list_keys
        for key in sorted(unknown):
            logger.warning('Ignoring unknown definition list %r', key)
        kwargs['definition_lists'] = DefinitionLists(
            **{k: [str(s) for s in v] for k, v in lists.items() if k in list_keys}
        )
    return GeneratorSettings(**kwargs)


def load_settings(path: str | Path | None) -> GeneratorSettings:
    """Load settings from a JSON file; defaults when ``path`` is None or missing.

    Raises:
        ValueError: If the file is not valid JSON or values fail validation.
    """
    if path is None:
        return GeneratorSettings()
    p = Path(path)
    if not p.exists():
        logger.info('Settings file %s not found; using defaults', p)
        return GeneratorSettings()
    try:
        with p.open(encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f'Invalid settings file {p}: {e}') from e
    if not isinstance(data, dict):
        raise ValueError(f'Settings file {p} must contain a JSON object')
    return settings_from_dict(data)
