"""Planet definitions and the categorized definition pool."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable

from starsystem_tools.constants import VANILLA_PLANETS
from starsystem_tools.settings import DefinitionLists

logger = logging.getLogger(__name__)


class DefinitionCategory(str, Enum):
    PLANETS = 'planets'
    SUNS = 'suns'
    GAS_GIANTS = 'gas_giants'
    MOONS = 'moons'
    MANDATORY = 'mandatory'


@dataclass(frozen=True)
class Definition:
    """A planet generator definition: subtype id and surface gravity (g)."""

    subtype_id: str
    surface_gravity: float
    display_name: str = ''

    @property
    def name(self) -> str:
        return self.display_name or self.subtype_id


# Built-in catalog: the vanilla planet subtypes and their surface gravity.
_DEFAULT_CATALOG: tuple[Definition, ...] = (
    Definition('Alien', 1.1, 'Alien Planet'),
    Definition('EarthLike', 1.0, 'Earthlike'),
    Definition('EarthLikeTutorial', 1.0, 'Earthlike Tutorial'),
    Definition('Europa', 0.25, 'Europa'),
    Definition('Mars', 0.9, 'Mars'),
    Definition('MarsTutorial', 0.9, 'Mars Tutorial'),
    Definition('Moon', 0.25, 'Moon'),
    Definition('MoonTutorial', 0.25, 'Moon Tutorial'),
    Definition('Pertam', 1.2, 'Pertam'),
    Definition('Titan', 0.25, 'Titan'),
    Definition('Triton', 1.0, 'Triton'),
)


def default_definitions() -> list[Definition]:
    """Return the built-in definition catalog."""
    return list(_DEFAULT_CATALOG)


def load_definitions(path: str | Path) -> list[Definition]:
    """Read a JSON catalog ``{"definitions": [{"subtype_id", "surface_gravity", ...}]}``.

    Entries missing a subtype id or with non-numeric gravity are logged and
    skipped.

    Raises:
        ValueError: If the file is not valid JSON or has no definitions list.
        OSError: If the file cannot be read.
    """
    p = Path(path)
    try:
        with p.open(encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f'Invalid definition catalog {p}: {e}') from e
    entries = data.get('definitions') if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ValueError(f'Definition catalog {p} has no "definitions" list')
    out: list[Definition] = []
    for i, entry in enumerate(entries):
        try:
            subtype = str(entry['subtype_id']).strip()
            gravity = float(entry['surface_gravity'])
        except (KeyError, TypeError, ValueError) as e:
            logger.error('Definition %d in %s is invalid: %s', i, p, e)
            continue
        if not subtype or gravity < 0:
            logger.error('Definition %d in %s is invalid: %r', i, p, entry)
            continue
        out.append(Definition(subtype, gravity, str(entry.get('display_name', ''))))
    return out


@dataclass
class DefinitionPool:
    """Definitions sorted into categories once, after filtering.

    Moon and sun definitions only appear in their own category; every other
    definition is a planet, and may additionally be mandatory or a gas giant.
    """

    planets: list[Definition] = field(default_factory=list)
    suns: list[Definition] = field(default_factory=list)
    gas_giants: list[Definition] = field(default_factory=list)
    moons: list[Definition] = field(default_factory=list)
    mandatory: list[Definition] = field(default_factory=list)

    @classmethod
    def from_definitions(
        cls,
        definitions: Iterable[Definition],
        lists: DefinitionLists | None = None,
        allow_vanilla: bool = True,
    ) -> DefinitionPool:
        """Filter and categorize definitions.

        Parameters:
            definitions: All available definitions.
            lists: Blacklist and category lists (defaults if None).
            allow_vanilla: False drops the built-in vanilla subtypes.
        """
        lists = lists or DefinitionLists()
        blacklist = set(lists.blacklist)
        pool = cls()
        for d in definitions:
            sid = d.subtype_id
            if sid in blacklist:
                continue
            if not allow_vanilla and sid in VANILLA_PLANETS:
                continue
            if sid in lists.moons:
                pool.moons.append(d)
                continue
            if sid in lists.suns:
                pool.suns.append(d)
                continue
            if sid in lists.mandatory:
                pool.mandatory.append(d)
            if sid in lists.gas_giants:
                pool.gas_giants.append(d)
            pool.planets.append(d)
        logger.debug(
            'Definition pool: %d planets, %d suns, %d gas giants, %d moons, %d mandatory',
            len(pool.planets),
            len(pool.suns),
            len(pool.gas_giants),
            len(pool.moons),
            len(pool.mandatory),
        )
        return pool

    def definitions_for(self, category: DefinitionCategory) -> list[Definition]:
        """Return the (live) list of definitions in ``category``."""
        return getattr(self, DefinitionCategory(category).value)

    def is_mandatory(self, subtype_id: str) -> bool:
        return any(d.subtype_id == subtype_id for d in self.mandatory)

    def is_gas_giant(self, definition: Definition) -> bool:
        return any(d.subtype_id == definition.subtype_id for d in self.gas_giants)

    def copy(self) -> DefinitionPool:
        """Independent copy whose lists can be consumed by one generation run."""
        return DefinitionPool(
            planets=list(self.planets),
            suns=list(self.suns),
            gas_giants=list(self.gas_giants),
            moons=list(self.moons),
            mandatory=list(self.mandatory),
        )
