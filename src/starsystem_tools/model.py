"""System object tree: bodies of a star system and whole-tree operations."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from starsystem_tools.constants import ASTEROID_RING_TYPE
from starsystem_tools.geometry import ORIGIN, Vec3

logger = logging.getLogger(__name__)

# Parent id of the root; never assigned to a body.
EMPTY_ID = uuid.UUID(int=0)


class ObjectKind(str, Enum):
    """Tag discriminating the body variants of the system tree."""

    PLANET = 'planet'
    MOON = 'moon'
    ASTEROIDS = 'asteroids'
    EMPTY = 'empty'


@dataclass(eq=False)
class SystemObject:
    """A node of the system tree.

    Positions are absolute world coordinates. ``children`` are owned by this
    node; each child appears in exactly one parent's list. Nodes compare and
    hash by identity.
    """

    kind: ObjectKind = ObjectKind.EMPTY
    display_name: str = ''
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    center_position: Vec3 = ORIGIN
    parent_id: uuid.UUID = EMPTY_ID
    children: list[SystemObject] = field(default_factory=list)

    def add_child(self, child: SystemObject) -> None:
        """Attach ``child`` and point its parent_id at this node.

        A child already attached (same id) is left as is.

        Raises:
            ValueError: If ``child`` is this node or contains it in its subtree.
        """
        if child is self or any(o is self for o in child.all_children()):
            raise ValueError(f'Attaching {child.display_name!r} would create a cycle')
        child.parent_id = self.id
        if any(c.id == child.id for c in self.children):
            return
        self.children.append(child)

    def remove_child(self, child_id: uuid.UUID) -> SystemObject | None:
        """Detach the direct child with ``child_id``; return it or None."""
        for i, c in enumerate(self.children):
            if c.id == child_id:
                return self.children.pop(i)
        return None

    def child_count(self) -> int:
        """Number of descendants of this node (the node itself excluded)."""
        return sum(1 + c.child_count() for c in self.children)

    def all_children(self) -> list[SystemObject]:
        """All descendants, depth first, each exactly once."""
        out: list[SystemObject] = []
        for c in self.children:
            out.append(c)
            out.extend(c.all_children())
        return out


@dataclass(eq=False)
class PlanetBody(SystemObject):
    """Planet or moon (same fields, distinguished by ``kind``).

    ``generated`` flips once, when the body is spawned in the world, and
    ``entity_id`` then holds the spawned entity handle. A moon is spawned
    together with its parent planet.
    """

    kind: ObjectKind = ObjectKind.PLANET
    subtype_id: str = ''
    diameter: float = 0.0
    generated: bool = False
    entity_id: int = 0

    def __post_init__(self) -> None:
        if self.kind not in (ObjectKind.PLANET, ObjectKind.MOON):
            raise ValueError(f'PlanetBody kind must be planet or moon, got {self.kind}')
        if self.diameter < 0:
            raise ValueError(f'Diameter must be >= 0, got {self.diameter}')

    @property
    def is_moon(self) -> bool:
        return self.kind is ObjectKind.MOON

    def mark_generated(self, entity_id: int) -> None:
        """Record that the body was spawned as entity ``entity_id`` (one-way).

        Raises:
            ValueError: If already generated or ``entity_id`` is 0.
        """
        if self.generated:
            raise ValueError(f'{self.display_name!r} is already generated')
        if entity_id == 0:
            raise ValueError('Entity id 0 is reserved for ungenerated bodies')
        self.generated = True
        self.entity_id = entity_id

    def try_get_ring(self) -> AsteroidFormationBody | None:
        """Return the ring formation attached to this planet, or None."""
        for c in self.children:
            if isinstance(c, AsteroidFormationBody) and c.asteroid_type_name == ASTEROID_RING_TYPE:
                return c
        return None


@dataclass(eq=False)
class AsteroidFormationBody(SystemObject):
    """Asteroid ring, belt or field; shape data lives with its provider."""

    kind: ObjectKind = ObjectKind.ASTEROIDS
    asteroid_type_name: str = ''
    size_range: tuple[float, float] = (0.0, 0.0)

    def __post_init__(self) -> None:
        if self.kind is not ObjectKind.ASTEROIDS:
            raise ValueError(f'AsteroidFormationBody kind must be asteroids, got {self.kind}')


@dataclass
class SystemData:
    """Holder of the system root and whole-tree queries.

    Lookups are linear scans over the materialized tree; a system holds tens
    of bodies.
    """

    center_object: SystemObject | None = None

    def count(self) -> int:
        """Total number of bodies including the root; 0 without a root."""
        if self.center_object is None:
            return 0
        return 1 + self.center_object.child_count()

    def all_objects(self) -> list[SystemObject]:
        """Root and all descendants, each exactly once."""
        if self.center_object is None:
            return []
        return [self.center_object, *self.center_object.all_children()]

    def objects_of_kind(self, kind: ObjectKind) -> list[SystemObject]:
        """All bodies tagged ``kind``, root included."""
        return [o for o in self.all_objects() if o.kind is kind]

    def find_by_id(self, obj_id: uuid.UUID) -> SystemObject | None:
        """Return the body with ``obj_id`` or None. EMPTY_ID is never found."""
        if obj_id == EMPTY_ID:
            return None
        for o in self.all_objects():
            if o.id == obj_id:
                return o
        return None

    def object_exists(self, obj_id: uuid.UUID) -> bool:
        """True if a body with ``obj_id`` is in the tree."""
        return self.find_by_id(obj_id) is not None

    def parent_of(self, obj_id: uuid.UUID) -> SystemObject | None:
        """Return the body whose children hold ``obj_id``, or None.

        The parent is found from the tree structure, not from ``parent_id``.
        """
        for o in self.all_objects():
            if any(c.id == obj_id for c in o.children):
                return o
        return None

    def remove(self, obj_id: uuid.UUID) -> bool:
        """Remove a non-root body, moving its direct children up to its parent.

        Returns:
            False if ``obj_id`` is the root, unknown, or not held by any
            parent; True after removal.
        """
        if self.center_object is None or obj_id == self.center_object.id:
            return False
        parent = self.parent_of(obj_id)
        if parent is None:
            logger.warning('Cannot remove %s: not attached to the system tree', obj_id)
            return False
        obj = parent.remove_child(obj_id)
        for child in list(obj.children):
            parent.add_child(child)
        obj.children.clear()
        return True

    def mark_generated(self, obj_id: uuid.UUID, entity_id: int) -> bool:
        """Mark the planet or moon ``obj_id`` as spawned; False if not found.

        Moons are spawned together with their planet, so a moon can only be
        marked once its parent planet is. Each moon keeps its own entity id.

        Raises:
            ValueError: If a moon's parent planet is not generated yet, or
                see PlanetBody.mark_generated.
        """
        obj = self.find_by_id(obj_id)
        if not isinstance(obj, PlanetBody):
            return False
        if obj.is_moon:
            parent = self.parent_of(obj_id)
            if isinstance(parent, PlanetBody) and not parent.generated:
                raise ValueError(
                    f'Moon {obj.display_name!r} cannot be generated before planet {parent.display_name!r}'
                )
        obj.mark_generated(entity_id)
        return True


# ---------------------------------------------------------------------------
# Dict form (JSON-safe)
# ---------------------------------------------------------------------------


def object_to_dict(obj: SystemObject) -> dict[str, Any]:
    """Convert a body and its subtree to a JSON-safe dict."""
    d: dict[str, Any] = {
        'kind': obj.kind.value,
        'display_name': obj.display_name,
        'id': str(obj.id),
        'center_position': list(obj.center_position),
        'parent_id': str(obj.parent_id),
    }
    if isinstance(obj, PlanetBody):
        d['subtype_id'] = obj.subtype_id
        d['diameter'] = obj.diameter
        d['generated'] = obj.generated
        d['entity_id'] = obj.entity_id
    elif isinstance(obj, AsteroidFormationBody):
        d['asteroid_type_name'] = obj.asteroid_type_name
        d['size_range'] = list(obj.size_range)
    d['children'] = [object_to_dict(c) for c in obj.children]
    return d


def object_from_dict(d: dict[str, Any]) -> SystemObject:
    """Rebuild a body and its subtree from ``object_to_dict`` output.

    Children are attached with ``add_child``, so their parent ids follow the
    nesting.

    Raises:
        ValueError: On an unknown kind or malformed field.
        KeyError: On a missing required field.
    """
    kind = ObjectKind(d['kind'])
    x, y, z = (float(v) for v in d.get('center_position', ORIGIN))
    common: dict[str, Any] = {
        'kind': kind,
        'display_name': str(d.get('display_name', '')),
        'id': _parse_id(d['id']),
        'center_position': (x, y, z),
    }
    obj: SystemObject
    if kind in (ObjectKind.PLANET, ObjectKind.MOON):
        obj = PlanetBody(
            **common,
            subtype_id=str(d.get('subtype_id', '')),
            diameter=float(d.get('diameter', 0.0)),
            generated=bool(d.get('generated', False)),
            entity_id=int(d.get('entity_id', 0)),
        )
    elif kind is ObjectKind.ASTEROIDS:
        lo, hi = (float(v) for v in d.get('size_range', (0.0, 0.0)))
        obj = AsteroidFormationBody(
            **common,
            asteroid_type_name=str(d.get('asteroid_type_name', '')),
            size_range=(lo, hi),
        )
    else:
        obj = SystemObject(**common)
    for cd in d.get('children', []):
        child = object_from_dict(cd)
        if any(c.id == child.id for c in obj.children):
            raise ValueError(f'Duplicate object id {child.id}')
        obj.add_child(child)
    return obj


def _parse_id(value: Any) -> uuid.UUID:
    if not isinstance(value, str):
        raise ValueError(f'Object id must be a string, got {value!r}')
    return uuid.UUID(value)


def system_data_to_dict(data: SystemData) -> dict[str, Any]:
    """JSON-safe dict of the whole tree (``center_object`` is None when empty)."""
    center = None if data.center_object is None else object_to_dict(data.center_object)
    return {'center_object': center}


def system_data_from_dict(d: dict[str, Any]) -> SystemData:
    """Rebuild SystemData from ``system_data_to_dict`` output.

    Parent ids are rebuilt from the nesting; stored ``parent_id`` values are
    ignored.

    Raises:
        ValueError: On a malformed body or an id used more than once.
    """
    center = d.get('center_object')
    if center is None:
        return SystemData()
    data = SystemData(center_object=object_from_dict(center))
    ids = [o.id for o in data.all_objects()]
    if len(ids) != len(set(ids)):
        raise ValueError('Duplicate object ids in system data')
    return data
