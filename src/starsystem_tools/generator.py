"""Star system generator: seeded layout of orbits, planets, moons and asteroids.

Generation is a single synchronous pass. All randomness comes from one
``numpy.random.Generator`` owned by a GenerationContext, so the same seed,
settings, definitions and providers always produce the same tree. Definition
pools are copied into the context and consumed there according to the
allocation policy; the caller's pool is never modified.

Every stochastic search is bounded (see ``sampling.sample_until``): a search
that runs out of attempts accepts its last candidate instead of failing.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass

import numpy as np

from starsystem_tools.asteroids import AsteroidProviderRegistry
from starsystem_tools.asteroids.base import new_object_id
from starsystem_tools.constants import (
    GAS_GIANT_SIZE_FACTOR,
    MAX_DEF_FIND_ROUNDS,
    MAX_MOON_PLACEMENT_ROUNDS,
    MOON_DIAMETER_UNIT,
    MOON_GRAVITY_FACTOR,
    MOON_JITTER_MAX,
    MOON_JITTER_MIN,
    MOON_MAX_PARENT_FRACTION,
    PLANET_MAX_ELEVATION_DEG,
    PLANET_SIZE_PER_GRAVITY,
    RING_GRAVITY_FACTOR,
    SUN_SIZE_FACTOR,
    SYSTEM_CENTER_NAME,
)
from starsystem_tools.definitions import Definition, DefinitionPool
from starsystem_tools.geometry import ORIGIN, Vec3, distance, orbit_position, vadd
from starsystem_tools.model import (
    AsteroidFormationBody,
    ObjectKind,
    PlanetBody,
    SystemData,
    SystemObject,
)
from starsystem_tools.naming import format_name
from starsystem_tools.sampling import sample_until
from starsystem_tools.settings import AllocationPolicy, GeneratorSettings

logger = logging.getLogger(__name__)

_SEED_MASK = 0xFFFFFFFFFFFFFFFF


def derive_seed(world_seed: int, salt: int | None = None) -> int:
    """Combine the world's procedural seed with a salt into a generator seed.

    Without ``salt`` a fresh random value is used, so regenerating a world
    with the same base seed yields a different system.
    """
    if salt is None:
        salt = uuid.uuid4().int & 0xFFFFFFFF
    return (world_seed + salt) & _SEED_MASK


def calculate_diameter(
    definition: Definition, settings: GeneratorSettings, gas_giant: bool = False
) -> float:
    """Diameter in meters from surface gravity: min(sqrt(g) * 120000 * m, cap).

    The multiplier ``m`` is doubled for gas giants.
    """
    modifier = settings.planet_size_multiplier
    if gas_giant:
        modifier *= GAS_GIANT_SIZE_FACTOR
    size = math.sqrt(max(definition.surface_gravity, 0.0)) * PLANET_SIZE_PER_GRAVITY * modifier
    return min(size, settings.planet_size_cap)


@dataclass
class GenerationContext:
    """Everything one generation run reads and consumes."""

    settings: GeneratorSettings
    pool: DefinitionPool
    registry: AsteroidProviderRegistry
    rng: np.random.Generator
    planet_index: int = 0
    asteroid_index: int = 0

    @classmethod
    def create(
        cls,
        settings: GeneratorSettings,
        pool: DefinitionPool,
        registry: AsteroidProviderRegistry,
        seed: int,
    ) -> GenerationContext:
        """Context with a private copy of ``pool`` and a generator seeded by ``seed``."""
        return cls(settings, pool.copy(), registry, np.random.default_rng(seed))

    def diameter_of(self, definition: Definition) -> float:
        """Diameter of ``definition`` in meters, doubled multiplier for gas giants."""
        return calculate_diameter(definition, self.settings, self.pool.is_gas_giant(definition))

    def pick(self, definitions: list[Definition]) -> Definition:
        """Uniformly random entry of a non-empty ``definitions`` list."""
        return definitions[int(self.rng.integers(len(definitions)))]


# ---------------------------------------------------------------------------
# Definition search
# ---------------------------------------------------------------------------


def find_planet_definition(ctx: GenerationContext, max_diameter: float) -> Definition | None:
    """Pick a planet definition no larger than ``max_diameter`` if possible.

    Under MANDATORY_FIRST the mandatory pool is used while it has entries.
    After MAX_DEF_FIND_ROUNDS draws the last one is taken regardless of size.
    UNIQUE and MANDATORY_FIRST remove the pick from the pool it was drawn from.

    Returns:
        The definition, or None if the active pool is empty.
    """
    policy = ctx.settings.allocation_policy
    source = ctx.pool.planets
    if policy is AllocationPolicy.MANDATORY_FIRST and ctx.pool.mandatory:
        source = ctx.pool.mandatory
    if not source:
        logger.debug('No planet definitions left')
        return None
    definition, fits = sample_until(
        lambda: ctx.pick(source),
        lambda d: ctx.diameter_of(d) <= max_diameter,
        MAX_DEF_FIND_ROUNDS,
    )
    if not fits:
        logger.debug('No planet definition under %.0f m; using %s', max_diameter, definition.subtype_id)
    if policy is not AllocationPolicy.REPEATABLE:
        source.remove(definition)
    return definition


def find_moon_definition(ctx: GenerationContext, parent_diameter: float) -> Definition | None:
    """Pick a moon definition smaller than 75% of ``parent_diameter`` if possible.

    Returns:
        The definition, or None if no moon definitions are left.
    """
    moons = ctx.pool.moons
    if not moons:
        return None
    limit = parent_diameter * MOON_MAX_PARENT_FRACTION
    definition, _ = sample_until(
        lambda: ctx.pick(moons),
        lambda d: ctx.diameter_of(d) < limit,
        MAX_DEF_FIND_ROUNDS,
    )
    if ctx.settings.allocation_policy is AllocationPolicy.UNIQUE:
        moons.remove(definition)
    return definition


# ---------------------------------------------------------------------------
# Bodies
# ---------------------------------------------------------------------------


def generate_planet(
    ctx: GenerationContext, planet_index: int, size_fraction: float, orbit_distance: float
) -> PlanetBody | None:
    """Generate a planet (with optional ring and moons) at ``orbit_distance``.

    Parameters:
        ctx: Generation context.
        planet_index: 0-based planet number, used for naming.
        size_fraction: Fraction of the size cap the planet should fit under.
        orbit_distance: Distance from the system center in meters.

    Returns:
        The planet, or None if no planet definition is available.
    """
    rng = ctx.rng
    definition = find_planet_definition(ctx, ctx.settings.planet_size_cap * size_fraction)
    if definition is None:
        return None
    max_elevation = math.radians(PLANET_MAX_ELEVATION_DEG)
    azimuth = rng.uniform(0.0, 2.0 * math.pi)
    elevation = rng.uniform(-max_elevation, max_elevation)
    planet = PlanetBody(
        id=new_object_id(rng),
        display_name=format_name(
            ctx.settings.planet_name_format, planet_index, definition.subtype_id
        ),
        center_position=orbit_position(orbit_distance, azimuth, elevation),
        subtype_id=definition.subtype_id,
        diameter=ctx.diameter_of(definition),
    )
    logger.debug('Generating planet %s (%s)', planet.display_name, planet.subtype_id)

    gravity = definition.surface_gravity
    if rng.random() > RING_GRAVITY_FACTOR * gravity:
        ring = generate_ring(ctx, planet)
        if ring is not None:
            planet.add_child(ring)
    if rng.random() > MOON_GRAVITY_FACTOR * gravity:
        for moon in generate_moons(ctx, planet):
            planet.add_child(moon)
    return planet


def generate_ring(ctx: GenerationContext, planet: PlanetBody) -> AsteroidFormationBody | None:
    """Ring around ``planet`` from the ring provider, or None if unavailable."""
    provider = ctx.registry.ring_provider()
    if provider is None:
        return None
    logger.debug('Generating ring for planet %s', planet.display_name)
    ring = provider.generate_instance(0, planet, 0, ctx.rng)
    if ring is not None:
        ring.asteroid_type_name = provider.type_name()
    return ring


def generate_moons(ctx: GenerationContext, planet: PlanetBody) -> list[PlanetBody]:
    """Generate between 1 and ceil(diameter / 60) moons around ``planet``.

    Moons are placed in bands moving outward from the planet; each position
    is retried until unobstructed or MAX_MOON_PLACEMENT_ROUNDS is reached, in
    which case the last position is kept.
    """
    rng = ctx.rng
    max_moons = math.ceil(planet.diameter / MOON_DIAMETER_UNIT * 2)
    if max_moons < 1:
        return []
    num_moons = int(rng.integers(1, max_moons, endpoint=True))
    if ctx.settings.allocation_policy is AllocationPolicy.UNIQUE:
        num_moons = min(num_moons, len(ctx.pool.moons))
    logger.debug('Generating %d moons for planet %s', num_moons, planet.display_name)

    moons: list[PlanetBody] = []
    for i in range(num_moons):
        band = planet.diameter * (i + 1) + planet.diameter * rng.uniform(MOON_JITTER_MIN, MOON_JITTER_MAX)
        definition = find_moon_definition(ctx, planet.diameter)
        if definition is None:
            break
        diameter = ctx.diameter_of(definition)

        def draw() -> Vec3:
            azimuth = rng.uniform(0.0, 2.0 * math.pi)
            elevation = rng.uniform(-math.pi / 2.0, math.pi / 2.0)
            return vadd(planet.center_position, orbit_position(band, azimuth, elevation))

        position, clear = sample_until(
            draw,
            lambda p: not is_moon_position_obstructed(ctx, p, diameter, planet, moons),
            MAX_MOON_PLACEMENT_ROUNDS,
        )
        if not clear:
            logger.debug('Moon %d of %s placed at an obstructed position', i, planet.display_name)
        moons.append(
            PlanetBody(
                kind=ObjectKind.MOON,
                id=new_object_id(rng),
                display_name=format_name(
                    ctx.settings.moon_name_format,
                    i,
                    definition.subtype_id,
                    planet.display_name,
                ),
                center_position=position,
                subtype_id=definition.subtype_id,
                diameter=diameter,
                parent_id=planet.id,
            )
        )
    return moons


def is_moon_position_obstructed(
    ctx: GenerationContext,
    position: Vec3,
    moon_diameter: float,
    planet: PlanetBody,
    moons: list[PlanetBody],
) -> bool:
    """True if a moon at ``position`` would overlap the planet or its neighbours.

    Checks the planet itself, the planet's asteroid children (through their
    provider shape), its planet-kind children, and the moons placed so far.
    """
    if distance(position, planet.center_position) < moon_diameter + planet.diameter:
        return True
    for child in planet.children:
        if isinstance(child, AsteroidFormationBody):
            shape = ctx.registry.shape_for(child)
            if shape is not None and distance(shape.closest_point(position), position) <= moon_diameter:
                return True
        elif isinstance(child, PlanetBody) and child.kind is ObjectKind.PLANET:
            if distance(child.center_position, position) < moon_diameter + child.diameter:
                return True
    for moon in moons:
        if distance(moon.center_position, position) < moon_diameter + moon.diameter:
            return True
    return False


def _system_center(ctx: GenerationContext) -> SystemObject:
    """Sun at the origin if a sun definition exists, else an empty center."""
    if ctx.pool.suns:
        sun_def = ctx.pick(ctx.pool.suns)
        return PlanetBody(
            id=new_object_id(ctx.rng),
            display_name=sun_def.name,
            center_position=ORIGIN,
            subtype_id=sun_def.subtype_id,
            diameter=ctx.diameter_of(sun_def) * SUN_SIZE_FACTOR,
        )
    return SystemObject(
        kind=ObjectKind.EMPTY,
        display_name=SYSTEM_CENTER_NAME,
        id=new_object_id(ctx.rng),
    )


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


def run_generation(ctx: GenerationContext) -> SystemData:
    """Build a system tree using (and consuming) ``ctx``.

    Stops early, returning the partial system, once the orbit distance
    reaches a bounded world size. A category whose definitions or providers
    are exhausted is dropped with a warning so the loop always ends.
    """
    settings = ctx.settings
    rng = ctx.rng
    planet_count = int(rng.integers(settings.min_planets, settings.max_planets, endpoint=True))
    asteroid_count = int(
        rng.integers(settings.min_asteroid_objects, settings.max_asteroid_objects, endpoint=True)
    )
    system_size = planet_count + asteroid_count
    planet_prob = planet_count / system_size if system_size > 0 else 0.0

    center = _system_center(ctx)
    system = SystemData(center_object=center)
    orbit_distance = center.diameter if isinstance(center, PlanetBody) else 0.0

    generatable = ctx.registry.system_generatable()
    if asteroid_count > 0 and not generatable:
        logger.warning('No system generatable asteroid providers; skipping %d asteroid objects', asteroid_count)
        asteroid_count = 0
    failed_asteroid_slots = 0

    logger.info('Generating system with %d planets and %d asteroid objects', planet_count, asteroid_count)
    while planet_count > 0 or asteroid_count > 0:
        orbit_distance += int(
            rng.integers(settings.min_orbit_distance, settings.max_orbit_distance, endpoint=True)
        )
        if settings.bounded and orbit_distance >= settings.world_size:
            logger.info('World size %.0f reached; system has %d objects', settings.world_size, system.count())
            return system

        if planet_count <= 0:
            make_planet = False
        elif asteroid_count <= 0:
            make_planet = True
        else:
            make_planet = rng.random() < planet_prob

        obj: SystemObject | None
        if make_planet:
            size_fraction = math.sin(len(center.children) * math.pi / system_size)
            obj = generate_planet(ctx, ctx.planet_index, size_fraction, orbit_distance)
            if obj is None:
                logger.warning('Planet definitions exhausted; skipping %d planets', planet_count)
                planet_count = 0
                continue
            ctx.planet_index += 1
            planet_count -= 1
        else:
            provider = generatable[int(rng.integers(len(generatable)))]
            obj = provider.generate_instance(ctx.asteroid_index, None, orbit_distance, rng)
            if obj is None:
                failed_asteroid_slots += 1
                if failed_asteroid_slots >= MAX_DEF_FIND_ROUNDS:
                    logger.warning('Asteroid providers keep failing; skipping %d asteroid objects', asteroid_count)
                    asteroid_count = 0
                continue
            failed_asteroid_slots = 0
            obj.asteroid_type_name = provider.type_name()
            ctx.asteroid_index += 1
            asteroid_count -= 1

        center.add_child(obj)

    logger.info('System generated with %d objects', system.count())
    return system


def generate_star_system(
    settings: GeneratorSettings,
    pool: DefinitionPool,
    registry: AsteroidProviderRegistry,
    seed: int,
) -> SystemData:
    """Generate a new star system for ``seed``.

    Parameters:
        settings: Generation settings.
        pool: Filtered definitions; not modified.
        registry: Asteroid providers. Shape data they hold from earlier
            runs is cleared; the formations of this system register theirs.
        seed: Generator seed (see derive_seed).

    Returns:
        The generated SystemData (possibly partial near the world size cap).
    """
    registry.clear_instances()
    ctx = GenerationContext.create(settings, pool, registry, seed)
    return run_generation(ctx)
