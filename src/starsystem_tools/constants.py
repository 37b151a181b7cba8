"""Fixed constants: attempt caps, size constants, vanilla subtypes, storage names."""

# Rejection sampling: max draws when searching definitions or moon placements
MAX_DEF_FIND_ROUNDS = 10000
MAX_MOON_PLACEMENT_ROUNDS = 10000

# Diameter: sqrt(gravity) * PLANET_SIZE_PER_GRAVITY * multiplier, in meters
PLANET_SIZE_PER_GRAVITY = 120000.0
GAS_GIANT_SIZE_FACTOR = 2.0
SUN_SIZE_FACTOR = 2.0

# Moons: max count is ceil(parent_diameter / MOON_DIAMETER_UNIT * 2)
MOON_DIAMETER_UNIT = 120.0
MOON_MAX_PARENT_FRACTION = 0.75
MOON_JITTER_MIN = 0.5
MOON_JITTER_MAX = 1.5

# Rings and moons appear when rand() > factor * surface gravity
RING_GRAVITY_FACTOR = 0.25
MOON_GRAVITY_FACTOR = 0.3

# Planet elevation above the orbital plane (degrees)
PLANET_MAX_ELEVATION_DEG = 5.0

SYSTEM_CENTER_NAME = 'System center'

# Persistence: file name inside the world directory
STORAGE_FILE = 'SolarSystem.json'
STORAGE_VERSION = 1

# Built-in planet subtypes that can be excluded from generation
VANILLA_PLANETS: tuple[str, ...] = (
    'Alien',
    'EarthLike',
    'EarthLikeTutorial',
    'Europa',
    'Mars',
    'MarsTutorial',
    'Moon',
    'MoonTutorial',
    'Pertam',
    'Titan',
    'Triton',
)

# Asteroid provider type names
ASTEROID_RING_TYPE = 'AsteroidRing'
ASTEROID_SPHERE_TYPE = 'AsteroidSphere'
