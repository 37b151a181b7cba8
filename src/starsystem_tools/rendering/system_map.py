"""Top-down (X/Y) map of a star system using matplotlib."""

from __future__ import annotations

import logging
from pathlib import Path

from starsystem_tools.asteroids import AsteroidProviderRegistry
from starsystem_tools.model import AsteroidFormationBody, ObjectKind, PlanetBody, SystemData

logger = logging.getLogger(__name__)

_COLORS = {
    ObjectKind.PLANET: 'tab:blue',
    ObjectKind.MOON: 'tab:gray',
    ObjectKind.ASTEROIDS: 'tab:brown',
    ObjectKind.EMPTY: 'black',
}


def _marker_size(diameter: float, largest: float) -> float:
    if largest <= 0:
        return 20.0
    return 20.0 + 180.0 * diameter / largest


def draw_system_map(
    data: SystemData,
    output_path: str | Path,
    registry: AsteroidProviderRegistry | None = None,
    title: str = '',
) -> int:
    """Render ``data`` as a top-down scatter map and save it to ``output_path``.

    Asteroid formations are drawn at their provider's representative point
    when ``registry`` knows their shape, else at their center position.

    Returns:
        Number of bodies drawn.
    """
    try:
        import matplotlib
        matplotlib.use('Agg')
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError('matplotlib is required for draw_system_map') from None

    objects = data.all_objects()
    largest = max((o.diameter for o in objects if isinstance(o, PlanetBody)), default=0.0)
    fig, ax = plt.subplots(figsize=(8, 8))
    for obj in objects:
        x, y, _ = obj.center_position
        size = 20.0
        if isinstance(obj, PlanetBody):
            size = _marker_size(obj.diameter, largest)
        elif isinstance(obj, AsteroidFormationBody) and registry is not None:
            shape = registry.shape_for(obj)
            if shape is not None:
                x, y, _ = shape.representative_point()
        marker = 'x' if obj.kind is ObjectKind.ASTEROIDS else 'o'
        ax.scatter([x], [y], s=size, c=_COLORS[obj.kind], marker=marker)
        if obj.kind is not ObjectKind.MOON:
            ax.annotate(obj.display_name, (x, y), fontsize=7, xytext=(4, 4), textcoords='offset points')
    ax.set_aspect('equal', adjustable='datalim')
    ax.set_xlabel('X (m)')
    ax.set_ylabel('Y (m)')
    ax.set_title(title or 'Star system')
    fig.savefig(str(output_path))
    plt.close(fig)
    logger.debug('Wrote system map with %d objects to %s', len(objects), output_path)
    return len(objects)
