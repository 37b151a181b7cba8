"""3-vector helpers for body placement and obstruction checks."""

from __future__ import annotations

import math

Vec3 = tuple[float, float, float]

ORIGIN: Vec3 = (0.0, 0.0, 0.0)


def vadd(a: Vec3, b: Vec3) -> Vec3:
    """Vector sum a + b."""
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def vsub(a: Vec3, b: Vec3) -> Vec3:
    """Vector difference a - b."""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def distance(a: Vec3, b: Vec3) -> float:
    """Euclidean distance between two points."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    dz = a[2] - b[2]
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def orbit_position(radius: float, azimuth: float, elevation: float) -> Vec3:
    """Point at ``radius`` from the origin for the given azimuth/elevation (radians).

    Azimuth drives X/Y (X = r sin a, Y = r cos a) and elevation drives Z
    (Z = r sin e), matching how bodies are laid out in the system plane.
    """
    return (
        radius * math.sin(azimuth),
        radius * math.cos(azimuth),
        radius * math.sin(elevation),
    )
