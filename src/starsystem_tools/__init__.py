"""Procedural star system generation and the persistent system object tree.

This package provides:
- System object tree: a rooted tree of planets, moons and asteroid formations
  with stable ids, aggregate queries and removal with reparenting
- Star system generator: seeded, retry-bounded layout of orbits, definition
  matching and moon placement
- Persistence, session lifecycle, a top-down system map and a CLI around them
"""

__all__: list[str] = []
