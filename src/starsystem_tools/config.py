"""Configuration: world directory and data file paths from environment."""

import os
from pathlib import Path

# Env var overrides with sensible defaults.
DEFAULT_WORLD_DIR = './world/'
DEFAULT_DEFINITIONS_FILE = ''
DEFAULT_SETTINGS_FILE = ''


def get_world_dir() -> str:
    """Return world storage directory (STARSYSTEM_WORLD_DIR env var or default).

    Returns:
        Path string.
    """
    return os.environ.get('STARSYSTEM_WORLD_DIR', DEFAULT_WORLD_DIR)


def get_definitions_path() -> str | None:
    """Return the planet definition catalog path, or None for the built-in catalog.

    Reads STARSYSTEM_DEFINITIONS. An empty value or a path that does not exist
    falls back to the built-in catalog.

    Returns:
        Path string or None.
    """
    path = os.environ.get('STARSYSTEM_DEFINITIONS', DEFAULT_DEFINITIONS_FILE).strip()
    if path and Path(path).exists():
        return path
    return None


def get_settings_path() -> str | None:
    """Return the generator settings file path, or None for defaults.

    Prefers STARSYSTEM_SETTINGS, then ``settings.json`` inside the world
    directory.

    Returns:
        Path string or None.
    """
    path = os.environ.get('STARSYSTEM_SETTINGS', DEFAULT_SETTINGS_FILE).strip()
    if path:
        return path
    candidate = Path(get_world_dir()) / 'settings.json'
    if candidate.exists():
        return str(candidate)
    return None
