"""Session lifecycle of a world's star system: load, init, save, unload."""

from __future__ import annotations

import logging
import threading
import uuid
from pathlib import Path

from starsystem_tools.asteroids import AsteroidProviderRegistry, default_registry
from starsystem_tools.definitions import DefinitionPool, default_definitions
from starsystem_tools.generator import derive_seed, generate_star_system
from starsystem_tools.model import AsteroidFormationBody, SystemData
from starsystem_tools.settings import GeneratorSettings
from starsystem_tools.storage import load_system_data, save_system_data

logger = logging.getLogger(__name__)


class StarSystemSession:
    """Owns the system tree of one world for the duration of a session.

    The tree is generated once (first ``init`` on an empty world) and loaded
    verbatim afterwards. Generation and saving are serialized by a lock;
    other mutation of ``system`` must be kept off concurrent saves by the
    caller.
    """

    def __init__(
        self,
        world_dir: str | Path,
        settings: GeneratorSettings | None = None,
        pool: DefinitionPool | None = None,
        registry: AsteroidProviderRegistry | None = None,
    ) -> None:
        self.world_dir = Path(world_dir)
        self.settings = settings or GeneratorSettings()
        self.pool = pool or DefinitionPool.from_definitions(
            default_definitions(),
            self.settings.definition_lists,
            self.settings.allow_vanilla_planets,
        )
        self.registry = registry or default_registry(self.settings)
        self.system = SystemData()
        self._lock = threading.Lock()

    def load(self) -> SystemData:
        """Load the persisted system (empty if none) and its asteroid data."""
        logger.info('Loading system data from %s', self.world_dir)
        with self._lock:
            self.system = load_system_data(self.world_dir, self.registry)
        return self.system

    def init(self, world_seed: int, salt: int | None = None) -> bool:
        """Generate a new system if the world has none.

        Returns:
            True if a system was generated.
        """
        with self._lock:
            if self.system.count() > 0:
                return False
            logger.info('Generating a new star system')
            self.system = generate_star_system(
                self.settings, self.pool, self.registry, derive_seed(world_seed, salt)
            )
            return True

    def save(self) -> bool:
        logger.info('Saving system data')
        with self._lock:
            return save_system_data(self.world_dir, self.system, self.registry)

    def unload(self) -> None:
        """Save and drop the system and all provider instance data."""
        logger.info('Unloading star system data')
        self.save()
        with self._lock:
            self.system = SystemData()
            self.registry.clear_instances()

    def remove_object(self, obj_id: uuid.UUID) -> bool:
        """Remove a body from the tree, dropping its provider data if any."""
        obj = self.system.find_by_id(obj_id)
        if not self.system.remove(obj_id):
            return False
        if isinstance(obj, AsteroidFormationBody):
            provider = self.registry.get(obj.asteroid_type_name)
            if provider is not None:
                provider.remove_instance(obj_id)
        return True
