"""
In-memory migration registry.

The registry provides:
- Migration storage and retrieval by machine name
- Grouping by each migration's group_name
- Dependency ordering for running several migrations
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from .errors import DuplicateMigrationError, MigrationDependencyError, MigrationNotFoundError
from .framework import BaseMigration

logger = logging.getLogger(__name__)


class MigrationRegistry:
    """
    Registry of migrations known to one run.

    Groups come from the group_name each migration was configured with;
    there is no process-wide group lookup.
    """

    def __init__(self):
        # machine_name -> migration
        self._migrations: Dict[str, BaseMigration] = {}

    def __len__(self) -> int:
        return len(self._migrations)

    def __contains__(self, machine_name: str) -> bool:
        return machine_name in self._migrations

    def register(self, migration: BaseMigration) -> None:
        """
        Add a migration to the registry.

        Raises:
            DuplicateMigrationError: If the machine name is already taken
        """
        if migration.machine_name in self._migrations:
            raise DuplicateMigrationError(migration.machine_name)

        self._migrations[migration.machine_name] = migration
        logger.debug(f"Registered migration {migration.machine_name} in group {migration.group_name}")

    def get(self, machine_name: str) -> Optional[BaseMigration]:
        return self._migrations.get(machine_name)

    def get_or_raise(self, machine_name: str) -> BaseMigration:
        """
        Retrieve a migration by machine name.

        Raises:
            MigrationNotFoundError: If the migration does not exist
        """
        migration = self.get(machine_name)
        if migration is None:
            raise MigrationNotFoundError(machine_name)
        return migration

    def list_names(self) -> List[str]:
        return list(self._migrations.keys())

    def groups(self) -> Dict[str, List[str]]:
        """Get machine names by group, in registration order."""
        groups: Dict[str, List[str]] = defaultdict(list)
        for name, migration in self._migrations.items():
            groups[migration.group_name].append(name)
        return dict(groups)

    def ordered(self, group: Optional[str] = None) -> List[BaseMigration]:
        """
        Get migrations so that each comes after its dependencies.

        Args:
            group: Only include migrations from this group

        Raises:
            MigrationDependencyError: If dependencies form a cycle
        """
        selected = {
            name: m for name, m in self._migrations.items()
            if group is None or m.group_name == group
        }

        # Kahn's algorithm, keeping registration order among ready migrations
        in_degree = {name: 0 for name in selected}
        dependents: Dict[str, List[str]] = defaultdict(list)

        for name, migration in selected.items():
            for dep in migration.dependencies:
                if dep not in selected:
                    if dep not in self._migrations:
                        logger.warning(f"Migration {name} depends on unknown migration {dep}")
                    continue
                in_degree[name] += 1
                dependents[dep].append(name)

        ready = [name for name in selected if in_degree[name] == 0]
        order: List[str] = []

        while ready:
            name = ready.pop(0)
            order.append(name)
            for dependent in dependents[name]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    ready.append(dependent)

        if len(order) != len(selected):
            raise MigrationDependencyError([n for n in selected if n not in order])

        return [selected[name] for name in order]
