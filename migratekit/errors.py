"""
Migration error types.

All errors inherit from MigrateError for easy catching.
Plugin registration and lookups report failure through boolean returns
instead of raising; see Migration.add_plugin.
"""

from typing import List


class MigrateError(Exception):
    """Base exception for all migration failures."""
    pass


class ResourceConstructionError(MigrateError):
    """Raised when a source, destination or map cannot be built."""

    def __init__(self, resource: str, reason: str):
        self.resource = resource
        self.reason = reason
        super().__init__(f"Could not construct {resource}: {reason}")


class ResourceUnboundError(MigrateError):
    """Raised when an operation needs a resource slot that is still empty."""

    def __init__(self, resource: str, machine_name: str):
        self.resource = resource
        self.machine_name = machine_name
        super().__init__(f"Migration {machine_name} has no {resource} bound")


class InvalidStateTransitionError(MigrateError):
    """Raised when attempting an illegal status transition."""

    def __init__(self, machine_name: str, current_state: str, target_state: str):
        self.machine_name = machine_name
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(
            f"Invalid status transition for {machine_name}: "
            f"{current_state} -> {target_state}"
        )


class RowError(MigrateError):
    """Raised when a single source row cannot be read or imported."""

    def __init__(self, message: str, source_id=None):
        self.source_id = source_id
        super().__init__(message)


class DuplicateMigrationError(MigrateError):
    """Raised when a machine name is registered twice."""

    def __init__(self, machine_name: str):
        self.machine_name = machine_name
        super().__init__(f"Migration already registered: {machine_name}")


class MigrationNotFoundError(MigrateError):
    """Raised when a migration cannot be found in the registry."""

    def __init__(self, machine_name: str):
        self.machine_name = machine_name
        super().__init__(f"Migration not found: {machine_name}")


class MigrationDependencyError(MigrateError):
    """Raised when migration dependencies form a cycle."""

    def __init__(self, machine_names: List[str]):
        self.machine_names = machine_names
        super().__init__(
            f"Circular migration dependencies: {', '.join(sorted(machine_names))}"
        )


class ConfigurationError(MigrateError):
    """Raised when a configuration file or class path is invalid."""
    pass
