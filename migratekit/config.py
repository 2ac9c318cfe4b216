"""Configuration files describing which migrations to build."""

import importlib
import json
import logging
from typing import Any, Dict, List

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError
from .migration import Migration
from .plugins.base import MigrationPlugin
from .registry import MigrationRegistry

logger = logging.getLogger(__name__)


class PluginDefinition(BaseModel):
    class_path: str = Field(alias="class")
    settings: Dict[str, Any] = Field(default_factory=dict)


class MigrationDefinition(BaseModel):
    machine_name: str
    class_path: str = Field(default="migratekit.migrations:CSVMigration", alias="class")
    group_name: str = "default"
    description: str = ""
    dependencies: List[str] = Field(default_factory=list)
    enabled: bool = True
    arguments: Dict[str, Any] = Field(default_factory=dict)
    plugins: Dict[str, PluginDefinition] = Field(default_factory=dict)

    def build(self) -> Migration:
        """Instantiate the migration and attach its plugins."""
        migration_class = load_class(self.class_path)
        if not (isinstance(migration_class, type) and issubclass(migration_class, Migration)):
            raise ConfigurationError(f"{self.class_path} is not a Migration subclass")

        arguments = {
            **self.arguments,
            "machine_name": self.machine_name,
            "group_name": self.group_name,
            "dependencies": self.dependencies,
            "enabled": self.enabled,
        }
        if self.description:
            arguments["description"] = self.description

        migration = migration_class(arguments)

        for name, definition in self.plugins.items():
            plugin_class = load_class(definition.class_path)
            if not (isinstance(plugin_class, type) and issubclass(plugin_class, MigrationPlugin)):
                raise ConfigurationError(f"{definition.class_path} is not a MigrationPlugin subclass")
            migration.add_plugin(name, plugin_class(**definition.settings))

        return migration


class MigrateConfig(BaseModel):
    migrations: List[MigrationDefinition] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrateConfig":
        """
        Create from dictionary representation.

        Raises:
            ConfigurationError: If the data does not describe valid migrations
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid migration configuration: {e}") from e

    @classmethod
    def from_json_file(cls, file_path: str) -> "MigrateConfig":
        """Load configuration from JSON file."""
        try:
            with open(file_path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not read {file_path}: {e}") from e
        return cls.from_dict(data)

    def build_registry(self) -> MigrationRegistry:
        """Build every configured migration into a registry."""
        registry = MigrationRegistry()
        for definition in self.migrations:
            registry.register(definition.build())
        logger.info(f"Loaded {len(registry)} migrations")
        return registry


def load_class(class_path: str) -> Any:
    """
    Import an object from a "package.module:Name" path.

    Raises:
        ConfigurationError: If the module or attribute cannot be found
    """
    module_name, sep, attribute = class_path.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(f"Expected 'module:Class', got '{class_path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import {module_name}: {e}") from e

    try:
        return getattr(module, attribute)
    except AttributeError:
        raise ConfigurationError(f"{module_name} has no attribute {attribute}") from None
