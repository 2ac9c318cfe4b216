"""Migration - plugin dispatch and lazy resource binding on top of BaseMigration."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .destinations.base import BaseDestination
from .framework import BaseMigration
from .maps.base import BaseMap
from .models.migration import PROCESSING_STATUSES, MigrationEvent, MigrationStatus
from .models.record import MessageLevel
from .plugins.base import MigrationPlugin
from .sources.base import BaseSource

logger = logging.getLogger(__name__)


class Migration(BaseMigration, ABC):
    """
    Base class for concrete migrations.

    Subclasses supply the source, destination and map through
    get_source_object(), get_destination_object() and get_map_object().
    Each is built the first time it is needed and kept for the lifetime of
    the migration. If a factory raises, the slot stays empty and the next
    access tries again.

    Plugins attached with add_plugin() are notified of lifecycle events in
    the order they were attached. Dispatch is synchronous and unguarded: an
    exception from one plugin stops the event from reaching the rest.

    Not safe for concurrent use; callers must serialize access to one
    instance.
    """

    def __init__(self, arguments: Optional[Dict[str, Any]] = None):
        """
        Initialize the migration.

        Args:
            arguments: Configuration values; these win over get_default_arguments()
        """
        merged = {**self.get_default_arguments(), **(arguments or {})}
        super().__init__(merged)
        self.description = merged.get("description", self.description)
        self._plugins: Dict[str, MigrationPlugin] = {}
        self.init()

    # ------------------------------------------------------------------
    # Override points
    # ------------------------------------------------------------------

    def get_default_arguments(self) -> Dict[str, Any]:
        """Defaults merged under the arguments passed to the constructor."""
        return {}

    def init(self) -> None:
        """Called once at the end of construction, after arguments are set."""

    @abstractmethod
    def get_source_object(self) -> BaseSource:
        """Build the source for this migration."""

    @abstractmethod
    def get_destination_object(self) -> BaseDestination:
        """Build the destination for this migration."""

    @abstractmethod
    def get_map_object(self) -> BaseMap:
        """Build the id map for this migration."""

    def set_field_mappings(self) -> None:
        """Add field mappings once resources are bound. No-op by default."""

    # ------------------------------------------------------------------
    # Arguments
    # ------------------------------------------------------------------

    def get_argument(self, key: str, default: Any = None) -> Any:
        return self.arguments.get(key, default)

    def set_argument(self, key: str, value: Any) -> None:
        self.arguments[key] = value

    def get_arguments(self) -> Dict[str, Any]:
        return self.arguments.copy()

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    def add_plugin(self, name: str, plugin: MigrationPlugin) -> bool:
        """
        Attach a plugin under a name and send it the INITIALIZE event.

        The plugin is stored and bound before INITIALIZE is dispatched. If
        its handler raises, the exception propagates with the plugin still
        attached; call remove_plugin() to clean up.

        Returns:
            False if a plugin is already attached under this name
        """
        if name in self._plugins:
            logger.warning(f"{self.machine_name}: plugin '{name}' is already attached")
            return False

        self._plugins[name] = plugin
        plugin.set_migration(self)
        logger.debug(f"{self.machine_name}: attached plugin '{name}'")
        plugin.execute(MigrationEvent.INITIALIZE, {})
        return True

    def remove_plugin(self, name: str) -> bool:
        """
        Detach a plugin and clear its back-reference.

        Returns:
            False if no plugin is attached under this name
        """
        plugin = self._plugins.get(name)
        if plugin is None:
            return False

        plugin.set_migration(None)
        del self._plugins[name]
        logger.debug(f"{self.machine_name}: removed plugin '{name}'")
        return True

    def get_plugin(self, name: str) -> Optional[MigrationPlugin]:
        return self._plugins.get(name)

    def get_plugins(self) -> Dict[str, MigrationPlugin]:
        """Get attached plugins by name, in attachment order."""
        return self._plugins.copy()

    def has_plugin(self, name: str) -> bool:
        return name in self._plugins

    def execute_plugins(self, event: Any, args: Optional[Dict[str, Any]] = None) -> None:
        """
        Send an event to every attached plugin, in attachment order.

        Events outside MigrationEvent are ignored without error.
        """
        parsed = MigrationEvent.parse(event)
        if parsed is None:
            logger.debug(f"{self.machine_name}: ignoring unknown event {event!r}")
            return

        args = {} if args is None else args
        for plugin in list(self._plugins.values()):
            plugin.execute(parsed, args)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def pre_import(self) -> None:
        self.execute_plugins(MigrationEvent.PREIMPORT, {})

    def post_import(self) -> None:
        self.execute_plugins(MigrationEvent.POSTIMPORT, {})

    def set_status(self, status: MigrationStatus) -> None:
        """Bind resources and set up field mappings before processing starts."""
        status = MigrationStatus(status)
        if status in PROCESSING_STATUSES and status != self.status:
            self.get_source()
            self.get_destination()
            self.get_map()
            self.set_field_mappings()
        super().set_status(status)

    # ------------------------------------------------------------------
    # Lazy resources
    # ------------------------------------------------------------------

    def get_source(self) -> BaseSource:
        if self._source is None:
            self.set_source(self.get_source_object())
            logger.debug(f"{self.machine_name}: source bound")
        return self._source

    def get_destination(self) -> BaseDestination:
        if self._destination is None:
            self.set_destination(self.get_destination_object())
            logger.debug(f"{self.machine_name}: destination bound")
        return self._destination

    def get_map(self) -> BaseMap:
        if self._map is None:
            self.set_map(self.get_map_object())
            logger.debug(f"{self.machine_name}: map bound")
        return self._map

    # Queries below bind what they read before delegating

    def source_count(self, refresh: bool = False) -> int:
        self.get_source()
        return super().source_count(refresh=refresh)

    def processed_count(self) -> int:
        self.get_map()
        return super().processed_count()

    def imported_count(self) -> int:
        self.get_map()
        return super().imported_count()

    def update_count(self) -> int:
        self.get_map()
        return super().update_count()

    def error_count(self) -> int:
        self.get_map()
        return super().error_count()

    def message_count(self) -> int:
        self.get_map()
        return super().message_count()

    def save_message(self, message: str, level: MessageLevel = MessageLevel.ERROR) -> None:
        self.get_map()
        super().save_message(message, level)

    def set_update(self, source_key: Optional[str] = None) -> bool:
        self.get_map()
        if source_key is None:
            self.get_source()
        return super().set_update(source_key)

    def current_source_key(self) -> Optional[str]:
        self.get_source()
        return super().current_source_key()

    def prepare_update(self) -> int:
        self.get_map()
        return super().prepare_update()

    def lookup_destination_id(self, source_key: str) -> Optional[str]:
        self.get_map()
        return super().lookup_destination_id(source_key)

    def is_complete(self) -> bool:
        self.get_source()
        self.get_map()
        return super().is_complete()
