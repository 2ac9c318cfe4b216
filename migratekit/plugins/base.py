"""Plugin base class for migration lifecycle extensions.

A plugin is attached to a migration under a name with
Migration.add_plugin() and is then notified of lifecycle events:

- INITIALIZE  -- once, while add_plugin() runs
- PREIMPORT   -- before the first row of an import
- POSTIMPORT  -- after the last row of an import (or a requested stop)

Plugins are called in the order they were attached. An exception raised
by a handler propagates to whoever triggered the event and the plugins
attached after it are not called.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..models.migration import MigrationEvent

if TYPE_CHECKING:
    from ..migration import Migration

logger = logging.getLogger(__name__)


class MigrationPlugin:
    """Base class for plugins reacting to migration lifecycle events.

    Override the on_* handlers you need, or execute() to see every event.
    """

    def __init__(self, migration: Optional[Migration] = None):
        # Pre-binding only sets the back-reference; attaching is add_plugin's job
        self.migration: Optional[Migration] = None
        if migration is not None:
            self.set_migration(migration)

    def get_migration(self) -> Optional[Migration]:
        return self.migration

    def set_migration(self, migration: Optional[Migration]) -> None:
        self.migration = migration

    def execute(self, event: MigrationEvent, args: Dict[str, Any]) -> None:
        """Handle a lifecycle event by routing it to the matching on_* method."""
        if event == MigrationEvent.INITIALIZE:
            self.on_initialize(args)
        elif event == MigrationEvent.PREIMPORT:
            self.on_pre_import(args)
        elif event == MigrationEvent.POSTIMPORT:
            self.on_post_import(args)

    def on_initialize(self, args: Dict[str, Any]) -> None:
        """Called once when the plugin is attached. No-op by default."""

    def on_pre_import(self, args: Dict[str, Any]) -> None:
        """Called before an import starts processing rows. No-op by default."""

    def on_post_import(self, args: Dict[str, Any]) -> None:
        """Called after an import stops processing rows. No-op by default."""

    def __repr__(self) -> str:
        bound = self.migration.machine_name if self.migration is not None else None
        return f"<{self.__class__.__name__} migration={bound}>"
