"""
migratekit

Lifecycle plugins and lazily bound resources for record migrations.

Supports:
- Plugins attached by name and notified of initialize, pre-import and
  post-import events in attachment order
- Sources, destinations and id maps built on first use
- Row-by-row import, update and rollback driven by an id map
- Migration registries built from JSON configuration files
"""

from .migration import Migration
from .models.migration import MigrationEvent, MigrationResult, MigrationStatus
from .plugins.base import MigrationPlugin

__version__ = "0.1.0"

__all__ = [
    "Migration",
    "MigrationEvent",
    "MigrationResult",
    "MigrationStatus",
    "MigrationPlugin",
]
