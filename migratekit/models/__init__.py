"""Data models for migratekit."""

from .migration import (
    FieldMapping,
    MigrationEvent,
    MigrationResult,
    MigrationStatus,
)
from .record import (
    MapRow,
    MessageLevel,
    MigrationMessage,
    RowStatus,
    SourceRow,
)

__all__ = [
    "FieldMapping",
    "MigrationEvent",
    "MigrationResult",
    "MigrationStatus",
    "MapRow",
    "MessageLevel",
    "MigrationMessage",
    "RowStatus",
    "SourceRow",
]
