"""Plugins shipped with migratekit."""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .base import MigrationPlugin
from ..models.migration import MigrationEvent

logger = logging.getLogger(__name__)


class LoggingPlugin(MigrationPlugin):
    """Logs every lifecycle event, with import counts after an import."""

    def __init__(self, migration=None, level: int = logging.INFO):
        super().__init__(migration)
        self.level = level

    def execute(self, event: MigrationEvent, args: Dict[str, Any]) -> None:
        name = self.migration.machine_name if self.migration is not None else "<unbound>"
        logger.log(self.level, f"{name}: {event.value}")

        if event == MigrationEvent.POSTIMPORT and self.migration is not None:
            logger.log(
                self.level,
                f"{name}: {self.migration.processed_count()} processed, "
                f"{self.migration.imported_count()} imported, "
                f"{self.migration.error_count()} failed"
            )


class TimingPlugin(MigrationPlugin):
    """Records when the last import started and finished."""

    def __init__(self, migration=None):
        super().__init__(migration)
        self.started_at: Optional[datetime] = None
        self.completed_at: Optional[datetime] = None

    def on_pre_import(self, args: Dict[str, Any]) -> None:
        self.started_at = datetime.utcnow()
        self.completed_at = None

    def on_post_import(self, args: Dict[str, Any]) -> None:
        self.completed_at = datetime.utcnow()

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None
