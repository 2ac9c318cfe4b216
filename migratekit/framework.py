"""Migration framework - status handling, row processing and counts.

BaseMigration is the capability boundary Migration builds on: a status
field, the source/destination/map slots, field mapping storage, import and
rollback processing, and the count/query operations over the slots.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .destinations.base import BaseDestination
from .errors import InvalidStateTransitionError, ResourceUnboundError
from .maps.base import BaseMap
from .models.migration import (
    STATUS_TRANSITIONS,
    FieldMapping,
    MigrationResult,
    MigrationStatus,
)
from .models.record import MessageLevel, RowStatus, SourceRow
from .sources.base import BaseSource

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "default"


class BaseMigration:
    """
    A single migration from one source into one destination.

    Handles:
    - Status transitions (idle, importing, rolling back, stopping, disabled)
    - Row-by-row import with an id map for skipping and updating rows
    - Rollback of everything recorded in the map
    - Field mappings from source rows onto destination records
    - Counts and messages kept in the map
    """

    def __init__(self, arguments: Optional[Dict[str, Any]] = None):
        """
        Initialize the migration.

        Args:
            arguments: Configuration values for this migration
        """
        self.arguments: Dict[str, Any] = dict(arguments or {})
        self.machine_name: str = self.arguments.get("machine_name") or self.__class__.__name__
        self.group_name: str = self.arguments.get("group_name") or DEFAULT_GROUP
        self.description: str = self.arguments.get("description", "")
        self.dependencies: List[str] = list(self.arguments.get("dependencies", []))

        self.status = MigrationStatus.IDLE
        if not self.arguments.get("enabled", True):
            self.status = MigrationStatus.DISABLED

        self._source: Optional[BaseSource] = None
        self._destination: Optional[BaseDestination] = None
        self._map: Optional[BaseMap] = None
        self._field_mappings: Dict[str, FieldMapping] = {}

        self.last_result: Optional[MigrationResult] = None
        self.started_at: Optional[datetime] = None
        self.completed_at: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.machine_name} ({self.status.value})>"

    # ------------------------------------------------------------------
    # Resource slots
    # ------------------------------------------------------------------

    def get_source(self) -> Optional[BaseSource]:
        return self._source

    def set_source(self, source: Optional[BaseSource]) -> None:
        self._source = source

    def get_destination(self) -> Optional[BaseDestination]:
        return self._destination

    def set_destination(self, destination: Optional[BaseDestination]) -> None:
        self._destination = destination

    def get_map(self) -> Optional[BaseMap]:
        return self._map

    def set_map(self, map: Optional[BaseMap]) -> None:
        self._map = map

    def _require_source(self) -> BaseSource:
        if self._source is None:
            raise ResourceUnboundError("source", self.machine_name)
        return self._source

    def _require_destination(self) -> BaseDestination:
        if self._destination is None:
            raise ResourceUnboundError("destination", self.machine_name)
        return self._destination

    def _require_map(self) -> BaseMap:
        if self._map is None:
            raise ResourceUnboundError("map", self.machine_name)
        return self._map

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_status(self) -> MigrationStatus:
        return self.status

    def set_status(self, status: MigrationStatus) -> None:
        """
        Move to a new status.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        status = MigrationStatus(status)
        if status == self.status:
            return
        if status not in STATUS_TRANSITIONS[self.status]:
            raise InvalidStateTransitionError(self.machine_name, self.status.value, status.value)

        logger.debug(f"{self.machine_name}: {self.status.value} -> {status.value}")
        self.status = status

    @property
    def enabled(self) -> bool:
        return self.status != MigrationStatus.DISABLED

    def stop_process(self) -> None:
        """Ask a running import or rollback to stop after the current row."""
        if self.status in (MigrationStatus.IMPORTING, MigrationStatus.ROLLING_BACK):
            self.set_status(MigrationStatus.STOPPING)
            logger.info(f"Stopping {self.machine_name}")

    # ------------------------------------------------------------------
    # Field mappings
    # ------------------------------------------------------------------

    def add_field_mapping(
        self,
        destination_field: str,
        source_field: Optional[str] = None,
        default_value: Optional[Any] = None,
        callbacks: Optional[List[Callable[[Any], Any]]] = None
    ) -> FieldMapping:
        """
        Map a source field onto a destination field.

        A mapping added for a destination field that is already mapped
        replaces the earlier one.
        """
        if destination_field in self._field_mappings:
            logger.debug(f"{self.machine_name}: overriding mapping for {destination_field}")

        mapping = FieldMapping(
            destination_field=destination_field,
            source_field=source_field,
            default_value=default_value,
            callbacks=list(callbacks or []),
        )
        self._field_mappings[destination_field] = mapping
        return mapping

    def remove_field_mapping(self, destination_field: str) -> bool:
        return self._field_mappings.pop(destination_field, None) is not None

    def get_field_mappings(self) -> Dict[str, FieldMapping]:
        return self._field_mappings.copy()

    def apply_field_mappings(self, row: SourceRow) -> Dict[str, Any]:
        """
        Build a destination record from a source row.

        Without any field mappings the row data is passed through as is.
        """
        if not self._field_mappings:
            return dict(row.data)

        record = {}
        for mapping in self._field_mappings.values():
            value = None
            if mapping.source_field:
                value = row.get_field(mapping.source_field)
            if value is None:
                value = mapping.default_value
            for callback in mapping.callbacks:
                value = callback(value)
            record[mapping.destination_field] = value
        return record

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def pre_import(self) -> None:
        """Called before the first row of an import is processed."""

    def post_import(self) -> None:
        """Called after the last row of an import is processed."""

    def pre_rollback(self) -> None:
        """Called before a rollback starts."""

    def post_rollback(self) -> None:
        """Called after a rollback ends."""

    def prepare_row(self, row: SourceRow) -> bool:
        """Inspect or alter a row before import. Return False to ignore it."""
        return True

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def process_import(self, limit: Optional[int] = None, update: bool = False) -> MigrationResult:
        """
        Import source rows into the destination.

        Args:
            limit: Stop after this many rows have been processed
            update: If True, re-import rows that were already imported

        Returns:
            MigrationResult for the run
        """
        if self.status == MigrationStatus.DISABLED:
            logger.info(f"Skipping disabled migration {self.machine_name}")
            return MigrationResult.DISABLED

        if self.status != MigrationStatus.IDLE:
            logger.error(f"Cannot import {self.machine_name} while {self.status.value}")
            return MigrationResult.FAILED

        self.set_status(MigrationStatus.IMPORTING)
        self.started_at = datetime.utcnow()
        self.completed_at = None
        result = MigrationResult.COMPLETED

        try:
            if update:
                self.prepare_update()

            self.pre_import()

            source = self._require_source()
            destination = self._require_destination()
            id_map = self._require_map()

            logger.info(f"Importing {self.machine_name}")
            processed = 0
            for row in source:
                if self.status == MigrationStatus.STOPPING:
                    result = MigrationResult.STOPPED
                    break
                if limit is not None and processed >= limit:
                    result = MigrationResult.INCOMPLETE
                    break

                existing = id_map.lookup(row.id)
                if existing and not existing.needs_update:
                    continue

                self._import_row(row, existing.destination_id if existing else None,
                                 destination, id_map)
                processed += 1

            self.post_import()
            logger.info(
                f"Imported {self.machine_name}: {processed} processed, "
                f"{id_map.error_count()} failed ({result.value})"
            )

        finally:
            self.completed_at = datetime.utcnow()
            self.set_status(MigrationStatus.IDLE)

        self.last_result = result
        return result

    def _import_row(
        self,
        row: SourceRow,
        destination_id: Optional[str],
        destination: BaseDestination,
        id_map: BaseMap
    ) -> None:
        try:
            if not self.prepare_row(row):
                id_map.save_id_mapping(row.id, destination_id, RowStatus.IGNORED)
                return

            record = self.apply_field_mappings(row)
            destination_id = destination.import_row(record, row, destination_id)
            id_map.save_id_mapping(row.id, destination_id, RowStatus.IMPORTED)

        except Exception as e:
            id_map.save_id_mapping(row.id, destination_id, RowStatus.FAILED)
            id_map.save_message(row.id, str(e), MessageLevel.ERROR)
            logger.error(f"{self.machine_name}: failed to import source row {row.id}: {e}")

    def process_rollback(self) -> MigrationResult:
        """
        Delete every destination record listed in the map.

        Returns:
            MigrationResult for the run
        """
        if self.status == MigrationStatus.DISABLED:
            return MigrationResult.DISABLED

        if self.status != MigrationStatus.IDLE:
            logger.error(f"Cannot roll back {self.machine_name} while {self.status.value}")
            return MigrationResult.FAILED

        self.set_status(MigrationStatus.ROLLING_BACK)
        result = MigrationResult.COMPLETED

        try:
            self.pre_rollback()

            destination = self._require_destination()
            id_map = self._require_map()

            logger.info(f"Rolling back {self.machine_name}")
            deleted = 0
            for map_row in id_map.rows():
                if self.status == MigrationStatus.STOPPING:
                    result = MigrationResult.STOPPED
                    break

                if map_row.destination_id is not None:
                    if destination.rollback(map_row.destination_id):
                        deleted += 1
                id_map.delete(map_row.source_id)

            self.post_rollback()
            logger.info(f"Rolled back {deleted} {self.machine_name} records")

        finally:
            self.set_status(MigrationStatus.IDLE)

        self.last_result = result
        return result

    # ------------------------------------------------------------------
    # Counts and queries
    # ------------------------------------------------------------------

    def source_count(self, refresh: bool = False) -> int:
        return self._require_source().count(refresh=refresh)

    def processed_count(self) -> int:
        return self._require_map().processed_count()

    def imported_count(self) -> int:
        return self._require_map().imported_count()

    def update_count(self) -> int:
        return self._require_map().update_count()

    def error_count(self) -> int:
        return self._require_map().error_count()

    def message_count(self) -> int:
        return self._require_map().message_count()

    def save_message(self, message: str, level: MessageLevel = MessageLevel.ERROR) -> None:
        """Save a message against the row currently being processed."""
        source_key = self._source.current_key if self._source else None
        self._require_map().save_message(source_key, message, level)

    def set_update(self, source_key: Optional[str] = None) -> bool:
        """Flag a row for re-import; defaults to the current row."""
        if source_key is None:
            source_key = self.current_source_key()
        if source_key is None:
            return False
        return self._require_map().set_update(source_key)

    def current_source_key(self) -> Optional[str]:
        return self._require_source().current_key

    def prepare_update(self) -> int:
        """Flag every previously processed row for re-import."""
        return self._require_map().prepare_update()

    def lookup_destination_id(self, source_key: str) -> Optional[str]:
        return self._require_map().lookup_destination_id(source_key)

    def is_complete(self) -> bool:
        """Check whether every source row has been processed."""
        total = self.source_count(refresh=True)
        if total < 0:
            return True
        return total <= self.processed_count()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "machine_name": self.machine_name,
            "group_name": self.group_name,
            "description": self.description,
            "status": self.status.value,
            "dependencies": self.dependencies,
            "last_result": self.last_result.value if self.last_result else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
