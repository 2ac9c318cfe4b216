"""Destinations that keep records in memory or in a JSON file."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .base import BaseDestination
from ..errors import ResourceConstructionError, RowError
from ..models.record import SourceRow

logger = logging.getLogger(__name__)


class InMemoryDestination(BaseDestination):
    """Destination keeping imported records in a dictionary."""

    def __init__(self, key_field: Optional[str] = None, dry_run: bool = False):
        super().__init__(key_field=key_field, dry_run=dry_run)
        self.records: Dict[str, Dict[str, Any]] = {}
        self._next_id = 1

    def import_row(
        self,
        record: Dict[str, Any],
        row: SourceRow,
        destination_id: Optional[str] = None
    ) -> str:
        if destination_id is None:
            destination_id = self._new_id(record, row)

        if self.dry_run:
            logger.info(f"[DRY RUN] Would store record {destination_id} from source row {row.id}")
            return destination_id

        self.records[destination_id] = dict(record)
        return destination_id

    def rollback(self, destination_id: str) -> bool:
        if self.dry_run:
            logger.info(f"[DRY RUN] Would delete record {destination_id}")
            return destination_id in self.records
        return self.records.pop(destination_id, None) is not None

    def _new_id(self, record: Dict[str, Any], row: SourceRow) -> str:
        if self.key_field:
            value = record.get(self.key_field)
            if value is None:
                raise RowError(
                    f"Record has no value for destination key field '{self.key_field}'",
                    source_id=row.id,
                )
            return str(value)

        destination_id = str(self._next_id)
        self._next_id += 1
        return destination_id

    def fields(self):
        names = []
        for record in self.records.values():
            for key in record:
                if key not in names:
                    names.append(key)
        return names


class JSONFileDestination(InMemoryDestination):
    """
    Destination writing imported records to a JSON file.

    The whole file is rewritten as a JSON array after every change, so it
    always reflects the records currently held.
    """

    def __init__(
        self,
        path: Union[str, Path],
        key_field: Optional[str] = None,
        dry_run: bool = False
    ):
        super().__init__(key_field=key_field, dry_run=dry_run)
        self.path = Path(path)

        if not self.path.parent.is_dir():
            raise ResourceConstructionError(
                "destination", f"Output directory does not exist: {self.path.parent}"
            )

    def import_row(self, record, row, destination_id=None):
        destination_id = super().import_row(record, row, destination_id)
        self._save()
        return destination_id

    def rollback(self, destination_id):
        deleted = super().rollback(destination_id)
        if deleted:
            self._save()
        return deleted

    def _save(self):
        if self.dry_run:
            return
        data = [{"_id": key, **record} for key, record in self.records.items()]
        with open(self.path, 'w') as f:
            json.dump(data, f, indent=2, default=str)
        logger.debug(f"Saved {len(data)} records to {self.path}")
