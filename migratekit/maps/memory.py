"""In-memory id map."""

import logging
from datetime import datetime
from typing import Dict, Iterator, List, Optional

from .base import BaseMap
from ..models.record import MapRow, MessageLevel, MigrationMessage, RowStatus

logger = logging.getLogger(__name__)


class InMemoryMap(BaseMap):
    """Id map held in memory for the lifetime of a migration."""

    def __init__(self):
        # source_id -> MapRow
        self._rows: Dict[str, MapRow] = {}
        self._messages: List[MigrationMessage] = []

    def lookup(self, source_id: str) -> Optional[MapRow]:
        return self._rows.get(source_id)

    def save_id_mapping(
        self,
        source_id: str,
        destination_id: Optional[str],
        status: RowStatus = RowStatus.IMPORTED
    ) -> MapRow:
        row = MapRow(source_id=source_id, destination_id=destination_id, status=status)
        self._rows[source_id] = row
        return row

    def delete(self, source_id: str) -> bool:
        self._messages = [m for m in self._messages if m.source_id != source_id]
        return self._rows.pop(source_id, None) is not None

    def rows(self) -> Iterator[MapRow]:
        yield from list(self._rows.values())

    def save_message(
        self,
        source_id: Optional[str],
        message: str,
        level: MessageLevel = MessageLevel.ERROR
    ) -> MigrationMessage:
        saved = MigrationMessage(source_id=source_id, message=message, level=level)
        self._messages.append(saved)
        return saved

    def messages(self, source_id: Optional[str] = None) -> List[MigrationMessage]:
        if source_id is None:
            return list(self._messages)
        return [m for m in self._messages if m.source_id == source_id]

    def clear_messages(self) -> None:
        self._messages = []

    def set_update(self, source_id: str) -> bool:
        row = self._rows.get(source_id)
        if row is None:
            return False
        row.needs_update = True
        row.updated_at = datetime.utcnow()
        return True

    def prepare_update(self) -> int:
        for row in self._rows.values():
            row.needs_update = True
            row.updated_at = datetime.utcnow()
        logger.debug(f"Flagged {len(self._rows)} map rows for update")
        return len(self._rows)

    def processed_count(self) -> int:
        return len(self._rows)

    def message_count(self) -> int:
        return len(self._messages)
