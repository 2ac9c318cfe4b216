"""Base id map interface."""

from abc import ABC, abstractmethod
from typing import Iterator, List, Optional

from ..models.record import MapRow, MessageLevel, MigrationMessage, RowStatus


class BaseMap(ABC):
    """
    Base class for id maps.

    A map remembers which destination record each source row produced,
    the status of that row, and any messages saved while processing it.
    """

    @abstractmethod
    def lookup(self, source_id: str) -> Optional[MapRow]:
        """Get the map row for a source id."""
        pass

    @abstractmethod
    def save_id_mapping(
        self,
        source_id: str,
        destination_id: Optional[str],
        status: RowStatus = RowStatus.IMPORTED
    ) -> MapRow:
        """Create or replace the map row for a source id."""
        pass

    @abstractmethod
    def delete(self, source_id: str) -> bool:
        """Remove the map row (and its messages) for a source id."""
        pass

    @abstractmethod
    def rows(self) -> Iterator[MapRow]:
        """Iterate over all map rows."""
        pass

    @abstractmethod
    def save_message(
        self,
        source_id: Optional[str],
        message: str,
        level: MessageLevel = MessageLevel.ERROR
    ) -> MigrationMessage:
        """Save a message against a source id."""
        pass

    @abstractmethod
    def messages(self, source_id: Optional[str] = None) -> List[MigrationMessage]:
        """Get saved messages, optionally only those for one source id."""
        pass

    @abstractmethod
    def clear_messages(self) -> None:
        """Delete all saved messages."""
        pass

    @abstractmethod
    def set_update(self, source_id: str) -> bool:
        """Flag one imported row for re-import."""
        pass

    @abstractmethod
    def prepare_update(self) -> int:
        """Flag every row for re-import."""
        pass

    def lookup_destination_id(self, source_id: str) -> Optional[str]:
        """Get the destination id a source row was imported as."""
        row = self.lookup(source_id)
        return row.destination_id if row else None

    def lookup_source_id(self, destination_id: str) -> Optional[str]:
        """Get the source id a destination record was imported from."""
        for row in self.rows():
            if row.destination_id == destination_id:
                return row.source_id
        return None

    def count_status(self, *statuses: RowStatus) -> int:
        """Count map rows in any of the given statuses."""
        return sum(1 for row in self.rows() if row.status in statuses)

    def processed_count(self) -> int:
        """Count every source row that has been processed."""
        return sum(1 for _ in self.rows())

    def imported_count(self) -> int:
        """Count rows that were imported."""
        return self.count_status(RowStatus.IMPORTED)

    def update_count(self) -> int:
        """Count rows flagged for re-import."""
        return sum(1 for row in self.rows() if row.needs_update)

    def error_count(self) -> int:
        """Count rows that failed to import."""
        return self.count_status(RowStatus.FAILED)

    def message_count(self) -> int:
        """Count saved messages."""
        return len(self.messages())
