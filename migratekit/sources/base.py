"""Base source interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional
import logging

from ..errors import RowError
from ..models.record import SourceRow

logger = logging.getLogger(__name__)


class BaseSource(ABC):
    """
    Base class for all migration sources.

    Sources read raw records from somewhere and hand them to the migration
    one SourceRow at a time. The key of the row being processed is exposed
    as current_key while iteration is in progress.
    """

    def __init__(self, key_field: str = "id"):
        """
        Initialize the source.

        Args:
            key_field: Field holding the unique source key of each record
        """
        self.key_field = key_field
        self.current_key: Optional[str] = None
        self._count: Optional[int] = None

    @abstractmethod
    def fetch(self) -> Iterator[Dict[str, Any]]:
        """
        Yield raw records from the source.

        Yields:
            Record dictionaries
        """
        pass

    def count(self, refresh: bool = False) -> int:
        """
        Count the records available in the source.

        Args:
            refresh: If True, recount instead of using the cached value

        Returns:
            Number of records, or -1 if the source cannot be counted
        """
        if self._count is None or refresh:
            self._count = self.compute_count()
        return self._count

    def compute_count(self) -> int:
        """Count records by reading them all. Override for cheaper counts."""
        return sum(1 for _ in self.fetch())

    def __iter__(self) -> Iterator[SourceRow]:
        try:
            for position, data in enumerate(self.fetch(), start=1):
                try:
                    row = self.create_row(data)
                except RowError as e:
                    logger.warning(f"Skipping source record {position}: {e}")
                    continue
                self.current_key = row.id
                yield row
        finally:
            self.current_key = None

    def create_row(self, data: Dict[str, Any]) -> SourceRow:
        """
        Create a SourceRow from a raw record.

        Raises:
            RowError: If the record has no value for the key field
        """
        key = data.get(self.key_field)
        if key is None or key == "":
            raise RowError(f"Source record has no value for key field '{self.key_field}'")
        return SourceRow(id=str(key), data=dict(data))

    def fields(self) -> List[str]:
        """List the fields records from this source carry, if known."""
        return []

    def reset(self) -> None:
        """Forget the cached count and the current key."""
        self._count = None
        self.current_key = None
