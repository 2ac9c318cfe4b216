"""Base destination interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

from ..models.record import SourceRow

logger = logging.getLogger(__name__)


class BaseDestination(ABC):
    """
    Base class for migration destinations.

    Destinations store records produced from source rows and can remove
    them again when a migration is rolled back.
    """

    def __init__(self, key_field: Optional[str] = None, dry_run: bool = False):
        """
        Initialize the destination.

        Args:
            key_field: Record field to use as destination id; generated if None
            dry_run: If True, simulate without storing anything
        """
        self.key_field = key_field
        self.dry_run = dry_run

    @abstractmethod
    def import_row(
        self,
        record: Dict[str, Any],
        row: SourceRow,
        destination_id: Optional[str] = None
    ) -> str:
        """
        Store a single record.

        Args:
            record: Record built from the source row by the field mappings
            row: Source row the record was built from
            destination_id: Id of a previously imported record to update

        Returns:
            Destination id of the stored record
        """
        pass

    @abstractmethod
    def rollback(self, destination_id: str) -> bool:
        """
        Delete a previously imported record.

        Args:
            destination_id: Id returned by import_row

        Returns:
            True if a record was deleted
        """
        pass

    def fields(self) -> List[str]:
        """List the fields records in this destination carry, if known."""
        return []
