"""In-memory source backed by a list of dictionaries."""

from typing import Any, Dict, Iterator, List, Optional

from .base import BaseSource


class ListSource(BaseSource):
    """Source reading records from a list held in memory."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None, key_field: str = "id"):
        super().__init__(key_field=key_field)
        self.records = list(records or [])

    def fetch(self) -> Iterator[Dict[str, Any]]:
        for record in self.records:
            yield record

    def compute_count(self) -> int:
        return len(self.records)

    def fields(self) -> List[str]:
        names: List[str] = []
        for record in self.records:
            for key in record:
                if key not in names:
                    names.append(key)
        return names
