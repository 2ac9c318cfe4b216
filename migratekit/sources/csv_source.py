"""CSV file source."""

import csv
import io
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from .base import BaseSource
from ..errors import ResourceConstructionError

logger = logging.getLogger(__name__)


class CSVSource(BaseSource):
    """
    Source for CSV file exports.

    Supports:
    - Delimiter detection
    - Column renaming
    - latin-1 fallback when the file is not valid in the configured encoding
    """

    def __init__(
        self,
        path: Union[str, Path],
        key_field: str = "id",
        column_mapping: Optional[Dict[str, str]] = None,
        encoding: str = "utf-8",
        delimiter: str = ","
    ):
        """
        Initialize the CSV source.

        Args:
            path: Path to the CSV file
            key_field: Column to use as the source key
            column_mapping: Optional mapping of CSV columns to field names
            encoding: File encoding
            delimiter: Delimiter used when detection fails

        Raises:
            ResourceConstructionError: If the file does not exist
        """
        super().__init__(key_field=key_field)
        self.path = Path(path)
        self.column_mapping = column_mapping or {}
        self.encoding = encoding
        self.delimiter = delimiter

        if not self.path.is_file():
            raise ResourceConstructionError("source", f"CSV file not found: {self.path}")

    def fetch(self) -> Iterator[Dict[str, Any]]:
        content = self._load()
        reader = csv.DictReader(io.StringIO(content), delimiter=self._sniff_delimiter(content))
        for row in reader:
            yield self._process_row(row)

    def _load(self) -> str:
        # Decode the whole file up front so a decode error surfaces before any row is yielded
        try:
            return self._decode(self.encoding)
        except UnicodeDecodeError:
            logger.warning(f"{self.encoding} decode failed, trying latin-1 for {self.path}")
            return self._decode("latin-1")

    def _decode(self, encoding: str) -> str:
        with open(self.path, "r", encoding=encoding, newline="") as f:
            return f.read()

    def _sniff_delimiter(self, content: str) -> str:
        """Detect the delimiter from the start of the file, falling back to the configured one."""
        try:
            return csv.Sniffer().sniff(content[:8192], delimiters=",;\t|").delimiter
        except csv.Error:
            return self.delimiter

    def _process_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Rename columns and turn empty cells into None."""
        data = {}
        for column, value in row.items():
            if column is None:
                continue
            name = self.column_mapping.get(column, column).strip()
            if isinstance(value, str):
                value = value.strip()
                if value == "":
                    value = None
            data[name] = value
        return data

    def fields(self) -> List[str]:
        content = self._load()
        reader = csv.reader(io.StringIO(content), delimiter=self._sniff_delimiter(content))
        header = next(reader, [])
        return [self.column_mapping.get(c, c).strip() for c in header]
