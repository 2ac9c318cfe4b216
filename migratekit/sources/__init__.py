"""Migration sources."""

from .base import BaseSource
from .csv_source import CSVSource
from .list_source import ListSource

__all__ = [
    "BaseSource",
    "CSVSource",
    "ListSource",
]
