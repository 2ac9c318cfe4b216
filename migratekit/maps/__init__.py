"""Id maps linking source rows to destination records."""

from .base import BaseMap
from .memory import InMemoryMap

__all__ = [
    "BaseMap",
    "InMemoryMap",
]
