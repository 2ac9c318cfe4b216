"""Migration destinations."""

from .base import BaseDestination
from .memory import InMemoryDestination, JSONFileDestination

__all__ = [
    "BaseDestination",
    "InMemoryDestination",
    "JSONFileDestination",
]
