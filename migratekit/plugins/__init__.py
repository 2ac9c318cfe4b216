"""Lifecycle plugins for migrations."""

from .base import MigrationPlugin
from .builtin import LoggingPlugin, TimingPlugin

__all__ = [
    "MigrationPlugin",
    "LoggingPlugin",
    "TimingPlugin",
]
