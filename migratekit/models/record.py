"""Record models for migration data."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from enum import Enum, IntEnum
from datetime import datetime


class RowStatus(str, Enum):
    """Status of a source row in the id map."""
    IMPORTED = "imported"
    IGNORED = "ignored"
    FAILED = "failed"


class MessageLevel(IntEnum):
    """Severity of a saved migration message."""
    ERROR = 1
    WARNING = 2
    NOTICE = 3
    INFORMATIONAL = 4


@dataclass
class SourceRow:
    """A row read from a migration source."""
    id: str
    data: Dict[str, Any]
    read_at: datetime = field(default_factory=datetime.utcnow)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "data": self.data,
            "read_at": self.read_at.isoformat(),
            "metadata": self.metadata,
        }

    def get_field(self, path: str, default: Any = None) -> Any:
        """Get a field value by dot-notation path (e.g., 'address.city')."""
        parts = path.split(".")
        value = self.data
        for part in parts:
            if isinstance(value, dict):
                value = value.get(part)
            elif isinstance(value, list) and part.isdigit():
                idx = int(part)
                value = value[idx] if idx < len(value) else None
            else:
                return default
            if value is None:
                return default
        return value


@dataclass
class MapRow:
    """Link between a source row and the destination record it produced."""
    source_id: str
    destination_id: Optional[str] = None
    status: RowStatus = RowStatus.IMPORTED
    needs_update: bool = False  # Re-import on the next run, status kept
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "source_id": self.source_id,
            "destination_id": self.destination_id,
            "status": self.status.value,
            "needs_update": self.needs_update,
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class MigrationMessage:
    """A message saved against a source row during processing."""
    source_id: Optional[str]
    message: str
    level: MessageLevel = MessageLevel.ERROR
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "source_id": self.source_id,
            "message": self.message,
            "level": self.level.name.lower(),
            "created_at": self.created_at.isoformat(),
        }
