"""Migration lifecycle models."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from enum import Enum


class MigrationStatus(str, Enum):
    """Status of a migration."""
    IDLE = "idle"
    IMPORTING = "importing"
    ROLLING_BACK = "rolling_back"
    STOPPING = "stopping"
    DISABLED = "disabled"


class MigrationResult(str, Enum):
    """Outcome of an import or rollback run."""
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"  # Stopped at the requested limit
    STOPPED = "stopped"  # Stopped on request
    FAILED = "failed"
    DISABLED = "disabled"


class MigrationEvent(str, Enum):
    """Lifecycle events dispatched to attached plugins."""
    INITIALIZE = "initialize"
    PREIMPORT = "pre_import"
    POSTIMPORT = "post_import"

    @classmethod
    def parse(cls, value: Any) -> Optional["MigrationEvent"]:
        """Return the event matching a member, value or member name, or None for anything unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            pass
        if isinstance(value, str):
            return cls.__members__.get(value)
        return None


# Statuses reachable from each status
STATUS_TRANSITIONS: Dict[MigrationStatus, tuple] = {
    MigrationStatus.IDLE: (
        MigrationStatus.IMPORTING,
        MigrationStatus.ROLLING_BACK,
        MigrationStatus.DISABLED,
    ),
    MigrationStatus.IMPORTING: (MigrationStatus.STOPPING, MigrationStatus.IDLE),
    MigrationStatus.ROLLING_BACK: (MigrationStatus.STOPPING, MigrationStatus.IDLE),
    MigrationStatus.STOPPING: (MigrationStatus.IDLE,),
    MigrationStatus.DISABLED: (MigrationStatus.IDLE,),
}

PROCESSING_STATUSES = (MigrationStatus.IMPORTING, MigrationStatus.ROLLING_BACK)


@dataclass
class FieldMapping:
    """Mapping from a source field onto a destination field."""
    destination_field: str
    source_field: Optional[str] = None  # None if generated/default
    default_value: Optional[Any] = None
    callbacks: List[Callable[[Any], Any]] = field(default_factory=list)
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "destination_field": self.destination_field,
            "source_field": self.source_field,
        }
        if self.default_value is not None:
            result["default"] = self.default_value
        if self.callbacks:
            result["callbacks"] = [getattr(c, "__name__", repr(c)) for c in self.callbacks]
        if self.description:
            result["description"] = self.description
        return result
