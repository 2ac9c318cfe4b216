"""Ready-made migrations configured entirely through arguments."""

import logging
from typing import Any, Dict

from .destinations import InMemoryDestination, JSONFileDestination
from .errors import ResourceConstructionError
from .maps import InMemoryMap
from .migration import Migration
from .sources import CSVSource

logger = logging.getLogger(__name__)


class CSVMigration(Migration):
    """
    Migrate rows from a CSV file.

    Arguments:
        source_path: CSV file to read (required)
        key_field: Column holding the source key
        output_path: JSON file to write records to; kept in memory if unset
        destination_key_field: Record field to use as destination id
        field_mappings: Destination field -> source field (dot paths allowed)
        defaults: Destination field -> value used when the source is empty
        dry_run: Simulate the destination without storing anything
    """

    def get_default_arguments(self) -> Dict[str, Any]:
        return {
            "key_field": "id",
            "output_path": None,
            "destination_key_field": None,
            "field_mappings": {},
            "defaults": {},
            "dry_run": False,
        }

    def get_source_object(self) -> CSVSource:
        path = self.get_argument("source_path")
        if not path:
            raise ResourceConstructionError("source", f"{self.machine_name} has no source_path argument")
        return CSVSource(path, key_field=self.get_argument("key_field"))

    def get_destination_object(self) -> InMemoryDestination:
        output_path = self.get_argument("output_path")
        key_field = self.get_argument("destination_key_field")
        dry_run = self.get_argument("dry_run")
        if output_path:
            return JSONFileDestination(output_path, key_field=key_field, dry_run=dry_run)
        return InMemoryDestination(key_field=key_field, dry_run=dry_run)

    def get_map_object(self) -> InMemoryMap:
        return InMemoryMap()

    def set_field_mappings(self) -> None:
        defaults = self.get_argument("defaults") or {}
        mappings = self.get_argument("field_mappings") or {}

        for destination_field, source_field in mappings.items():
            self.add_field_mapping(
                destination_field,
                source_field,
                default_value=defaults.get(destination_field),
            )

        # Defaults without a source column still need a mapping
        for destination_field, value in defaults.items():
            if destination_field not in mappings:
                self.add_field_mapping(destination_field, default_value=value)
