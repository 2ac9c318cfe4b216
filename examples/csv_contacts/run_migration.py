#!/usr/bin/env python3
"""
Example: CSV contacts to a JSON file

Shows a custom Migration subclass with a plugin attached.

Usage:
    # Import
    python run_migration.py

    # Import, then roll everything back
    python run_migration.py --rollback

    # Simulate without writing the output file
    python run_migration.py --dry-run
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from migratekit import Migration, MigrationPlugin
from migratekit.destinations import JSONFileDestination
from migratekit.maps import InMemoryMap
from migratekit.models.record import MessageLevel
from migratekit.plugins import LoggingPlugin, TimingPlugin
from migratekit.sources import CSVSource

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

HERE = Path(__file__).parent


class ContactMigration(Migration):
    """Contacts from contacts.csv into contacts.json."""

    def get_default_arguments(self):
        return {
            "machine_name": "contacts",
            "group_name": "crm",
            "description": "Contacts exported from the old CRM",
            "source_path": str(HERE / "contacts.csv"),
            "output_path": str(HERE / "contacts.json"),
            "dry_run": False,
        }

    def get_source_object(self):
        return CSVSource(self.get_argument("source_path"))

    def get_destination_object(self):
        return JSONFileDestination(
            self.get_argument("output_path"),
            key_field="email",
            dry_run=self.get_argument("dry_run"),
        )

    def get_map_object(self):
        return InMemoryMap()

    def set_field_mappings(self):
        self.add_field_mapping("email", "email", callbacks=[lambda v: v.lower() if v else v])
        self.add_field_mapping("name", "first_name")
        self.add_field_mapping("surname", "last_name")
        self.add_field_mapping("country", "country", default_value="US")

    def prepare_row(self, row):
        if not row.data.get("email"):
            self.save_message(f"Contact {row.id} has no email", MessageLevel.WARNING)
            return False
        return True


class SummaryPlugin(MigrationPlugin):
    """Prints a short summary once an import is done."""

    def on_post_import(self, args):
        migration = self.migration
        print(
            f"{migration.machine_name}: {migration.imported_count()} imported, "
            f"{migration.processed_count() - migration.imported_count()} skipped, "
            f"{migration.message_count()} messages"
        )


def main():
    parser = argparse.ArgumentParser(description="Migrate CSV contacts to JSON")
    parser.add_argument("--dry-run", action="store_true", help="Simulate without writing")
    parser.add_argument("--rollback", action="store_true", help="Roll back after importing")
    args = parser.parse_args()

    migration = ContactMigration({"dry_run": args.dry_run})
    migration.add_plugin("log", LoggingPlugin())
    migration.add_plugin("timer", TimingPlugin())
    migration.add_plugin("summary", SummaryPlugin())

    result = migration.process_import()
    timer = migration.get_plugin("timer")
    logger.info(f"Import {result.value} in {timer.duration_seconds:.3f} seconds")

    for message in migration.get_map().messages():
        logger.info(f"[{message.level.name}] {message.message}")

    if args.rollback:
        migration.process_rollback()
        logger.info(f"After rollback: {migration.processed_count()} rows in map")


if __name__ == "__main__":
    main()
