"""Command line interface for running configured migrations."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config import MigrateConfig
from .errors import MigrateError
from .models.migration import MigrationResult
from .registry import MigrationRegistry

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "migrations.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="migratekit",
        description="Run migrations described in a JSON configuration file",
    )
    parser.add_argument(
        "--config", "-c",
        default=os.environ.get("MIGRATEKIT_CONFIG", DEFAULT_CONFIG),
        help="Path to migration config JSON (default: $MIGRATEKIT_CONFIG or migrations.json)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")

    list_parser = subparsers.add_parser("list", help="List configured migrations")
    list_parser.add_argument("--group", "-g", help="Only list migrations in this group")

    import_parser = subparsers.add_parser("import", help="Import migrations")
    import_parser.add_argument("names", nargs="*", help="Machine names to import (default: all)")
    import_parser.add_argument("--group", "-g", help="Only import migrations in this group")
    import_parser.add_argument("--limit", type=int, help="Stop each migration after this many rows")
    import_parser.add_argument("--update", action="store_true", help="Re-import rows already imported")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        registry = MigrateConfig.from_json_file(args.config).build_registry()

        if args.command == "list":
            return list_migrations(registry, args.group)
        if args.command == "import":
            return run_import(registry, args.names, args.group, args.limit, args.update)

    except MigrateError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


def list_migrations(registry: MigrationRegistry, group: Optional[str] = None) -> int:
    """Print each migration with its status and counts."""
    migrations = registry.ordered(group)
    if not migrations:
        print("No migrations configured.")
        return 0

    print(f"{'Migration':<30} {'Group':<15} {'Status':<12} {'Total':>8} {'Processed':>10}")
    print("-" * 79)
    for migration in migrations:
        print(
            f"{migration.machine_name:<30} {migration.group_name:<15} "
            f"{migration.status.value:<12} {migration.source_count():>8} "
            f"{migration.processed_count():>10}"
        )
    return 0


def run_import(
    registry: MigrationRegistry,
    names: Optional[List[str]] = None,
    group: Optional[str] = None,
    limit: Optional[int] = None,
    update: bool = False
) -> int:
    """Import the selected migrations in dependency order."""
    migrations = registry.ordered(group)
    if names:
        for name in names:
            registry.get_or_raise(name)
        migrations = [m for m in migrations if m.machine_name in names]

    failed = False
    for migration in migrations:
        result = migration.process_import(limit=limit, update=update)

        print("\n" + "=" * 60)
        print(f"{migration.machine_name}: {result.value}")
        print("=" * 60)
        if result != MigrationResult.DISABLED:
            print(f"Processed: {migration.processed_count()}")
            print(f"Imported: {migration.imported_count()}")
            print(f"Failed: {migration.error_count()}")
            print(f"Messages: {migration.message_count()}")

        if result == MigrationResult.FAILED:
            failed = True

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
