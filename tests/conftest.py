"""Shared fixtures for migratekit tests."""

import pytest

from migratekit.destinations import InMemoryDestination
from migratekit.maps import InMemoryMap
from migratekit.migration import Migration
from migratekit.plugins import MigrationPlugin
from migratekit.sources import ListSource


SAMPLE_RECORDS = [
    {"id": "1", "name": "Ada", "email": "ada@example.com"},
    {"id": "2", "name": "Grace", "email": "grace@example.com"},
    {"id": "3", "name": "Linus", "email": None},
]


class RecordingPlugin(MigrationPlugin):
    """Plugin that records every event it receives."""

    def __init__(self, migration=None):
        super().__init__(migration)
        self.events = []

    def execute(self, event, args):
        self.events.append((event, args))

    def count(self, event):
        return sum(1 for e, _ in self.events if e == event)


class CountingMigration(Migration):
    """Migration over an in-memory list that counts factory calls."""

    def init(self):
        self.factory_calls = {"source": 0, "destination": 0, "map": 0}

    def get_source_object(self):
        self.factory_calls["source"] += 1
        records = self.get_argument("records", SAMPLE_RECORDS)
        return ListSource([dict(r) for r in records])

    def get_destination_object(self):
        self.factory_calls["destination"] += 1
        return InMemoryDestination()

    def get_map_object(self):
        self.factory_calls["map"] += 1
        return InMemoryMap()


@pytest.fixture
def migration():
    return CountingMigration({"machine_name": "people"})


@pytest.fixture
def recorder():
    return RecordingPlugin()
