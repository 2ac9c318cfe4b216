"""Tests for Migration arguments, lazy binding and status handling."""

import pytest

from conftest import SAMPLE_RECORDS, CountingMigration
from migratekit.destinations import InMemoryDestination
from migratekit.errors import (
    InvalidStateTransitionError,
    ResourceConstructionError,
    ResourceUnboundError,
)
from migratekit.framework import BaseMigration
from migratekit.maps import InMemoryMap
from migratekit.migration import Migration
from migratekit.models.migration import MigrationStatus
from migratekit.models.record import MessageLevel
from migratekit.sources import ListSource


class BatchMigration(CountingMigration):
    def get_default_arguments(self):
        return {"batchSize": 50, "description": "Batched people"}


class TestArguments:
    """Argument defaults and overrides."""

    def test_defaults_apply(self):
        migration = BatchMigration({})
        assert migration.get_argument("batchSize") == 50

    def test_caller_value_wins(self):
        migration = BatchMigration({"batchSize": 10})
        assert migration.get_argument("batchSize") == 10

    def test_set_argument(self):
        migration = BatchMigration()
        migration.set_argument("batchSize", 5)
        assert migration.get_argument("batchSize") == 5
        assert migration.get_argument("missing", "fallback") == "fallback"

    def test_get_arguments_returns_copy(self):
        migration = BatchMigration()
        args = migration.get_arguments()
        args["batchSize"] = 1
        assert migration.get_argument("batchSize") == 50

    def test_description_from_arguments(self):
        assert BatchMigration().description == "Batched people"
        assert BatchMigration({"description": "Custom"}).description == "Custom"

    def test_init_runs_after_arguments(self):
        seen = {}

        class Probe(CountingMigration):
            def get_default_arguments(self):
                return {"size": 3}

            def init(self):
                super().init()
                seen["size"] = self.get_argument("size")
                seen["description"] = self.description

        Probe({"description": "probe"})
        assert seen == {"size": 3, "description": "probe"}

    def test_identity_arguments(self):
        migration = CountingMigration({
            "machine_name": "users",
            "group_name": "accounts",
            "dependencies": ["roles"],
        })
        assert migration.machine_name == "users"
        assert migration.group_name == "accounts"
        assert migration.dependencies == ["roles"]

    def test_identity_defaults(self):
        migration = CountingMigration()
        assert migration.machine_name == "CountingMigration"
        assert migration.group_name == "default"
        assert migration.status == MigrationStatus.IDLE

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            Migration()


class TestLazyBinding:
    """Resources are built once, on first use."""

    def test_nothing_built_at_construction(self, migration):
        assert migration.factory_calls == {"source": 0, "destination": 0, "map": 0}

    @pytest.mark.parametrize("kind", ["source", "destination", "map"])
    def test_getter_builds_once(self, migration, kind):
        getter = getattr(migration, f"get_{kind}")
        first = getter()
        second = getter()

        assert first is second
        assert migration.factory_calls[kind] == 1

    def test_getters_return_expected_types(self, migration):
        assert isinstance(migration.get_source(), ListSource)
        assert isinstance(migration.get_destination(), InMemoryDestination)
        assert isinstance(migration.get_map(), InMemoryMap)

    def test_setter_prevents_factory_call(self, migration):
        source = ListSource([{"id": "x"}])
        migration.set_source(source)
        assert migration.get_source() is source
        assert migration.factory_calls["source"] == 0

    def test_factory_failure_leaves_slot_empty_and_retries(self):
        class Flaky(CountingMigration):
            def get_source_object(self):
                self.factory_calls["source"] += 1
                if self.factory_calls["source"] == 1:
                    raise ResourceConstructionError("source", "not ready")
                return ListSource(SAMPLE_RECORDS)

        migration = Flaky()
        with pytest.raises(ResourceConstructionError, match="not ready"):
            migration.get_source()
        assert migration._source is None

        assert isinstance(migration.get_source(), ListSource)
        assert migration.factory_calls["source"] == 2

    @pytest.mark.parametrize("query, needs", [
        ("source_count", "source"),
        ("processed_count", "map"),
        ("imported_count", "map"),
        ("update_count", "map"),
        ("error_count", "map"),
        ("message_count", "map"),
        ("prepare_update", "map"),
        ("current_source_key", "source"),
    ])
    def test_queries_bind_before_delegating(self, migration, query, needs):
        getattr(migration, query)()
        assert migration.factory_calls[needs] == 1

    def test_queries_before_import(self, migration):
        assert migration.source_count() == 3
        assert migration.processed_count() == 0
        assert migration.imported_count() == 0
        assert migration.update_count() == 0
        assert migration.error_count() == 0
        assert migration.message_count() == 0
        assert migration.current_source_key() is None
        assert migration.is_complete() is False
        assert migration.lookup_destination_id("1") is None

    def test_save_message_binds_map(self, migration):
        migration.save_message("hello", MessageLevel.NOTICE)
        assert migration.message_count() == 1
        message = migration.get_map().messages()[0]
        assert message.source_id is None
        assert message.level == MessageLevel.NOTICE

    def test_set_update_without_current_row(self, migration):
        assert migration.set_update() is False
        assert migration.factory_calls["source"] == 1
        assert migration.factory_calls["map"] == 1


class TestBaseMigrationSlots:
    """Without lazy binding, queries on empty slots fail."""

    def test_unbound_source_raises(self):
        base = BaseMigration({"machine_name": "bare"})
        with pytest.raises(ResourceUnboundError, match="bare has no source"):
            base.source_count()

    def test_unbound_map_raises(self):
        base = BaseMigration()
        with pytest.raises(ResourceUnboundError):
            base.processed_count()


class TestStatus:
    """Status transitions and binding on processing transitions."""

    def test_importing_binds_resources_and_mappings(self):
        calls = []

        class Mapped(CountingMigration):
            def set_field_mappings(self):
                calls.append(dict(self.factory_calls))
                self.add_field_mapping("full_name", "name")

        migration = Mapped()
        migration.set_status(MigrationStatus.IMPORTING)

        assert migration.status == MigrationStatus.IMPORTING
        assert calls == [{"source": 1, "destination": 1, "map": 1}]
        assert "full_name" in migration.get_field_mappings()

    def test_rolling_back_binds_resources(self, migration):
        migration.set_status(MigrationStatus.ROLLING_BACK)
        assert migration.factory_calls == {"source": 1, "destination": 1, "map": 1}

    def test_other_transitions_do_not_bind(self, migration):
        migration.set_status(MigrationStatus.DISABLED)
        migration.set_status(MigrationStatus.IDLE)
        assert migration.factory_calls == {"source": 0, "destination": 0, "map": 0}

    def test_binding_failure_keeps_status(self):
        class NoMap(CountingMigration):
            def get_map_object(self):
                raise ResourceConstructionError("map", "no storage")

        migration = NoMap()
        with pytest.raises(ResourceConstructionError):
            migration.set_status(MigrationStatus.IMPORTING)
        assert migration.status == MigrationStatus.IDLE

    def test_invalid_transition(self, migration):
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            migration.set_status(MigrationStatus.STOPPING)
        assert exc_info.value.current_state == "idle"
        assert exc_info.value.target_state == "stopping"

    def test_string_status_accepted(self, migration):
        migration.set_status("importing")
        assert migration.status == MigrationStatus.IMPORTING

    def test_disabled_from_arguments(self):
        migration = CountingMigration({"enabled": False})
        assert migration.status == MigrationStatus.DISABLED
        assert migration.enabled is False

    def test_stop_process_only_while_processing(self, migration):
        migration.stop_process()
        assert migration.status == MigrationStatus.IDLE

        migration.set_status(MigrationStatus.IMPORTING)
        migration.stop_process()
        assert migration.status == MigrationStatus.STOPPING
