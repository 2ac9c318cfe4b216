"""Tests for the command line interface."""

import json

import pytest

from migratekit.cli import main


@pytest.fixture
def config_file(tmp_path):
    source = tmp_path / "people.csv"
    source.write_text("id,name\n1,Ada\n2,Grace\n3,Linus\n")

    path = tmp_path / "migrations.json"
    path.write_text(json.dumps({
        "migrations": [
            {
                "machine_name": "people",
                "group_name": "crm",
                "arguments": {
                    "source_path": str(source),
                    "output_path": str(tmp_path / "people.json"),
                },
                "plugins": {"log": {"class": "migratekit.plugins:LoggingPlugin"}},
            },
            {
                "machine_name": "archived",
                "enabled": False,
                "arguments": {"source_path": str(source)},
            },
        ]
    }))
    return path


class TestCLI:
    """migratekit command line."""

    def test_no_command_prints_help(self, config_file, capsys):
        assert main(["--config", str(config_file)]) == 1
        assert "usage" in capsys.readouterr().out

    def test_list(self, config_file, capsys):
        assert main(["--config", str(config_file), "list"]) == 0
        out = capsys.readouterr().out
        assert "people" in out
        assert "crm" in out
        assert "archived" in out

    def test_import_all(self, config_file, tmp_path, capsys):
        assert main(["--config", str(config_file), "import"]) == 0
        out = capsys.readouterr().out
        assert "people: completed" in out
        assert "Imported: 3" in out
        assert "archived: disabled" in out
        assert len(json.loads((tmp_path / "people.json").read_text())) == 3

    def test_import_with_limit(self, config_file, tmp_path, capsys):
        assert main(["--config", str(config_file), "import", "people", "--limit", "2"]) == 0
        out = capsys.readouterr().out
        assert "people: incomplete" in out
        assert "archived" not in out
        assert len(json.loads((tmp_path / "people.json").read_text())) == 2

    def test_import_by_group(self, config_file, capsys):
        assert main(["--config", str(config_file), "import", "--group", "crm"]) == 0
        out = capsys.readouterr().out
        assert "people: completed" in out
        assert "archived" not in out

    def test_unknown_migration(self, config_file, capsys):
        assert main(["--config", str(config_file), "import", "ghost"]) == 1
        assert "Migration not found: ghost" in capsys.readouterr().err

    def test_missing_config(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "nope.json"), "list"]) == 1
        assert "Could not read" in capsys.readouterr().err

    def test_config_from_environment(self, config_file, monkeypatch, capsys):
        monkeypatch.setenv("MIGRATEKIT_CONFIG", str(config_file))
        assert main(["list"]) == 0
        assert "people" in capsys.readouterr().out
