"""
Tests for configuration and the command-line interface.
"""

import json

import pytest

from ..cli import main
from ..config import CoreConfig
from .conftest import entity_record, snapshot_payload


class TestCoreConfig:
    """Tests for environment configuration."""

    def test_defaults(self, monkeypatch):
        """Without variables, defaults apply."""
        for name in ("STEPSYNC_DEBIT_HORIZON", "STEPSYNC_CACHE_RETENTION",
                     "STEPSYNC_STEP_BUDGET_MS", "STEPSYNC_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert CoreConfig.from_env() == CoreConfig()

    def test_overrides(self, monkeypatch):
        """Variables override defaults."""
        monkeypatch.setenv("STEPSYNC_DEBIT_HORIZON", "8")
        monkeypatch.setenv("STEPSYNC_CACHE_RETENTION", "0")
        monkeypatch.setenv("STEPSYNC_STEP_BUDGET_MS", "250.5")
        monkeypatch.setenv("STEPSYNC_LOG_LEVEL", "debug")

        config = CoreConfig.from_env()

        assert config.debit_horizon_steps == 8
        assert config.cache_retention_steps == 0
        assert config.step_budget_ms == 250.5
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["soon", "-3"])
    def test_invalid_values_fall_back(self, monkeypatch, value):
        """Unparseable or negative values are ignored."""
        monkeypatch.setenv("STEPSYNC_DEBIT_HORIZON", value)
        assert CoreConfig.from_env().debit_horizon_steps == 4


class TestCli:
    """Tests for the stepsync command."""

    def test_validate(self, tmp_path, capsys):
        """validate prints the partition summary."""
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(snapshot_payload(448, [
            entity_record(1, 18),
            entity_record(2, 45),
            entity_record(100, 341, alliance="neutral"),
            entity_record(200, 105, alliance="enemy"),
            {"tag": 5, "type_id": "bad"},
        ])))

        assert main(["validate", str(path)]) == 0

        out = capsys.readouterr().out
        assert "Step: 448 (20.0s)" in out
        assert "Mine: 2 (1 structures, 1 workers)" in out
        assert "Enemy visible: 1" in out
        assert "Unclassified: 1" in out
        assert "malformed record for tag 5" in out

    def test_validate_invalid(self, tmp_path, capsys):
        """An invalid snapshot exits with status 1."""
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps({"entities": []}))

        with pytest.raises(SystemExit) as exc:
            main(["validate", str(path)])
        assert exc.value.code == 1
        assert "Invalid snapshot" in capsys.readouterr().out

    def test_validate_missing_file(self, tmp_path, capsys):
        """A missing file exits with status 1."""
        with pytest.raises(SystemExit):
            main(["validate", str(tmp_path / "missing.json")])
        assert "File not found" in capsys.readouterr().out

    def test_types(self, capsys):
        """types lists the catalog, optionally by race."""
        assert main(["types", "--race", "zerg"]) == 0

        out = capsys.readouterr().out
        assert "HATCHERY" in out
        assert "MARINE" not in out

    def test_types_unknown_race(self, capsys):
        """An unrecognized race name exits with status 1."""
        with pytest.raises(SystemExit) as exc:
            main(["types", "--race", "foo"])

        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert "Unknown race: foo" in out
        assert "MINERALFIELD" not in out
