"""
Tests for boundary Pydantic schemas.

Validates that:
- Snapshots parse with per-record salvage
- Death evidence combines dead_tags and alerts
- Outbound models serialize correctly
"""

import pytest

from ..api.schemas import (
    ActionPayload,
    GameSetup,
    RawSnapshot,
    StepResponse,
    parse_entity,
)
from ..errors import SnapshotValidationError


class TestSnapshotParsing:
    """Tests for RawSnapshot.parse."""

    def test_minimal(self):
        """Only the step index is required."""
        snapshot = RawSnapshot.parse({"step": 3})

        assert snapshot.step == 3
        assert snapshot.entities == []
        assert snapshot.player.minerals == 0
        assert snapshot.warnings == []

    def test_not_a_mapping(self):
        """Non-mapping payloads are rejected."""
        with pytest.raises(SnapshotValidationError) as exc:
            RawSnapshot.parse("step 3")
        assert "mapping" in exc.value.errors[0]

    def test_bad_step(self):
        """An unusable step index is rejected with the field path."""
        with pytest.raises(SnapshotValidationError) as exc:
            RawSnapshot.parse({"step": "later"})
        assert exc.value.errors[0].startswith("step")

    def test_bad_record_does_not_reject_snapshot(self):
        """Entity records are validated one by one."""
        snapshot = RawSnapshot.parse({
            "step": 1,
            "entities": [
                {"tag": 1, "type_id": 45, "alliance": "self"},
                {"tag": 2, "health": "lots", "alliance": "enemy"},
                {"health": 10},
            ],
        })

        assert [e.tag for e in snapshot.entities] == [1, 2]
        assert snapshot.entities[1].malformed
        assert snapshot.entities[1].alliance == "enemy"
        assert len(snapshot.warnings) == 2

    def test_passthrough(self):
        """Already parsed snapshots are returned as is."""
        snapshot = RawSnapshot(step=1)
        assert RawSnapshot.parse(snapshot) is snapshot

    def test_death_tags(self):
        """dead_tags and death alerts are combined; other alerts ignored."""
        snapshot = RawSnapshot.parse({
            "step": 9,
            "dead_tags": [1],
            "alerts": [
                {"kind": "unit_destroyed", "tags": [2]},
                {"kind": "structure_destroyed", "tags": [3]},
                {"kind": "nuclear_launch_detected", "tags": [4]},
            ],
        })
        assert snapshot.death_tags() == {1, 2, 3}


class TestParseEntity:
    """Tests for single record salvage."""

    def test_string_tag_salvaged(self):
        """A numeric string tag still identifies the record."""
        entity = parse_entity({"tag": "42", "position": "nowhere"})
        assert entity.tag == 42
        assert entity.malformed

    def test_unusable_tag(self):
        """No identity, no entity."""
        warnings = []
        assert parse_entity({"tag": "abc"}, index=4, warnings=warnings) is None
        assert warnings == ["entities[4]: dropped record without a usable tag"]


class TestOutbound:
    """Tests for outbound models."""

    def test_step_response(self):
        """StepResponse carries the batched payloads."""
        response = StepResponse(step=12, actions=[
            ActionPayload(ability_id=3674, unit_tags=[1, 2], target_tag=200),
        ])

        data = response.model_dump()
        assert data["step"] == 12
        assert data["actions"][0]["unit_tags"] == [1, 2]
        assert data["actions"][0]["target_position"] is None
        assert data["actions"][0]["queue_command"] is False

    def test_game_setup_defaults(self):
        """GameSetup is usable with defaults."""
        setup = GameSetup()
        assert setup.race == "random"
        assert setup.expansions == []
