"""
Tests for the entity normalizer.

Tests:
- Ownership and category mapping
- Unknown types and malformed records degrade to unclassified
- Orders and duplicate records
"""

import pytest

from ..api.schemas import RawEntity
from ..catalog import Category, UnitTypeId
from ..engine_core import Owner, Point2


class TestOwnership:
    """Tests for alliance to owner mapping."""

    @pytest.mark.parametrize("alliance, owner", [
        ("self", Owner.MINE),
        ("enemy", Owner.OPPONENT),
        ("neutral", Owner.NEUTRAL),
        ("ally", Owner.NEUTRAL),
        ("somebody", Owner.NEUTRAL),
    ])
    def test_alliance_maps_to_owner(self, normalizer, make_entity, alliance, owner):
        """Each alliance lands in one owner partition."""
        entity = normalizer.normalize(make_entity(1, UnitTypeId.MARINE, alliance=alliance), step=5)
        assert entity.owner == owner


class TestClassification:
    """Tests for category derivation."""

    def test_known_structure(self, normalizer, make_entity):
        """A command center is a structure and a townhall."""
        entity = normalizer.normalize(make_entity(1, UnitTypeId.COMMANDCENTER), step=1)

        assert entity.unit_type == UnitTypeId.COMMANDCENTER
        assert entity.is_structure
        assert entity.is_townhall
        assert not entity.is_worker
        assert entity.is_classified

    def test_worker(self, normalizer, make_entity):
        """Workers carry both unit and worker categories."""
        entity = normalizer.normalize(make_entity(2, UnitTypeId.SCV), step=1)
        assert entity.categories == frozenset({Category.UNIT, Category.WORKER})

    def test_placeholder_display(self, normalizer, make_entity):
        """A placeholder is not yet a structure."""
        entity = normalizer.normalize(
            make_entity(7, UnitTypeId.BARRACKS, display_type="placeholder", build_progress=0.0),
            step=10,
        )
        assert entity.is_placeholder
        assert not entity.is_structure
        assert not entity.is_under_construction

    def test_unknown_type_is_retained(self, normalizer, make_entity):
        """Unknown type ids normalize to unclassified, not None."""
        entity = normalizer.normalize(make_entity(9, 99999), step=3)

        assert entity is not None
        assert entity.unit_type is None
        assert entity.type_id == 99999
        assert entity.categories == frozenset({Category.UNCLASSIFIED})
        assert not entity.is_classified

    def test_malformed_record_is_salvaged(self, normalizer):
        """A broken record with a tag becomes an unclassified entity."""
        entity = normalizer.normalize({"tag": 12, "type_id": "not-a-number", "alliance": "enemy"}, step=4)

        assert entity is not None
        assert entity.tag == 12
        assert entity.owner == Owner.OPPONENT
        assert not entity.is_classified

    def test_record_without_tag_is_dropped(self, normalizer):
        """Only records without identity are dropped."""
        assert normalizer.normalize({"type_id": 48}, step=4) is None
        assert normalizer.normalize("garbage", step=4) is None


class TestFields:
    """Tests for field mapping."""

    def test_position_and_step(self, normalizer, make_entity):
        """Position and last seen step are set."""
        entity = normalizer.normalize(make_entity(1, UnitTypeId.MARINE, x=10, y=20), step=33)

        assert entity.position == Point2(10.0, 20.0)
        assert entity.last_seen_step == 33

    def test_orders(self, normalizer, make_entity):
        """Order targets become a tag, a point or None."""
        record = make_entity(1, UnitTypeId.SCV, orders=[
            {"ability_id": 3666, "target_tag": 100},
            {"ability_id": 321, "target_position": {"x": 40, "y": 52}},
            {"ability_id": 3665},
        ])
        entity = normalizer.normalize(record, step=1)

        assert [o.target for o in entity.orders] == [100, Point2(40.0, 52.0), None]
        assert entity.orders[0].targets_entity
        assert not entity.is_idle

    def test_accepts_schema_objects(self, normalizer):
        """RawEntity values are used as is."""
        raw = RawEntity(tag=5, type_id=int(UnitTypeId.PROBE), alliance="self")
        entity = normalizer.normalize(raw, step=2)
        assert entity.is_worker


class TestNormalizeMany:
    """Tests for normalizing a whole step."""

    def test_duplicates_keep_last(self, normalizer, make_entity):
        """A tag reported twice keeps its last record."""
        records = [
            make_entity(1, UnitTypeId.MARINE, health=10),
            make_entity(1, UnitTypeId.MARINE, health=30),
            make_entity(2, UnitTypeId.MARINE),
        ]
        entities = normalizer.normalize_many(records, step=1)

        assert set(entities) == {1, 2}
        assert entities[1].health == 30

    def test_skips_dropped(self, normalizer, make_entity):
        """Records without a tag don't appear."""
        entities = normalizer.normalize_many([{"alliance": "self"}, make_entity(3, UnitTypeId.SCV)], step=1)
        assert list(entities) == [3]
