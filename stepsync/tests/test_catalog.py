"""
Tests for the static type catalog.
"""

import pytest

from ..catalog import (
    AbilityId,
    Category,
    Cost,
    Race,
    UnitTypeId,
    cost_of,
    get_type_data,
    lookup_type,
    produced_by,
    race_values,
)


class TestLookups:
    """Tests for type lookups."""

    def test_known_type(self):
        """Known ids resolve to catalog data."""
        data = get_type_data(21)
        assert data.type_id == UnitTypeId.BARRACKS
        assert data.race == Race.TERRAN
        assert data.is_structure
        assert data.creation_ability == AbilityId.TERRANBUILD_BARRACKS

    def test_unknown_type(self):
        """Unknown ids resolve to None, never raise."""
        assert lookup_type(99999) is None
        assert lookup_type("marine") is None
        assert get_type_data(99999) is None
        assert cost_of(99999) is None

    def test_produced_by(self):
        """Creation abilities map back to their type."""
        assert produced_by(AbilityId.LARVATRAIN_DRONE) == UnitTypeId.DRONE
        assert produced_by(int(AbilityId.MOVE)) is None

    def test_categories(self):
        """Neutral types carry their resource categories."""
        assert Category.MINERAL_FIELD in get_type_data(UnitTypeId.MINERALFIELD750).categories
        assert Category.GAS_BUILDING in get_type_data(UnitTypeId.EXTRACTOR).categories


class TestRaces:
    """Tests for race parsing and race values."""

    @pytest.mark.parametrize("value, race", [
        ("Zerg", Race.ZERG),
        (" protoss ", Race.PROTOSS),
        ("unknown", Race.RANDOM),
        (None, Race.RANDOM),
        (Race.TERRAN, Race.TERRAN),
    ])
    def test_parse(self, value, race):
        assert Race.parse(value) == race

    def test_race_values(self):
        """Each race knows its worker, gas and supply types."""
        zerg = race_values(Race.ZERG)
        assert zerg.worker == UnitTypeId.DRONE
        assert zerg.supply == UnitTypeId.OVERLORD
        assert UnitTypeId.LAIR in zerg.townhalls
        assert race_values(Race.RANDOM) is None


class TestCost:
    """Tests for Cost arithmetic and validity."""

    def test_arithmetic(self):
        assert Cost(100, 25, 2) - Cost(50, 0, 1) == Cost(50, 25, 1)
        assert Cost(50) + Cost(0, 25) == Cost(50, 25)

    def test_validity(self):
        assert Cost(50, 0, 0.5).is_valid
        assert not Cost(-1).is_valid
        assert not Cost(True).is_valid
        assert not Cost("50").is_valid
