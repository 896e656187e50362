"""
Pytest fixtures for stepsync tests.

Snapshots are built as plain dicts, the shape the transport hands
over, so tests exercise the same parsing path as real games.
"""

import pytest

from ..agents import IdleAgent
from ..api.schemas import GameSetup, RawSnapshot
from ..catalog import UnitTypeId
from ..engine_core import EntityNormalizer, ResourceLedger
from ..session import SessionManager


def entity_record(tag, type_id, alliance="self", **fields):
    """One raw entity record."""
    record = {
        "tag": tag,
        "type_id": int(type_id),
        "alliance": alliance,
        "position": {"x": float(fields.pop("x", 0.0)), "y": float(fields.pop("y", 0.0))},
        "health": 45.0,
        "health_max": 45.0,
    }
    record.update(fields)
    return record


def snapshot_payload(step, entities=(), minerals=50, vespene=0, food_used=12, food_cap=15, **fields):
    """One raw snapshot payload."""
    payload = {
        "step": step,
        "player": {
            "minerals": minerals,
            "vespene": vespene,
            "food_used": food_used,
            "food_cap": food_cap,
            "food_workers": fields.pop("food_workers", food_used),
            "food_army": fields.pop("food_army", 0),
        },
        "entities": list(entities),
    }
    payload.update(fields)
    return payload


@pytest.fixture
def make_entity():
    """Factory for raw entity records."""
    return entity_record


@pytest.fixture
def make_snapshot():
    """Factory for raw snapshot payloads."""
    return snapshot_payload


@pytest.fixture
def normalizer() -> EntityNormalizer:
    return EntityNormalizer()


@pytest.fixture
def ledger() -> ResourceLedger:
    """Ledger reconciled to 50 minerals, 12/15 supply."""
    ledger = ResourceLedger(horizon=4)
    ledger.reconcile(RawSnapshot.parse(snapshot_payload(1, minerals=50)))
    return ledger


@pytest.fixture
def terran_base():
    """A starting Terran base: command center, two workers, minerals, one enemy."""
    return [
        entity_record(1, UnitTypeId.COMMANDCENTER, x=50, y=50, health=1500, health_max=1500),
        entity_record(2, UnitTypeId.SCV, x=45, y=48),
        entity_record(3, UnitTypeId.SCV, x=46, y=52),
        entity_record(100, UnitTypeId.MINERALFIELD, alliance="neutral", x=40, y=50, mineral_contents=1800),
        entity_record(101, UnitTypeId.VESPENEGEYSER, alliance="neutral", x=42, y=58, vespene_contents=2250),
        entity_record(200, UnitTypeId.ZERGLING, alliance="enemy", x=70, y=70),
    ]


@pytest.fixture
def manager() -> SessionManager:
    return SessionManager()


@pytest.fixture
def idle_session(manager):
    """A Terran session driven by an IdleAgent."""
    setup = GameSetup(
        race="terran",
        opponent_race="random",
        map_name="TestMap",
        start_location={"x": 50, "y": 50},
        enemy_start_locations=[{"x": 150, "y": 150}],
    )
    return manager.create_session(IdleAgent(), setup=setup, session_id="test")
