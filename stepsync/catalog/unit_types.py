"""
Unit Type Catalog - Static data about known unit types.

This module contains the subset of unit types the core classifies.
The engine ships far more types than listed here and adds new ones
with content updates; anything missing from the catalog is still
tracked, it just normalizes to Category.UNCLASSIFIED.

Each entry carries:
- Race (for opponent race detection)
- Categories (structure, worker, townhall, ...)
- Cost (minerals, vespene, supply)
- Creation ability (for counting units in production)
- Supply provided
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .abilities import AbilityId
from .races import Race


class UnitTypeId(IntEnum):
    """Engine unit type ids."""
    # Terran
    COMMANDCENTER = 18
    SUPPLYDEPOT = 19
    REFINERY = 20
    BARRACKS = 21
    ENGINEERINGBAY = 22
    MISSILETURRET = 23
    BUNKER = 24
    FACTORY = 27
    STARPORT = 28
    SCV = 45
    SUPPLYDEPOTLOWERED = 47
    MARINE = 48
    MARAUDER = 51
    MULE = 268
    PLANETARYFORTRESS = 130
    ORBITALCOMMAND = 132
    REFINERYRICH = 1943

    # Protoss
    NEXUS = 59
    PYLON = 60
    ASSIMILATOR = 61
    GATEWAY = 62
    FORGE = 63
    CYBERNETICSCORE = 72
    ZEALOT = 73
    STALKER = 74
    PROBE = 84
    ASSIMILATORRICH = 1955

    # Zerg
    HATCHERY = 86
    EXTRACTOR = 88
    SPAWNINGPOOL = 89
    LAIR = 100
    HIVE = 101
    EGG = 103
    DRONE = 104
    ZERGLING = 105
    OVERLORD = 106
    QUEEN = 126
    LARVA = 151
    EXTRACTORRICH = 1981

    # Neutral
    RICHMINERALFIELD = 146
    RICHMINERALFIELD750 = 147
    XELNAGATOWER = 149
    MINERALFIELD = 341
    VESPENEGEYSER = 342
    SPACEPLATFORMGEYSER = 343
    RICHVESPENEGEYSER = 344
    DESTRUCTIBLEDEBRIS6X6 = 365
    DESTRUCTIBLEROCK6X6 = 371
    MINERALFIELD750 = 483
    INHIBITORZONESMALL = 1968
    INHIBITORZONEMEDIUM = 1969
    INHIBITORZONELARGE = 1970


class Category(Enum):
    """Classification tags an entity can carry. Not mutually exclusive."""
    UNIT = "unit"
    STRUCTURE = "structure"
    TOWNHALL = "townhall"
    WORKER = "worker"
    GAS_BUILDING = "gas_building"
    LARVA = "larva"
    PLACEHOLDER = "placeholder"
    MINERAL_FIELD = "mineral_field"
    VESPENE_GEYSER = "vespene_geyser"
    DESTRUCTABLE = "destructable"
    WATCHTOWER = "watchtower"
    INHIBITOR_ZONE = "inhibitor_zone"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class Cost:
    """Resource cost of creating something. Supply may be fractional (zerglings)."""
    minerals: int = 0
    vespene: int = 0
    supply: float = 0

    def __add__(self, other: Cost) -> Cost:
        return Cost(
            minerals=self.minerals + other.minerals,
            vespene=self.vespene + other.vespene,
            supply=self.supply + other.supply,
        )

    def __sub__(self, other: Cost) -> Cost:
        return Cost(
            minerals=self.minerals - other.minerals,
            vespene=self.vespene - other.vespene,
            supply=self.supply - other.supply,
        )

    @property
    def is_valid(self) -> bool:
        """A cost is valid when every component is a non-negative number."""
        for value in (self.minerals, self.vespene, self.supply):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            if value < 0:
                return False
        return True


ZERO_COST = Cost()


@dataclass(frozen=True)
class UnitTypeData:
    """
    Static definition of a unit type.
    """
    type_id: UnitTypeId
    name: str
    race: Race
    categories: frozenset[Category] = field(default_factory=frozenset)
    cost: Cost = ZERO_COST
    creation_ability: AbilityId | None = None
    supply_provided: float = 0

    @property
    def is_structure(self) -> bool:
        return Category.STRUCTURE in self.categories


def _unit(type_id, race, cost=ZERO_COST, ability=None, *extra, supply_provided=0):
    return UnitTypeData(
        type_id=type_id,
        name=type_id.name.title(),
        race=race,
        categories=frozenset({Category.UNIT, *extra}),
        cost=cost,
        creation_ability=ability,
        supply_provided=supply_provided,
    )


def _structure(type_id, race, cost=ZERO_COST, ability=None, *extra, supply_provided=0):
    return UnitTypeData(
        type_id=type_id,
        name=type_id.name.title(),
        race=race,
        categories=frozenset({Category.STRUCTURE, *extra}),
        cost=cost,
        creation_ability=ability,
        supply_provided=supply_provided,
    )


def _neutral(type_id, *categories):
    return UnitTypeData(
        type_id=type_id,
        name=type_id.name.title(),
        race=Race.RANDOM,
        categories=frozenset(categories),
    )


T, P, Z = Race.TERRAN, Race.PROTOSS, Race.ZERG
U = UnitTypeId
A = AbilityId

_DEFINITIONS = [
    # Terran
    _structure(U.COMMANDCENTER, T, Cost(400), A.TERRANBUILD_COMMANDCENTER,
               Category.TOWNHALL, supply_provided=15),
    _structure(U.ORBITALCOMMAND, T, Cost(150), A.UPGRADETOORBITAL_ORBITALCOMMAND,
               Category.TOWNHALL, supply_provided=15),
    _structure(U.PLANETARYFORTRESS, T, Cost(150, 150),
               A.UPGRADETOPLANETARYFORTRESS_PLANETARYFORTRESS,
               Category.TOWNHALL, supply_provided=15),
    _structure(U.SUPPLYDEPOT, T, Cost(100), A.TERRANBUILD_SUPPLYDEPOT, supply_provided=8),
    _structure(U.SUPPLYDEPOTLOWERED, T, supply_provided=8),
    _structure(U.REFINERY, T, Cost(75), A.TERRANBUILD_REFINERY, Category.GAS_BUILDING),
    _structure(U.REFINERYRICH, T, Cost(75), None, Category.GAS_BUILDING),
    _structure(U.BARRACKS, T, Cost(150), A.TERRANBUILD_BARRACKS),
    _structure(U.ENGINEERINGBAY, T, Cost(125), A.TERRANBUILD_ENGINEERINGBAY),
    _structure(U.MISSILETURRET, T, Cost(100), A.TERRANBUILD_MISSILETURRET),
    _structure(U.BUNKER, T, Cost(100), A.TERRANBUILD_BUNKER),
    _structure(U.FACTORY, T, Cost(150, 100), A.TERRANBUILD_FACTORY),
    _structure(U.STARPORT, T, Cost(150, 100), A.TERRANBUILD_STARPORT),
    _unit(U.SCV, T, Cost(50, 0, 1), A.COMMANDCENTERTRAIN_SCV, Category.WORKER),
    _unit(U.MARINE, T, Cost(50, 0, 1), A.BARRACKSTRAIN_MARINE),
    _unit(U.MARAUDER, T, Cost(100, 25, 2), A.BARRACKSTRAIN_MARAUDER),
    _unit(U.MULE, T, ZERO_COST, A.CALLDOWNMULE_CALLDOWNMULE),
    # Protoss
    _structure(U.NEXUS, P, Cost(400), A.PROTOSSBUILD_NEXUS, Category.TOWNHALL, supply_provided=15),
    _structure(U.PYLON, P, Cost(100), A.PROTOSSBUILD_PYLON, supply_provided=8),
    _structure(U.ASSIMILATOR, P, Cost(75), A.PROTOSSBUILD_ASSIMILATOR, Category.GAS_BUILDING),
    _structure(U.ASSIMILATORRICH, P, Cost(75), None, Category.GAS_BUILDING),
    _structure(U.GATEWAY, P, Cost(150), A.PROTOSSBUILD_GATEWAY),
    _structure(U.FORGE, P, Cost(150), A.PROTOSSBUILD_FORGE),
    _structure(U.CYBERNETICSCORE, P, Cost(150), A.PROTOSSBUILD_CYBERNETICSCORE),
    _unit(U.PROBE, P, Cost(50, 0, 1), A.NEXUSTRAIN_PROBE, Category.WORKER),
    _unit(U.ZEALOT, P, Cost(100, 0, 2), A.GATEWAYTRAIN_ZEALOT),
    _unit(U.STALKER, P, Cost(125, 50, 2), A.GATEWAYTRAIN_STALKER),
    # Zerg
    _structure(U.HATCHERY, Z, Cost(300), A.ZERGBUILD_HATCHERY, Category.TOWNHALL, supply_provided=6),
    _structure(U.LAIR, Z, Cost(150, 100), A.UPGRADETOLAIR_LAIR, Category.TOWNHALL, supply_provided=6),
    _structure(U.HIVE, Z, Cost(200, 150), A.UPGRADETOHIVE_HIVE, Category.TOWNHALL, supply_provided=6),
    _structure(U.EXTRACTOR, Z, Cost(25), A.ZERGBUILD_EXTRACTOR, Category.GAS_BUILDING),
    _structure(U.EXTRACTORRICH, Z, Cost(25), None, Category.GAS_BUILDING),
    _structure(U.SPAWNINGPOOL, Z, Cost(200), A.ZERGBUILD_SPAWNINGPOOL),
    _unit(U.LARVA, Z, ZERO_COST, None, Category.LARVA),
    _unit(U.EGG, Z),
    _unit(U.DRONE, Z, Cost(50, 0, 1), A.LARVATRAIN_DRONE, Category.WORKER),
    _unit(U.ZERGLING, Z, Cost(50, 0, 1), A.LARVATRAIN_ZERGLING),
    _unit(U.OVERLORD, Z, Cost(100), A.LARVATRAIN_OVERLORD, supply_provided=8),
    _unit(U.QUEEN, Z, Cost(150, 0, 2), A.TRAINQUEEN_QUEEN),
    # Neutral
    _neutral(U.MINERALFIELD, Category.MINERAL_FIELD),
    _neutral(U.MINERALFIELD750, Category.MINERAL_FIELD),
    _neutral(U.RICHMINERALFIELD, Category.MINERAL_FIELD),
    _neutral(U.RICHMINERALFIELD750, Category.MINERAL_FIELD),
    _neutral(U.VESPENEGEYSER, Category.VESPENE_GEYSER),
    _neutral(U.SPACEPLATFORMGEYSER, Category.VESPENE_GEYSER),
    _neutral(U.RICHVESPENEGEYSER, Category.VESPENE_GEYSER),
    _neutral(U.XELNAGATOWER, Category.WATCHTOWER),
    _neutral(U.DESTRUCTIBLEDEBRIS6X6, Category.DESTRUCTABLE),
    _neutral(U.DESTRUCTIBLEROCK6X6, Category.DESTRUCTABLE),
    _neutral(U.INHIBITORZONESMALL, Category.INHIBITOR_ZONE),
    _neutral(U.INHIBITORZONEMEDIUM, Category.INHIBITOR_ZONE),
    _neutral(U.INHIBITORZONELARGE, Category.INHIBITOR_ZONE),
]

UNIT_TYPES: dict[UnitTypeId, UnitTypeData] = {d.type_id: d for d in _DEFINITIONS}

# Reverse lookup: which unit type does an ability produce
CREATED_BY_ABILITY: dict[int, UnitTypeId] = {
    int(d.creation_ability): d.type_id
    for d in _DEFINITIONS
    if d.creation_ability is not None
}

del T, P, Z, U, A


@dataclass(frozen=True)
class RaceValues:
    """
    Frequently used unit types for one race.

    Answers the questions agent code asks most often:
    which worker do I build, which townhalls count as bases,
    what extracts gas, what provides supply.
    """
    race: Race
    start_townhall: UnitTypeId
    worker: UnitTypeId
    gas: UnitTypeId
    rich_gas: UnitTypeId
    supply: UnitTypeId
    townhalls: frozenset[UnitTypeId] = field(default_factory=frozenset)


RACE_VALUES: dict[Race, RaceValues] = {
    Race.TERRAN: RaceValues(
        race=Race.TERRAN,
        start_townhall=UnitTypeId.COMMANDCENTER,
        worker=UnitTypeId.SCV,
        gas=UnitTypeId.REFINERY,
        rich_gas=UnitTypeId.REFINERYRICH,
        supply=UnitTypeId.SUPPLYDEPOT,
        townhalls=frozenset({
            UnitTypeId.COMMANDCENTER,
            UnitTypeId.ORBITALCOMMAND,
            UnitTypeId.PLANETARYFORTRESS,
        }),
    ),
    Race.PROTOSS: RaceValues(
        race=Race.PROTOSS,
        start_townhall=UnitTypeId.NEXUS,
        worker=UnitTypeId.PROBE,
        gas=UnitTypeId.ASSIMILATOR,
        rich_gas=UnitTypeId.ASSIMILATORRICH,
        supply=UnitTypeId.PYLON,
        townhalls=frozenset({UnitTypeId.NEXUS}),
    ),
    Race.ZERG: RaceValues(
        race=Race.ZERG,
        start_townhall=UnitTypeId.HATCHERY,
        worker=UnitTypeId.DRONE,
        gas=UnitTypeId.EXTRACTOR,
        rich_gas=UnitTypeId.EXTRACTORRICH,
        supply=UnitTypeId.OVERLORD,
        townhalls=frozenset({UnitTypeId.HATCHERY, UnitTypeId.LAIR, UnitTypeId.HIVE}),
    ),
}


def lookup_type(type_id: int) -> UnitTypeId | None:
    """Map a raw type id to a catalog id, or None when unknown."""
    try:
        return UnitTypeId(type_id)
    except (ValueError, TypeError):
        return None


def get_type_data(type_id: int) -> UnitTypeData | None:
    """Get static data for a raw type id, or None when not cataloged."""
    unit_type = lookup_type(type_id)
    if unit_type is None:
        return None
    return UNIT_TYPES.get(unit_type)


def cost_of(type_id: int) -> Cost | None:
    """Get the cost of a unit type, or None when not cataloged."""
    data = get_type_data(type_id)
    return data.cost if data else None


def produced_by(ability_id: int) -> UnitTypeId | None:
    """Get the unit type an ability creates, if any."""
    return CREATED_BY_ABILITY.get(ability_id)


def race_values(race: Race) -> RaceValues | None:
    """Get race values; None for RANDOM."""
    return RACE_VALUES.get(race)
