"""
World Model - Read-only view of the game at one step.

A new WorldModel is published every step and never changes after
publication. Entities are partitioned by ownership:

    mine     own entities (always in vision)
    enemy    opponent entities visible this step
    cached   opponent entities out of vision, last-known values
    neutral  resources, rocks, towers, allies

Every entity lives in exactly one partition. Sub-views such as
mine.structures or neutral.mineral_fields are filters over a
partition, not separate storage.

The one live reference is the resource ledger: count_in_flight()
and the resource accessors that mention "available" read the
speculative state, which changes as agent code commits.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, TYPE_CHECKING

from ..api.schemas import GameSetup, RawAlert, RawExpansion, RawPlayerCommon, RawRamp, RawScore
from ..catalog import Category, Cost, Race, RaceValues, UnitTypeId, produced_by, race_values
from ..engine_core.entity import Entity, Owner, Point2
from .units import Units

if TYPE_CHECKING:
    from ..engine_core.ledger import ResourceLedger


STEPS_PER_SECOND = 22.4

# Orders whose target sits this close to an existing structure of the
# produced type are the structure itself, already counted
_SAME_SITE_DISTANCE = 1.0


def _with(entities: Units, category: Category) -> Units:
    return entities.filter(lambda e: e.has(category))


class PlayerUnits:
    """One player's partition with its category sub-views."""

    def __init__(self, entities: Iterable[Entity] = ()):
        self.all = Units(entities)

    def __len__(self) -> int:
        return len(self.all)

    def __iter__(self):
        return iter(self.all)

    @property
    def units(self) -> Units:
        return _with(self.all, Category.UNIT)

    @property
    def structures(self) -> Units:
        return _with(self.all, Category.STRUCTURE)

    @property
    def townhalls(self) -> Units:
        return _with(self.all, Category.TOWNHALL)

    @property
    def workers(self) -> Units:
        return _with(self.all, Category.WORKER)

    @property
    def gas_buildings(self) -> Units:
        return _with(self.all, Category.GAS_BUILDING)

    @property
    def larvae(self) -> Units:
        return _with(self.all, Category.LARVA)

    @property
    def placeholders(self) -> Units:
        return _with(self.all, Category.PLACEHOLDER)


class NeutralUnits:
    """The neutral partition with its category sub-views."""

    def __init__(self, entities: Iterable[Entity] = ()):
        self.all = Units(entities)

    def __len__(self) -> int:
        return len(self.all)

    def __iter__(self):
        return iter(self.all)

    @property
    def mineral_fields(self) -> Units:
        return _with(self.all, Category.MINERAL_FIELD)

    @property
    def vespene_geysers(self) -> Units:
        return _with(self.all, Category.VESPENE_GEYSER)

    @property
    def resources(self) -> Units:
        return self.mineral_fields + self.vespene_geysers

    @property
    def destructables(self) -> Units:
        return _with(self.all, Category.DESTRUCTABLE)

    @property
    def watchtowers(self) -> Units:
        return _with(self.all, Category.WATCHTOWER)

    @property
    def inhibitor_zones(self) -> Units:
        return _with(self.all, Category.INHIBITOR_ZONE)


@dataclass(frozen=True)
class MapInfo:
    """Static map information known before the first step."""
    name: str = ""
    start_location: Point2 | None = None
    enemy_start_locations: tuple[Point2, ...] = ()
    expansions: tuple[RawExpansion, ...] = ()
    ramps: tuple[RawRamp, ...] = ()

    @classmethod
    def from_setup(cls, setup: GameSetup | None) -> MapInfo:
        if setup is None:
            return cls()
        start = setup.start_location
        return cls(
            name=setup.map_name,
            start_location=Point2(start.x, start.y) if start else None,
            enemy_start_locations=tuple(Point2(p.x, p.y) for p in setup.enemy_start_locations),
            expansions=tuple(setup.expansions),
            ramps=tuple(setup.ramps),
        )


@dataclass(frozen=True)
class WorldModel:
    """
    Everything agent code may read during one step.

    Build with WorldModel.build(); the constructor takes the finished
    partitions.
    """
    step: int
    mine: PlayerUnits
    enemy: PlayerUnits
    cached: PlayerUnits
    neutral: NeutralUnits

    player: RawPlayerCommon = field(default_factory=RawPlayerCommon)
    score: RawScore = field(default_factory=RawScore)
    alerts: tuple[RawAlert, ...] = ()

    race: Race = Race.RANDOM
    opponent_race: Race = Race.RANDOM
    map_info: MapInfo = field(default_factory=MapInfo)

    ledger: ResourceLedger | None = None

    _by_tag: dict[int, Entity] = field(default_factory=dict, repr=False)

    @classmethod
    def build(
        cls,
        step: int,
        visible: dict[int, Entity],
        cached: dict[int, Entity],
        player: RawPlayerCommon | None = None,
        score: RawScore | None = None,
        alerts: Iterable[RawAlert] = (),
        race: Race = Race.RANDOM,
        opponent_race: Race = Race.RANDOM,
        map_info: MapInfo | None = None,
        ledger: ResourceLedger | None = None,
    ) -> WorldModel:
        """Partition an arena (visible + cached) into a published model."""
        mine: list[Entity] = []
        enemy: list[Entity] = []
        neutral: list[Entity] = []
        for tag in sorted(visible):
            entity = visible[tag]
            if entity.owner == Owner.MINE:
                mine.append(entity)
            elif entity.owner == Owner.OPPONENT:
                enemy.append(entity)
            else:
                neutral.append(entity)
        remembered = [cached[tag] for tag in sorted(cached)]

        by_tag = dict(visible)
        by_tag.update(cached)

        return cls(
            step=step,
            mine=PlayerUnits(mine),
            enemy=PlayerUnits(enemy),
            cached=PlayerUnits(remembered),
            neutral=NeutralUnits(neutral),
            player=player or RawPlayerCommon(),
            score=score or RawScore(),
            alerts=tuple(alerts),
            race=race,
            opponent_race=opponent_race,
            map_info=map_info or MapInfo(),
            ledger=ledger,
            _by_tag=by_tag,
        )

    # ---- lookups ----

    def get(self, tag: int) -> Entity | None:
        return self._by_tag.get(tag)

    def __contains__(self, tag: int) -> bool:
        return tag in self._by_tag

    @property
    def all_units(self) -> Units:
        return self.mine.all + self.enemy.all + self.cached.all + self.neutral.all

    # ---- resources ----

    @property
    def minerals(self) -> int:
        return self.player.minerals

    @property
    def vespene(self) -> int:
        return self.player.vespene

    @property
    def supply_used(self) -> float:
        return self.player.food_used

    @property
    def supply_cap(self) -> float:
        return self.player.food_cap

    @property
    def supply_left(self) -> float:
        return max(0, self.player.food_cap - self.player.food_used)

    @property
    def supply_army(self) -> float:
        return self.player.food_army

    @property
    def supply_workers(self) -> float:
        return self.player.food_workers

    @property
    def available(self) -> Cost:
        """Speculative resources: authoritative minus outstanding debits."""
        if self.ledger is None:
            return Cost(self.minerals, self.vespene, self.supply_left)
        return self.ledger.available

    # ---- time and map ----

    @property
    def time(self) -> float:
        """Game time in seconds."""
        return self.step / STEPS_PER_SECOND

    @property
    def start_location(self) -> Point2 | None:
        return self.map_info.start_location

    @property
    def enemy_start_locations(self) -> tuple[Point2, ...]:
        return self.map_info.enemy_start_locations

    @property
    def start_locations(self) -> tuple[Point2, ...]:
        """Own start location first, then the possible enemy ones."""
        own = (self.map_info.start_location,) if self.map_info.start_location else ()
        return own + self.map_info.enemy_start_locations

    @property
    def expansions(self) -> tuple[RawExpansion, ...]:
        return self.map_info.expansions

    @property
    def ramps(self) -> tuple[RawRamp, ...]:
        return self.map_info.ramps

    @property
    def races(self) -> tuple[Race, Race]:
        """(own race, opponent race); RANDOM until known."""
        return (self.race, self.opponent_race)

    @property
    def race_values(self) -> RaceValues | None:
        return race_values(self.race)

    # ---- production counting ----

    def count_ready(self, unit_type: UnitTypeId | int) -> int:
        """Own finished entities of a type."""
        return sum(1 for e in self.mine.all if e.type_id == int(unit_type) and e.is_ready and not e.is_placeholder)

    def count_existing(self, unit_type: UnitTypeId | int) -> int:
        """Own entities of a type, finished or under construction."""
        return sum(1 for e in self.mine.all if e.type_id == int(unit_type) and not e.is_placeholder)

    def count_ordered(self, unit_type: UnitTypeId | int) -> int:
        """
        Own orders producing a type that haven't turned into an entity yet.

        A construction order is skipped once a structure of that type
        stands at the order's target.
        """
        unit_type = int(unit_type)
        sites = [e.position for e in self.mine.all if e.type_id == unit_type and not e.is_placeholder]

        total = 0
        for entity in self.mine.all:
            for order in entity.orders:
                if produced_by(order.ability_id) != unit_type:
                    continue
                target = self._order_site(order.target)
                if target is not None and any(_near(target, site) for site in sites):
                    continue
                total += 1
        return total

    def count_in_flight(self, unit_type: UnitTypeId | int) -> int:
        """
        Existing + ordered + committed this step.

        Includes ledger debits for the type committed since the last
        reconcile, so an order issued earlier in this step is counted
        before the engine reports it.
        """
        total = self.count_existing(unit_type) + self.count_ordered(unit_type)
        if self.ledger is not None:
            total += self.ledger.pending_unit_counts().get(int(unit_type), 0)
        return total

    def _order_site(self, target: Point2 | int | None) -> Point2 | None:
        if isinstance(target, Point2):
            return target
        if isinstance(target, int):
            entity = self._by_tag.get(target)
            return entity.position if entity else None
        return None


def _near(a: Point2, b: Point2) -> bool:
    return (a.x - b.x) ** 2 + (a.y - b.y) ** 2 <= _SAME_SITE_DISTANCE ** 2
