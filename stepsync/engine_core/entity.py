"""
Entity - Canonical per-step value for one game entity.

Design principles:
- Immutable: a step's entities never change once published
- Identity-keyed: tag is stable for the entity's lifetime and never reused
- Partial knowledge is fine: unknown types keep their raw type id
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum

from ..catalog import Category, UnitTypeId, Race, get_type_data


class Owner(Enum):
    """Ownership partition an entity belongs to."""
    MINE = "mine"
    OPPONENT = "opponent"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Point2:
    """A 2D world-space position."""
    x: float
    y: float

    def __iter__(self):
        yield self.x
        yield self.y


@dataclass(frozen=True)
class UnitOrder:
    """
    One queued order.

    target is a Point2 for positional orders, an entity tag for
    targeted orders, or None.
    """
    ability_id: int
    target: Point2 | int | None = None
    progress: float = 0.0

    @property
    def targets_entity(self) -> bool:
        return isinstance(self.target, int)


@dataclass(frozen=True)
class Entity:
    """
    One entity as known at a given step.

    Note: For cached opponent entities, every attribute is the
    last-known value as of last_seen_step.
    """
    tag: int
    type_id: int
    owner: Owner
    unit_type: UnitTypeId | None = None
    categories: frozenset[Category] = field(default_factory=frozenset)
    position: Point2 = Point2(0.0, 0.0)

    health: float = 0.0
    health_max: float = 0.0
    shield: float = 0.0
    shield_max: float = 0.0
    energy: float = 0.0
    build_progress: float = 1.0

    orders: tuple[UnitOrder, ...] = ()

    is_cloaked: bool = False
    is_flying: bool = False
    is_burrowed: bool = False
    is_hallucination: bool = False
    display_type: str = "visible"

    mineral_contents: int = 0
    vespene_contents: int = 0

    last_seen_step: int = 0

    def __hash__(self):
        return hash(self.tag)

    def __eq__(self, other):
        if not isinstance(other, Entity):
            return False
        return self.tag == other.tag

    # ---- category checks ----

    def has(self, category: Category) -> bool:
        return category in self.categories

    @property
    def is_classified(self) -> bool:
        return Category.UNCLASSIFIED not in self.categories

    @property
    def is_structure(self) -> bool:
        return Category.STRUCTURE in self.categories

    @property
    def is_placeholder(self) -> bool:
        return Category.PLACEHOLDER in self.categories

    @property
    def is_townhall(self) -> bool:
        return Category.TOWNHALL in self.categories

    @property
    def is_worker(self) -> bool:
        return Category.WORKER in self.categories

    @property
    def is_mine(self) -> bool:
        return self.owner == Owner.MINE

    @property
    def is_opponent(self) -> bool:
        return self.owner == Owner.OPPONENT

    # ---- state flags ----

    @property
    def is_idle(self) -> bool:
        return not self.orders

    @property
    def is_ready(self) -> bool:
        return self.build_progress >= 1.0

    @property
    def is_under_construction(self) -> bool:
        """True for structures still being built (placeholders are not started yet)."""
        return self.is_structure and not self.is_ready

    @property
    def race(self) -> Race:
        """Race of the entity's type; RANDOM when unknown or neutral."""
        data = get_type_data(self.type_id)
        return data.race if data else Race.RANDOM

    @property
    def health_percentage(self) -> float:
        if self.health_max <= 0:
            return 0.0
        return self.health / self.health_max

    def seen_at(self, step: int) -> Entity:
        """Return a copy stamped with a new last-seen step."""
        return replace(self, last_seen_step=step)
