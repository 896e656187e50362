"""
Pydantic Schemas - The boundary contract with the transport collaborator.

Inbound (once per step):
- RawSnapshot: entity records, resources, score, alerts, death markers

Inbound (once per game):
- GameSetup: player id, races, map information

Outbound (once per step):
- StepResponse: the finalized, batched actions

Transport owns the wire encoding. These models only fix the shape
of the values handed across the boundary.
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field, ValidationError

from ..errors import SnapshotValidationError


# =============================================================================
# Enums
# =============================================================================

class Alliance(str, Enum):
    """Who an entity belongs to, relative to us."""
    SELF = "self"
    ALLY = "ally"
    ENEMY = "enemy"
    NEUTRAL = "neutral"


class DisplayType(str, Enum):
    """How the engine is showing an entity this step."""
    VISIBLE = "visible"
    SNAPSHOT = "snapshot"
    HIDDEN = "hidden"
    PLACEHOLDER = "placeholder"


class AlertKind(str, Enum):
    """Alert kinds the core acts on. Other kinds pass through as plain strings."""
    UNIT_DESTROYED = "unit_destroyed"
    STRUCTURE_DESTROYED = "structure_destroyed"


DEATH_ALERT_KINDS = frozenset({AlertKind.UNIT_DESTROYED.value, AlertKind.STRUCTURE_DESTROYED.value})


# =============================================================================
# Inbound Models
# =============================================================================

class RawPosition(BaseModel):
    """World-space position."""
    x: float
    y: float
    z: float = 0.0

    model_config = {"from_attributes": True}


class RawOrder(BaseModel):
    """One entry of an entity's order queue."""
    ability_id: int
    target_tag: Optional[int] = None
    target_position: Optional[RawPosition] = None
    progress: float = 0.0


class RawEntity(BaseModel):
    """One entity record as reported by the engine."""
    tag: int
    type_id: int = 0
    alliance: str = Field(default=Alliance.NEUTRAL.value, description="self, ally, enemy, neutral")
    display_type: str = Field(default=DisplayType.VISIBLE.value, description="visible, snapshot, hidden, placeholder")
    position: RawPosition = Field(default_factory=lambda: RawPosition(x=0.0, y=0.0))
    health: float = 0.0
    health_max: float = 0.0
    shield: float = 0.0
    shield_max: float = 0.0
    energy: float = 0.0
    build_progress: float = 1.0
    orders: list[RawOrder] = Field(default_factory=list)
    is_cloaked: bool = False
    is_flying: bool = False
    is_burrowed: bool = False
    is_hallucination: bool = False
    mineral_contents: int = 0
    vespene_contents: int = 0

    # Set when the record failed validation and only the tag was salvaged
    malformed: bool = False


class RawAlert(BaseModel):
    """An engine alert. Death notifications carry the destroyed tags."""
    kind: str
    tags: list[int] = Field(default_factory=list)


class RawPlayerCommon(BaseModel):
    """Authoritative resource and supply values."""
    minerals: int = 0
    vespene: int = 0
    food_used: float = 0
    food_cap: float = 0
    food_army: float = 0
    food_workers: float = 0


class RawScore(BaseModel):
    """Cumulative score values."""
    score: int = 0
    collected_minerals: int = 0
    collected_vespene: int = 0
    killed_value_units: int = 0
    killed_value_structures: int = 0


class RawSnapshot(BaseModel):
    """
    One step's authoritative observation.

    Use RawSnapshot.parse() for untrusted payloads: it validates
    entity records one by one, so a single malformed record is
    salvaged or dropped instead of rejecting the whole step.
    """
    step: int
    player: RawPlayerCommon = Field(default_factory=RawPlayerCommon)
    entities: list[RawEntity] = Field(default_factory=list)
    dead_tags: list[int] = Field(default_factory=list)
    alerts: list[RawAlert] = Field(default_factory=list)
    score: RawScore = Field(default_factory=RawScore)
    opponent_race: Optional[str] = None

    # Problems found while parsing (records salvaged or dropped)
    warnings: list[str] = Field(default_factory=list)

    def death_tags(self) -> set[int]:
        """All tags with destruction evidence this step."""
        tags = set(self.dead_tags)
        for alert in self.alerts:
            if alert.kind in DEATH_ALERT_KINDS:
                tags.update(alert.tags)
        return tags

    @classmethod
    def parse(cls, payload: Any) -> "RawSnapshot":
        """
        Build a snapshot from an untrusted mapping.

        Raises SnapshotValidationError only when the payload is not a
        mapping or its step index is missing or invalid.
        """
        if isinstance(payload, RawSnapshot):
            return payload
        if not isinstance(payload, dict):
            raise SnapshotValidationError([f"Snapshot must be a mapping, got {type(payload).__name__}"])

        body = dict(payload)
        raw_entities = body.pop("entities", None) or []
        warnings: list[str] = []

        try:
            snapshot = cls.model_validate(body)
        except ValidationError as e:
            raise SnapshotValidationError(
                [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            ) from e

        entities: list[RawEntity] = []
        for index, record in enumerate(raw_entities):
            entity = parse_entity(record, index, warnings)
            if entity is not None:
                entities.append(entity)

        snapshot.entities = entities
        snapshot.warnings = warnings
        return snapshot


def parse_entity(record: Any, index: int = 0, warnings: list[str] | None = None) -> RawEntity | None:
    """Validate one entity record, salvaging the tag when the rest is broken."""
    if warnings is None:
        warnings = []
    if isinstance(record, RawEntity):
        return record
    try:
        return RawEntity.model_validate(record)
    except ValidationError:
        pass

    tag = record.get("tag") if isinstance(record, dict) else None
    try:
        tag = int(tag)
    except (TypeError, ValueError):
        warnings.append(f"entities[{index}]: dropped record without a usable tag")
        return None

    warnings.append(f"entities[{index}]: malformed record for tag {tag}, kept as unclassified")
    salvaged = {"tag": tag, "malformed": True}
    for key in ("alliance", "display_type"):
        if isinstance(record.get(key), str):
            salvaged[key] = record[key]
    return RawEntity.model_validate(salvaged)


class RawExpansion(BaseModel):
    """An expansion location and the center of its resources."""
    location: RawPosition
    resource_center: RawPosition


class RawRamp(BaseModel):
    """A ramp, given as the pathable points on it."""
    points: list[RawPosition] = Field(default_factory=list)
    upper: list[RawPosition] = Field(default_factory=list)
    lower: list[RawPosition] = Field(default_factory=list)


class GameSetup(BaseModel):
    """Per-game information known before the first step."""
    player_id: int = 1
    race: str = "random"
    opponent_race: str = "random"
    opponent_id: Optional[str] = None
    map_name: str = ""
    start_location: Optional[RawPosition] = None
    enemy_start_locations: list[RawPosition] = Field(default_factory=list)
    expansions: list[RawExpansion] = Field(default_factory=list)
    ramps: list[RawRamp] = Field(default_factory=list)


# =============================================================================
# Outbound Models
# =============================================================================

class ActionPayload(BaseModel):
    """One batched order: one ability, many issuers, one target."""
    ability_id: int
    unit_tags: list[int]
    target_tag: Optional[int] = None
    target_position: Optional[RawPosition] = None
    queue_command: bool = False


class StepResponse(BaseModel):
    """Everything sent back to the engine for a step."""
    step: int
    actions: list[ActionPayload] = Field(default_factory=list)
