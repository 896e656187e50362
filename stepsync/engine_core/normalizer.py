"""
Entity Normalizer - Raw entity records to canonical Entities.

The normalizer is a pure transformation. It never fails on content
it doesn't recognize: unknown type ids and malformed records become
UNCLASSIFIED entities that are still tracked, since partial knowledge
beats losing the entity after a game-content update.
"""

from __future__ import annotations
import logging
from typing import Any, Iterable

from ..api.schemas import RawEntity, RawOrder, Alliance, DisplayType, parse_entity
from ..catalog import Category, get_type_data, lookup_type
from .entity import Entity, Owner, Point2, UnitOrder

logger = logging.getLogger(__name__)


_OWNER_BY_ALLIANCE = {
    Alliance.SELF.value: Owner.MINE,
    Alliance.ENEMY.value: Owner.OPPONENT,
    Alliance.NEUTRAL.value: Owner.NEUTRAL,
    # Allies are not ours to command and not a threat
    Alliance.ALLY.value: Owner.NEUTRAL,
}


class EntityNormalizer:
    """
    Converts raw entity records into canonical Entity values.

    Stateless - safe to share between sessions.
    """

    def normalize(self, raw: RawEntity | dict[str, Any], step: int) -> Entity | None:
        """
        Normalize one record.

        Returns None only when the record carries no usable identity.
        """
        if not isinstance(raw, RawEntity):
            raw = parse_entity(raw)
            if raw is None:
                logger.warning("Dropping entity record without a usable tag at step %d", step)
                return None
            if raw.malformed:
                logger.warning("Malformed record for tag %d at step %d, kept as unclassified", raw.tag, step)

        owner = _OWNER_BY_ALLIANCE.get(str(raw.alliance).lower(), Owner.NEUTRAL)
        unit_type = None if raw.malformed else lookup_type(raw.type_id)

        return Entity(
            tag=raw.tag,
            type_id=raw.type_id,
            owner=owner,
            unit_type=unit_type,
            categories=self.classify(raw),
            position=Point2(raw.position.x, raw.position.y),
            health=raw.health,
            health_max=raw.health_max,
            shield=raw.shield,
            shield_max=raw.shield_max,
            energy=raw.energy,
            build_progress=raw.build_progress,
            orders=tuple(self._normalize_order(o) for o in raw.orders),
            is_cloaked=raw.is_cloaked,
            is_flying=raw.is_flying,
            is_burrowed=raw.is_burrowed,
            is_hallucination=raw.is_hallucination,
            display_type=raw.display_type,
            mineral_contents=raw.mineral_contents,
            vespene_contents=raw.vespene_contents,
            last_seen_step=step,
        )

    def normalize_many(self, records: Iterable[RawEntity | dict[str, Any]], step: int) -> dict[int, Entity]:
        """
        Normalize a step's records into a tag -> Entity mapping.

        A tag reported twice keeps its last record.
        """
        entities: dict[int, Entity] = {}
        for record in records:
            entity = self.normalize(record, step)
            if entity is None:
                continue
            if entity.tag in entities:
                logger.debug("Duplicate record for tag %d at step %d, keeping the last", entity.tag, step)
            entities[entity.tag] = entity
        return entities

    def classify(self, raw: RawEntity) -> frozenset[Category]:
        """Derive category tags for a record."""
        is_placeholder = str(raw.display_type).lower() == DisplayType.PLACEHOLDER.value

        if raw.malformed:
            return frozenset({Category.UNCLASSIFIED})

        # A placeholder is a planned structure, not a structure yet
        if is_placeholder:
            return frozenset({Category.PLACEHOLDER})

        data = get_type_data(raw.type_id)
        if data is None:
            return frozenset({Category.UNCLASSIFIED})
        return data.categories

    @staticmethod
    def _normalize_order(order: RawOrder) -> UnitOrder:
        if order.target_tag is not None:
            target = order.target_tag
        elif order.target_position is not None:
            target = Point2(order.target_position.x, order.target_position.y)
        else:
            target = None
        return UnitOrder(ability_id=order.ability_id, target=target, progress=order.progress)
