"""
Entity Set Differ - Classifies identities across two consecutive steps.

The engine only reports current truth. The differ compares the arena
known after step N-1 (visible + cached entities) with the raw set of
step N and decides, per identity:

    created      new identity
    updated      visible before and now
    reappeared   cached before, visible again
    destroyed    death evidence, or an own/neutral entity vanished
    left_vision  opponent entity vanished without death evidence
    expired      cached longer than the retention horizon, or an own
                 placeholder gone without death evidence

Rules:
- Destruction evidence beats everything else for the same identity
- Own entities are always in vision, so vanishing means destroyed,
  except placeholders, which the engine replaces with the real structure
- All work is hash-set lookups, linear in the larger set
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ..api.schemas import DisplayType
from .entity import Entity, Owner

logger = logging.getLogger(__name__)


# Display types meaning "engine memory, not live vision"
_REMEMBERED_DISPLAY = frozenset({DisplayType.SNAPSHOT.value, DisplayType.HIDDEN.value})


@dataclass
class DiffResult:
    """
    Result of diffing one step against the previous arena.

    visible and cached together form the new arena.
    """
    step: int

    created: list[int] = field(default_factory=list)
    updated: list[int] = field(default_factory=list)
    reappeared: list[int] = field(default_factory=list)
    destroyed: list[int] = field(default_factory=list)
    left_vision: list[int] = field(default_factory=list)
    expired: list[int] = field(default_factory=list)

    # New arena
    visible: dict[int, Entity] = field(default_factory=dict)
    cached: dict[int, Entity] = field(default_factory=dict)

    # Last known value of every entity evicted this step
    removed: dict[int, Entity] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return bool(
            self.created or self.destroyed or self.left_vision
            or self.reappeared or self.expired
        )


class EntitySetDiffer:
    """
    Diffs identity sets between steps.

    retention_steps bounds how long a cached opponent entity is kept
    after it was last seen; 0 keeps it until destruction evidence.
    """

    def __init__(self, retention_steps: int = 0):
        self.retention_steps = max(0, int(retention_steps))

    def diff(
        self,
        previous_visible: Mapping[int, Entity],
        previous_cached: Mapping[int, Entity],
        current: Mapping[int, Entity],
        dead_tags: Iterable[int],
        step: int,
    ) -> DiffResult:
        """Classify every identity known before or observed now."""
        dead = set(dead_tags)
        result = DiffResult(step=step)

        # Identities observed this step
        for tag, entity in current.items():
            known = previous_visible.get(tag) or previous_cached.get(tag)

            if tag in dead:
                if known is not None:
                    result.destroyed.append(tag)
                    result.removed[tag] = entity
                else:
                    logger.debug("Tag %d appeared already dead at step %d, ignoring", tag, step)
                continue

            if entity.owner == Owner.OPPONENT and entity.display_type in _REMEMBERED_DISPLAY:
                # Engine still reports it, but from memory
                result.cached[tag] = entity
                if tag in previous_visible:
                    result.left_vision.append(tag)
                elif tag in previous_cached:
                    result.updated.append(tag)
                else:
                    result.created.append(tag)
                continue

            result.visible[tag] = entity
            if tag in previous_visible:
                result.updated.append(tag)
            elif tag in previous_cached:
                result.reappeared.append(tag)
            else:
                result.created.append(tag)

        # Visible last step, gone now
        for tag, entity in previous_visible.items():
            if tag in current:
                continue
            if tag in dead:
                result.destroyed.append(tag)
                result.removed[tag] = entity
            elif entity.owner == Owner.OPPONENT:
                result.left_vision.append(tag)
                result.cached[tag] = entity
            elif entity.owner == Owner.MINE and entity.is_placeholder:
                # Order fulfilled or abandoned, evicted without an event
                result.expired.append(tag)
                result.removed[tag] = entity
            else:
                if entity.owner == Owner.MINE:
                    logger.warning(
                        "Own entity %d (type %d) vanished at step %d without a death alert, treating as destroyed",
                        tag, entity.type_id, step,
                    )
                result.destroyed.append(tag)
                result.removed[tag] = entity

        # Cached last step, still not observed
        for tag, entity in previous_cached.items():
            if tag in current:
                continue
            if tag in dead:
                result.destroyed.append(tag)
                result.removed[tag] = entity
            elif self._is_stale(entity, step):
                result.expired.append(tag)
                result.removed[tag] = entity
            else:
                result.cached[tag] = entity

        unknown = dead.difference(previous_visible, previous_cached, current)
        if unknown:
            logger.debug("Ignoring death markers for unknown tags at step %d: %s", step, sorted(unknown))

        return result

    def _is_stale(self, entity: Entity, step: int) -> bool:
        if not self.retention_steps:
            return False
        return step - entity.last_seen_step > self.retention_steps
