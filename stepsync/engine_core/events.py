"""
Events - Semantic events derived from consecutive snapshots.

The engine never says "this finished building"; it only reports the
current build progress. The deriver turns differ output and
construction-state transitions into events the agent can react to.

Ordering within a step is fixed, regardless of engine ordering:
1. destructions
2. creations
3. construction transitions
4. race reveal
Within each group, events are ordered by tag.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from itertools import chain

from ..catalog import Race
from .differ import DiffResult
from .entity import Entity, Owner

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of derived events."""
    ENTITY_DESTROYED = "entity_destroyed"
    ENTITY_CREATED = "entity_created"
    CONSTRUCTION_STARTED = "construction_started"
    CONSTRUCTION_COMPLETE = "construction_complete"
    OPPONENT_RACE_REVEALED = "opponent_race_revealed"


@dataclass(frozen=True)
class Event:
    """
    One derived event.

    tag is set for entity events, race for the race reveal.
    """
    event_type: EventType
    step: int
    tag: int | None = None
    race: Race | None = None

    @classmethod
    def destroyed(cls, tag: int, step: int) -> Event:
        return cls(event_type=EventType.ENTITY_DESTROYED, step=step, tag=tag)

    @classmethod
    def created(cls, tag: int, step: int) -> Event:
        return cls(event_type=EventType.ENTITY_CREATED, step=step, tag=tag)

    @classmethod
    def construction_started(cls, tag: int, step: int) -> Event:
        return cls(event_type=EventType.CONSTRUCTION_STARTED, step=step, tag=tag)

    @classmethod
    def construction_complete(cls, tag: int, step: int) -> Event:
        return cls(event_type=EventType.CONSTRUCTION_COMPLETE, step=step, tag=tag)

    @classmethod
    def race_revealed(cls, race: Race, step: int) -> Event:
        return cls(event_type=EventType.OPPONENT_RACE_REVEALED, step=step, race=race)

    def __str__(self) -> str:
        subject = self.race if self.race is not None else self.tag
        return f"{self.event_type.value}({subject}) @ {self.step}"


class ConstructionPhase(Enum):
    """Construction lifecycle of one owned structure. Phases only advance."""
    ORDERED = 1
    STARTED = 2
    IN_PROGRESS = 3
    COMPLETE = 4


class ConstructionTracker:
    """
    Maps tags to their construction phase.

    Because phases never move backwards, each transition event can
    fire at most once per tag.
    """

    def __init__(self):
        self._phases: dict[int, ConstructionPhase] = {}

    def phase(self, tag: int) -> ConstructionPhase | None:
        return self._phases.get(tag)

    def forget(self, tag: int):
        self._phases.pop(tag, None)

    def __len__(self) -> int:
        return len(self._phases)

    def observe(self, entity: Entity) -> tuple[EventType, ...]:
        """
        Advance the tag's phase from a new observation.

        Returns the transition event types that fired, in order. A
        placeholder next seen finished skips the in-progress phase and
        fires both transitions at once.
        """
        current = self._phases.get(entity.tag)

        if entity.is_placeholder:
            if current is None:
                self._phases[entity.tag] = ConstructionPhase.ORDERED
            return ()

        if not entity.is_structure:
            return ()

        if entity.is_under_construction:
            if current in (None, ConstructionPhase.ORDERED):
                self._phases[entity.tag] = ConstructionPhase.STARTED
                return (EventType.CONSTRUCTION_STARTED,)
            if current == ConstructionPhase.STARTED:
                self._phases[entity.tag] = ConstructionPhase.IN_PROGRESS
            return ()

        self._phases[entity.tag] = ConstructionPhase.COMPLETE
        if current == ConstructionPhase.ORDERED:
            return (EventType.CONSTRUCTION_STARTED, EventType.CONSTRUCTION_COMPLETE)
        if current in (ConstructionPhase.STARTED, ConstructionPhase.IN_PROGRESS):
            return (EventType.CONSTRUCTION_COMPLETE,)
        return ()


class EventDeriver:
    """
    Produces the ordered event sequence for each step.

    Usage:
        deriver = EventDeriver(opponent_race=Race.RANDOM)
        events = deriver.derive(diff, opponent_race_hint)
    """

    def __init__(self, opponent_race: Race = Race.RANDOM):
        # Only a race unknown at game start can be revealed
        self.race_known_at_start = opponent_race.is_known
        self.revealed_race: Race | None = opponent_race if opponent_race.is_known else None
        self.tracker = ConstructionTracker()

    def derive(
        self,
        diff: DiffResult,
        opponent_race: Race | str | None = None,
        baseline: bool = False,
    ) -> list[Event]:
        """
        Derive this step's events.

        On the baseline (first) step the tracker is seeded but no
        creation or construction events are produced.
        """
        step = diff.step
        events: list[Event] = []

        for tag in sorted(diff.destroyed):
            events.append(Event.destroyed(tag, step))
        for tag in diff.destroyed:
            self.tracker.forget(tag)
        for tag in diff.expired:
            self.tracker.forget(tag)

        if not baseline:
            for tag in sorted(diff.created):
                events.append(Event.created(tag, step))

        transitions: list[Event] = []
        for entity in diff.visible.values():
            if entity.owner != Owner.MINE:
                continue
            fired = self.tracker.observe(entity)
            if baseline:
                continue
            for event_type in fired:
                transitions.append(Event(event_type=event_type, step=step, tag=entity.tag))
        transitions.sort(key=lambda e: e.tag)
        events.extend(transitions)

        reveal = self._detect_race(diff, opponent_race)
        if reveal is not None:
            events.append(Event.race_revealed(reveal, step))

        if events:
            logger.debug("Step %d events: %s", step, ", ".join(str(e) for e in events))
        return events

    def _detect_race(self, diff: DiffResult, hint: Race | str | None) -> Race | None:
        """Return the opponent race the first time it becomes known."""
        if self.race_known_at_start or self.revealed_race is not None:
            return None

        race = Race.parse(hint)
        if not race.is_known:
            for entity in chain(diff.visible.values(), diff.cached.values()):
                if entity.owner == Owner.OPPONENT and entity.race.is_known:
                    race = entity.race
                    break

        if race.is_known:
            self.revealed_race = race
            logger.info("Opponent race revealed: %s", race)
            return race
        return None
