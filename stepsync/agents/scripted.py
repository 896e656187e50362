"""
Scripted agents - Small deterministic agents.

Used for:
- Testing the game loop end to end
- Baseline behavior when no real agent is plugged in
"""

from __future__ import annotations
import logging

from ..catalog import race_values
from ..engine_core.events import Event, EventType
from .base import Agent, AgentContext, GameResult

logger = logging.getLogger(__name__)


class IdleAgent(Agent):
    """Does nothing. Records what it was told, for tests."""

    def __init__(self):
        self.started = False
        self.steps: list[int] = []
        self.events: list[Event] = []
        self.result: GameResult | None = None

    def on_start(self, context: AgentContext):
        self.started = True

    def on_step(self, context: AgentContext):
        self.steps.append(context.step)

    def on_event(self, event: Event, context: AgentContext):
        self.events.append(event)

    def on_end(self, result: GameResult):
        self.result = result


class WorkerProductionAgent(Agent):
    """
    Keeps idle townhalls training workers up to a target count.

    Counts workers in flight (existing, in production and committed
    this step) so it never over-orders while the engine catches up.
    """

    def __init__(self, target_workers: int = 22):
        self.target_workers = target_workers
        self.completed: list[int] = []

    def on_event(self, event: Event, context: AgentContext):
        if event.event_type == EventType.CONSTRUCTION_COMPLETE:
            self.completed.append(event.tag)

    def on_step(self, context: AgentContext):
        values = race_values(context.world.race)
        if values is None:
            return

        for townhall in context.world.mine.townhalls.ready.idle:
            if context.world.count_in_flight(values.worker) >= self.target_workers:
                break
            if not context.train(townhall.tag, values.worker):
                break
            logger.debug("Training %s from townhall %d", values.worker.name, townhall.tag)
