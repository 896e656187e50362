"""
Agent - Interface for agent logic driven by the game loop.

Lifecycle, per game:
- on_start once, before the first on_step
- on_event for each derived event of a step, in order
- on_step once per step, after that step's events
- on_end once, with the game result

Agent code only sees an AgentContext: the published World Model,
the step's events, the ledger and helpers that queue actions.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, TYPE_CHECKING

from ..catalog import Race, UnitTypeId
from ..engine_core.action import ActionRequest, Target
from ..engine_core.batcher import ActionBatcher
from ..engine_core.entity import Point2
from ..engine_core.events import Event
from ..engine_core.ledger import ResourceLedger, SpeculativeDebit

if TYPE_CHECKING:
    from ..world.model import WorldModel


class GameResult(Enum):
    """Outcome of a game, from the agent's point of view."""
    VICTORY = "victory"
    DEFEAT = "defeat"
    TIE = "tie"
    UNDECIDED = "undecided"


@dataclass
class AgentContext:
    """
    What agent code can see and do during one step.

    The train/build helpers follow the ledger discipline: they check
    can_afford, queue the order, then commit its cost. Raw requests
    via do() leave committing to the caller.
    """
    world: WorldModel
    ledger: ResourceLedger
    batcher: ActionBatcher
    events: list[Event] = field(default_factory=list)

    @property
    def step(self) -> int:
        return self.world.step

    # ---- resources ----

    def can_afford(self, cost: Any, reserve_supply: bool = True) -> bool:
        return self.ledger.can_afford(cost, reserve_supply=reserve_supply)

    def commit(self, cost: Any, unit_type: UnitTypeId | int | None = None) -> SpeculativeDebit | None:
        return self.ledger.commit(cost, unit_type=unit_type)

    # ---- actions ----

    def do(self, action: ActionRequest | None) -> bool:
        """Queue a request as is. Returns False if it was ignored."""
        return self.batcher.request(action)

    def train(self, issuer: int, unit_type: UnitTypeId, queue: bool = False) -> bool:
        """Queue a train order and commit its cost, if affordable."""
        if not self.can_afford(unit_type):
            return False
        if not self.do(ActionRequest.train(issuer, unit_type, queue=queue)):
            return False
        self.commit(unit_type)
        return True

    def build(self, issuer: int, unit_type: UnitTypeId, target: Point2 | int, queue: bool = False) -> bool:
        """Queue a construction order and commit its cost, if affordable."""
        if not self.can_afford(unit_type):
            return False
        if not self.do(ActionRequest.build(issuer, unit_type, target, queue=queue)):
            return False
        self.commit(unit_type)
        return True

    def move(self, issuers: int | Iterable[int], target: Point2 | int, queue: bool = False) -> bool:
        return self.do(ActionRequest.move(issuers, target, queue=queue))

    def attack(self, issuers: int | Iterable[int], target: Point2 | int, queue: bool = False) -> bool:
        return self.do(ActionRequest.attack(issuers, target, queue=queue))

    def gather(self, issuers: int | Iterable[int], target: int, queue: bool = False) -> bool:
        return self.do(ActionRequest.gather(issuers, target, queue=queue))

    def stop(self, issuers: int | Iterable[int]) -> bool:
        return self.do(ActionRequest.stop(issuers))

    def use(self, ability: int, issuers: int | Iterable[int], target: Target = None, queue: bool = False) -> bool:
        return self.do(ActionRequest.use(ability, issuers, target=target, queue=queue))


class Agent(ABC):
    """
    Abstract base class for agents.

    Only on_step is required. race is what the agent asks to play
    as when the outer runner sets up the game.
    """

    race: Race = Race.RANDOM

    def on_start(self, context: AgentContext):
        """Called once before the first step."""

    @abstractmethod
    def on_step(self, context: AgentContext):
        """
        Called once per step, after the step's events.

        Args:
            context: World Model, events, ledger and action helpers
        """
        pass

    def on_event(self, event: Event, context: AgentContext):
        """Called for each derived event, before on_step."""

    def on_end(self, result: GameResult):
        """Called once when the game is over."""

    def get_name(self) -> str:
        """Get the agent's name/identifier."""
        return self.__class__.__name__
