"""
Game Loop - The per-step synchronization cycle.

The loop, once per engine step:
1. Parse the raw snapshot (untrusted records salvaged or dropped)
2. Normalize entity records
3. Reconcile the resource ledger
4. Diff identity sets against the previous arena
5. Derive the ordered event sequence
6. Publish a new World Model
7. Run the agent: on_event for each event, then on_step
8. Batch the agent's requests into the step response

Everything runs on the calling thread and finishes before the next
snapshot is requested. The engine waits on our response, so no
step may do unbounded work.
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..agents import AgentContext, GameResult
from ..api.schemas import RawSnapshot, StepResponse
from ..catalog import Race
from ..engine_core import BatchedAction, DiffResult, Event, ReconcileReport
from ..errors import SessionError
from ..world import MapInfo, WorldModel
from .manager import Session, SessionState

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    WAITING_SNAPSHOT = "waiting_snapshot"
    RUNNING_AGENT = "running_agent"
    GAME_OVER = "game_over"


@dataclass
class StepResult:
    """
    Result of processing one step.

    response is what goes back to the transport; the rest is for
    logging, tests and tooling.
    """
    step: int
    loop_state: LoopState
    world: WorldModel
    response: StepResponse

    events: list[Event] = field(default_factory=list)
    actions: list[BatchedAction] = field(default_factory=list)

    diff: DiffResult | None = None
    reconcile: ReconcileReport | None = None

    # Records salvaged or dropped, step anomalies
    warnings: list[str] = field(default_factory=list)

    elapsed_ms: float = 0.0
    baseline: bool = False


class GameLoop:
    """
    The main step driver for one session.

    Usage:
        loop = GameLoop(session)

        # Each step, from the transport
        result = loop.process_snapshot(payload)
        send(result.response)

        # When the engine reports the game is over
        loop.finish(GameResult.VICTORY)
    """

    def __init__(self, session: Session):
        self.session = session
        self.state = LoopState.WAITING_SNAPSHOT

    def process_snapshot(self, payload: RawSnapshot | dict[str, Any]) -> StepResult:
        """
        Run one full synchronization cycle.

        Raises:
            SessionError: the session has ended
            SnapshotValidationError: payload is not a snapshot at all
        """
        session = self.session
        if not session.is_active():
            raise SessionError(f"Session {session.session_id} has ended")

        snapshot = RawSnapshot.parse(payload)
        step = snapshot.step
        warnings = list(snapshot.warnings)
        for warning in snapshot.warnings:
            logger.warning("Step %d: %s", step, warning)

        if session.last_step is not None and step <= session.last_step:
            message = f"step index went from {session.last_step} to {step}"
            warnings.append(message)
            logger.warning("Non-monotonic step: %s", message)

        baseline = session.world is None

        current = session.normalizer.normalize_many(snapshot.entities, step)
        report = session.ledger.reconcile(snapshot)
        diff = session.differ.diff(
            session.visible,
            session.cached,
            current,
            snapshot.death_tags(),
            step,
        )
        events = session.deriver.derive(diff, snapshot.opponent_race, baseline=baseline)

        # Previous arena is no longer needed once diffed
        session.visible = diff.visible
        session.cached = diff.cached
        session.last_step = step
        session.steps_processed += 1

        world = WorldModel.build(
            step=step,
            visible=diff.visible,
            cached=diff.cached,
            player=snapshot.player,
            score=snapshot.score,
            alerts=snapshot.alerts,
            race=session.race,
            opponent_race=session.deriver.revealed_race or Race.RANDOM,
            map_info=MapInfo.from_setup(session.setup),
            ledger=session.ledger,
        )
        session.world = world

        elapsed_ms = self._run_agent(world, events, baseline)
        if elapsed_ms > session.config.step_budget_ms:
            message = f"agent took {elapsed_ms:.1f}ms (budget {session.config.step_budget_ms:.0f}ms)"
            warnings.append(message)
            logger.warning("Step %d: %s", step, message)

        actions = session.batcher.finalize()
        response = StepResponse(step=step, actions=[a.to_payload() for a in actions])

        logger.debug(
            "Step %d: %d entities, %d cached, %d events, %d actions",
            step, len(diff.visible), len(diff.cached), len(events), len(actions),
        )

        return StepResult(
            step=step,
            loop_state=self.state,
            world=world,
            response=response,
            events=events,
            actions=actions,
            diff=diff,
            reconcile=report,
            warnings=warnings,
            elapsed_ms=elapsed_ms,
            baseline=baseline,
        )

    def finish(self, result: GameResult) -> GameResult:
        """
        Deliver the game result to the agent and close the session.

        Raises SessionError if the result was already delivered.
        """
        session = self.session
        if not session.is_active():
            raise SessionError(f"Session {session.session_id} has already ended")

        session.result = result
        session.state = SessionState.GAME_OVER
        self.state = LoopState.GAME_OVER
        logger.info(
            "Session %s finished after %d steps: %s",
            session.session_id, session.steps_processed, result.value,
        )
        session.agent.on_end(result)
        return result

    def _run_agent(self, world: WorldModel, events: list[Event], baseline: bool) -> float:
        """Run agent callbacks for one step. Returns elapsed milliseconds."""
        session = self.session
        agent = session.agent
        context = AgentContext(
            world=world,
            ledger=session.ledger,
            batcher=session.batcher,
            events=events,
        )

        self.state = LoopState.RUNNING_AGENT
        started = time.perf_counter()
        try:
            if baseline:
                session.state = SessionState.ACTIVE
                agent.on_start(context)
            for event in events:
                agent.on_event(event, context)
            agent.on_step(context)
        except Exception:
            logger.exception("Agent %s failed at step %d", agent.get_name(), world.step)
            # Drop orders from the failed step
            session.batcher.finalize()
            raise
        finally:
            self.state = LoopState.WAITING_SNAPSHOT

        return (time.perf_counter() - started) * 1000.0
