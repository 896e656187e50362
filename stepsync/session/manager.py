"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Runner starts a game → create a session for the agent
2. Each step:
   - Transport hands over one raw snapshot
   - The session's GameLoop synchronizes and runs the agent
   - Transport sends back the batched actions
3. Game ends → finish() delivers the result, session is released

PERSISTENCE RULES:
- Sessions are in-memory only
- Ending a session releases its arena, ledger and world model
- Nothing survives a session except what the agent keeps itself

Several sessions may run side by side in one process (multi-agent
runs); each owns all of its state, so they never interact.
"""

from __future__ import annotations
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

from ..agents import Agent, GameResult
from ..api.schemas import GameSetup
from ..catalog import Race
from ..config import CoreConfig
from ..engine_core import (
    ActionBatcher,
    Entity,
    EntityNormalizer,
    EntitySetDiffer,
    EventDeriver,
    ResourceLedger,
)
from ..errors import SessionError

if TYPE_CHECKING:
    from ..world import WorldModel
    from .game_loop import GameLoop

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    CREATED = "created"  # Waiting for the first snapshot
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Result delivered
    ABANDONED = "abandoned"  # Ended without a result


@dataclass
class Session:
    """
    One agent's game.

    Contains:
    - The agent and the game setup
    - The synchronization components (one set per session)
    - The arena: visible and cached entities after the last step
    - The last published World Model
    """
    session_id: str
    agent: Agent
    created_at: float
    setup: GameSetup = field(default_factory=GameSetup)
    config: CoreConfig = field(default_factory=CoreConfig)

    state: SessionState = SessionState.CREATED
    result: GameResult | None = None

    # Components
    normalizer: EntityNormalizer = field(default_factory=EntityNormalizer)
    differ: EntitySetDiffer | None = None
    ledger: ResourceLedger | None = None
    deriver: EventDeriver | None = None
    batcher: ActionBatcher = field(default_factory=ActionBatcher)
    loop: GameLoop | None = None

    # Arena after the last processed step
    visible: dict[int, Entity] = field(default_factory=dict)
    cached: dict[int, Entity] = field(default_factory=dict)
    world: WorldModel | None = None
    last_step: int | None = None
    steps_processed: int = 0

    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.differ is None:
            self.differ = EntitySetDiffer(retention_steps=self.config.cache_retention_steps)
        if self.ledger is None:
            self.ledger = ResourceLedger(horizon=self.config.debit_horizon_steps)
        if self.deriver is None:
            self.deriver = EventDeriver(opponent_race=Race.parse(self.setup.opponent_race))

    @property
    def race(self) -> Race:
        """Own race: the setup's, else what the agent asked for."""
        race = Race.parse(self.setup.race)
        return race if race.is_known else self.agent.race

    def is_active(self) -> bool:
        """Check if session can still be driven."""
        return self.state in {SessionState.CREATED, SessionState.ACTIVE}

    def release(self):
        """Drop all per-game state."""
        self.visible = {}
        self.cached = {}
        self.world = None
        self.batcher.finalize()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their game loops
    - Track active sessions
    - Clean up ended sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, config: CoreConfig | None = None):
        self.config = config or CoreConfig()
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        agent: Agent,
        setup: GameSetup | None = None,
        session_id: str | None = None,
        config: CoreConfig | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            agent: Agent logic to drive
            setup: Per-game information (races, map)
            session_id: Explicit id; a uuid4 when omitted
            config: Overrides the manager's config for this session

        Returns:
            New Session with its GameLoop attached
        """
        from .game_loop import GameLoop

        session_id = session_id or str(uuid.uuid4())
        if session_id in self._sessions:
            raise SessionError(f"Session already exists: {session_id}")

        session = Session(
            session_id=session_id,
            agent=agent,
            created_at=time.time(),
            setup=setup or GameSetup(),
            config=config or self.config,
        )
        session.loop = GameLoop(session)

        self._sessions[session_id] = session
        logger.info("Created session %s for %s", session_id, agent.get_name())
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> Session:
        """Get an active session by ID or raise SessionError."""
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionError(f"Unknown session: {session_id}")
        if not session.is_active():
            raise SessionError(f"Session has ended: {session_id}")
        return session

    def end_session(self, session_id: str, result: GameResult | None = None) -> Session | None:
        """
        End a session and release its state.

        With a result, the agent's on_end is called first (unless the
        loop already delivered one). Without, the session is abandoned.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return None

        if result is not None and session.is_active() and session.loop is not None:
            session.loop.finish(result)
        elif session.is_active():
            session.state = SessionState.ABANDONED

        session.release()
        logger.info("Ended session %s (%s)", session_id, session.state.value)
        return session

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        End sessions that are no longer active or older than max_age.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if not session.is_active() or current_time - session.created_at > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id)
        return len(to_remove)
