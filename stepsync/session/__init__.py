"""
Session Module - Manages in-memory game sessions.

A session represents one agent's game:
- Created when the runner starts a game
- Holds the arena, ledger and last World Model
- Processes one snapshot per step
- Released when the game ends

Sessions are EPHEMERAL: nothing is persisted.
"""

from ..agents import GameResult
from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, StepResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "StepResult",
    "GameResult",
]
