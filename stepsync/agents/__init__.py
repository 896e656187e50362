"""
Agents module - Interface for agent logic.

Provides:
- Agent: Lifecycle interface driven by the game loop
- AgentContext: Per-step view and action helpers
- GameResult: Game outcome passed to on_end
- IdleAgent, WorkerProductionAgent: Scripted baselines
"""

from .base import Agent, AgentContext, GameResult
from .scripted import IdleAgent, WorkerProductionAgent

__all__ = [
    "Agent",
    "AgentContext",
    "GameResult",
    "IdleAgent",
    "WorkerProductionAgent",
]
