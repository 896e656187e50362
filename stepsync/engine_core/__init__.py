"""
Engine Core - Per-step synchronization with the simulation engine.

Each step the core:
1. Normalizes raw entity records into Entities
2. Reconciles the resource ledger against authoritative values
3. Diffs identity sets against the previous step
4. Derives ordered events from the diff
5. Batches the agent's action requests
"""

from .entity import Entity, Owner, Point2, UnitOrder
from .normalizer import EntityNormalizer
from .ledger import ResourceLedger, SpeculativeDebit, ReconcileReport, DEFAULT_DEBIT_HORIZON
from .differ import EntitySetDiffer, DiffResult
from .events import Event, EventType, EventDeriver, ConstructionPhase, ConstructionTracker
from .action import ActionRequest, BatchedAction, Target
from .batcher import ActionBatcher

__all__ = [
    "Entity",
    "Owner",
    "Point2",
    "UnitOrder",
    "EntityNormalizer",
    "ResourceLedger",
    "SpeculativeDebit",
    "ReconcileReport",
    "DEFAULT_DEBIT_HORIZON",
    "EntitySetDiffer",
    "DiffResult",
    "Event",
    "EventType",
    "EventDeriver",
    "ConstructionPhase",
    "ConstructionTracker",
    "ActionRequest",
    "BatchedAction",
    "Target",
    "ActionBatcher",
]
