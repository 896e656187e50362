"""World Model - the read-only per-step view handed to agent code."""

from .units import Units
from .model import WorldModel, PlayerUnits, NeutralUnits, MapInfo, STEPS_PER_SECOND

__all__ = [
    "Units",
    "WorldModel",
    "PlayerUnits",
    "NeutralUnits",
    "MapInfo",
    "STEPS_PER_SECOND",
]
