"""
Races - Playable races.
"""

from __future__ import annotations
from enum import Enum


class Race(Enum):
    """Game races. RANDOM doubles as 'not known yet'."""
    TERRAN = "terran"
    ZERG = "zerg"
    PROTOSS = "protoss"
    RANDOM = "random"

    @property
    def is_known(self) -> bool:
        return self != Race.RANDOM

    @classmethod
    def parse(cls, value: str | Race | None) -> Race:
        """Parse a race name; anything unrecognized is RANDOM."""
        if isinstance(value, Race):
            return value
        if not value:
            return cls.RANDOM
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.RANDOM

    def __str__(self) -> str:
        return self.value.capitalize()
