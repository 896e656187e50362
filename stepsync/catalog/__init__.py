"""Static game data - unit types, abilities, races."""

from .abilities import AbilityId
from .races import Race
from .unit_types import (
    UnitTypeId,
    UnitTypeData,
    Category,
    Cost,
    ZERO_COST,
    RaceValues,
    UNIT_TYPES,
    RACE_VALUES,
    lookup_type,
    get_type_data,
    cost_of,
    produced_by,
    race_values,
)

__all__ = [
    "AbilityId",
    "Race",
    "UnitTypeId",
    "UnitTypeData",
    "Category",
    "Cost",
    "ZERO_COST",
    "RaceValues",
    "UNIT_TYPES",
    "RACE_VALUES",
    "lookup_type",
    "get_type_data",
    "cost_of",
    "produced_by",
    "race_values",
]
