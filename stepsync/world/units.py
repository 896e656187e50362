"""
Units - Immutable, filterable collections of entities.

Every filter returns a new Units; nothing mutates in place, so a
collection handed to agent code stays valid for the whole step and
may be read from worker threads.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Iterator, Sequence, TypeVar, overload

from ..catalog import UnitTypeId
from ..engine_core.entity import Entity

R = TypeVar("R")


def _type_set(types: UnitTypeId | int | Iterable[UnitTypeId | int]) -> frozenset[int]:
    if isinstance(types, int):
        return frozenset({int(types)})
    return frozenset(int(t) for t in types)


class Units(Sequence[Entity]):
    """
    An ordered, read-only sequence of entities.

    Usage:
        marines = world.mine.units.of_type(UnitTypeId.MARINE).idle
        tags = marines.tags
    """

    __slots__ = ("_entities",)

    def __init__(self, entities: Iterable[Entity] = ()):
        self._entities: tuple[Entity, ...] = tuple(entities)

    @overload
    def __getitem__(self, index: int) -> Entity: ...

    @overload
    def __getitem__(self, index: slice) -> Units: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Units(self._entities[index])
        return self._entities[index]

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities)

    def __contains__(self, item) -> bool:
        if isinstance(item, Entity):
            item = item.tag
        return any(e.tag == item for e in self._entities)

    def __bool__(self) -> bool:
        return bool(self._entities)

    def __add__(self, other: Units) -> Units:
        seen = {e.tag for e in self._entities}
        return Units(self._entities + tuple(e for e in other if e.tag not in seen))

    def __repr__(self) -> str:
        return f"Units({len(self._entities)})"

    # ---- filters ----

    def filter(self, predicate: Callable[[Entity], bool]) -> Units:
        return Units(e for e in self._entities if predicate(e))

    def of_type(self, types: UnitTypeId | int | Iterable[UnitTypeId | int]) -> Units:
        wanted = _type_set(types)
        return self.filter(lambda e: e.type_id in wanted)

    def exclude_type(self, types: UnitTypeId | int | Iterable[UnitTypeId | int]) -> Units:
        unwanted = _type_set(types)
        return self.filter(lambda e: e.type_id not in unwanted)

    @property
    def ready(self) -> Units:
        return self.filter(lambda e: e.is_ready)

    @property
    def not_ready(self) -> Units:
        return self.filter(lambda e: not e.is_ready)

    @property
    def idle(self) -> Units:
        return self.filter(lambda e: e.is_idle)

    # ---- lookups ----

    @property
    def tags(self) -> frozenset[int]:
        return frozenset(e.tag for e in self._entities)

    def find_by_tag(self, tag: int) -> Entity | None:
        for entity in self._entities:
            if entity.tag == tag:
                return entity
        return None

    @property
    def first(self) -> Entity | None:
        return self._entities[0] if self._entities else None

    # ---- parallel read mode ----

    def parallel_map(self, fn: Callable[[Entity], R], max_workers: int | None = None) -> list[R]:
        """
        Apply a read-only function to every member on a thread pool.

        Results keep member order. fn must not mutate shared state.
        """
        if not self._entities:
            return []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(fn, self._entities))
