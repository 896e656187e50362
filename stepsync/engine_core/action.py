"""
Action System - Action requests and batched orders.

Agent code issues ActionRequests during a step. The batcher merges
them into BatchedActions, which are what actually goes out:

    ActionRequest.train(barracks.tag, UnitTypeId.MARINE)
    ActionRequest.build(worker.tag, UnitTypeId.BARRACKS, Point2(40, 52))
    ActionRequest.attack([m.tag for m in marines], enemy.tag)

A target is a Point2 (position), an int (entity tag), or None.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Union

from ..api.schemas import ActionPayload, RawPosition
from ..catalog import AbilityId, UnitTypeId, get_type_data
from .entity import Point2

Target = Union[Point2, int, None]


def _as_tags(issuers: int | Iterable[int]) -> tuple[int, ...]:
    if isinstance(issuers, int):
        return (issuers,)
    return tuple(issuers)


@dataclass(frozen=True)
class ActionRequest:
    """
    One order requested by agent logic.

    All issuers receive the same ability and target.
    """
    ability: int
    issuers: tuple[int, ...]
    target: Target = None
    queue: bool = False

    @property
    def key(self) -> tuple[int, Target, bool]:
        """Requests with equal keys may share one batched order."""
        return (int(self.ability), self.target, self.queue)

    @classmethod
    def use(
        cls,
        ability: int,
        issuers: int | Iterable[int],
        target: Target = None,
        queue: bool = False,
    ) -> ActionRequest:
        """Factory for an arbitrary ability."""
        return cls(ability=int(ability), issuers=_as_tags(issuers), target=target, queue=queue)

    @classmethod
    def train(cls, issuer: int, unit_type: UnitTypeId, queue: bool = False) -> ActionRequest | None:
        """Factory for training a unit. None if the type has no creation ability."""
        data = get_type_data(unit_type)
        if data is None or data.creation_ability is None:
            return None
        return cls.use(data.creation_ability, issuer, queue=queue)

    @classmethod
    def build(
        cls,
        issuer: int,
        unit_type: UnitTypeId,
        target: Point2 | int,
        queue: bool = False,
    ) -> ActionRequest | None:
        """
        Factory for constructing a structure.

        target is a position, or a geyser tag for gas buildings.
        None if the type has no creation ability.
        """
        data = get_type_data(unit_type)
        if data is None or data.creation_ability is None:
            return None
        return cls.use(data.creation_ability, issuer, target=target, queue=queue)

    @classmethod
    def move(cls, issuers: int | Iterable[int], target: Point2 | int, queue: bool = False) -> ActionRequest:
        return cls.use(AbilityId.MOVE, issuers, target=target, queue=queue)

    @classmethod
    def attack(cls, issuers: int | Iterable[int], target: Point2 | int, queue: bool = False) -> ActionRequest:
        return cls.use(AbilityId.ATTACK, issuers, target=target, queue=queue)

    @classmethod
    def gather(cls, issuers: int | Iterable[int], target: int, queue: bool = False) -> ActionRequest:
        return cls.use(AbilityId.HARVEST_GATHER, issuers, target=target, queue=queue)

    @classmethod
    def stop(cls, issuers: int | Iterable[int]) -> ActionRequest:
        return cls.use(AbilityId.STOP, issuers)


@dataclass(frozen=True)
class BatchedAction:
    """One outbound order: one ability and target, many issuers."""
    ability: int
    issuers: tuple[int, ...]
    target: Target = None
    queue: bool = False

    def to_payload(self) -> ActionPayload:
        """Encode for the transport collaborator."""
        target_tag = None
        target_position = None
        if isinstance(self.target, Point2):
            target_position = RawPosition(x=self.target.x, y=self.target.y)
        elif isinstance(self.target, int):
            target_tag = self.target
        return ActionPayload(
            ability_id=int(self.ability),
            unit_tags=list(self.issuers),
            target_tag=target_tag,
            target_position=target_position,
            queue_command=self.queue,
        )
