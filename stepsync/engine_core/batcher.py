"""
Action Batcher - Merges a step's action requests into batched orders.

The engine accepts many issuers per order, so requests that share
ability, target and queue flag are sent as one order.

Merging rules:
- Batches keep the order in which their key first appeared
- A request joins an earlier batch only if none of its issuers shows
  up in a later batch (each issuer's own order sequence is preserved)
- A non-queued duplicate issuer in a batch collapses into one
- A queued duplicate issuer starts a new batch (it is a second order)

Batching changes the encoding of orders, never the set of orders.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .action import ActionRequest, BatchedAction, Target

logger = logging.getLogger(__name__)


@dataclass
class _OpenBatch:
    ability: int
    target: Target
    queue: bool
    issuers: dict[int, None] = field(default_factory=dict)

    def freeze(self) -> BatchedAction:
        return BatchedAction(
            ability=self.ability,
            issuers=tuple(self.issuers),
            target=self.target,
            queue=self.queue,
        )


class ActionBatcher:
    """
    Accumulates requests during agent logic.

    Usage:
        batcher = ActionBatcher()
        batcher.request(ActionRequest.move(tags, Point2(30, 30)))
        actions = batcher.finalize()
    """

    def __init__(self):
        self._batches: list[_OpenBatch] = []
        # key -> index of the newest batch with that key
        self._by_key: dict[tuple, int] = {}
        # issuer tag -> index of the newest batch containing it
        self._last_batch_of: dict[int, int] = {}
        self._requests = 0

    def __len__(self) -> int:
        """Number of requests accepted since the last finalize()."""
        return self._requests

    def request(self, action: ActionRequest | None) -> bool:
        """
        Add a request. Returns False if it was ignored.

        None is accepted (and ignored) so factory results can be passed
        straight through.
        """
        if action is None:
            return False
        if not action.issuers:
            logger.debug("Ignoring action %d without issuers", action.ability)
            return False

        index = self._merge_target(action)
        if index is None:
            index = len(self._batches)
            self._batches.append(_OpenBatch(
                ability=int(action.ability),
                target=action.target,
                queue=action.queue,
            ))
            self._by_key[action.key] = index

        batch = self._batches[index]
        for tag in action.issuers:
            batch.issuers[tag] = None
            self._last_batch_of[tag] = index

        self._requests += 1
        return True

    def extend(self, actions) -> int:
        """Add several requests. Returns how many were accepted."""
        return sum(1 for action in actions if self.request(action))

    def peek(self) -> list[BatchedAction]:
        """Current batches without clearing."""
        return [batch.freeze() for batch in self._batches]

    def finalize(self) -> list[BatchedAction]:
        """Return this step's batched orders and reset for the next step."""
        actions = self.peek()
        if actions:
            logger.debug("Batched %d request(s) into %d order(s)", self._requests, len(actions))
        self._batches = []
        self._by_key = {}
        self._last_batch_of = {}
        self._requests = 0
        return actions

    def _merge_target(self, action: ActionRequest) -> int | None:
        """Index of the batch this request can join, if any."""
        index = self._by_key.get(action.key)
        if index is None:
            return None

        batch = self._batches[index]
        for tag in action.issuers:
            last = self._last_batch_of.get(tag)
            if last is not None and last > index:
                return None
            if action.queue and tag in batch.issuers:
                return None
        return index
