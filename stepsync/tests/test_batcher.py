"""
Tests for action requests and batching.

Tests:
- Factories resolve catalog abilities
- Merging by ability, target and queue flag
- Per-issuer order sequences are preserved
- Payload encoding
"""

import pytest

from ..catalog import AbilityId, UnitTypeId
from ..engine_core import ActionBatcher, ActionRequest, BatchedAction, Point2


@pytest.fixture
def batcher():
    return ActionBatcher()


def per_issuer(actions):
    """Flatten batches into each issuer's order sequence."""
    sequences = {}
    for action in actions:
        for tag in action.issuers:
            sequences.setdefault(tag, []).append((action.ability, action.target, action.queue))
    return sequences


class TestFactories:
    """Tests for ActionRequest factories."""

    def test_train(self):
        """train uses the type's creation ability."""
        request = ActionRequest.train(1, UnitTypeId.MARINE)
        assert request.ability == AbilityId.BARRACKSTRAIN_MARINE
        assert request.issuers == (1,)
        assert request.target is None

    def test_build(self):
        """build targets a position or a geyser tag."""
        request = ActionRequest.build(2, UnitTypeId.BARRACKS, Point2(40, 52))
        assert request.ability == AbilityId.TERRANBUILD_BARRACKS
        assert request.target == Point2(40, 52)

        gas = ActionRequest.build(2, UnitTypeId.REFINERY, 101)
        assert gas.target == 101

    def test_no_creation_ability(self):
        """Types without a creation ability give None."""
        assert ActionRequest.train(1, UnitTypeId.LARVA) is None
        assert ActionRequest.build(1, UnitTypeId.MINERALFIELD, Point2(0, 0)) is None

    def test_group_orders(self):
        """move and attack accept one tag or many."""
        assert ActionRequest.move(5, Point2(1, 1)).issuers == (5,)
        assert ActionRequest.attack([5, 6], 200).issuers == (5, 6)
        assert ActionRequest.stop([5]).ability == AbilityId.STOP
        assert ActionRequest.gather(5, 100).ability == AbilityId.HARVEST_GATHER


class TestMerging:
    """Tests for batch merging."""

    def test_same_key_merges(self, batcher):
        """Same ability and target share one order."""
        batcher.request(ActionRequest.attack(1, Point2(30, 30)))
        batcher.request(ActionRequest.attack([2, 3], Point2(30, 30)))

        actions = batcher.finalize()

        assert len(actions) == 1
        assert actions[0].issuers == (1, 2, 3)

    def test_different_targets_stay_apart(self, batcher):
        """Different targets or abilities are separate orders, in first-seen order."""
        batcher.request(ActionRequest.attack(1, Point2(30, 30)))
        batcher.request(ActionRequest.move(2, Point2(30, 30)))
        batcher.request(ActionRequest.attack(3, Point2(10, 10)))
        batcher.request(ActionRequest.attack(4, Point2(30, 30)))

        actions = batcher.finalize()

        assert [(a.ability, a.target) for a in actions] == [
            (AbilityId.ATTACK, Point2(30, 30)),
            (AbilityId.MOVE, Point2(30, 30)),
            (AbilityId.ATTACK, Point2(10, 10)),
        ]
        assert actions[0].issuers == (1, 4)

    def test_queue_flag_is_part_of_key(self, batcher):
        """Queued and immediate orders never merge."""
        batcher.request(ActionRequest.move(1, Point2(5, 5)))
        batcher.request(ActionRequest.move(2, Point2(5, 5), queue=True))
        assert len(batcher.finalize()) == 2

    def test_issuer_order_preserved(self, batcher):
        """A request doesn't jump ahead of the issuer's later orders."""
        batcher.request(ActionRequest.move(1, Point2(5, 5)))
        batcher.request(ActionRequest.move(1, Point2(9, 9), queue=True))
        batcher.request(ActionRequest.move([1, 2], Point2(5, 5)))

        actions = batcher.finalize()

        assert len(actions) == 3
        assert per_issuer(actions)[1] == [
            (AbilityId.MOVE, Point2(5, 5), False),
            (AbilityId.MOVE, Point2(9, 9), True),
            (AbilityId.MOVE, Point2(5, 5), False),
        ]

    def test_unrelated_issuer_still_merges(self, batcher):
        """Merging is blocked only by the request's own issuers."""
        batcher.request(ActionRequest.attack(1, 200))
        batcher.request(ActionRequest.move(2, Point2(1, 1)))
        batcher.request(ActionRequest.attack(3, 200))

        actions = batcher.finalize()
        assert actions[0].issuers == (1, 3)

    def test_non_queued_duplicate_collapses(self, batcher):
        """Repeating the same immediate order is one order."""
        batcher.request(ActionRequest.stop(1))
        batcher.request(ActionRequest.stop(1))

        actions = batcher.finalize()
        assert actions == [BatchedAction(ability=AbilityId.STOP, issuers=(1,))]

    def test_queued_duplicate_kept(self, batcher):
        """Queuing the same order twice is two orders."""
        batcher.request(ActionRequest.move(1, Point2(5, 5), queue=True))
        batcher.request(ActionRequest.move(1, Point2(5, 5), queue=True))

        assert len(batcher.finalize()) == 2

    def test_effective_orders_unchanged(self, batcher):
        """Batching changes encoding, not the orders each issuer gets."""
        requests = [
            ActionRequest.attack(1, Point2(30, 30)),
            ActionRequest.attack(2, Point2(30, 30)),
            ActionRequest.move(3, Point2(1, 1)),
            ActionRequest.attack(3, Point2(30, 30), queue=True),
            ActionRequest.gather(4, 100),
            ActionRequest.gather(5, 100),
            ActionRequest.attack(2, Point2(30, 30), queue=True),
        ]
        batcher.extend(requests)

        expected = {}
        for r in requests:
            for tag in r.issuers:
                expected.setdefault(tag, []).append((r.ability, r.target, r.queue))

        actions = batcher.finalize()
        assert per_issuer(actions) == expected
        assert len(actions) == 4


class TestLifecycle:
    """Tests for accumulate / finalize."""

    def test_finalize_clears(self, batcher):
        """Each step starts empty."""
        batcher.request(ActionRequest.stop(1))
        assert len(batcher) == 1
        assert batcher.finalize()
        assert len(batcher) == 0
        assert batcher.finalize() == []

    def test_ignores_empty(self, batcher):
        """None and issuer-less requests are dropped."""
        assert not batcher.request(None)
        assert not batcher.request(ActionRequest.move([], Point2(1, 1)))
        assert batcher.finalize() == []


class TestPayload:
    """Tests for outbound encoding."""

    def test_position_target(self):
        """Positions go to target_position."""
        payload = BatchedAction(AbilityId.MOVE, (1, 2), Point2(3, 4)).to_payload()

        assert payload.ability_id == int(AbilityId.MOVE)
        assert payload.unit_tags == [1, 2]
        assert payload.target_position.x == 3
        assert payload.target_tag is None

    def test_tag_target(self):
        """Tags go to target_tag."""
        payload = BatchedAction(AbilityId.ATTACK, (1,), 200, queue=True).to_payload()

        assert payload.target_tag == 200
        assert payload.target_position is None
        assert payload.queue_command is True
