"""
Resource Ledger - Authoritative resources plus speculative debits.

An order issued this step doesn't move the engine's resource counters
until a later step. The ledger lets agent code plan against what it
has already committed:

    if ledger.can_afford(UnitTypeId.MARINE):
        issue_train_order()
        ledger.commit(UnitTypeId.MARINE)

Lifecycle of a debit:
1. commit() records it, tagged with the current step and cycle
2. reconcile() confirms it once this step's spending covers its cost.
   Spending is the drop in minerals/vespene with mined income
   (score.collected_*) added back. A supply-used rise covering the
   debit's supply confirms it as well
3. A debit still unconfirmed after the horizon is dropped as failed

Authoritative values are only ever replaced, never debited.
None of these operations raise.
"""

from __future__ import annotations
import logging
from collections import Counter
from dataclasses import dataclass, field
from itertools import count
from typing import Any

from ..api.schemas import RawSnapshot
from ..catalog import Cost, UnitTypeId, cost_of, lookup_type

logger = logging.getLogger(__name__)


DEFAULT_DEBIT_HORIZON = 4


@dataclass(frozen=True)
class SpeculativeDebit:
    """
    A locally applied, unconfirmed resource deduction.

    Cycles count reconcile() calls; expires_cycle is the last cycle
    at which the debit may still be confirmed.
    """
    debit_id: int
    cost: Cost
    issued_step: int
    issued_cycle: int
    expires_cycle: int
    unit_type: UnitTypeId | None = None


@dataclass
class ReconcileReport:
    """What a reconcile() call did with outstanding debits."""
    step: int
    confirmed: list[SpeculativeDebit] = field(default_factory=list)
    expired: list[SpeculativeDebit] = field(default_factory=list)


class ResourceLedger:
    """
    Tracks minerals, vespene and supply for one player.

    Usage:
        ledger = ResourceLedger(horizon=4)
        ledger.reconcile(snapshot)   # once per step, before agent logic
        ledger.can_afford(cost)      # during agent logic
        ledger.commit(cost)          # right after issuing the order
    """

    def __init__(self, horizon: int = DEFAULT_DEBIT_HORIZON):
        self.horizon = max(0, int(horizon))

        # Authoritative values, as last reported
        self._minerals = 0
        self._vespene = 0
        self._supply_used: float = 0
        self._supply_cap: float = 0

        self._step = 0
        self._cycle = 0
        self._initialized = False
        self._collected = (0, 0)
        self._debits: list[SpeculativeDebit] = []
        self._ids = count(1)

    # ---- authoritative values ----

    @property
    def minerals(self) -> int:
        return self._minerals

    @property
    def vespene(self) -> int:
        return self._vespene

    @property
    def supply_used(self) -> float:
        return self._supply_used

    @property
    def supply_cap(self) -> float:
        return self._supply_cap

    @property
    def supply_left(self) -> float:
        return max(0, self._supply_cap - self._supply_used)

    @property
    def step(self) -> int:
        return self._step

    # ---- speculative view ----

    @property
    def outstanding(self) -> tuple[SpeculativeDebit, ...]:
        """Debits not yet confirmed or expired, oldest first."""
        return tuple(self._debits)

    @property
    def pending_cost(self) -> Cost:
        """Sum of all outstanding debits."""
        total = Cost()
        for debit in self._debits:
            total = total + debit.cost
        return total

    @property
    def available(self) -> Cost:
        """
        Authoritative values minus outstanding debits.

        The supply component is free supply (cap - used - pending).
        Components may be negative when commits overran the budget.
        """
        pending = self.pending_cost
        return Cost(
            minerals=self._minerals - pending.minerals,
            vespene=self._vespene - pending.vespene,
            supply=self._supply_cap - self._supply_used - pending.supply,
        )

    def pending_unit_counts(self) -> Counter:
        """
        Unit types committed since the last reconcile.

        Orders from earlier steps already show up in the snapshot's
        order queues, so only this step's commits are counted here.
        """
        counts: Counter = Counter()
        for debit in self._debits:
            if debit.unit_type is not None and debit.issued_cycle == self._cycle:
                counts[debit.unit_type] += 1
        return counts

    # ---- operations ----

    def can_afford(self, cost: Any, reserve_supply: bool = True) -> bool:
        """
        Check whether a cost fits into the available resources.

        cost may be a Cost, a UnitTypeId, or a raw type id. Returns
        False for unknown types, negative or malformed costs.
        """
        resolved = self._resolve_cost(cost)
        if resolved is None or not resolved.is_valid:
            return False

        available = self.available
        if resolved.minerals > available.minerals:
            return False
        if resolved.vespene > available.vespene:
            return False
        if reserve_supply and resolved.supply > 0 and resolved.supply > available.supply:
            return False
        return True

    def commit(self, cost: Any, unit_type: UnitTypeId | int | None = None) -> SpeculativeDebit | None:
        """
        Record a speculative debit for an order just issued.

        When cost is a unit type, its catalog cost is used and the
        type is remembered for in-flight counting. Returns None (and
        records nothing) for malformed costs.
        """
        resolved = self._resolve_cost(cost)
        if resolved is None or not resolved.is_valid:
            logger.warning("Ignoring commit of malformed cost %r", cost)
            return None

        if unit_type is None and not isinstance(cost, Cost):
            unit_type = cost
        if unit_type is not None:
            unit_type = lookup_type(unit_type)

        debit = SpeculativeDebit(
            debit_id=next(self._ids),
            cost=resolved,
            issued_step=self._step,
            issued_cycle=self._cycle,
            expires_cycle=self._cycle + self.horizon,
            unit_type=unit_type,
        )
        self._debits.append(debit)
        logger.debug("Committed debit %d (%s) at step %d", debit.debit_id, resolved, self._step)
        return debit

    def cancel(self, debit: SpeculativeDebit) -> bool:
        """Drop a debit the agent knows has failed. Returns False if not outstanding."""
        for index, outstanding in enumerate(self._debits):
            if outstanding.debit_id == debit.debit_id:
                del self._debits[index]
                return True
        return False

    def reconcile(self, snapshot: RawSnapshot) -> ReconcileReport:
        """
        Replace authoritative values and settle outstanding debits.

        Called once per step before agent logic runs. Debits are settled
        oldest first; each confirmed debit consumes the part of this
        step's observed spending that covers it.
        """
        player = snapshot.player
        previous = (self._minerals, self._vespene, self._supply_used)
        mined = self._observe_income(snapshot)

        self._minerals = player.minerals
        self._vespene = player.vespene
        self._supply_used = player.food_used
        self._supply_cap = player.food_cap
        self._step = snapshot.step
        self._cycle += 1

        report = ReconcileReport(step=snapshot.step)

        if not self._initialized:
            # No previous values to measure movement against
            self._initialized = True
            spent = Cost()
        else:
            spent = Cost(
                minerals=max(0, previous[0] + mined[0] - self._minerals),
                vespene=max(0, previous[1] + mined[1] - self._vespene),
                supply=max(0, self._supply_used - previous[2]),
            )

        remaining: list[SpeculativeDebit] = []
        for debit in self._debits:
            if self._covers(spent, debit.cost) or self._supply_confirms(spent, debit.cost):
                spent = self._consume(spent, debit.cost)
                report.confirmed.append(debit)
            elif self._cycle > debit.expires_cycle:
                report.expired.append(debit)
            else:
                remaining.append(debit)
        self._debits = remaining

        for debit in report.confirmed:
            logger.debug("Debit %d confirmed at step %d", debit.debit_id, snapshot.step)
        for debit in report.expired:
            logger.debug(
                "Debit %d (%s) unconfirmed after %d steps, assuming the order failed",
                debit.debit_id, debit.cost, self.horizon,
            )
        return report

    def _observe_income(self, snapshot: RawSnapshot) -> tuple[int, int]:
        """
        Minerals and vespene mined since the last reconcile.

        Collected totals only grow; a missing or lower score counts as
        no income and keeps the previous totals.
        """
        score = snapshot.score
        now = (score.collected_minerals, score.collected_vespene)
        before = self._collected
        self._collected = (max(before[0], now[0]), max(before[1], now[1]))
        if not self._initialized:
            return (0, 0)
        return (max(0, now[0] - before[0]), max(0, now[1] - before[1]))

    @staticmethod
    def _covers(spent: Cost, cost: Cost) -> bool:
        return (
            spent.minerals >= cost.minerals
            and spent.vespene >= cost.vespene
            and spent.supply >= cost.supply
        )

    @staticmethod
    def _supply_confirms(spent: Cost, cost: Cost) -> bool:
        # Units take their supply the step the engine accepts the order
        return cost.supply > 0 and spent.supply >= cost.supply

    @staticmethod
    def _consume(spent: Cost, cost: Cost) -> Cost:
        return Cost(
            minerals=max(0, spent.minerals - cost.minerals),
            vespene=max(0, spent.vespene - cost.vespene),
            supply=max(0, spent.supply - cost.supply),
        )

    @staticmethod
    def _resolve_cost(cost: Any) -> Cost | None:
        if isinstance(cost, Cost):
            return cost
        if isinstance(cost, bool) or not isinstance(cost, int):
            return None
        return cost_of(cost)
