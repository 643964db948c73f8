# accounting/services/settlement.py

"""
======================================================
PATH: accounting/services/settlement.py
======================================================
SETTLEMENT ALLOCATOR

Pure planner: decides how a payment (plus optional discount / surcharge)
lands on a debtor's open obligations. No database access, no side effects.
The obligation services execute the plan inside a posting unit.

Two call sites:

1) plan_single_settlement   "collect against receivable X"
   - surcharge and discount adjust X's amount
   - payment may not exceed X's remaining (no advance)

2) plan_distribution        "customer paid, settle oldest first"
   - obligations walked by due date, then creation order, then id
   - discount reduces amounts oldest-first, before the payment walk
   - surcharge is not spread: it lands whole on the first open obligation
   - leftover payment is an advance (or rejected when advances are off)

Guarantees (checked on every plan):
- sum(applied) + advance == payment
- balance_reduction == payment + discount - surcharge
- no obligation ends with paid > amount or amount < 0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable

from accounting.money import ZERO, derive_status, q2
from accounting.services.exceptions import (
    ConflictError,
    ConsistencyError,
    LedgerValidationError,
)


# ============================================================
# VALUE TYPES
# ============================================================


@dataclass(frozen=True)
class OpenItem:
    """Snapshot of one obligation, as seen before the unit starts writing."""

    key: Any
    amount: Decimal
    paid_amount: Decimal
    due_date: date | None = None
    created_at: datetime | date | None = None

    @property
    def remaining(self) -> Decimal:
        return max(ZERO, q2(self.amount) - q2(self.paid_amount))

    @property
    def sort_date(self) -> date:
        if self.due_date is not None:
            return self.due_date
        if isinstance(self.created_at, datetime):
            return self.created_at.date()
        if isinstance(self.created_at, date):
            return self.created_at
        return date.max

    @classmethod
    def from_obligation(cls, obligation) -> "OpenItem":
        return cls(
            key=obligation.pk,
            amount=q2(obligation.amount),
            paid_amount=q2(obligation.paid_amount),
            due_date=obligation.due_date,
            created_at=obligation.created_at,
        )


@dataclass(frozen=True)
class Allocation:
    key: Any
    applied: Decimal
    discount: Decimal
    surcharge: Decimal
    amount_before: Decimal
    paid_before: Decimal

    @property
    def amount_after(self) -> Decimal:
        return self.amount_before + self.surcharge - self.discount

    @property
    def paid_after(self) -> Decimal:
        return self.paid_before + self.applied

    @property
    def remaining_after(self) -> Decimal:
        return max(ZERO, self.amount_after - self.paid_after)

    @property
    def status_after(self) -> str:
        return derive_status(self.amount_after, self.paid_after)

    @property
    def balance_reduction(self) -> Decimal:
        return self.applied + self.discount - self.surcharge


@dataclass(frozen=True)
class SettlementPlan:
    payment: Decimal
    discount: Decimal
    surcharge: Decimal
    allocations: tuple[Allocation, ...] = field(default_factory=tuple)
    advance: Decimal = ZERO

    @property
    def applied_total(self) -> Decimal:
        return sum((a.applied for a in self.allocations), ZERO)

    @property
    def balance_reduction(self) -> Decimal:
        return self.payment + self.discount - self.surcharge

    def check_conservation(self) -> None:
        if self.applied_total + self.advance != self.payment:
            raise ConsistencyError(
                f"Settlement plan does not conserve payment: "
                f"{self.applied_total} + {self.advance} != {self.payment}"
            )

        per_item = sum((a.balance_reduction for a in self.allocations), ZERO)
        if per_item + self.advance != self.balance_reduction:
            raise ConsistencyError(
                "Settlement plan does not conserve the balance reduction"
            )

        for a in self.allocations:
            if a.amount_after < ZERO or a.paid_after > a.amount_after:
                raise ConsistencyError(
                    f"Settlement plan overdraws obligation {a.key}"
                )


# ============================================================
# INPUT GUARDS
# ============================================================


def _amounts(payment, discount, surcharge) -> tuple[Decimal, Decimal, Decimal]:
    payment = q2(payment)
    discount = q2(discount)
    surcharge = q2(surcharge)

    if payment <= ZERO:
        raise LedgerValidationError("Amount must be greater than 0")
    if discount < ZERO:
        raise LedgerValidationError("Discount cannot be negative")
    if surcharge < ZERO:
        raise LedgerValidationError("Surcharge cannot be negative")

    return payment, discount, surcharge


def order_open_items(items: Iterable[OpenItem]) -> list[OpenItem]:
    """Oldest due first; ties by creation time, then key. Closed items dropped."""
    open_items = [i for i in items if i.remaining > ZERO]

    def _created_key(item: OpenItem):
        c = item.created_at
        if isinstance(c, datetime):
            return (c.date(), c.time())
        if isinstance(c, date):
            return (c, datetime.min.time())
        return (date.max, datetime.min.time())

    return sorted(
        open_items,
        key=lambda i: (i.sort_date, _created_key(i), str(i.key)),
    )


# ============================================================
# SINGLE TARGET
# ============================================================


def plan_single_settlement(
    item: OpenItem,
    *,
    payment,
    discount=ZERO,
    surcharge=ZERO,
    noun: str = "receivable",
) -> SettlementPlan:
    payment, discount, surcharge = _amounts(payment, discount, surcharge)

    amount = q2(item.amount)
    paid = q2(item.paid_amount)
    if amount - paid <= ZERO:
        raise ConflictError(f"This {noun} is already fully paid")

    adjusted = amount + surcharge - discount
    if adjusted < ZERO:
        raise ConflictError(f"Discount cannot make {noun} total negative")

    if adjusted < paid:
        raise ConflictError(
            f"Discount cannot reduce the {noun} total below the amount already paid"
        )

    # a discount may close the document; any payment on top is then too much
    current_remaining = adjusted - paid
    if payment > current_remaining:
        raise ConflictError("Payment amount cannot exceed remaining due")

    plan = SettlementPlan(
        payment=payment,
        discount=discount,
        surcharge=surcharge,
        allocations=(
            Allocation(
                key=item.key,
                applied=payment,
                discount=discount,
                surcharge=surcharge,
                amount_before=amount,
                paid_before=paid,
            ),
        ),
        advance=ZERO,
    )
    plan.check_conservation()
    return plan


# ============================================================
# DISTRIBUTION (FIFO BY DUE DATE)
# ============================================================


def plan_distribution(
    items: Iterable[OpenItem],
    *,
    payment,
    discount=ZERO,
    surcharge=ZERO,
    allow_advance: bool = True,
    noun: str = "receivable",
) -> SettlementPlan:
    payment, discount, surcharge = _amounts(payment, discount, surcharge)
    ordered = order_open_items(items)

    if not ordered and not allow_advance:
        raise ConflictError(f"No due {noun} entries found")

    if surcharge > ZERO and not ordered:
        raise ConflictError(f"A surcharge needs an open {noun} to be charged to")

    # working state per item: [amount, paid, applied, discount, surcharge]
    work = {
        i.key: [q2(i.amount), q2(i.paid_amount), ZERO, ZERO, ZERO] for i in ordered
    }

    if surcharge > ZERO:
        first = work[ordered[0].key]
        first[0] += surcharge
        first[4] = surcharge

    discount_left = discount
    for item in ordered:
        if discount_left <= ZERO:
            break
        w = work[item.key]
        take = min(max(ZERO, w[0] - w[1]), discount_left)
        w[0] -= take
        w[3] = take
        discount_left -= take

    if discount_left > ZERO:
        raise ConflictError("Discount cannot exceed the total due")

    total_due = sum((max(ZERO, w[0] - w[1]) for w in work.values()), ZERO)
    if not allow_advance and payment > total_due:
        raise ConflictError(f"Payment exceeds total due ({total_due:.2f})")

    payment_left = payment
    for item in ordered:
        if payment_left <= ZERO:
            break
        w = work[item.key]
        due = max(ZERO, w[0] - w[1])
        if due <= ZERO:
            continue
        applied = min(due, payment_left)
        w[2] = applied
        payment_left -= applied

    allocations = tuple(
        Allocation(
            key=item.key,
            applied=work[item.key][2],
            discount=work[item.key][3],
            surcharge=work[item.key][4],
            amount_before=q2(item.amount),
            paid_before=q2(item.paid_amount),
        )
        for item in ordered
        if work[item.key][2] > ZERO
        or work[item.key][3] > ZERO
        or work[item.key][4] > ZERO
    )

    plan = SettlementPlan(
        payment=payment,
        discount=discount,
        surcharge=surcharge,
        allocations=allocations,
        advance=payment_left,
    )
    plan.check_conservation()
    return plan
