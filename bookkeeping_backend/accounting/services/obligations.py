# accounting/services/obligations.py

"""
======================================================
PATH: accounting/services/obligations.py
======================================================
OBLIGATION ENGINE (receivables + payables)

Executes obligation lifecycles through the posting protocol. Receivables and
payables are mirror images; an ObligationSide tells the engine which model,
which counterparty field and which cash direction it is working with.

Balance rules (counterparty = customer for receivables, vendor for payables):
- open        : counterparty += amount
- settle      : counterparty -= payment + discount - surcharge; account +/- payment
- distribute  : same, summed over every touched obligation (+ advance)
- revise      : counterparty += new_remaining - old_remaining
                (moved counterparty: old -= old_remaining, new += new_remaining)
- resync      : like revise, paid_amount capped at the new amount
- remove      : counterparty -= remaining, no transaction (corrective reversal)

Every public function here runs inside ledger_unit(); callers may nest.
Input is parsed and validated by the calling service, before the unit starts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import Sum

from accounting.money import STATUS_PAID, ZERO, q2
from accounting.services.exceptions import (
    ConflictError,
    LedgerValidationError,
    from_django_validation,
)
from accounting.services.posting import (
    apply_delta,
    ledger_unit,
    lock_account,
    lock_row,
    record_transaction,
    require_funds,
)
from accounting.services.settlement import (
    OpenItem,
    SettlementPlan,
    plan_distribution,
    plan_single_settlement,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObligationSide:
    model: type
    party_field: str
    transaction_type: str
    category: str
    reference_model: str
    noun: str
    description_prefix: str
    outgoing: bool = False
    advance_category: str = ""

    @property
    def party_model(self):
        return self.model._meta.get_field(self.party_field).related_model

    def party_id(self, obligation):
        return getattr(obligation, f"{self.party_field}_id")

    def party_lock_key(self, party_id) -> str:
        return f"{self.party_field}:{party_id}"

    def obligation_lock_key(self, obligation_id) -> str:
        return f"{self.noun}:{obligation_id}"

    def open_queryset(self, party_id):
        return (
            self.model.objects.filter(**{f"{self.party_field}_id": party_id})
            .exclude(status=STATUS_PAID)
            .order_by("due_date", "created_at", "id")
        )


def _save(obligation, **kwargs) -> None:
    try:
        obligation.save(**kwargs)
    except ValidationError as exc:
        raise from_django_validation(exc) from exc


def total_due(side: ObligationSide, party_id) -> Decimal:
    agg = side.open_queryset(party_id).aggregate(
        amount=Sum("amount"), paid=Sum("paid_amount")
    )
    return max(ZERO, q2(agg["amount"]) - q2(agg["paid"]))


def serialize_obligation(side: ObligationSide, obligation) -> dict:
    return {
        "id": obligation.pk,
        f"{side.party_field}_id": side.party_id(obligation),
        "business": obligation.business,
        "date": str(obligation.date),
        "due_date": str(obligation.due_date),
        "amount": str(q2(obligation.amount)),
        "paid_amount": str(q2(obligation.paid_amount)),
        "remaining": str(obligation.remaining),
        "status": obligation.status,
        "description": obligation.description,
    }


# ============================================================
# OPEN / REMOVE
# ============================================================


def open_obligation(
    side: ObligationSide,
    *,
    party,
    amount: Decimal,
    due_date,
    date,
    business: str,
    description: str = "",
):
    with ledger_unit(f"open_{side.noun}", lock_keys=[side.party_lock_key(party.pk)]):
        obligation = side.model(
            **{side.party_field: party},
            business=business,
            date=date,
            due_date=due_date,
            amount=q2(amount),
            paid_amount=ZERO,
            description=description or "",
        )
        obligation.refresh_status()
        _save(obligation)

        apply_delta(side.party_model, party.pk, obligation.amount)

    logger.info(
        "Obligation opened",
        extra={
            "kind": side.noun,
            "obligation_id": obligation.pk,
            "party_id": party.pk,
            "amount": str(obligation.amount),
        },
    )
    return obligation


def remove_obligation(side: ObligationSide, obligation) -> Decimal:
    """Delete and reverse the counterparty by the then-current remaining."""
    party_id = side.party_id(obligation)
    obligation_id = obligation.pk

    with ledger_unit(f"remove_{side.noun}", lock_keys=[side.party_lock_key(party_id)]):
        locked = lock_row(side.model, obligation_id)
        outstanding = locked.remaining

        apply_delta(side.party_model, party_id, -outstanding)
        locked.delete()

    logger.info(
        "Obligation removed",
        extra={
            "kind": side.noun,
            "obligation_id": obligation_id,
            "party_id": party_id,
            "reversed": str(outstanding),
        },
    )
    return outstanding


# ============================================================
# RE-SYNC / REVISE
# ============================================================


def _move_outstanding(side, *, old_party_id, new_party_id, old_remaining, new_remaining):
    if old_party_id == new_party_id:
        apply_delta(side.party_model, new_party_id, new_remaining - old_remaining)
        return

    apply_delta(side.party_model, old_party_id, -old_remaining)
    apply_delta(side.party_model, new_party_id, new_remaining)


def resync_obligation(side: ObligationSide, obligation, *, amount, party=None, **fields):
    """
    Re-point an obligation at a new amount (and optionally a new counterparty).

    paid_amount is preserved, capped at the new amount. Balances move by the
    delta between old and new remaining, never by re-adding the full amount.
    """
    new_party_id = party.pk if party is not None else side.party_id(obligation)
    lock_keys = {side.party_lock_key(side.party_id(obligation)), side.party_lock_key(new_party_id)}

    with ledger_unit(f"resync_{side.noun}", lock_keys=lock_keys):
        locked = lock_row(side.model, obligation.pk)
        old_party_id = side.party_id(locked)
        old_remaining = locked.remaining

        new_amount = q2(amount)
        new_paid = min(q2(locked.paid_amount), new_amount)
        if new_paid < q2(locked.paid_amount):
            logger.warning(
                "Paid amount capped while re-syncing obligation",
                extra={
                    "kind": side.noun,
                    "obligation_id": locked.pk,
                    "paid_amount": str(locked.paid_amount),
                    "new_amount": str(new_amount),
                },
            )

        locked.amount = new_amount
        locked.paid_amount = new_paid
        if party is not None:
            setattr(locked, side.party_field, party)
        for name, value in fields.items():
            setattr(locked, name, value)
        locked.refresh_status()
        _save(locked)

        _move_outstanding(
            side,
            old_party_id=old_party_id,
            new_party_id=new_party_id,
            old_remaining=old_remaining,
            new_remaining=locked.remaining,
        )

    return locked


def revise_obligation(
    side: ObligationSide,
    *,
    obligation_id,
    amount: Decimal | None = None,
    party=None,
    payment: Decimal = ZERO,
    account_id=None,
    date=None,
    note: str = "",
    **fields,
):
    """
    Edit an obligation, optionally recording a payment in the same unit.

    Reducing the amount below what was already paid is rejected.
    """
    payment = q2(payment)
    if payment > ZERO and not account_id:
        raise LedgerValidationError("Settlement account is required when a payment is recorded")

    with ledger_unit(
        f"revise_{side.noun}", lock_keys=[side.obligation_lock_key(obligation_id)]
    ):
        locked = lock_row(side.model, obligation_id)
        old_party_id = side.party_id(locked)
        old_remaining = locked.remaining
        new_party_id = party.pk if party is not None else old_party_id

        new_amount = q2(amount) if amount is not None else q2(locked.amount)
        if new_amount < q2(locked.paid_amount):
            raise ConflictError(
                f"Amount cannot be reduced below the amount already paid ({q2(locked.paid_amount):.2f})"
            )

        new_paid = q2(locked.paid_amount) + payment
        if new_paid > new_amount:
            raise ConflictError(f"Payment amount cannot exceed remaining {side.noun}")

        account = None
        if payment > ZERO:
            account = lock_account(account_id)
            if side.outgoing:
                require_funds(account, payment, message="Insufficient account balance for this payment")

        locked.amount = new_amount
        locked.paid_amount = new_paid
        if party is not None:
            setattr(locked, side.party_field, party)
        for name, value in fields.items():
            setattr(locked, name, value)
        locked.refresh_status()
        _save(locked)

        _move_outstanding(
            side,
            old_party_id=old_party_id,
            new_party_id=new_party_id,
            old_remaining=old_remaining,
            new_remaining=locked.remaining,
        )

        if account is not None:
            record_transaction(
                account=account,
                type=side.transaction_type,
                amount=payment,
                category=side.category,
                business=locked.business,
                date=date or locked.date,
                description=note or f"{side.description_prefix} against {side.noun} #{locked.pk}",
                reference_model=side.reference_model,
                reference_id=locked.pk,
                **{side.party_field: getattr(locked, side.party_field)},
            )

    return locked


# ============================================================
# SETTLEMENT
# ============================================================


def _apply_allocation(locked, allocation) -> None:
    locked.amount = allocation.amount_after
    locked.paid_amount = allocation.paid_after
    locked.refresh_status()
    _save(locked, update_fields=["amount", "paid_amount", "status", "updated_at"])


def settle_obligation(
    side: ObligationSide,
    *,
    obligation_id,
    payment: Decimal,
    discount: Decimal = ZERO,
    surcharge: Decimal = ZERO,
    account_id,
    date,
    note: str = "",
) -> tuple[object, SettlementPlan]:
    with ledger_unit(
        f"settle_{side.noun}", lock_keys=[side.obligation_lock_key(obligation_id)]
    ):
        locked = lock_row(side.model, obligation_id)
        account = lock_account(account_id)

        plan = plan_single_settlement(
            OpenItem.from_obligation(locked),
            payment=payment,
            discount=discount,
            surcharge=surcharge,
            noun=side.noun,
        )

        if side.outgoing:
            require_funds(account, plan.payment, message="Insufficient account balance for this payment")

        _apply_allocation(locked, plan.allocations[0])

        record_transaction(
            account=account,
            type=side.transaction_type,
            amount=plan.payment,
            category=side.category,
            business=locked.business,
            date=date,
            description=note or f"{side.description_prefix} against {side.noun} #{locked.pk}",
            reference_model=side.reference_model,
            reference_id=locked.pk,
            **{side.party_field: getattr(locked, side.party_field)},
        )

        apply_delta(side.party_model, side.party_id(locked), -plan.balance_reduction)

    logger.info(
        "Obligation settled",
        extra={
            "kind": side.noun,
            "obligation_id": locked.pk,
            "payment": str(plan.payment),
            "discount": str(plan.discount),
            "surcharge": str(plan.surcharge),
            "remaining": str(locked.remaining),
        },
    )
    return locked, plan


def distribute_payment(
    side: ObligationSide,
    *,
    party_id,
    account_id,
    payment: Decimal,
    discount: Decimal = ZERO,
    surcharge: Decimal = ZERO,
    allow_advance: bool,
    date,
    note: str = "",
    business: str | None = None,
    funds_message: str = "Insufficient account balance for this payment",
) -> tuple[object, SettlementPlan]:
    """Spread one payment over the counterparty's open obligations, oldest due first."""
    with ledger_unit(
        f"distribute_{side.noun}_payment", lock_keys=[side.party_lock_key(party_id)]
    ):
        party = lock_row(side.party_model, party_id)
        account = lock_account(account_id)

        if side.outgoing:
            require_funds(account, payment, message=funds_message)

        open_rows = {o.pk: o for o in side.open_queryset(party.pk).select_for_update()}

        plan = plan_distribution(
            [OpenItem.from_obligation(o) for o in open_rows.values()],
            payment=payment,
            discount=discount,
            surcharge=surcharge,
            allow_advance=allow_advance,
            noun=side.noun,
        )

        if plan.advance > ZERO and not business:
            raise LedgerValidationError("Business is required to record an advance payment")

        for allocation in plan.allocations:
            locked = open_rows[allocation.key]
            _apply_allocation(locked, allocation)

            if allocation.applied > ZERO:
                record_transaction(
                    account=account,
                    type=side.transaction_type,
                    amount=allocation.applied,
                    category=side.category,
                    business=locked.business,
                    date=date,
                    description=(
                        f"{note} ({side.noun} #{locked.pk})"
                        if note
                        else f"{side.description_prefix} against {side.noun} #{locked.pk}"
                    ),
                    reference_model=side.reference_model,
                    reference_id=locked.pk,
                    **{side.party_field: party},
                )

        if plan.advance > ZERO:
            record_transaction(
                account=account,
                type=side.transaction_type,
                amount=plan.advance,
                category=side.advance_category,
                business=business,
                date=date,
                description=note or f"Advance from {party}",
                **{side.party_field: party},
            )

        apply_delta(side.party_model, party.pk, -plan.balance_reduction)

    logger.info(
        "Payment distributed",
        extra={
            "kind": side.noun,
            "party_id": party_id,
            "payment": str(plan.payment),
            "settled": str(plan.applied_total),
            "advance": str(plan.advance),
            "touched": len(plan.allocations),
        },
    )
    return party, plan
