# vendors/services/payable_service.py

"""
======================================================
PATH: vendors/services/payable_service.py
======================================================
PAYABLE SERVICE (mirror of the receivable service)

- create_payable  : vendor balance += amount
- update_payable  : edit, move vendor, optionally pay (account must cover it)
- settle_payable  : pay against ONE bill (discount / surcharge)
- delete_payable  : vendor balance -= remaining
"""

from __future__ import annotations

from accounting.models.transaction import Transaction
from accounting.money import ZERO, parse_date, parse_money, require_business
from accounting.services.exceptions import LedgerValidationError
from accounting.services.obligations import (
    ObligationSide,
    open_obligation,
    remove_obligation,
    revise_obligation,
    serialize_obligation,
    settle_obligation,
)
from accounting.services.posting import get_or_not_found
from vendors.models import Payable, Vendor

PAYABLES = ObligationSide(
    model=Payable,
    party_field="vendor",
    transaction_type=Transaction.EXPENSE,
    category=Transaction.CATEGORY_PAYABLE_SETTLEMENT,
    reference_model=Transaction.REF_PAYABLE,
    noun="payable",
    description_prefix="Settlement",
    outgoing=True,
)


def _vendor(vendor_id) -> Vendor:
    if vendor_id in (None, ""):
        raise LedgerValidationError("Vendor is required")
    return get_or_not_found(Vendor, vendor_id)


def create_payable(
    *,
    vendor_id,
    amount,
    due_date,
    business,
    description: str = "",
    date=None,
) -> dict:
    amt = parse_money(amount, positive=True)
    issue_date = parse_date(date)
    due = parse_date(due_date, field="due_date", required=True)
    business = require_business(business)
    vendor = _vendor(vendor_id)

    payable = open_obligation(
        PAYABLES,
        party=vendor,
        amount=amt,
        due_date=due,
        date=issue_date,
        business=business,
        description=description,
    )
    return serialize_obligation(PAYABLES, payable)


def update_payable(
    *,
    payable_id,
    vendor_id=None,
    amount=None,
    due_date=None,
    date=None,
    business=None,
    description=None,
    payment_amount=None,
    account_id=None,
    payment_date=None,
    note: str = "",
) -> dict:
    fields = {}
    if due_date is not None:
        fields["due_date"] = parse_date(due_date, field="due_date", required=True)
    if date is not None:
        fields["date"] = parse_date(date)
    if business is not None:
        fields["business"] = require_business(business)
    if description is not None:
        fields["description"] = description

    payment = parse_money(payment_amount, field="payment_amount")

    payable = revise_obligation(
        PAYABLES,
        obligation_id=payable_id,
        amount=parse_money(amount, positive=True) if amount is not None else None,
        party=_vendor(vendor_id) if vendor_id is not None else None,
        payment=payment,
        account_id=account_id,
        date=parse_date(payment_date) if payment > ZERO else None,
        note=note,
        **fields,
    )
    return serialize_obligation(PAYABLES, payable)


def settle_payable(
    *,
    payable_id,
    amount,
    account_id,
    discount=None,
    surcharge=None,
    date=None,
    note: str = "",
) -> dict:
    payable, plan = settle_obligation(
        PAYABLES,
        obligation_id=payable_id,
        payment=parse_money(amount, positive=True),
        discount=parse_money(discount, field="discount"),
        surcharge=parse_money(surcharge, field="surcharge"),
        account_id=account_id,
        date=parse_date(date),
        note=note,
    )

    return {
        "payable_id": payable.pk,
        "applied_amount": str(plan.applied_total),
        "discount_amount": str(plan.discount),
        "surcharge_amount": str(plan.surcharge),
        "remaining": str(payable.remaining),
        "status": payable.status,
    }


def delete_payable(*, payable_id) -> dict:
    payable = get_or_not_found(Payable, payable_id)
    reversed_amount = remove_obligation(PAYABLES, payable)
    return {
        "payable_id": payable_id,
        "reversed_amount": str(reversed_amount),
    }
