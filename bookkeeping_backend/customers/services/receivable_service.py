# customers/services/receivable_service.py

"""
======================================================
PATH: customers/services/receivable_service.py
======================================================
RECEIVABLE SERVICE

Operations:
- create_receivable   : open a receivable, customer balance += amount
- update_receivable   : edit (optionally move customer / record a payment)
- settle_receivable   : collect against ONE receivable (discount / surcharge)
- delete_receivable   : remove, customer balance -= remaining

Input is parsed at the top of each function; Validation and Conflict errors
are raised before the posting unit writes anything.
"""

from __future__ import annotations

import logging

from accounting.models.transaction import Transaction
from accounting.money import (
    ZERO,
    parse_date,
    parse_money,
    q2,
    require_business,
)
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
from customers.models import Customer, Receivable

logger = logging.getLogger(__name__)


RECEIVABLES = ObligationSide(
    model=Receivable,
    party_field="customer",
    transaction_type=Transaction.INCOME,
    category=Transaction.CATEGORY_RECEIVABLE_COLLECTION,
    reference_model=Transaction.REF_RECEIVABLE,
    noun="receivable",
    description_prefix="Collection",
    outgoing=False,
    advance_category=Transaction.CATEGORY_CUSTOMER_ADVANCE,
)


def _customer(customer_id) -> Customer:
    if customer_id in (None, ""):
        raise LedgerValidationError("Customer is required")
    return get_or_not_found(Customer, customer_id)


def create_receivable(
    *,
    customer_id,
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
    customer = _customer(customer_id)

    receivable = open_obligation(
        RECEIVABLES,
        party=customer,
        amount=amt,
        due_date=due,
        date=issue_date,
        business=business,
        description=description,
    )
    return serialize_obligation(RECEIVABLES, receivable)


def update_receivable(
    *,
    receivable_id,
    customer_id=None,
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

    new_amount = parse_money(amount, positive=True) if amount is not None else None
    payment = parse_money(payment_amount, field="payment_amount")
    customer = _customer(customer_id) if customer_id is not None else None

    receivable = revise_obligation(
        RECEIVABLES,
        obligation_id=receivable_id,
        amount=new_amount,
        party=customer,
        payment=payment,
        account_id=account_id,
        date=parse_date(payment_date) if payment > ZERO else None,
        note=note,
        **fields,
    )
    return serialize_obligation(RECEIVABLES, receivable)


def settle_receivable(
    *,
    receivable_id,
    amount,
    account_id,
    discount=None,
    surcharge=None,
    date=None,
    note: str = "",
) -> dict:
    """
    Collect against a single receivable.

    The customer balance drops by amount + discount - surcharge; the account
    grows by amount. Overpaying a single receivable is rejected, never
    turned into an advance.
    """
    payment = parse_money(amount, positive=True)
    disc = parse_money(discount, field="discount")
    extra = parse_money(surcharge, field="surcharge")
    pay_date = parse_date(date)

    receivable, plan = settle_obligation(
        RECEIVABLES,
        obligation_id=receivable_id,
        payment=payment,
        discount=disc,
        surcharge=extra,
        account_id=account_id,
        date=pay_date,
        note=note,
    )

    return {
        "receivable_id": receivable.pk,
        "applied_amount": str(plan.applied_total),
        "advance_amount": str(q2(plan.advance)),
        "discount_amount": str(plan.discount),
        "surcharge_amount": str(plan.surcharge),
        "remaining": str(receivable.remaining),
        "status": receivable.status,
    }


def delete_receivable(*, receivable_id) -> dict:
    receivable = get_or_not_found(Receivable, receivable_id)
    reversed_amount = remove_obligation(RECEIVABLES, receivable)
    return {
        "receivable_id": receivable_id,
        "reversed_amount": str(reversed_amount),
    }

