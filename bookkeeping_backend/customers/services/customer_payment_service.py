# customers/services/customer_payment_service.py

"""
======================================================
PATH: customers/services/customer_payment_service.py
======================================================
CUSTOMER PAYMENT (FIFO DISTRIBUTION)

A customer hands over one amount; it settles their open receivables oldest
due date first. Whatever is left becomes an advance:
- recorded as a "Customer Advance" income transaction with no reference
- pushes the customer balance below zero (credit)

Accounting effect (one atomic unit):
- account  += amount
- customer -= amount + discount - surcharge
- one "Receivable Collection" transaction per receivable that got cash
"""

from __future__ import annotations

import logging

from accounting.money import parse_date, parse_money, require_business
from accounting.services.obligations import distribute_payment, total_due
from customers.services.receivable_service import RECEIVABLES

logger = logging.getLogger(__name__)


def record_customer_payment(
    *,
    customer_id,
    account_id,
    amount,
    discount=None,
    surcharge=None,
    date=None,
    note: str = "",
    business=None,
) -> dict:
    payment = parse_money(amount, positive=True)
    disc = parse_money(discount, field="discount")
    extra = parse_money(surcharge, field="surcharge")
    pay_date = parse_date(date)
    business = require_business(business) if business else None

    logger.info(
        "Recording customer payment",
        extra={
            "customer_id": customer_id,
            "account_id": account_id,
            "amount": str(payment),
            "discount": str(disc),
            "surcharge": str(extra),
        },
    )

    customer, plan = distribute_payment(
        RECEIVABLES,
        party_id=customer_id,
        account_id=account_id,
        payment=payment,
        discount=disc,
        surcharge=extra,
        allow_advance=True,
        date=pay_date,
        note=note,
        business=business,
    )

    return {
        "customer_id": customer.pk,
        "amount": str(plan.payment),
        "settled_amount": str(plan.applied_total),
        "advance_amount": str(plan.advance),
        "discount_amount": str(plan.discount),
        "surcharge_amount": str(plan.surcharge),
        "total_due_after": str(total_due(RECEIVABLES, customer.pk)),
        "allocations": [
            {
                "receivable_id": a.key,
                "applied": str(a.applied),
                "discount": str(a.discount),
                "surcharge": str(a.surcharge),
                "remaining": str(a.remaining_after),
                "status": a.status_after,
            }
            for a in plan.allocations
        ],
    }
