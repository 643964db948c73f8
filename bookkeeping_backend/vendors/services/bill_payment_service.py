# vendors/services/bill_payment_service.py

"""
======================================================
PATH: vendors/services/bill_payment_service.py
======================================================
VENDOR BILL PAYMENT (FIFO)

Pays a vendor's open payables oldest due date first from one account.

Rules:
- the account must hold at least the payment amount
- the vendor must have something due
- the payment may not exceed the total due (no vendor advances)

Accounting effect (one atomic unit):
- account -= amount
- vendor  -= amount
- one "Payable Settlement" expense per payable touched
"""

from __future__ import annotations

import logging

from accounting.money import parse_date, parse_money
from accounting.services.obligations import distribute_payment, total_due
from vendors.services.payable_service import PAYABLES

logger = logging.getLogger(__name__)


def pay_vendor_bill(*, vendor_id, account_id, amount, date=None, note: str = "") -> dict:
    payment = parse_money(amount, positive=True)
    pay_date = parse_date(date)

    logger.info(
        "Initiating vendor bill payment",
        extra={"vendor_id": vendor_id, "account_id": account_id, "amount": str(payment)},
    )

    vendor, plan = distribute_payment(
        PAYABLES,
        party_id=vendor_id,
        account_id=account_id,
        payment=payment,
        allow_advance=False,
        date=pay_date,
        note=note,
    )

    return {
        "vendor_id": vendor.pk,
        "applied_amount": str(plan.applied_total),
        "total_due_after": str(total_due(PAYABLES, vendor.pk)),
        "allocations": [
            {
                "payable_id": a.key,
                "applied": str(a.applied),
                "remaining": str(a.remaining_after),
                "status": a.status_after,
            }
            for a in plan.allocations
        ],
    }
