# accounting/money.py

"""
======================================================
PATH: accounting/money.py
======================================================
MONEY & STATUS PRIMITIVES

Pure helpers shared by every ledger document.

Rules:
- Money is Decimal with two places (ROUND_HALF_UP), never float
- Monetary input must be finite and non-negative
- Payment status is derived, never typed in:
    paid <= 0        -> unpaid
    paid >= amount   -> paid
    otherwise        -> partial
- remaining = max(0, amount - paid)
"""

from __future__ import annotations

from datetime import date as date_type, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.utils import timezone

from accounting.services.exceptions import LedgerValidationError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

STATUS_UNPAID = "unpaid"
STATUS_PARTIAL = "partial"
STATUS_PAID = "paid"

PAYMENT_STATUSES = [
    (STATUS_UNPAID, "Unpaid"),
    (STATUS_PARTIAL, "Partial"),
    (STATUS_PAID, "Paid"),
]

BUSINESS_TRAVEL = "travel"
BUSINESS_ISP = "isp"

BUSINESSES = [
    (BUSINESS_TRAVEL, "Travel"),
    (BUSINESS_ISP, "ISP"),
]


# ============================================================
# MONEY
# ============================================================


def q2(v) -> Decimal:
    """Quantize an already-trusted value (database or internal arithmetic)."""
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def parse_money(value, *, field: str = "amount", positive: bool = False) -> Decimal:
    """
    Boundary parser for monetary input.

    Rejects non-numeric, non-finite and negative values. With positive=True,
    zero is rejected as well.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if positive:
            raise LedgerValidationError(f"{_label(field)} must be greater than 0")
        return ZERO

    if isinstance(value, bool):
        raise LedgerValidationError(f"{_label(field)} must be a number")

    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise LedgerValidationError(f"{_label(field)} must be a number") from exc

    if not amount.is_finite():
        raise LedgerValidationError(f"{_label(field)} must be a finite number")

    amount = amount.quantize(TWOPLACES, rounding=ROUND_HALF_UP)

    if amount < ZERO:
        raise LedgerValidationError(f"{_label(field)} cannot be negative")
    if positive and amount <= ZERO:
        raise LedgerValidationError(f"{_label(field)} must be greater than 0")

    return amount


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()


# ============================================================
# STATUS
# ============================================================


def remaining(amount, paid) -> Decimal:
    return max(ZERO, q2(amount) - q2(paid))


def derive_status(amount, paid) -> str:
    amount = q2(amount)
    paid = q2(paid)

    if paid <= ZERO:
        return STATUS_UNPAID
    if paid >= amount:
        return STATUS_PAID
    return STATUS_PARTIAL


# ============================================================
# BOUNDARY VALIDATION
# ============================================================


def require_business(value) -> str:
    business = (value or "").strip().lower() if isinstance(value, str) else value
    if business not in (BUSINESS_TRAVEL, BUSINESS_ISP):
        raise LedgerValidationError("Business must be travel or isp")
    return business


def parse_date(value, *, field: str = "date", required: bool = False) -> date_type | None:
    """
    Accepts date objects or ISO strings (YYYY-MM-DD).
    Missing optional dates default to today's local date.
    """
    if value is None or value == "":
        if required:
            raise LedgerValidationError(f"Valid {field.replace('_', ' ')} is required")
        return timezone.localdate()

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_type):
        return value

    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise LedgerValidationError(
            f"Valid {field.replace('_', ' ')} is required"
        ) from exc


def require_text(value, *, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise LedgerValidationError(f"{_label(field)} is required")
    return text
