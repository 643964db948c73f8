# accounting/services/cashbook_service.py

"""
======================================================
PATH: accounting/services/cashbook_service.py
======================================================
CASHBOOK SERVICE

Accounts and manual (non-settlement) cash entries.

- create_account      : opening balance is written once, at creation
- update_account      : master data only; balance is never accepted
- record_income       : account += amount
- record_expense      : account -= amount (may go negative)
- delete_manual_entry : reverse the account, then delete the entry

Settlement entries (receivable / payable / salary) are refused by
delete_manual_entry; their parent documents own them.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.money import (
    parse_date,
    parse_money,
    q2,
    require_business,
    require_text,
)
from accounting.services.exceptions import (
    ConflictError,
    LedgerValidationError,
    from_django_validation,
)
from accounting.services.posting import (
    apply_delta,
    get_or_not_found,
    ledger_unit,
    lock_account,
    lock_row,
    record_transaction,
)
from vendors.models import Vendor

logger = logging.getLogger(__name__)

ACCOUNT_TYPES = {code for code, _ in Account.ACCOUNT_TYPES}


def serialize_account(account: Account) -> dict:
    return {
        "id": account.pk,
        "name": account.name,
        "account_type": account.account_type,
        "balance": str(q2(account.balance)),
        "bank_name": account.bank_name,
        "account_number": account.account_number,
        "is_active": account.is_active,
    }


def serialize_transaction(txn: Transaction) -> dict:
    return {
        "id": txn.pk,
        "date": str(txn.date),
        "type": txn.type,
        "amount": str(q2(txn.amount)),
        "category": txn.category,
        "business": txn.business,
        "account_id": txn.account_id,
        "customer_id": txn.customer_id,
        "vendor_id": txn.vendor_id,
        "reference_model": txn.reference_model,
        "reference_id": txn.reference_id,
        "description": txn.description,
    }


def _account_type(value) -> str:
    kind = (value or Account.CASH).strip().lower()
    if kind not in ACCOUNT_TYPES:
        raise LedgerValidationError(
            f"Account type must be one of: {', '.join(sorted(ACCOUNT_TYPES))}"
        )
    return kind


# ============================================================
# ACCOUNTS
# ============================================================


@transaction.atomic
def create_account(
    *,
    name,
    account_type=Account.CASH,
    opening_balance=None,
    bank_name: str = "",
    account_number: str = "",
) -> dict:
    account = Account(
        name=require_text(name, field="name"),
        account_type=_account_type(account_type),
        balance=parse_money(opening_balance, field="opening_balance"),
        bank_name=(bank_name or "").strip(),
        account_number=(account_number or "").strip(),
    )
    try:
        account.save()
    except ValidationError as exc:
        raise from_django_validation(exc) from exc

    logger.info(
        "Account created",
        extra={"account_id": account.pk, "opening_balance": str(account.balance)},
    )
    return serialize_account(account)


@transaction.atomic
def update_account(*, account_id, **changes) -> dict:
    account = get_or_not_found(
        Account, account_id, queryset=Account.objects.select_for_update()
    )

    if changes.get("name") is not None:
        account.name = require_text(changes["name"], field="name")
    if changes.get("account_type") is not None:
        account.account_type = _account_type(changes["account_type"])
    for field in ("bank_name", "account_number"):
        if changes.get(field) is not None:
            setattr(account, field, str(changes[field]).strip())
    if changes.get("is_active") is not None:
        account.is_active = bool(changes["is_active"])

    try:
        account.save(
            update_fields=[
                "name", "account_type", "bank_name", "account_number", "is_active", "updated_at",
            ]
        )
    except ValidationError as exc:
        raise from_django_validation(exc) from exc

    return serialize_account(account)


# ============================================================
# MANUAL ENTRIES
# ============================================================


def _record_manual(*, txn_type, account_id, amount, category, business, date, description, vendor_id=None):
    amt = parse_money(amount, positive=True)
    category = require_text(category, field="category")
    business = require_business(business)
    entry_date = parse_date(date)
    vendor = get_or_not_found(Vendor, vendor_id) if vendor_id not in (None, "") else None

    with ledger_unit(f"record_{txn_type}", lock_keys=[f"account:{account_id}"]):
        account = lock_account(account_id)
        txn = record_transaction(
            account=account,
            type=txn_type,
            amount=amt,
            category=category,
            business=business,
            date=entry_date,
            description=description,
            vendor=vendor,
        )

    return serialize_transaction(txn)


def record_income(*, account_id, amount, category, business, date=None, description: str = "") -> dict:
    return _record_manual(
        txn_type=Transaction.INCOME,
        account_id=account_id,
        amount=amount,
        category=category,
        business=business,
        date=date,
        description=description,
    )


def record_expense(
    *, account_id, amount, category, business, date=None, description: str = "", vendor_id=None
) -> dict:
    return _record_manual(
        txn_type=Transaction.EXPENSE,
        account_id=account_id,
        amount=amount,
        category=category,
        business=business,
        date=date,
        description=description,
        vendor_id=vendor_id,
    )


def delete_manual_entry(*, transaction_id) -> dict:
    with ledger_unit("delete_manual_entry", lock_keys=[f"transaction:{transaction_id}"]):
        txn = lock_row(Transaction, transaction_id)
        if txn.is_settlement:
            raise ConflictError(
                "Settlement transactions cannot be deleted; they belong to their document"
            )

        lock_account(txn.account_id, active_only=False)
        apply_delta(Account, txn.account_id, -txn.signed_amount)

        try:
            txn.delete()
        except ValidationError as exc:
            raise from_django_validation(exc) from exc

    logger.info(
        "Manual entry deleted",
        extra={
            "transaction_id": transaction_id,
            "account_id": txn.account_id,
            "reversed": str(-txn.signed_amount),
        },
    )
    return {"transaction_id": transaction_id, "reversed_amount": str(q2(txn.amount))}
