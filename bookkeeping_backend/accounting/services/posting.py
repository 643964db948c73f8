# accounting/services/posting.py

"""
======================================================
PATH: accounting/services/posting.py
======================================================
BALANCE MUTATION PROTOCOL

The only way balance-bearing rows (Account, Customer, Vendor) change.

Contract:
- ledger_unit() wraps a multi-record mutation in ONE database transaction
- apply_delta() moves a balance with a single UPDATE ... SET f = f + delta
  (F() expression: concurrent increments never lose updates)
- record_transaction() appends the immutable Transaction AND moves the
  account balance in the same unit
- Any failure rolls back the whole unit; callers never observe partial state

Error translation:
- OperationalError / InterfaceError -> StoreUnavailableError (retryable)
- any other DatabaseError           -> ConsistencyError

Degraded mode:
- When the database cannot commit several rows atomically, units are refused
  unless LEDGER_ALLOW_DEGRADED_MODE is enabled
- When enabled, units run sequentially under process-local per-debtor locks
  and a DegradedConsistencyWarning is emitted on every unit
"""

from __future__ import annotations

import logging
import threading
import warnings
from contextlib import contextmanager
from typing import Iterable

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import (
    DEFAULT_DB_ALIAS,
    DatabaseError,
    InterfaceError,
    OperationalError,
    connections,
    transaction,
)
from django.db.models import F

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.money import ZERO, q2
from accounting.services.exceptions import (
    ConflictError,
    ConsistencyError,
    LedgerValidationError,
    NotFoundError,
    StoreUnavailableError,
    from_django_validation,
)

logger = logging.getLogger("ledger")

DEGRADED_LOCK_TIMEOUT_SECONDS = 30

_degraded_locks: dict[str, threading.RLock] = {}
_degraded_locks_guard = threading.Lock()


class DegradedConsistencyWarning(RuntimeWarning):
    """Emitted when a ledger unit runs without database atomicity."""


# ============================================================
# UNIT OF WORK
# ============================================================


def supports_atomic_units(using: str = DEFAULT_DB_ALIAS) -> bool:
    return bool(connections[using].features.supports_transactions)


@contextmanager
def _translate_store_errors(label: str):
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        logger.error(
            "Ledger unit aborted: store unavailable",
            extra={"unit": label, "error": exc.__class__.__name__},
        )
        raise StoreUnavailableError(f"{label}: store unavailable") from exc
    except DatabaseError as exc:
        logger.exception(
            "Ledger unit rolled back after a database failure",
            extra={"unit": label},
        )
        raise ConsistencyError(f"{label}: atomic unit rolled back") from exc


def _lock_for(key: str) -> threading.RLock:
    with _degraded_locks_guard:
        lock = _degraded_locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _degraded_locks[key] = lock
        return lock


@contextmanager
def _degraded_unit(label: str, lock_keys: Iterable):
    if not getattr(settings, "LEDGER_ALLOW_DEGRADED_MODE", False):
        logger.error(
            "Ledger unit refused: database cannot commit atomically",
            extra={"unit": label},
        )
        raise StoreUnavailableError(
            "Atomic commit is not available on this database"
        )

    keys = sorted({str(k) for k in lock_keys}) or ["*"]

    logger.warning(
        "Ledger unit running in DEGRADED mode (no atomic commit)",
        extra={"unit": label, "lock_keys": keys},
    )
    warnings.warn(
        f"{label}: running without atomic commit; serialized by per-debtor lock only",
        DegradedConsistencyWarning,
        stacklevel=4,
    )

    acquired: list[threading.RLock] = []
    try:
        for key in keys:
            lock = _lock_for(key)
            if not lock.acquire(timeout=DEGRADED_LOCK_TIMEOUT_SECONDS):
                raise StoreUnavailableError(f"{label}: timed out waiting for {key}")
            acquired.append(lock)

        with _translate_store_errors(label):
            yield
    finally:
        for lock in reversed(acquired):
            lock.release()


@contextmanager
def ledger_unit(label: str, *, lock_keys: Iterable = (), using: str = DEFAULT_DB_ALIAS):
    """
    One atomic unit of ledger work.

    lock_keys name the debtors/obligations the unit touches ("customer:12").
    They only matter in degraded mode; with a transactional database the
    row locks taken inside the unit (select_for_update) serialize writers.
    """
    if not supports_atomic_units(using):
        with _degraded_unit(label, lock_keys):
            yield
        return

    with _translate_store_errors(label):
        with transaction.atomic(using=using):
            yield


# ============================================================
# ROW ACCESS
# ============================================================


def _not_found_message(model) -> str:
    return f"{str(model._meta.verbose_name).capitalize()} not found"


def get_or_not_found(model, pk, *, queryset=None):
    qs = queryset if queryset is not None else model._default_manager.all()
    if pk in (None, ""):
        raise NotFoundError(_not_found_message(model))
    try:
        return qs.get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError, ValidationError) as exc:
        raise NotFoundError(_not_found_message(model)) from exc


def lock_row(model, pk):
    """select_for_update() fetch; must run inside ledger_unit()."""
    return get_or_not_found(model, pk, queryset=model._default_manager.select_for_update())


def lock_account(account_id, *, active_only: bool = True) -> Account:
    account = lock_row(Account, account_id)
    if active_only and not account.is_active:
        raise NotFoundError("Account not found")
    return account


def require_funds(account: Account, amount, *, message: str) -> None:
    if q2(account.balance) < q2(amount):
        logger.warning(
            "Insufficient account balance",
            extra={
                "account_id": account.pk,
                "balance": str(account.balance),
                "amount": str(amount),
            },
        )
        raise ConflictError(message)


# ============================================================
# BALANCE MUTATION
# ============================================================


def apply_delta(model, pk, delta, *, field: str = "balance") -> None:
    """Signed increment of a balance-like field. No read, no lost update."""
    delta = q2(delta)
    if delta == ZERO:
        return

    updated = model._default_manager.filter(pk=pk).update(**{field: F(field) + delta})
    if updated != 1:
        raise NotFoundError(_not_found_message(model))

    logger.debug(
        "Balance delta applied",
        extra={"model": model.__name__, "pk": pk, "field": field, "delta": str(delta)},
    )


def record_transaction(
    *,
    account: Account,
    type: str,
    amount,
    category: str,
    business: str,
    date,
    description: str = "",
    customer=None,
    vendor=None,
    reference_model: str = "",
    reference_id=None,
) -> Transaction:
    amt = q2(amount)
    if amt <= ZERO:
        raise LedgerValidationError("Transaction amount must be greater than 0")

    try:
        txn = Transaction.objects.create(
            account=account,
            type=type,
            amount=amt,
            category=category,
            business=business,
            date=date,
            description=(description or "")[:255],
            customer=customer,
            vendor=vendor,
            reference_model=reference_model or "",
            reference_id="" if reference_id is None else str(reference_id),
        )
    except ValidationError as exc:
        raise from_django_validation(exc) from exc

    apply_delta(Account, account.pk, txn.signed_amount)

    logger.info(
        "Transaction recorded",
        extra={
            "transaction_id": txn.pk,
            "account_id": account.pk,
            "type": type,
            "amount": str(amt),
            "category": category,
            "reference_model": txn.reference_model,
            "reference_id": txn.reference_id,
        },
    )
    return txn
