# accounting/tests/test_posting.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError, OperationalError
from django.test import TestCase, override_settings

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.money import STATUS_UNPAID
from accounting.services.exceptions import (
    ConsistencyError,
    GENERIC_FAILURE_MESSAGE,
    StoreUnavailableError,
)
from accounting.services.posting import DegradedConsistencyWarning
from customers.models import Customer, Receivable
from customers.services.receivable_service import create_receivable, settle_receivable


class PostingUnitTests(TestCase):
    """
    A ledger unit either commits every row it touched or none of them.
    """

    def setUp(self):
        self.account = Account.objects.create(name="Cash Drawer", balance=Decimal("0.00"))
        self.customer = Customer.objects.create(name="Rahim", phone="01700000001")
        self.receivable = create_receivable(
            customer_id=self.customer.pk,
            amount="1000",
            due_date="2024-01-31",
            business="travel",
            date="2024-01-01",
        )

    def _assert_untouched(self):
        self.account.refresh_from_db()
        self.customer.refresh_from_db()
        receivable = Receivable.objects.get(pk=self.receivable["id"])

        self.assertEqual(self.account.balance, Decimal("0.00"))
        self.assertEqual(self.customer.balance, Decimal("1000.00"))
        self.assertEqual(receivable.paid_amount, Decimal("0.00"))
        self.assertEqual(receivable.status, STATUS_UNPAID)
        self.assertFalse(Transaction.objects.exists())

    # ======================================================
    # ROLLBACK
    # ======================================================

    def test_failure_after_writes_rolls_back_everything(self):
        with mock.patch(
            "accounting.services.obligations.apply_delta",
            side_effect=DatabaseError("disk full"),
        ):
            with self.assertRaises(ConsistencyError) as ctx:
                settle_receivable(
                    receivable_id=self.receivable["id"],
                    amount="400",
                    account_id=self.account.pk,
                )

        self.assertTrue(ctx.exception.retryable)
        self.assertEqual(ctx.exception.public_message, GENERIC_FAILURE_MESSAGE)
        self._assert_untouched()

    def test_transport_failure_is_retryable_store_error(self):
        with mock.patch(
            "accounting.services.obligations.lock_account",
            side_effect=OperationalError("connection reset"),
        ):
            with self.assertRaises(StoreUnavailableError) as ctx:
                settle_receivable(
                    receivable_id=self.receivable["id"],
                    amount="400",
                    account_id=self.account.pk,
                )

        self.assertEqual(ctx.exception.http_status, 503)
        self._assert_untouched()

    # ======================================================
    # DEGRADED MODE
    # ======================================================

    @override_settings(LEDGER_ALLOW_DEGRADED_MODE=False)
    def test_non_atomic_store_is_refused_by_default(self):
        with mock.patch(
            "accounting.services.posting.supports_atomic_units", return_value=False
        ):
            with self.assertRaises(StoreUnavailableError):
                settle_receivable(
                    receivable_id=self.receivable["id"],
                    amount="400",
                    account_id=self.account.pk,
                )

        self._assert_untouched()

    @override_settings(LEDGER_ALLOW_DEGRADED_MODE=True)
    def test_degraded_mode_runs_with_warning(self):
        with mock.patch(
            "accounting.services.posting.supports_atomic_units", return_value=False
        ):
            with self.assertWarns(DegradedConsistencyWarning):
                result = settle_receivable(
                    receivable_id=self.receivable["id"],
                    amount="400",
                    account_id=self.account.pk,
                    date=date(2024, 1, 10),
                )

        self.assertEqual(result["remaining"], "600.00")
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("400.00"))
