# customers/tests/test_receivables.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.money import STATUS_PAID, STATUS_PARTIAL, STATUS_UNPAID
from accounting.services.exceptions import (
    ConflictError,
    LedgerValidationError,
    NotFoundError,
)
from customers.models import Customer, Receivable
from customers.services.receivable_service import (
    create_receivable,
    delete_receivable,
    settle_receivable,
    update_receivable,
)


class ReceivableLifecycleTests(TestCase):
    """
    Customer balance == sum of open remaining (minus advances), at every step.
    """

    def setUp(self):
        self.account = Account.objects.create(name="Cash", balance=Decimal("0.00"))
        self.customer = Customer.objects.create(name="Abdul", phone="01711111111")
        self.receivable = create_receivable(
            customer_id=self.customer.pk,
            amount="1000",
            due_date="2024-02-01",
            business="travel",
            date="2024-01-01",
            description="Umrah visa",
        )

    def _balances(self):
        self.account.refresh_from_db()
        self.customer.refresh_from_db()
        return self.account.balance, self.customer.balance

    # ======================================================
    # CREATE
    # ======================================================

    def test_create_raises_customer_balance(self):
        self.assertEqual(self.receivable["status"], STATUS_UNPAID)
        self.assertEqual(self.receivable["remaining"], "1000.00")
        self.assertEqual(self._balances(), (Decimal("0.00"), Decimal("1000.00")))

    def test_create_validates_before_writing(self):
        with self.assertRaises(LedgerValidationError):
            create_receivable(customer_id=self.customer.pk, amount="0", due_date="2024-02-01", business="travel")
        with self.assertRaisesMessage(LedgerValidationError, "Valid due date is required"):
            create_receivable(customer_id=self.customer.pk, amount="10", due_date=None, business="travel")
        with self.assertRaisesMessage(NotFoundError, "Customer not found"):
            create_receivable(customer_id=424242, amount="10", due_date="2024-02-01", business="travel")

        self.assertEqual(Receivable.objects.count(), 1)

    # ======================================================
    # SETTLE
    # ======================================================

    def test_partial_then_overpayment_rejected(self):
        result = settle_receivable(
            receivable_id=self.receivable["id"], amount="400", account_id=self.account.pk
        )

        self.assertEqual(result["status"], STATUS_PARTIAL)
        self.assertEqual(result["remaining"], "600.00")
        self.assertEqual(self._balances(), (Decimal("400.00"), Decimal("600.00")))

        with self.assertRaisesMessage(ConflictError, "Payment amount cannot exceed remaining due"):
            settle_receivable(
                receivable_id=self.receivable["id"], amount="700", account_id=self.account.pk
            )

        self.assertEqual(self._balances(), (Decimal("400.00"), Decimal("600.00")))
        self.assertEqual(Transaction.objects.count(), 1)

    def test_settlement_transaction_points_at_document(self):
        settle_receivable(receivable_id=self.receivable["id"], amount="250", account_id=self.account.pk)

        txn = Transaction.objects.get()
        self.assertEqual(txn.type, Transaction.INCOME)
        self.assertEqual(txn.category, Transaction.CATEGORY_RECEIVABLE_COLLECTION)
        self.assertEqual(txn.reference_model, Transaction.REF_RECEIVABLE)
        self.assertEqual(txn.reference_id, str(self.receivable["id"]))
        self.assertEqual(txn.customer_id, self.customer.pk)
        self.assertEqual(txn.business, "travel")

    def test_discount_closes_receivable(self):
        result = settle_receivable(
            receivable_id=self.receivable["id"],
            amount="900",
            discount="100",
            account_id=self.account.pk,
        )

        self.assertEqual(result["status"], STATUS_PAID)
        self.assertEqual(self._balances(), (Decimal("900.00"), Decimal("0.00")))
        self.assertEqual(Receivable.objects.get().amount, Decimal("900.00"))

    def test_surcharge_raises_amount_and_balance_drop_is_net(self):
        settle_receivable(
            receivable_id=self.receivable["id"],
            amount="500",
            surcharge="50",
            account_id=self.account.pk,
        )

        receivable = Receivable.objects.get()
        self.assertEqual(receivable.amount, Decimal("1050.00"))
        self.assertEqual(receivable.remaining, Decimal("550.00"))
        self.assertEqual(self._balances(), (Decimal("500.00"), Decimal("550.00")))

    # ======================================================
    # UPDATE
    # ======================================================

    def test_update_amount_moves_balance_by_delta(self):
        settle_receivable(receivable_id=self.receivable["id"], amount="400", account_id=self.account.pk)

        result = update_receivable(receivable_id=self.receivable["id"], amount="1200")

        self.assertEqual(result["remaining"], "800.00")
        self.assertEqual(self._balances(), (Decimal("400.00"), Decimal("800.00")))

    def test_update_below_paid_rejected(self):
        settle_receivable(receivable_id=self.receivable["id"], amount="400", account_id=self.account.pk)

        with self.assertRaises(ConflictError):
            update_receivable(receivable_id=self.receivable["id"], amount="300")

        self.assertEqual(self._balances(), (Decimal("400.00"), Decimal("600.00")))

    def test_update_with_payment_records_collection(self):
        result = update_receivable(
            receivable_id=self.receivable["id"],
            payment_amount="300",
            account_id=self.account.pk,
            payment_date="2024-01-15",
        )

        self.assertEqual(result["paid_amount"], "300.00")
        self.assertEqual(self._balances(), (Decimal("300.00"), Decimal("700.00")))
        self.assertEqual(Transaction.objects.get().date.isoformat(), "2024-01-15")

    def test_update_payment_needs_account(self):
        with self.assertRaisesMessage(LedgerValidationError, "Settlement account is required"):
            update_receivable(receivable_id=self.receivable["id"], payment_amount="100")

    def test_move_to_other_customer(self):
        other = Customer.objects.create(name="Bashir", phone="01722222222")
        settle_receivable(receivable_id=self.receivable["id"], amount="400", account_id=self.account.pk)

        update_receivable(receivable_id=self.receivable["id"], customer_id=other.pk)

        other.refresh_from_db()
        self.assertEqual(self._balances()[1], Decimal("0.00"))
        self.assertEqual(other.balance, Decimal("600.00"))

    # ======================================================
    # DELETE
    # ======================================================

    def test_delete_reverses_remaining_only(self):
        settle_receivable(receivable_id=self.receivable["id"], amount="400", account_id=self.account.pk)

        result = delete_receivable(receivable_id=self.receivable["id"])

        self.assertEqual(result["reversed_amount"], "600.00")
        self.assertEqual(self._balances(), (Decimal("400.00"), Decimal("0.00")))
        self.assertFalse(Receivable.objects.exists())
        self.assertEqual(Transaction.objects.count(), 1)
