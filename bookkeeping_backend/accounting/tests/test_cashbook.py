# accounting/tests/test_cashbook.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.services.cashbook_service import (
    create_account,
    delete_manual_entry,
    record_expense,
    record_income,
    update_account,
)
from accounting.services.exceptions import (
    ConflictError,
    LedgerValidationError,
    NotFoundError,
)
from customers.models import Customer
from customers.services.receivable_service import create_receivable, settle_receivable
from vendors.models import Vendor


class AccountServiceTests(TestCase):
    def test_opening_balance_is_set_once(self):
        result = create_account(name="  Main Cash ", opening_balance="500")

        self.assertEqual(result["name"], "Main Cash")
        self.assertEqual(result["balance"], "500.00")
        self.assertFalse(Transaction.objects.exists())

    def test_bank_account_needs_bank_name(self):
        with self.assertRaisesMessage(LedgerValidationError, "Bank name is required for bank accounts"):
            create_account(name="City Bank", account_type=Account.BANK)

    def test_update_never_touches_balance(self):
        account = create_account(name="Wallet", account_type=Account.MOBILE_BANKING, opening_balance="50")

        result = update_account(account_id=account["id"], name="bKash", balance="9999")

        self.assertEqual(result["name"], "bKash")
        self.assertEqual(result["balance"], "50.00")


class ManualEntryTests(TestCase):
    """
    Manual income / expense move the account directly; settlement entries
    belong to their document and cannot be deleted here.
    """

    def setUp(self):
        self.account = Account.objects.create(name="Cash", balance=Decimal("100.00"))

    def test_income_and_expense_move_balance(self):
        record_income(account_id=self.account.pk, amount="250", category="Commission", business="travel")
        record_expense(account_id=self.account.pk, amount="80.50", category="Rent", business="isp")

        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("269.50"))
        self.assertEqual(Transaction.objects.count(), 2)

    def test_expense_may_overdraw_account(self):
        record_expense(account_id=self.account.pk, amount="300", category="Rent", business="travel")

        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("-200.00"))

    def test_expense_can_name_a_vendor(self):
        vendor = Vendor.objects.create(name="Office Supplies Ltd")

        result = record_expense(
            account_id=self.account.pk,
            amount="20",
            category="Stationery",
            business="travel",
            vendor_id=vendor.pk,
        )

        self.assertEqual(result["vendor_id"], vendor.pk)

    def test_validation_happens_before_any_write(self):
        with self.assertRaises(LedgerValidationError):
            record_income(account_id=self.account.pk, amount="0", category="X", business="travel")
        with self.assertRaises(LedgerValidationError):
            record_income(account_id=self.account.pk, amount="10", category="  ", business="travel")
        with self.assertRaises(LedgerValidationError):
            record_income(account_id=self.account.pk, amount="10", category="X", business="bakery")

        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("100.00"))
        self.assertFalse(Transaction.objects.exists())

    def test_inactive_account_is_not_found(self):
        self.account.is_active = False
        self.account.save()

        with self.assertRaisesMessage(NotFoundError, "Account not found"):
            record_income(account_id=self.account.pk, amount="10", category="X", business="travel")

    def test_delete_manual_entry_reverses_balance(self):
        entry = record_expense(account_id=self.account.pk, amount="40", category="Tea", business="travel")

        result = delete_manual_entry(transaction_id=entry["id"])

        self.assertEqual(result["reversed_amount"], "40.00")
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("100.00"))
        self.assertFalse(Transaction.objects.filter(pk=entry["id"]).exists())

    def test_settlement_entry_cannot_be_deleted(self):
        customer = Customer.objects.create(name="Karim", phone="01800000000")
        receivable = create_receivable(
            customer_id=customer.pk, amount="300", due_date="2024-02-01", business="travel"
        )
        settle_receivable(receivable_id=receivable["id"], amount="100", account_id=self.account.pk)
        txn = Transaction.objects.get(reference_model=Transaction.REF_RECEIVABLE)

        with self.assertRaises(ConflictError):
            delete_manual_entry(transaction_id=txn.pk)

        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("200.00"))
        self.assertTrue(Transaction.objects.filter(pk=txn.pk).exists())
