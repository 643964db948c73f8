# vendors/tests/test_payables.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.money import STATUS_PAID, STATUS_PARTIAL
from accounting.services.exceptions import ConflictError, LedgerValidationError
from vendors.models import Payable, Vendor
from vendors.services.bill_payment_service import pay_vendor_bill
from vendors.services.payable_service import (
    create_payable,
    delete_payable,
    settle_payable,
    update_payable,
)
from vendors.services.vendor_service import create_vendor, get_vendor_ledger


class PayableTests(TestCase):
    """
    Payables mirror receivables, but cash flows out and needs funds.
    """

    def setUp(self):
        self.account = Account.objects.create(
            name="Bank", account_type=Account.BANK, bank_name="City", balance=Decimal("1000.00")
        )
        self.vendor = Vendor.objects.create(name="Sky Airlines")
        self.payable = create_payable(
            vendor_id=self.vendor.pk,
            amount="800",
            due_date="2024-02-01",
            business="travel",
            date="2024-01-01",
        )

    def _balances(self):
        self.account.refresh_from_db()
        self.vendor.refresh_from_db()
        return self.account.balance, self.vendor.balance

    def test_create_raises_vendor_balance(self):
        self.assertEqual(self._balances(), (Decimal("1000.00"), Decimal("800.00")))

    def test_settle_records_expense(self):
        result = settle_payable(payable_id=self.payable["id"], amount="300", account_id=self.account.pk)

        self.assertEqual(result["status"], STATUS_PARTIAL)
        self.assertEqual(self._balances(), (Decimal("700.00"), Decimal("500.00")))

        txn = Transaction.objects.get()
        self.assertEqual(txn.type, Transaction.EXPENSE)
        self.assertEqual(txn.category, Transaction.CATEGORY_PAYABLE_SETTLEMENT)
        self.assertEqual(txn.reference_model, Transaction.REF_PAYABLE)
        self.assertEqual(txn.vendor_id, self.vendor.pk)

    def test_settle_needs_funds(self):
        Account.objects.filter(pk=self.account.pk).update(balance=Decimal("100.00"))

        with self.assertRaisesMessage(ConflictError, "Insufficient account balance"):
            settle_payable(payable_id=self.payable["id"], amount="300", account_id=self.account.pk)

        self.assertEqual(self._balances(), (Decimal("100.00"), Decimal("800.00")))
        self.assertFalse(Transaction.objects.exists())

    def test_update_payment_needs_funds(self):
        Account.objects.filter(pk=self.account.pk).update(balance=Decimal("10.00"))

        with self.assertRaises(ConflictError):
            update_payable(
                payable_id=self.payable["id"],
                payment_amount="50",
                account_id=self.account.pk,
            )

        self.assertEqual(Payable.objects.get().paid_amount, Decimal("0.00"))

    def test_update_amount_and_delete(self):
        update_payable(payable_id=self.payable["id"], amount="900")
        self.assertEqual(self._balances()[1], Decimal("900.00"))

        delete_payable(payable_id=self.payable["id"])
        self.assertEqual(self._balances()[1], Decimal("0.00"))


class VendorBillPaymentTests(TestCase):
    def setUp(self):
        self.account = Account.objects.create(name="Cash", balance=Decimal("2000.00"))
        self.vendor = Vendor.objects.create(name="Fiber Co")

    def _open(self, amount, due):
        return create_payable(vendor_id=self.vendor.pk, amount=amount, due_date=due, business="isp")

    def test_fifo_payment(self):
        newer = self._open("600", "2024-03-01")
        older = self._open("500", "2024-02-01")

        result = pay_vendor_bill(vendor_id=self.vendor.pk, account_id=self.account.pk, amount="700")

        self.assertEqual(result["applied_amount"], "700.00")
        self.assertEqual(result["total_due_after"], "400.00")
        self.assertEqual(Payable.objects.get(pk=older["id"]).status, STATUS_PAID)
        self.assertEqual(Payable.objects.get(pk=newer["id"]).remaining, Decimal("400.00"))

        self.account.refresh_from_db()
        self.vendor.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("1300.00"))
        self.assertEqual(self.vendor.balance, Decimal("400.00"))
        self.assertEqual(Transaction.objects.filter(type=Transaction.EXPENSE).count(), 2)

    def test_no_due_entries(self):
        with self.assertRaisesMessage(ConflictError, "No due payable entries found"):
            pay_vendor_bill(vendor_id=self.vendor.pk, account_id=self.account.pk, amount="100")

    def test_payment_above_total_due(self):
        self._open("500", "2024-02-01")

        with self.assertRaisesMessage(ConflictError, "Payment exceeds total due (500.00)"):
            pay_vendor_bill(vendor_id=self.vendor.pk, account_id=self.account.pk, amount="600")

        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.balance, Decimal("500.00"))

    def test_insufficient_funds(self):
        self._open("5000", "2024-02-01")

        with self.assertRaisesMessage(ConflictError, "Insufficient account balance"):
            pay_vendor_bill(vendor_id=self.vendor.pk, account_id=self.account.pk, amount="2500")

        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("2000.00"))

    def test_amount_must_be_positive(self):
        with self.assertRaises(LedgerValidationError):
            pay_vendor_bill(vendor_id=self.vendor.pk, account_id=self.account.pk, amount="-5")


class VendorMasterTests(TestCase):
    def test_name_required(self):
        with self.assertRaises(LedgerValidationError):
            create_vendor(name="  ")

    def test_ledger_totals(self):
        vendor = create_vendor(name="Visa Desk", service_category="visa")
        create_payable(vendor_id=vendor["id"], amount="250", due_date="2024-02-01", business="travel")

        ledger = get_vendor_ledger(vendor_id=vendor["id"])

        self.assertEqual(ledger["total_billed"], "250.00")
        self.assertEqual(ledger["total_due"], "250.00")
        self.assertEqual(ledger["total_vendor_cost"], "0.00")
        self.assertEqual(ledger["payables"][0]["status"], "unpaid")
