# orders/tests/test_service_lifecycle.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.services.exceptions import ConsistencyError, LedgerValidationError
from customers.models import Customer, Receivable
from customers.services.receivable_service import settle_receivable
from orders.models import Service
from orders.services.service_lifecycle import (
    InvalidServiceTransitionError,
    plan_transition,
)
from orders.services.service_order_service import (
    create_service,
    delete_service,
    deliver_service,
    transition_service_status,
    update_service,
)
from vendors.models import Payable, Vendor


class TransitionPlanTests(SimpleTestCase):
    """Pure lifecycle rules; no database."""

    def test_same_status_is_noop(self):
        plan = plan_transition(from_status="ready", to_status="ready")
        self.assertTrue(plan.noop)

    def test_same_status_while_editing_keeps_documents(self):
        plan = plan_transition(from_status="delivered", to_status="delivered", editing=True)
        self.assertFalse(plan.noop)
        self.assertTrue(plan.ensure_receivable)
        self.assertTrue(plan.ensure_payable)

    def test_cancel_removes_everything(self):
        plan = plan_transition(from_status="delivered", to_status="cancelled")
        self.assertTrue(plan.remove_receivable)
        self.assertTrue(plan.remove_payable)
        self.assertTrue(plan.clear_delivery_date)

    def test_leaving_delivered_drops_payable_only(self):
        plan = plan_transition(from_status="delivered", to_status="ready")
        self.assertTrue(plan.remove_payable)
        self.assertFalse(plan.remove_receivable)
        self.assertTrue(plan.ensure_receivable)

    def test_cancelled_cannot_be_delivered(self):
        with self.assertRaises(InvalidServiceTransitionError):
            plan_transition(from_status="cancelled", to_status="delivered")


class ServiceOrderTests(TestCase):
    """
    Documents follow the order: receivable while not cancelled,
    payable while delivered with cost.
    """

    def setUp(self):
        self.customer = Customer.objects.create(name="Hasan", phone="01911111111")
        self.vendor = Vendor.objects.create(name="Visa Agent")
        self.service = create_service(
            customer_id=self.customer.pk,
            vendor_id=self.vendor.pk,
            name="Saudi work visa",
            business="travel",
            price="1000",
            cost="200",
            service_type=Service.TYPE_VISA,
        )

    def _reload(self):
        self.customer.refresh_from_db()
        self.vendor.refresh_from_db()
        return Service.objects.get(pk=self.service["id"])

    # ======================================================
    # CREATE
    # ======================================================

    def test_create_bills_customer(self):
        service = self._reload()

        self.assertEqual(service.status, Service.STATUS_PENDING)
        self.assertIsNotNone(service.receivable_id)
        self.assertIsNone(service.payable_id)
        self.assertEqual(service.profit, Decimal("800.00"))
        self.assertEqual(self.customer.balance, Decimal("1000.00"))
        self.assertEqual(self.vendor.balance, Decimal("0.00"))
        self.assertEqual(self.customer.total_services, 1)
        self.assertEqual(self.vendor.total_services_provided, 1)

    def test_cost_needs_vendor(self):
        with self.assertRaises(LedgerValidationError):
            create_service(
                customer_id=self.customer.pk,
                name="Ticket",
                business="travel",
                price="500",
                cost="100",
            )

    def test_zero_price_still_gets_receivable(self):
        result = create_service(customer_id=self.customer.pk, name="Free advice", business="isp", price="0")

        receivable = Receivable.objects.get(pk=result["receivable_id"])
        self.assertEqual(receivable.amount, Decimal("0.00"))
        self.assertEqual(receivable.status, "unpaid")

    def test_created_cancelled_has_no_documents(self):
        result = create_service(
            customer_id=self.customer.pk,
            name="Dropped",
            business="travel",
            price="300",
            status=Service.STATUS_CANCELLED,
        )

        self.assertIsNone(result["receivable_id"])
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.balance, Decimal("1000.00"))

    # ======================================================
    # TRANSITIONS
    # ======================================================

    def test_deliver_raises_one_payable(self):
        deliver_service(service_id=self.service["id"], delivery_date="2024-05-01")
        deliver_service(service_id=self.service["id"])

        service = self._reload()
        self.assertEqual(service.status, Service.STATUS_DELIVERED)
        self.assertEqual(service.delivery_date, date(2024, 5, 1))
        self.assertEqual(Payable.objects.count(), 1)
        self.assertEqual(service.payable.amount, Decimal("200.00"))
        self.assertEqual(self.vendor.balance, Decimal("200.00"))

    def test_cancel_reverses_both_documents(self):
        deliver_service(service_id=self.service["id"])

        transition_service_status(service_id=self.service["id"], new_status="cancelled")

        service = self._reload()
        self.assertIsNone(service.receivable_id)
        self.assertIsNone(service.payable_id)
        self.assertIsNone(service.delivery_date)
        self.assertEqual(self.customer.balance, Decimal("0.00"))
        self.assertEqual(self.vendor.balance, Decimal("0.00"))
        self.assertFalse(Receivable.objects.exists())
        self.assertFalse(Payable.objects.exists())

    def test_cancel_after_partial_payment_reverses_remaining(self):
        account = Account.objects.create(name="Cash", balance=Decimal("0.00"))
        settle_receivable(
            receivable_id=self.service["receivable_id"], amount="400", account_id=account.pk
        )

        transition_service_status(service_id=self.service["id"], new_status="cancelled")

        self._reload()
        self.assertEqual(self.customer.balance, Decimal("0.00"))

    def test_cancelled_back_to_pending_rebills(self):
        transition_service_status(service_id=self.service["id"], new_status="cancelled")
        transition_service_status(service_id=self.service["id"], new_status="pending")

        service = self._reload()
        self.assertIsNotNone(service.receivable_id)
        self.assertEqual(self.customer.balance, Decimal("1000.00"))

    def test_cannot_deliver_cancelled(self):
        transition_service_status(service_id=self.service["id"], new_status="cancelled")

        with self.assertRaises(InvalidServiceTransitionError):
            deliver_service(service_id=self.service["id"])

        self.assertEqual(self._reload().status, Service.STATUS_CANCELLED)

    def test_leaving_delivered_drops_payable(self):
        deliver_service(service_id=self.service["id"])

        transition_service_status(service_id=self.service["id"], new_status="ready")

        service = self._reload()
        self.assertIsNone(service.payable_id)
        self.assertIsNone(service.delivery_date)
        self.assertEqual(self.vendor.balance, Decimal("0.00"))
        self.assertEqual(self.customer.balance, Decimal("1000.00"))

    def test_status_changes_leave_settled_receivable_alone(self):
        account = Account.objects.create(name="Cash", balance=Decimal("0.00"))
        settle_receivable(
            receivable_id=self.service["receivable_id"],
            amount="400",
            discount="100",
            account_id=account.pk,
        )

        for new_status in ("in-progress", "delivered", "ready"):
            with self.subTest(status=new_status):
                transition_service_status(service_id=self.service["id"], new_status=new_status)

                service = self._reload()
                self.assertEqual(service.status, new_status)
                self.assertEqual(service.receivable_id, self.service["receivable_id"])
                self.assertEqual(service.receivable.amount, Decimal("900.00"))
                self.assertEqual(service.receivable.paid_amount, Decimal("400.00"))
                self.assertEqual(self.customer.balance, Decimal("500.00"))

        account.refresh_from_db()
        self.assertEqual(account.balance, Decimal("400.00"))
        self.assertEqual(self.vendor.balance, Decimal("0.00"))

    def test_name_only_edit_keeps_surcharged_receivable(self):
        account = Account.objects.create(name="Cash", balance=Decimal("0.00"))
        settle_receivable(
            receivable_id=self.service["receivable_id"],
            amount="300",
            surcharge="50",
            account_id=account.pk,
        )

        update_service(service_id=self.service["id"], name="Saudi work visa (renewal)")

        service = self._reload()
        self.assertEqual(service.receivable.amount, Decimal("1050.00"))
        self.assertEqual(self.customer.balance, Decimal("750.00"))

    def test_same_status_change_writes_nothing(self):
        account = Account.objects.create(name="Cash", balance=Decimal("0.00"))
        settle_receivable(
            receivable_id=self.service["receivable_id"],
            amount="400",
            discount="100",
            account_id=account.pk,
        )
        before = self._reload()
        txn_count = Transaction.objects.count()

        result = transition_service_status(service_id=self.service["id"], new_status="pending")

        after = self._reload()
        account.refresh_from_db()
        self.assertEqual(result["status"], Service.STATUS_PENDING)
        self.assertEqual(after.updated_at, before.updated_at)
        self.assertEqual(after.receivable.updated_at, before.receivable.updated_at)
        self.assertEqual(Transaction.objects.count(), txn_count)
        self.assertEqual(self.customer.balance, Decimal("500.00"))
        self.assertEqual(account.balance, Decimal("400.00"))

    def test_invalid_status_rejected(self):
        with self.assertRaises(LedgerValidationError):
            transition_service_status(service_id=self.service["id"], new_status="shipped")

    def test_failed_ledger_effect_keeps_status(self):
        with mock.patch(
            "orders.services.service_order_service.open_obligation",
            side_effect=DatabaseError("disk full"),
        ):
            with self.assertRaises(ConsistencyError):
                deliver_service(service_id=self.service["id"])

        service = self._reload()
        self.assertEqual(service.status, Service.STATUS_PENDING)
        self.assertIsNone(service.payable_id)
        self.assertEqual(self.vendor.balance, Decimal("0.00"))

    # ======================================================
    # EDIT / DELETE
    # ======================================================

    def test_delivered_edit_resyncs_by_delta(self):
        deliver_service(service_id=self.service["id"])
        account = Account.objects.create(name="Cash", balance=Decimal("0.00"))
        settle_receivable(
            receivable_id=self.service["receivable_id"], amount="400", account_id=account.pk
        )

        update_service(service_id=self.service["id"], price="1200", cost="250")

        service = self._reload()
        self.assertEqual(service.receivable.remaining, Decimal("800.00"))
        self.assertEqual(service.receivable.paid_amount, Decimal("400.00"))
        self.assertEqual(self.customer.balance, Decimal("800.00"))
        self.assertEqual(self.vendor.balance, Decimal("250.00"))
        self.assertEqual(service.profit, Decimal("950.00"))

    def test_reassigning_customer_and_vendor_moves_balances(self):
        deliver_service(service_id=self.service["id"])
        other_customer = Customer.objects.create(name="Rafiq", phone="01922222222")
        other_vendor = Vendor.objects.create(name="Other Agent")

        update_service(
            service_id=self.service["id"],
            customer_id=other_customer.pk,
            vendor_id=other_vendor.pk,
        )

        self._reload()
        other_customer.refresh_from_db()
        other_vendor.refresh_from_db()
        self.assertEqual(self.customer.balance, Decimal("0.00"))
        self.assertEqual(other_customer.balance, Decimal("1000.00"))
        self.assertEqual(self.vendor.balance, Decimal("0.00"))
        self.assertEqual(other_vendor.balance, Decimal("200.00"))
        self.assertEqual(self.customer.total_services, 0)
        self.assertEqual(other_customer.total_services, 1)
        self.assertEqual(other_vendor.total_services_provided, 1)

    def test_delete_reverses_outstanding(self):
        deliver_service(service_id=self.service["id"])

        result = delete_service(service_id=self.service["id"])

        self.assertEqual(result["reversed_receivable"], "1000.00")
        self.assertEqual(result["reversed_payable"], "200.00")
        self.assertFalse(Service.objects.exists())
        self.customer.refresh_from_db()
        self.vendor.refresh_from_db()
        self.assertEqual(self.customer.balance, Decimal("0.00"))
        self.assertEqual(self.customer.total_services, 0)
        self.assertEqual(self.vendor.total_services_provided, 0)
