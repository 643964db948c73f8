# accounting/tests/test_reports.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.services.aging import AgingItem, bucket_for, build_aging
from accounting.services.cashbook_service import record_expense, record_income
from accounting.services.exceptions import LedgerValidationError
from accounting.services.report_service import (
    get_aging_report,
    get_report_snapshot,
    get_settlement_history,
)
from customers.models import Customer
from customers.services.receivable_service import (
    create_receivable,
    delete_receivable,
    settle_receivable,
)
from vendors.models import Vendor
from vendors.services.payable_service import create_payable


class AgingBucketTests(SimpleTestCase):
    def test_bucket_edges(self):
        self.assertEqual(bucket_for(0), "0-30")
        self.assertEqual(bucket_for(30), "0-30")
        self.assertEqual(bucket_for(31), "31-60")
        self.assertEqual(bucket_for(60), "31-60")
        self.assertEqual(bucket_for(61), "61+")

    def test_not_yet_due_counts_as_zero_days(self):
        as_of = date(2024, 6, 30)
        result = build_aging(
            [
                AgingItem(remaining=Decimal("100"), due_date=date(2024, 7, 15)),
                AgingItem(remaining=Decimal("50"), due_date=None, fallback_date=date(2024, 4, 1)),
                AgingItem(remaining=Decimal("0"), due_date=date(2020, 1, 1)),
            ],
            as_of,
        )

        buckets = {b["bucket"]: b for b in result["buckets"]}
        self.assertEqual(buckets["0-30"]["amount"], "100.00")
        self.assertEqual(buckets["61+"]["amount"], "50.00")
        self.assertEqual(result["total"], "150.00")
        self.assertEqual(result["total_count"], 2)


class ReportSnapshotTests(TestCase):
    """
    Snapshot totals come straight from the transaction journal.
    """

    def setUp(self):
        self.account = Account.objects.create(name="Cash", balance=Decimal("0.00"))

        record_income(
            account_id=self.account.pk, amount="1000", category="Visa Fee",
            business="travel", date="2024-05-03",
        )
        record_income(
            account_id=self.account.pk, amount="400", category="Internet Bill",
            business="isp", date="2024-05-10",
        )
        record_expense(
            account_id=self.account.pk, amount="300", category="Rent",
            business="travel", date="2024-05-20",
        )
        record_income(
            account_id=self.account.pk, amount="999", category="Visa Fee",
            business="travel", date="2024-03-15",
        )

    def test_overview_category_and_business(self):
        snap = get_report_snapshot(date_from="2024-05-01", date_to="2024-05-31")

        self.assertEqual(snap["overview"]["total_income"], "1400.00")
        self.assertEqual(snap["overview"]["total_expense"], "300.00")
        self.assertEqual(snap["overview"]["net_profit"], "1100.00")
        self.assertEqual(snap["overview"]["transaction_count"], 3)

        income_categories = [r["category"] for r in snap["category_summary"]["income"]]
        self.assertEqual(income_categories, ["Visa Fee", "Internet Bill"])

        by_business = {r["business"]: r for r in snap["business_summary"]}
        self.assertEqual(by_business["travel"]["net"], "700.00")
        self.assertEqual(by_business["isp"]["income"], "400.00")

    def test_business_filter(self):
        snap = get_report_snapshot(date_from="2024-05-01", date_to="2024-05-31", business="isp")

        self.assertEqual(snap["overview"]["total_income"], "400.00")
        self.assertEqual([r["business"] for r in snap["business_summary"]], ["isp"])

    def test_monthly_trend_window(self):
        snap = get_report_snapshot(date_from="2024-05-01", date_to="2024-05-31", trend_window="6m")

        trend = snap["monthly_trend"]
        self.assertEqual(len(trend), 6)
        self.assertEqual(trend[0]["month"], "2023-12")
        self.assertEqual(trend[-1]["month"], "2024-05")

        by_month = {t["month"]: t for t in trend}
        self.assertEqual(by_month["2024-03"]["income"], "999.00")
        self.assertEqual(by_month["2024-04"]["net"], "0.00")
        self.assertEqual(by_month["2024-05"]["net"], "1100.00")

        snap12 = get_report_snapshot(date_from="2024-05-01", date_to="2024-05-31", trend_window="12m")
        self.assertEqual(len(snap12["monthly_trend"]), 12)

    def test_invalid_filters(self):
        with self.assertRaisesMessage(LedgerValidationError, "date_from must be on or before date_to"):
            get_report_snapshot(date_from="2024-06-01", date_to="2024-05-01")

        with self.assertRaisesMessage(LedgerValidationError, "Trend window must be 6m or 12m"):
            get_report_snapshot(trend_window="3m")


class AgingReportTests(TestCase):
    def setUp(self):
        customer = Customer.objects.create(name="Salma", phone="01900000000")
        vendor = Vendor.objects.create(name="Air Desk")

        create_receivable(customer_id=customer.pk, amount="100", due_date="2024-06-20", business="travel")
        create_receivable(customer_id=customer.pk, amount="200", due_date="2024-05-15", business="travel")
        create_receivable(customer_id=customer.pk, amount="300", due_date="2024-03-01", business="isp")
        create_payable(vendor_id=vendor.pk, amount="700", due_date="2024-06-01", business="travel")

    def test_receivable_and_payable_buckets(self):
        report = get_aging_report(as_of="2024-06-30")

        receivable = {b["bucket"]: b["amount"] for b in report["receivable"]["buckets"]}
        self.assertEqual(receivable, {"0-30": "100.00", "31-60": "200.00", "61+": "300.00"})
        self.assertEqual(report["receivable"]["total"], "600.00")

        payable = {b["bucket"]: b["amount"] for b in report["payable"]["buckets"]}
        self.assertEqual(payable["0-30"], "700.00")

    def test_business_filter(self):
        report = get_aging_report(as_of="2024-06-30", business="isp")

        self.assertEqual(report["receivable"]["total"], "300.00")
        self.assertEqual(report["payable"]["total"], "0.00")


class SettlementHistoryTests(TestCase):
    def test_history_survives_document_deletion(self):
        account = Account.objects.create(name="Cash", balance=Decimal("0.00"))
        customer = Customer.objects.create(name="Nadia", phone="01600000000")
        receivable = create_receivable(
            customer_id=customer.pk, amount="500", due_date="2024-02-01", business="travel"
        )
        settle_receivable(receivable_id=receivable["id"], amount="200", account_id=account.pk)
        settle_receivable(receivable_id=receivable["id"], amount="50", account_id=account.pk)

        delete_receivable(receivable_id=receivable["id"])

        history = get_settlement_history(
            reference_model=Transaction.REF_RECEIVABLE, reference_id=receivable["id"]
        )
        self.assertEqual(history["count"], 2)
        self.assertEqual(history["total"], "250.00")

    def test_unknown_reference_model(self):
        with self.assertRaises(LedgerValidationError):
            get_settlement_history(reference_model="Invoice", reference_id=1)
