# accounting/tests/test_api.py

from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounting.models.account import Account
from accounting.services.exceptions import ConsistencyError, GENERIC_FAILURE_MESSAGE

User = get_user_model()


class AccountingAPITests(TestCase):
    """
    HTTP layer: auth is required, ledger errors map to one "detail" string.
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="clerk", password="pass")
        self.client.force_authenticate(user=self.user)

        self.account = Account.objects.create(name="Cash", balance=Decimal("100.00"))

    # ======================================================
    # AUTH
    # ======================================================

    def test_requires_authentication(self):
        anon = APIClient()
        res = anon.get(reverse("accounting-accounts"))

        self.assertIn(res.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_health_and_root_are_public(self):
        anon = APIClient()

        self.assertEqual(anon.get(reverse("health-check")).status_code, status.HTTP_200_OK)
        res = anon.get(reverse("api-root"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("customers", res.data["modules"])

    # ======================================================
    # ACCOUNTS + MANUAL ENTRIES
    # ======================================================

    def test_create_account_and_list(self):
        res = self.client.post(
            reverse("accounting-accounts"),
            {"name": "Dutch Bangla", "account_type": "bank", "bank_name": "DBBL", "opening_balance": "250.00"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["balance"], "250.00")

        res = self.client.get(reverse("accounting-accounts"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data), 2)

    def test_income_expense_and_transaction_list(self):
        res = self.client.post(
            reverse("accounting-income"),
            {"account_id": self.account.pk, "amount": "50.00", "category": "Commission", "business": "travel"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

        res = self.client.post(
            reverse("accounting-expense"),
            {"account_id": self.account.pk, "amount": "20.00", "category": "Tea", "business": "isp"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

        res = self.client.get(reverse("accounting-transactions"), {"type": "expense"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["category"], "Tea")

        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("130.00"))

    def test_ledger_error_is_one_detail_string(self):
        res = self.client.post(
            reverse("accounting-income"),
            {"account_id": 999999, "amount": "10.00", "category": "X", "business": "travel"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data, {"detail": "Account not found"})

    def test_consistency_failure_hides_internal_detail(self):
        with mock.patch(
            "accounting.api.views.record_income",
            side_effect=ConsistencyError("record_income: atomic unit rolled back"),
        ):
            res = self.client.post(
                reverse("accounting-income"),
                {"account_id": self.account.pk, "amount": "10.00", "category": "X", "business": "travel"},
                format="json",
            )

        self.assertEqual(res.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(res.data["detail"], GENERIC_FAILURE_MESSAGE)

    # ======================================================
    # REPORTS
    # ======================================================

    def test_reports_endpoints(self):
        res = self.client.get(reverse("reports-snapshot"), {"trend_window": "12m"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data["monthly_trend"]), 12)

        res = self.client.get(reverse("reports-aging"), {"as_of": "2024-06-30"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["receivable"]["total"], "0.00")

        res = self.client.get(
            reverse("reports-settlement-history"),
            {"reference_model": "Receivable", "reference_id": "1"},
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 0)
