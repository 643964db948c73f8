# vendors/tests/test_service_templates.py

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounting.services.exceptions import LedgerValidationError, NotFoundError
from vendors.models import Vendor, VendorServiceTemplate
from vendors.services.vendor_service import (
    add_vendor_service_template,
    delete_vendor_service_template,
    get_vendor_ledger,
    update_vendor_service_template_price,
)

User = get_user_model()


class VendorServiceTemplateTests(TestCase):
    """
    A vendor's price list: upsert by name, never touches balances.
    """

    def setUp(self):
        self.vendor = Vendor.objects.create(name="Visa Agent", balance=Decimal("250.00"))

    def test_add_then_same_name_any_case_reprices(self):
        first = add_vendor_service_template(
            vendor_id=self.vendor.pk, name="Visa", default_price="1000", default_cost="700"
        )
        second = add_vendor_service_template(
            vendor_id=self.vendor.pk, name="  visa ", default_price="1100", default_cost="750"
        )

        self.assertFalse(first["updated"])
        self.assertTrue(second["updated"])
        self.assertEqual(second["id"], first["id"])
        self.assertEqual(VendorServiceTemplate.objects.count(), 1)

        template = VendorServiceTemplate.objects.get()
        self.assertEqual(template.name, "Visa")
        self.assertEqual(template.category, "Visa")
        self.assertEqual(template.default_price, Decimal("1100.00"))
        self.assertEqual(template.default_cost, Decimal("750.00"))

    def test_negative_price_rejected(self):
        with self.assertRaisesMessage(LedgerValidationError, "cannot be negative"):
            add_vendor_service_template(vendor_id=self.vendor.pk, name="Ticket", default_price="-5")

        self.assertFalse(VendorServiceTemplate.objects.exists())

    def test_blank_name_rejected(self):
        with self.assertRaises(LedgerValidationError):
            add_vendor_service_template(vendor_id=self.vendor.pk, name="   ", default_price="10")

    def test_unknown_vendor(self):
        with self.assertRaisesMessage(NotFoundError, "Vendor not found"):
            add_vendor_service_template(vendor_id=999999, name="Visa", default_price="10")

    def test_update_price_keeps_cost_when_omitted(self):
        add_vendor_service_template(
            vendor_id=self.vendor.pk, name="Hotel night", default_price="80", default_cost="60"
        )

        result = update_vendor_service_template_price(
            vendor_id=self.vendor.pk, name="HOTEL NIGHT", default_price="90"
        )

        self.assertEqual(result["default_price"], "90.00")
        self.assertEqual(result["default_cost"], "60.00")

    def test_update_and_delete_missing_template(self):
        with self.assertRaisesMessage(NotFoundError, "Vendor listed service not found"):
            update_vendor_service_template_price(vendor_id=self.vendor.pk, name="Nope", default_price="1")

        with self.assertRaisesMessage(NotFoundError, "Vendor listed service not found"):
            delete_vendor_service_template(vendor_id=self.vendor.pk, name="Nope")

    def test_delete_by_name(self):
        add_vendor_service_template(vendor_id=self.vendor.pk, name="Visa", default_price="10")

        result = delete_vendor_service_template(vendor_id=self.vendor.pk, name="VISA")

        self.assertTrue(result["deleted"])
        self.assertFalse(VendorServiceTemplate.objects.exists())

    def test_templates_do_not_touch_balance_and_show_in_ledger(self):
        add_vendor_service_template(vendor_id=self.vendor.pk, name="Visa", default_price="1000")
        add_vendor_service_template(vendor_id=self.vendor.pk, name="Air ticket", default_price="500")

        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.balance, Decimal("250.00"))

        ledger = get_vendor_ledger(vendor_id=self.vendor.pk)
        self.assertEqual([t["name"] for t in ledger["service_templates"]], ["Air ticket", "Visa"])


class VendorServiceTemplateAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="clerk", password="pass")
        self.client.force_authenticate(user=self.user)
        self.vendor = Vendor.objects.create(name="Visa Agent")
        self.url = reverse("vendor-templates", args=[self.vendor.pk])

    def test_upsert_over_http(self):
        res = self.client.post(self.url, {"name": "Visa", "default_price": "1000.00"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertFalse(res.data["updated"])

        res = self.client.post(self.url, {"name": "visa", "default_price": "1200.00"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["updated"])

        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data), 1)
        self.assertEqual(res.data[0]["default_price"], "1200.00")

    def test_vendor_detail_includes_templates(self):
        VendorServiceTemplate.objects.create(vendor=self.vendor, name="Visa", default_price=Decimal("10"))

        res = self.client.get(reverse("vendor-detail", args=[self.vendor.pk]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["service_templates"][0]["name"], "Visa")

    def test_patch_and_delete(self):
        VendorServiceTemplate.objects.create(vendor=self.vendor, name="Visa", default_price=Decimal("10"))

        res = self.client.patch(self.url, {"name": "Visa", "default_price": "15.00"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["default_price"], "15.00")

        res = self.client.delete(self.url, {"name": "Visa"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        res = self.client.delete(self.url, {"name": "Visa"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["detail"], "Vendor listed service not found")

    def test_negative_price_is_400(self):
        res = self.client.post(self.url, {"name": "Visa", "default_price": "-1.00"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
