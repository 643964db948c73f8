# orders/tests/test_api.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from customers.models import Customer
from vendors.models import Vendor

User = get_user_model()


class ServiceAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="clerk", password="pass")
        self.client.force_authenticate(user=self.user)

        self.customer = Customer.objects.create(name="Selim", phone="01933333333")
        self.vendor = Vendor.objects.create(name="Airline")

    def _create(self, **overrides):
        payload = {
            "customer_id": self.customer.pk,
            "vendor_id": self.vendor.pk,
            "name": "Dhaka-Riyadh ticket",
            "business": "travel",
            "service_type": "air_ticket",
            "price": "650.00",
            "cost": "500.00",
        }
        payload.update(overrides)
        return self.client.post(reverse("services"), payload, format="json")

    def test_create_and_filter(self):
        res = self._create()
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["profit"], "150.00")

        res = self.client.get(reverse("services"), {"status": "pending", "search": "riyadh"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)

    def test_deliver_then_cancel(self):
        service_id = self._create().data["id"]

        res = self.client.post(reverse("service-deliver", args=[service_id]), {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "delivered")
        self.assertIsNotNone(res.data["payable_id"])

        res = self.client.post(
            reverse("service-status", args=[service_id]),
            {"status": "cancelled"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        res = self.client.post(reverse("service-deliver", args=[service_id]), {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["detail"], "Cannot deliver a cancelled service")

    def test_cost_without_vendor_is_400(self):
        res = self._create(vendor_id=None)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
