# orders/models/service.py

"""
======================================================
PATH: orders/models/service.py
======================================================
SERVICE ORDER MODEL

One billable job (visa, ticket, hotel, ...) for a customer, fulfilled by an
optional vendor.

Links:
- receivable : exactly one while the order is not cancelled
- payable    : at most one, only while delivered with cost > 0

Both links are maintained by orders.services.service_order_service.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.money import BUSINESSES
from customers.models import Customer, Receivable
from vendors.models import Payable, Vendor


class Service(models.Model):
    STATUS_PENDING = "pending"
    STATUS_IN_PROGRESS = "in-progress"
    STATUS_READY = "ready"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUSES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_IN_PROGRESS, "In progress"),
        (STATUS_READY, "Ready"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    TYPE_VISA = "visa"
    TYPE_AIR_TICKET = "air_ticket"
    TYPE_MEDICAL = "medical"
    TYPE_TAQAMUL = "taqamul"
    TYPE_HOTEL = "hotel"
    TYPE_PACKAGE = "package"
    TYPE_OTHER = "other"

    SERVICE_TYPES = [
        (TYPE_VISA, "Visa"),
        (TYPE_AIR_TICKET, "Air ticket"),
        (TYPE_MEDICAL, "Medical"),
        (TYPE_TAQAMUL, "Taqamul"),
        (TYPE_HOTEL, "Hotel"),
        (TYPE_PACKAGE, "Package"),
        (TYPE_OTHER, "Other"),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    service_type = models.CharField(max_length=20, choices=SERVICE_TYPES, default=TYPE_OTHER)
    business = models.CharField(max_length=10, choices=BUSINESSES)

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="services",
    )
    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        related_name="services",
        null=True,
        blank=True,
    )

    price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    profit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_PENDING)
    delivery_date = models.DateField(null=True, blank=True)

    receivable = models.OneToOneField(
        Receivable,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="service",
    )
    payable = models.OneToOneField(
        Payable,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="service",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="service_status_created_idx"),
            models.Index(fields=["customer", "status"], name="service_customer_status_idx"),
            models.Index(fields=["vendor", "status"], name="service_vendor_status_idx"),
            models.Index(fields=["business", "created_at"], name="service_business_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(price__gte=Decimal("0.00")),
                name="service_price_nonnegative",
            ),
            models.CheckConstraint(
                condition=Q(cost__gte=Decimal("0.00")),
                name="service_cost_nonnegative",
            ),
        ]

    def __str__(self):
        return f"{self.name} [{self.status}]"

    @property
    def is_delivered(self) -> bool:
        return self.status == self.STATUS_DELIVERED

    @property
    def is_cancelled(self) -> bool:
        return self.status == self.STATUS_CANCELLED

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Service name is required"})

        if self.price is not None and self.price < Decimal("0.00"):
            raise ValidationError({"price": "price cannot be negative"})

        if self.cost is not None and self.cost < Decimal("0.00"):
            raise ValidationError({"cost": "cost cannot be negative"})

        if self.cost and self.cost > Decimal("0.00") and not self.vendor_id:
            raise ValidationError({"vendor": "Vendor is required when cost is greater than 0"})

        if self.status == self.STATUS_DELIVERED and not self.delivery_date:
            raise ValidationError(
                {"delivery_date": "delivery_date is required when status is delivered"}
            )

        if self.status == self.STATUS_CANCELLED and (self.receivable_id or self.payable_id):
            raise ValidationError("A cancelled service cannot keep a receivable or payable")

        if self.status != self.STATUS_DELIVERED and self.payable_id:
            raise ValidationError({"payable": "Only delivered services carry a payable"})

    def save(self, *args, **kwargs):
        self.profit = (self.price or Decimal("0.00")) - (self.cost or Decimal("0.00"))
        self.full_clean()
        return super().save(*args, **kwargs)
