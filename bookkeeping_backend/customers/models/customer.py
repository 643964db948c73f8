# customers/models/customer.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Customer(models.Model):
    """
    Customer master.

    balance is signed:
    - positive : customer owes the business
    - negative : customer holds advance credit
    It is moved only by the posting protocol (receivables, collections).
    """

    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=50, unique=True)
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")

    passport_number = models.CharField(max_length=50, blank=True, default="")
    nationality = models.CharField(max_length=80, blank=True, default="")

    balance = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    total_services = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="customer_name_idx"),
        ]

    def __str__(self):
        return self.name

    @property
    def advance_credit(self) -> Decimal:
        return max(Decimal("0.00"), -self.balance)

    def clean(self):
        self.name = (self.name or "").strip()
        self.phone = (self.phone or "").strip()

        if not self.name:
            raise ValidationError({"name": "Customer name is required"})
        if not self.phone:
            raise ValidationError({"phone": "Customer phone is required"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
