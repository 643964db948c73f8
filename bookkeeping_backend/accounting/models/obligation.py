# accounting/models/obligation.py

"""
======================================================
PATH: accounting/models/obligation.py
======================================================
OBLIGATION BASE MODEL (abstract)

Shared shape of Receivable (customer owes us) and Payable (we owe vendor).

Invariants:
- 0 <= paid_amount <= amount
- status == derive_status(amount, paid_amount)
- remaining = max(0, amount - paid_amount)

Mutation of amount / paid_amount happens in the obligation services, inside a
posting unit, together with the counterparty balance delta.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from accounting.money import (
    BUSINESSES,
    PAYMENT_STATUSES,
    STATUS_UNPAID,
    derive_status,
    remaining,
)


class Obligation(models.Model):
    business = models.CharField(max_length=10, choices=BUSINESSES)

    date = models.DateField(help_text="Issue date")
    due_date = models.DateField()

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    paid_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=10,
        choices=PAYMENT_STATUSES,
        default=STATUS_UNPAID,
    )

    description = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["due_date", "created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gte=Decimal("0.00")),
                name="%(app_label)s_%(class)s_amount_nonnegative",
            ),
            models.CheckConstraint(
                condition=Q(paid_amount__gte=Decimal("0.00")),
                name="%(app_label)s_%(class)s_paid_nonnegative",
            ),
            models.CheckConstraint(
                condition=Q(paid_amount__lte=F("amount")),
                name="%(app_label)s_%(class)s_paid_within_amount",
            ),
        ]

    @property
    def remaining(self) -> Decimal:
        return remaining(self.amount, self.paid_amount)

    @property
    def is_open(self) -> bool:
        return self.remaining > Decimal("0.00")

    def refresh_status(self) -> str:
        self.status = derive_status(self.amount, self.paid_amount)
        return self.status

    def clean(self):
        if self.amount is None or self.amount < Decimal("0.00"):
            raise ValidationError({"amount": "amount cannot be negative"})

        if self.paid_amount is None or self.paid_amount < Decimal("0.00"):
            raise ValidationError({"paid_amount": "paid_amount cannot be negative"})

        if self.paid_amount > self.amount:
            raise ValidationError(
                {"paid_amount": "paid_amount cannot exceed amount"}
            )

        if self.status != derive_status(self.amount, self.paid_amount):
            raise ValidationError(
                {"status": "status must match amount and paid_amount"}
            )

    def save(self, *args, **kwargs):
        self.description = (self.description or "").strip()
        self.full_clean()
        return super().save(*args, **kwargs)
