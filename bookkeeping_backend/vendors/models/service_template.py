# vendors/models/service_template.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from vendors.models.vendor import Vendor


class VendorServiceTemplate(models.Model):
    """
    A vendor's listed service with its default selling price and cost.

    Names are unique per vendor, compared case-insensitively by
    vendor_service.add_vendor_service_template (the upsert key).
    Templates are a price list only; they never touch balances.
    """

    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.CASCADE,
        related_name="service_templates",
    )
    name = models.CharField(max_length=200)
    service_type = models.CharField(max_length=20, default="other")
    category = models.CharField(max_length=200, blank=True, default="")

    default_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    default_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["vendor", "name"]
        constraints = [
            models.UniqueConstraint(fields=["vendor", "name"], name="uniq_vendor_template_name"),
            models.CheckConstraint(
                condition=Q(default_price__gte=Decimal("0.00")) & Q(default_cost__gte=Decimal("0.00")),
                name="vendor_template_prices_nonnegative",
            ),
        ]

    def __str__(self):
        return f"{self.vendor} / {self.name}"

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Service name is required"})
        if not self.category:
            self.category = self.name

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
