# vendors/models/payable.py

from __future__ import annotations

from django.db import models

from accounting.models.obligation import Obligation
from vendors.models.vendor import Vendor


class Payable(Obligation):
    """Money the business owes a vendor (bill)."""

    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        related_name="payables",
    )

    class Meta(Obligation.Meta):
        indexes = [
            models.Index(fields=["vendor", "status"], name="pay_vendor_status_idx"),
            models.Index(fields=["status", "due_date"], name="pay_status_due_idx"),
            models.Index(fields=["business", "due_date"], name="pay_business_due_idx"),
        ]

    def __str__(self):
        return f"Payable #{self.pk} ({self.vendor_id}) {self.amount}"
