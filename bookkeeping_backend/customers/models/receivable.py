# customers/models/receivable.py

from __future__ import annotations

from django.db import models

from accounting.models.obligation import Obligation
from customers.models.customer import Customer


class Receivable(Obligation):
    """
    Money a customer owes the business.

    Opened manually or by a service order; settled by collections.
    """

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="receivables",
    )

    class Meta(Obligation.Meta):
        indexes = [
            models.Index(fields=["customer", "status"], name="recv_customer_status_idx"),
            models.Index(fields=["status", "due_date"], name="recv_status_due_idx"),
            models.Index(fields=["business", "due_date"], name="recv_business_due_idx"),
        ]

    def __str__(self):
        return f"Receivable #{self.pk} ({self.customer_id}) {self.amount}"
