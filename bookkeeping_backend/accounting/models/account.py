# accounting/models/account.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Account(models.Model):
    """
    A cash-holding account (cash drawer, bank account, mobile wallet).

    Guarantees:
    - Name is normalized (trimmed) and never blank
    - balance is signed cash on hand
    - balance is only moved by the posting protocol (F() increments),
      never by assigning the field from views or reports
    """

    CASH = "cash"
    BANK = "bank"
    MOBILE_BANKING = "mobile_banking"

    ACCOUNT_TYPES = [
        (CASH, "Cash"),
        (BANK, "Bank"),
        (MOBILE_BANKING, "Mobile Banking"),
    ]

    name = models.CharField(max_length=150)

    account_type = models.CharField(
        max_length=20,
        choices=ACCOUNT_TYPES,
        default=CASH,
    )

    balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    bank_name = models.CharField(max_length=150, blank=True, default="")
    account_number = models.CharField(max_length=64, blank=True, default="")

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        indexes = [
            models.Index(fields=["account_type"], name="account_type_idx"),
            models.Index(fields=["is_active"], name="account_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_account_name_not_blank",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_account_type_display()})"

    def clean(self):
        self.name = (self.name or "").strip()
        self.bank_name = (self.bank_name or "").strip()
        self.account_number = (self.account_number or "").strip()

        if not self.name:
            raise ValidationError({"name": "Account name is required"})

        if self.account_type == self.BANK and not self.bank_name:
            raise ValidationError({"bank_name": "Bank name is required for bank accounts"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
