# accounting/models/transaction.py

"""
======================================================
PATH: accounting/models/transaction.py
======================================================
TRANSACTION MODEL

Append-only record of cash moving in or out of an Account.

Guarantees:
- Immutable once created (no updates)
- Amount is always positive; direction is via type (income / expense)
- Settlement entries (reference_model set) can never be deleted;
  they outlive the receivable / payable / salary they settled
- Manual income / expense entries are their own parent document and may be
  deleted through the cashbook service (which reverses the account balance)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from accounting.models.account import Account
from accounting.money import BUSINESSES


class Transaction(models.Model):
    INCOME = "income"
    EXPENSE = "expense"

    TYPES = [
        (INCOME, "Income"),
        (EXPENSE, "Expense"),
    ]

    REF_RECEIVABLE = "Receivable"
    REF_PAYABLE = "Payable"
    REF_SALARY = "Salary"

    REFERENCE_MODELS = [
        (REF_RECEIVABLE, "Receivable"),
        (REF_PAYABLE, "Payable"),
        (REF_SALARY, "Salary"),
    ]

    CATEGORY_RECEIVABLE_COLLECTION = "Receivable Collection"
    CATEGORY_PAYABLE_SETTLEMENT = "Payable Settlement"
    CATEGORY_CUSTOMER_ADVANCE = "Customer Advance"
    CATEGORY_SALARY = "Salary"

    date = models.DateField()

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Positive monetary value",
    )

    type = models.CharField(max_length=10, choices=TYPES)
    category = models.CharField(max_length=100)
    business = models.CharField(max_length=10, choices=BUSINESSES)

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="transactions",
    )

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )
    vendor = models.ForeignKey(
        "vendors.Vendor",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )

    reference_model = models.CharField(
        max_length=20,
        choices=REFERENCE_MODELS,
        blank=True,
        default="",
    )
    reference_id = models.CharField(max_length=64, blank=True, default="")

    description = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["date"], name="txn_date_idx"),
            models.Index(fields=["type", "date"], name="txn_type_date_idx"),
            models.Index(fields=["business", "date"], name="txn_business_date_idx"),
            models.Index(fields=["account", "date"], name="txn_account_date_idx"),
            models.Index(fields=["reference_model", "reference_id"], name="txn_reference_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=Decimal("0.00")),
                name="transaction_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.type} {self.amount} [{self.category}] → {self.account}"

    @property
    def is_settlement(self) -> bool:
        return bool(self.reference_model)

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == self.INCOME else -self.amount

    def clean(self):
        if self.type not in (self.INCOME, self.EXPENSE):
            raise ValidationError("Invalid transaction type")

        if self.amount is None or self.amount <= 0:
            raise ValidationError("Transaction amount must be > 0")

        if bool(self.reference_model) != bool(self.reference_id):
            raise ValidationError(
                "reference_model and reference_id must be set together"
            )

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("Transactions are immutable and cannot be modified")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.is_settlement:
            raise ValidationError("Settlement transactions are permanent and cannot be deleted")
        return super().delete(*args, **kwargs)
