# payroll/models/salary.py

"""
======================================================
PATH: payroll/models/salary.py
======================================================
SALARY MODEL

One monthly salary line per employee.

- unpaid : generated, amount may still be refreshed from base_salary
- paid   : settled from an account; frozen from then on
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from accounting.models.account import Account
from accounting.money import BUSINESSES
from payroll.models.employee import Employee


class Salary(models.Model):
    STATUS_UNPAID = "unpaid"
    STATUS_PAID = "paid"

    STATUSES = [
        (STATUS_UNPAID, "Unpaid"),
        (STATUS_PAID, "Paid"),
    ]

    employee = models.ForeignKey(
        Employee,
        on_delete=models.PROTECT,
        related_name="salaries",
    )

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    year = models.PositiveIntegerField(
        validators=[MinValueValidator(2000), MaxValueValidator(3000)]
    )
    month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    business = models.CharField(max_length=10, choices=BUSINESSES)

    status = models.CharField(max_length=10, choices=STATUSES, default=STATUS_UNPAID)
    paid_date = models.DateField(null=True, blank=True)
    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="salaries",
        null=True,
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-year", "-month", "employee__name"]
        verbose_name_plural = "Salaries"
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "year", "month"],
                name="uniq_salary_employee_period",
            ),
            models.CheckConstraint(
                condition=Q(amount__gt=Decimal("0.00")),
                name="salary_amount_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["year", "month", "business"], name="salary_period_business_idx"),
            models.Index(fields=["status"], name="salary_status_idx"),
        ]

    def __str__(self):
        return f"{self.employee} {self.period}"

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def is_paid(self) -> bool:
        return self.status == self.STATUS_PAID

    def clean(self):
        if self.amount is None or self.amount <= Decimal("0.00"):
            raise ValidationError({"amount": "Salary amount must be greater than 0"})

        if self.status == self.STATUS_PAID and (not self.paid_date or not self.account_id):
            raise ValidationError("A paid salary needs a paid date and an account")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
