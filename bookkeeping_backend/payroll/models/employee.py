# payroll/models/employee.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.money import BUSINESSES


class Employee(models.Model):
    """Staff member paid a fixed monthly base salary from one business."""

    name = models.CharField(max_length=200)
    role = models.CharField(max_length=100, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")

    base_salary = models.DecimalField(max_digits=14, decimal_places=2)
    business = models.CharField(max_length=10, choices=BUSINESSES)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["business", "is_active"], name="employee_business_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(base_salary__gt=Decimal("0.00")),
                name="employee_base_salary_positive",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Employee name is required"})

        if self.base_salary is None or self.base_salary <= Decimal("0.00"):
            raise ValidationError({"base_salary": "Base salary must be greater than 0"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
