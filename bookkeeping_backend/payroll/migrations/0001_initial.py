"""
======================================================
PATH: payroll/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Employee + Salary
"""

from __future__ import annotations

from decimal import Decimal

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("role", models.CharField(blank=True, default="", max_length=100)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("base_salary", models.DecimalField(decimal_places=2, max_digits=14)),
                ("business", models.CharField(choices=[("travel", "Travel"), ("isp", "ISP")], max_length=10)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["business", "is_active"], name="employee_business_active_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("base_salary__gt", Decimal("0.00"))),
                        name="employee_base_salary_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Salary",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "year",
                    models.PositiveIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(2000),
                            django.core.validators.MaxValueValidator(3000),
                        ]
                    ),
                ),
                (
                    "month",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(12),
                        ]
                    ),
                ),
                ("business", models.CharField(choices=[("travel", "Travel"), ("isp", "ISP")], max_length=10)),
                (
                    "status",
                    models.CharField(
                        choices=[("unpaid", "Unpaid"), ("paid", "Paid")],
                        default="unpaid",
                        max_length=10,
                    ),
                ),
                ("paid_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "account",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="salaries",
                        to="accounting.account",
                    ),
                ),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="salaries",
                        to="payroll.employee",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Salaries",
                "ordering": ["-year", "-month", "employee__name"],
                "indexes": [
                    models.Index(fields=["year", "month", "business"], name="salary_period_business_idx"),
                    models.Index(fields=["status"], name="salary_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("employee", "year", "month"),
                        name="uniq_salary_employee_period",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", Decimal("0.00"))),
                        name="salary_amount_positive",
                    ),
                ],
            },
        ),
    ]
