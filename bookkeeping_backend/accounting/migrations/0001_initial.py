"""
======================================================
PATH: accounting/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Account + Transaction
"""

from __future__ import annotations

from decimal import Decimal

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("customers", "0001_initial"),
        ("vendors", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150)),
                (
                    "account_type",
                    models.CharField(
                        choices=[("cash", "Cash"), ("bank", "Bank"), ("mobile_banking", "Mobile Banking")],
                        default="cash",
                        max_length=20,
                    ),
                ),
                ("balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("bank_name", models.CharField(blank=True, default="", max_length=150)),
                ("account_number", models.CharField(blank=True, default="", max_length=64)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["account_type"], name="account_type_idx"),
                    models.Index(fields=["is_active"], name="account_active_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("name", ""), _negated=True),
                        name="chk_account_name_not_blank",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Positive monetary value",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("type", models.CharField(choices=[("income", "Income"), ("expense", "Expense")], max_length=10)),
                ("category", models.CharField(max_length=100)),
                ("business", models.CharField(choices=[("travel", "Travel"), ("isp", "ISP")], max_length=10)),
                (
                    "reference_model",
                    models.CharField(
                        blank=True,
                        choices=[("Receivable", "Receivable"), ("Payable", "Payable"), ("Salary", "Salary")],
                        default="",
                        max_length=20,
                    ),
                ),
                ("reference_id", models.CharField(blank=True, default="", max_length=64)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="accounting.account",
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transactions",
                        to="customers.customer",
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transactions",
                        to="vendors.vendor",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["date"], name="txn_date_idx"),
                    models.Index(fields=["type", "date"], name="txn_type_date_idx"),
                    models.Index(fields=["business", "date"], name="txn_business_date_idx"),
                    models.Index(fields=["account", "date"], name="txn_account_date_idx"),
                    models.Index(fields=["reference_model", "reference_id"], name="txn_reference_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", Decimal("0.00"))),
                        name="transaction_amount_positive",
                    ),
                ],
            },
        ),
    ]
