"""
======================================================
PATH: customers/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Customer + Receivable
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("phone", models.CharField(max_length=50, unique=True)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("address", models.TextField(blank=True, default="")),
                ("passport_number", models.CharField(blank=True, default="", max_length=50)),
                ("nationality", models.CharField(blank=True, default="", max_length=80)),
                ("balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_services", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [models.Index(fields=["name"], name="customer_name_idx")],
            },
        ),
        migrations.CreateModel(
            name="Receivable",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("business", models.CharField(choices=[("travel", "Travel"), ("isp", "ISP")], max_length=10)),
                ("date", models.DateField(help_text="Issue date")),
                ("due_date", models.DateField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("paid_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                (
                    "status",
                    models.CharField(
                        choices=[("unpaid", "Unpaid"), ("partial", "Partial"), ("paid", "Paid")],
                        default="unpaid",
                        max_length=10,
                    ),
                ),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="receivables",
                        to="customers.customer",
                    ),
                ),
            ],
            options={
                "ordering": ["due_date", "created_at", "id"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["customer", "status"], name="recv_customer_status_idx"),
                    models.Index(fields=["status", "due_date"], name="recv_status_due_idx"),
                    models.Index(fields=["business", "due_date"], name="recv_business_due_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gte", Decimal("0.00"))),
                        name="customers_receivable_amount_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("paid_amount__gte", Decimal("0.00"))),
                        name="customers_receivable_paid_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("paid_amount__lte", models.F("amount"))),
                        name="customers_receivable_paid_within_amount",
                    ),
                ],
            },
        ),
    ]
