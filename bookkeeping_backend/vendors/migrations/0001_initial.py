"""
======================================================
PATH: vendors/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Vendor + Payable
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
            name="Vendor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("address", models.TextField(blank=True, default="")),
                ("service_category", models.CharField(blank=True, default="", max_length=100)),
                ("balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_services_provided", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["name"], name="vendor_name_idx"),
                    models.Index(fields=["service_category"], name="vendor_category_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payable",
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
                    "vendor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payables",
                        to="vendors.vendor",
                    ),
                ),
            ],
            options={
                "ordering": ["due_date", "created_at", "id"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["vendor", "status"], name="pay_vendor_status_idx"),
                    models.Index(fields=["status", "due_date"], name="pay_status_due_idx"),
                    models.Index(fields=["business", "due_date"], name="pay_business_due_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gte", Decimal("0.00"))),
                        name="vendors_payable_amount_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("paid_amount__gte", Decimal("0.00"))),
                        name="vendors_payable_paid_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("paid_amount__lte", models.F("amount"))),
                        name="vendors_payable_paid_within_amount",
                    ),
                ],
            },
        ),
    ]
