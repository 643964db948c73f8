"""
======================================================
PATH: orders/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Service (service orders)
"""

from __future__ import annotations

from decimal import Decimal

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
            name="Service",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "service_type",
                    models.CharField(
                        choices=[
                            ("visa", "Visa"),
                            ("air_ticket", "Air ticket"),
                            ("medical", "Medical"),
                            ("taqamul", "Taqamul"),
                            ("hotel", "Hotel"),
                            ("package", "Package"),
                            ("other", "Other"),
                        ],
                        default="other",
                        max_length=20,
                    ),
                ),
                ("business", models.CharField(choices=[("travel", "Travel"), ("isp", "ISP")], max_length=10)),
                ("price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("profit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("in-progress", "In progress"),
                            ("ready", "Ready"),
                            ("delivered", "Delivered"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("delivery_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="services",
                        to="customers.customer",
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="services",
                        to="vendors.vendor",
                    ),
                ),
                (
                    "receivable",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="service",
                        to="customers.receivable",
                    ),
                ),
                (
                    "payable",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="service",
                        to="vendors.payable",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="service_status_created_idx"),
                    models.Index(fields=["customer", "status"], name="service_customer_status_idx"),
                    models.Index(fields=["vendor", "status"], name="service_vendor_status_idx"),
                    models.Index(fields=["business", "created_at"], name="service_business_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("price__gte", Decimal("0.00"))),
                        name="service_price_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("cost__gte", Decimal("0.00"))),
                        name="service_cost_nonnegative",
                    ),
                ],
            },
        ),
    ]
