"""
======================================================
PATH: vendors/migrations/0002_vendorservicetemplate.py
======================================================
MIGRATION: CREATE VendorServiceTemplate (vendor price list)
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    dependencies = [
        ("vendors", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="VendorServiceTemplate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("service_type", models.CharField(default="other", max_length=20)),
                ("category", models.CharField(blank=True, default="", max_length=200)),
                (
                    "default_price",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                (
                    "default_cost",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "vendor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="service_templates",
                        to="vendors.vendor",
                    ),
                ),
            ],
            options={
                "ordering": ["vendor", "name"],
                "constraints": [
                    models.UniqueConstraint(fields=("vendor", "name"), name="uniq_vendor_template_name"),
                    models.CheckConstraint(
                        condition=models.Q(("default_price__gte", Decimal("0.00")))
                        & models.Q(("default_cost__gte", Decimal("0.00"))),
                        name="vendor_template_prices_nonnegative",
                    ),
                ],
            },
        ),
    ]
