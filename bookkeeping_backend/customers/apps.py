# customers/apps.py

"""
CUSTOMERS APP CONFIG

Customer master data, receivables, collections and customer payments.
"""

from django.apps import AppConfig


class CustomersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "customers"
    verbose_name = "Customers & Receivables"
