# orders/apps.py

"""
ORDERS APP CONFIG

Service orders and their receivable / payable lifecycle.
"""

from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
    verbose_name = "Service Orders"
