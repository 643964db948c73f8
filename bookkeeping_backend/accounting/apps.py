# accounting/apps.py

"""
ACCOUNTING APP CONFIG

Cash accounts, the append-only transaction journal, the posting protocol and
reports.
"""

from django.apps import AppConfig


class AccountingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounting"
    verbose_name = "Accounting"
