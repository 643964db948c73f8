# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from accounting.models.account import Account
from accounting.models.obligation import Obligation
from accounting.models.transaction import Transaction

__all__ = [
    "Account",
    "Obligation",
    "Transaction",
]
