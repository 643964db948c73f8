# customers/models/__init__.py

"""
CUSTOMERS MODELS PACKAGE EXPORTS

Keep this file imports-only.
"""

from customers.models.customer import Customer
from customers.models.receivable import Receivable

__all__ = [
    "Customer",
    "Receivable",
]
