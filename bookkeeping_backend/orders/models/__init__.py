# orders/models/__init__.py

from orders.models.service import Service

__all__ = [
    "Service",
]
