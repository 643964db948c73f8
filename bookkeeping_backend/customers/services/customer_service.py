# customers/services/customer_service.py

"""
CUSTOMER SERVICE

- create_customer / update_customer : master data (phone is unique)
- get_customer_ledger               : read-only statement

balance and total_services are never accepted as input here; they belong to
the posting protocol and the service-order counters.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Sum

from accounting.models.transaction import Transaction
from accounting.money import ZERO, q2, require_text
from accounting.services.exceptions import ConflictError, from_django_validation
from accounting.services.posting import get_or_not_found
from customers.models import Customer, Receivable

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "phone", "email", "address", "passport_number", "nationality")

DUPLICATE_PHONE_MESSAGE = "A customer with this phone already exists"


def serialize_customer(customer: Customer) -> dict:
    return {
        "id": customer.pk,
        "name": customer.name,
        "phone": customer.phone,
        "email": customer.email,
        "address": customer.address,
        "passport_number": customer.passport_number,
        "nationality": customer.nationality,
        "balance": str(q2(customer.balance)),
        "total_services": customer.total_services,
    }


def _phone_taken(phone: str, *, exclude_id=None) -> bool:
    qs = Customer.objects.filter(phone=phone)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


@transaction.atomic
def create_customer(*, name, phone, **details) -> dict:
    name = require_text(name, field="name")
    phone = require_text(phone, field="phone")

    if _phone_taken(phone):
        raise ConflictError(DUPLICATE_PHONE_MESSAGE)

    customer = Customer(
        name=name,
        phone=phone,
        **{k: (details.get(k) or "").strip() for k in EDITABLE_FIELDS[2:]},
    )
    try:
        customer.save()
    except ValidationError as exc:
        raise from_django_validation(exc) from exc
    except IntegrityError as exc:
        raise ConflictError(DUPLICATE_PHONE_MESSAGE) from exc

    logger.info("Customer created", extra={"customer_id": customer.pk})
    return serialize_customer(customer)


@transaction.atomic
def update_customer(*, customer_id, **changes) -> dict:
    customer = get_or_not_found(Customer, customer_id, queryset=Customer.objects.select_for_update())

    for field in EDITABLE_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(customer, field, str(changes[field]).strip())

    if _phone_taken(customer.phone, exclude_id=customer.pk):
        raise ConflictError(DUPLICATE_PHONE_MESSAGE)

    try:
        customer.save()
    except ValidationError as exc:
        raise from_django_validation(exc) from exc

    return serialize_customer(customer)


# ============================================================
# READ-ONLY STATEMENT
# ============================================================


def get_customer_ledger(*, customer_id) -> dict:
    """
    Customer statement: receivables with paid/due, delivered services,
    collection history and totals. READ-ONLY.
    """
    from orders.models import Service

    customer = get_or_not_found(Customer, customer_id)

    receivables = list(Receivable.objects.filter(customer=customer).order_by("due_date", "id"))
    services = Service.objects.filter(
        customer=customer, status=Service.STATUS_DELIVERED
    ).order_by("-delivery_date", "-id")
    payments = Transaction.objects.filter(customer=customer, type=Transaction.INCOME)

    total_billed = sum((q2(r.amount) for r in receivables), ZERO)
    total_paid = sum((q2(r.paid_amount) for r in receivables), ZERO)
    total_due = sum((r.remaining for r in receivables), ZERO)
    advances = q2(
        payments.filter(category=Transaction.CATEGORY_CUSTOMER_ADVANCE).aggregate(
            s=Sum("amount")
        )["s"]
    )

    return {
        "customer": serialize_customer(customer),
        "receivables": [
            {
                "id": r.pk,
                "date": str(r.date),
                "due_date": str(r.due_date),
                "business": r.business,
                "description": r.description,
                "amount": str(q2(r.amount)),
                "paid_amount": str(q2(r.paid_amount)),
                "due_amount": str(r.remaining),
                "status": r.status,
            }
            for r in receivables
        ],
        "services": [
            {
                "id": s.pk,
                "name": s.name,
                "service_type": s.service_type,
                "delivery_date": str(s.delivery_date) if s.delivery_date else None,
                "price": str(q2(s.price)),
            }
            for s in services
        ],
        "payments": [
            {
                "id": t.pk,
                "date": str(t.date),
                "amount": str(q2(t.amount)),
                "category": t.category,
                "reference_id": t.reference_id,
                "description": t.description,
            }
            for t in payments.order_by("-date", "-id")
        ],
        "total_billed": str(total_billed),
        "total_paid": str(total_paid),
        "total_due": str(total_due),
        "advances_received": str(advances),
        "advance_credit": str(customer.advance_credit),
    }
