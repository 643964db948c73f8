# orders/services/service_order_service.py

"""
======================================================
PATH: orders/services/service_order_service.py
======================================================
SERVICE ORDER SERVICE (lifecycle executor)

Follows service_lifecycle.plan_transition() and keeps the order's documents
in step with its state, all inside ONE posting unit per call:

- receivable : customer is billed `price` while the order is not cancelled
- payable    : vendor is owed `cost` while delivered with cost > 0
- counters   : customer.total_services / vendor.total_services_provided

The status write is part of the same unit: if any ledger effect fails, the
service keeps its previous status.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db.models import F
from django.utils import timezone

from accounting.money import ZERO, parse_date, parse_money, q2, require_business, require_text
from accounting.services.exceptions import LedgerValidationError, from_django_validation
from accounting.services.obligations import open_obligation, remove_obligation, resync_obligation
from accounting.services.posting import get_or_not_found, ledger_unit, lock_row
from customers.models import Customer
from customers.services.receivable_service import RECEIVABLES
from orders.models import Service
from orders.services.service_lifecycle import plan_transition, require_status
from vendors.models import Vendor
from vendors.services.payable_service import PAYABLES

logger = logging.getLogger(__name__)

SERVICE_TYPES = {code for code, _ in Service.SERVICE_TYPES}


def service_due_date(base_date):
    return base_date + timedelta(days=int(getattr(settings, "LEDGER_DUE_GRACE_DAYS", 7)))


def serialize_service(service: Service) -> dict:
    return {
        "id": service.pk,
        "name": service.name,
        "description": service.description,
        "service_type": service.service_type,
        "business": service.business,
        "customer_id": service.customer_id,
        "vendor_id": service.vendor_id,
        "price": str(q2(service.price)),
        "cost": str(q2(service.cost)),
        "profit": str(q2(service.profit)),
        "status": service.status,
        "delivery_date": str(service.delivery_date) if service.delivery_date else None,
        "receivable_id": service.receivable_id,
        "payable_id": service.payable_id,
    }


# ============================================================
# INTERNALS
# ============================================================


def _bump(model, pk, field: str, step: int) -> None:
    if pk is None:
        return
    qs = model.objects.filter(pk=pk)
    if step < 0:
        qs = qs.filter(**{f"{field}__gte": -step})
    qs.update(**{field: F(field) + step})


def _save(service: Service) -> None:
    try:
        service.save()
    except ValidationError as exc:
        raise from_django_validation(exc) from exc


def _require_vendor_for_cost(cost, vendor) -> None:
    if cost > ZERO and vendor is None:
        raise LedgerValidationError("Vendor is required when cost is greater than 0")


def _sync_receivable(service: Service, *, reprice: bool = False) -> None:
    """Open the receivable if missing; re-price an existing one only when asked."""
    description = f"Service receivable: {service.name}"

    if service.receivable_id is None:
        today = timezone.localdate()
        service.receivable = open_obligation(
            RECEIVABLES,
            party=service.customer,
            amount=service.price,
            due_date=service_due_date(today),
            date=today,
            business=service.business,
            description=description,
        )
        return

    if not reprice:
        return

    receivable = service.receivable
    moved = receivable.customer_id != service.customer_id
    service.receivable = resync_obligation(
        RECEIVABLES,
        receivable,
        amount=service.price,
        party=service.customer if moved else None,
        business=service.business,
        description=description,
    )


def _sync_payable(service: Service, *, reprice: bool = False) -> None:
    if q2(service.cost) <= ZERO:
        if service.payable_id is not None:
            remove_obligation(PAYABLES, service.payable)
            service.payable = None
        return

    description = f"Service payable: {service.name}"

    if service.payable_id is None:
        service.payable = open_obligation(
            PAYABLES,
            party=service.vendor,
            amount=service.cost,
            due_date=service_due_date(service.delivery_date),
            date=service.delivery_date,
            business=service.business,
            description=description,
        )
        return

    if not reprice:
        return

    payable = service.payable
    moved = payable.vendor_id != service.vendor_id
    service.payable = resync_obligation(
        PAYABLES,
        payable,
        amount=service.cost,
        party=service.vendor if moved else None,
        business=service.business,
        description=description,
    )


def _apply_plan(
    service: Service,
    plan,
    *,
    delivery_date=None,
    reprice_receivable: bool = False,
    reprice_payable: bool = False,
) -> None:
    if plan.remove_payable and service.payable_id is not None:
        remove_obligation(PAYABLES, service.payable)
        service.payable = None

    if plan.remove_receivable and service.receivable_id is not None:
        remove_obligation(RECEIVABLES, service.receivable)
        service.receivable = None

    if plan.set_delivery_date:
        service.delivery_date = delivery_date or timezone.localdate()
    elif plan.clear_delivery_date:
        service.delivery_date = None

    service.status = plan.to_status

    if plan.ensure_receivable:
        _sync_receivable(service, reprice=reprice_receivable)
    if plan.ensure_payable:
        _sync_payable(service, reprice=reprice_payable)


# ============================================================
# OPERATIONS
# ============================================================


def create_service(
    *,
    customer_id,
    name,
    business,
    price,
    cost=None,
    vendor_id=None,
    service_type=Service.TYPE_OTHER,
    status=Service.STATUS_PENDING,
    delivery_date=None,
    description: str = "",
) -> dict:
    """
    Create an order and bill it right away.

    A receivable for the price is opened unless the order starts cancelled.
    An order created as delivered also raises the vendor payable (cost > 0).
    """
    name = require_text(name, field="name")
    business = require_business(business)
    price = parse_money(price, field="price")
    cost = parse_money(cost, field="cost")
    status = require_status(status)
    if service_type not in SERVICE_TYPES:
        raise LedgerValidationError("Invalid service type")

    if customer_id in (None, ""):
        raise LedgerValidationError("Customer is required")
    customer = get_or_not_found(Customer, customer_id)
    vendor = get_or_not_found(Vendor, vendor_id) if vendor_id not in (None, "") else None
    _require_vendor_for_cost(cost, vendor)

    delivered_on = parse_date(delivery_date, field="delivery_date") if status == Service.STATUS_DELIVERED else None

    with ledger_unit("create_service", lock_keys=[f"customer:{customer.pk}"]):
        service = Service(
            name=name,
            description=description or "",
            service_type=service_type,
            business=business,
            customer=customer,
            vendor=vendor,
            price=price,
            cost=cost,
            status=status,
            delivery_date=delivered_on,
        )
        _save(service)

        _bump(Customer, customer.pk, "total_services", 1)
        _bump(Vendor, getattr(vendor, "pk", None), "total_services_provided", 1)

        if status != Service.STATUS_CANCELLED:
            _sync_receivable(service)
        if status == Service.STATUS_DELIVERED:
            _sync_payable(service)
        _save(service)

    logger.info(
        "Service created",
        extra={
            "service_id": service.pk,
            "status": service.status,
            "price": str(service.price),
            "cost": str(service.cost),
        },
    )
    return serialize_service(service)


def transition_service_status(*, service_id, new_status, delivery_date=None) -> dict:
    target = require_status(new_status)
    delivered_on = (
        parse_date(delivery_date, field="delivery_date") if delivery_date not in (None, "") else None
    )

    with ledger_unit("transition_service_status", lock_keys=[f"service:{service_id}"]):
        service = lock_row(Service, service_id)
        plan = plan_transition(from_status=service.status, to_status=target)

        if plan.noop:
            return serialize_service(service)

        _apply_plan(service, plan, delivery_date=delivered_on)
        _save(service)

    logger.info(
        "Service status changed",
        extra={
            "service_id": service.pk,
            "from_status": plan.from_status,
            "to_status": plan.to_status,
        },
    )
    return serialize_service(service)


def deliver_service(*, service_id, delivery_date=None) -> dict:
    return transition_service_status(
        service_id=service_id,
        new_status=Service.STATUS_DELIVERED,
        delivery_date=delivery_date,
    )


def update_service(
    *,
    service_id,
    name=None,
    description=None,
    service_type=None,
    business=None,
    customer_id=None,
    vendor_id=None,
    price=None,
    cost=None,
    status=None,
    delivery_date=None,
) -> dict:
    """
    Edit an order; documents follow the edit.

    Documents are re-priced only when price / cost, the counterparty or the
    business actually changed; balances move by the change in what is still
    outstanding. A name-only edit leaves settled documents alone.
    """
    new_name = require_text(name, field="name") if name is not None else None
    new_business = require_business(business) if business is not None else None
    new_price = parse_money(price, field="price") if price is not None else None
    new_cost = parse_money(cost, field="cost") if cost is not None else None
    target = require_status(status) if status is not None else None
    if service_type is not None and service_type not in SERVICE_TYPES:
        raise LedgerValidationError("Invalid service type")

    new_customer = get_or_not_found(Customer, customer_id) if customer_id not in (None, "") else None
    new_vendor = get_or_not_found(Vendor, vendor_id) if vendor_id not in (None, "") else None
    delivered_on = (
        parse_date(delivery_date, field="delivery_date") if delivery_date not in (None, "") else None
    )

    with ledger_unit("update_service", lock_keys=[f"service:{service_id}"]):
        service = lock_row(Service, service_id)
        plan = plan_transition(
            from_status=service.status,
            to_status=target or service.status,
            editing=True,
        )
        customer_id_before, vendor_id_before = service.customer_id, service.vendor_id
        business_before = service.business
        price_before, cost_before = q2(service.price), q2(service.cost)

        if new_customer is not None and new_customer.pk != service.customer_id:
            _bump(Customer, service.customer_id, "total_services", -1)
            _bump(Customer, new_customer.pk, "total_services", 1)
            service.customer = new_customer

        if new_vendor is not None and new_vendor.pk != service.vendor_id:
            _bump(Vendor, service.vendor_id, "total_services_provided", -1)
            _bump(Vendor, new_vendor.pk, "total_services_provided", 1)
            service.vendor = new_vendor

        if new_name is not None:
            service.name = new_name
        if description is not None:
            service.description = description
        if service_type is not None:
            service.service_type = service_type
        if new_business is not None:
            service.business = new_business
        if new_price is not None:
            service.price = new_price
        if new_cost is not None:
            service.cost = new_cost

        _require_vendor_for_cost(q2(service.cost), service.vendor)

        if delivered_on is not None and plan.to_status == Service.STATUS_DELIVERED:
            service.delivery_date = delivered_on

        _apply_plan(
            service,
            plan,
            delivery_date=delivered_on,
            reprice_receivable=(
                service.customer_id != customer_id_before
                or service.business != business_before
                or q2(service.price) != price_before
            ),
            reprice_payable=(
                service.vendor_id != vendor_id_before
                or service.business != business_before
                or q2(service.cost) != cost_before
            ),
        )
        _save(service)

    logger.info(
        "Service updated",
        extra={
            "service_id": service.pk,
            "from_status": plan.from_status,
            "to_status": plan.to_status,
        },
    )
    return serialize_service(service)


def delete_service(*, service_id) -> dict:
    """Reverse whatever is still outstanding on the order, then delete it."""
    with ledger_unit("delete_service", lock_keys=[f"service:{service_id}"]):
        service = lock_row(Service, service_id)

        reversed_receivable = ZERO
        reversed_payable = ZERO
        if service.payable_id is not None:
            reversed_payable = remove_obligation(PAYABLES, service.payable)
        if service.receivable_id is not None:
            reversed_receivable = remove_obligation(RECEIVABLES, service.receivable)

        _bump(Customer, service.customer_id, "total_services", -1)
        _bump(Vendor, service.vendor_id, "total_services_provided", -1)

        service.delete()

    logger.info("Service deleted", extra={"service_id": service_id})
    return {
        "service_id": service_id,
        "reversed_receivable": str(reversed_receivable),
        "reversed_payable": str(reversed_payable),
    }
