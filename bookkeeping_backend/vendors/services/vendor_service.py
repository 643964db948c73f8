# vendors/services/vendor_service.py

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from accounting.models.transaction import Transaction
from accounting.money import ZERO, parse_money, q2, require_text
from accounting.services.exceptions import NotFoundError, from_django_validation
from accounting.services.posting import get_or_not_found
from vendors.models import Payable, Vendor, VendorServiceTemplate

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "phone", "email", "address", "service_category")


def serialize_vendor(vendor: Vendor) -> dict:
    return {
        "id": vendor.pk,
        "name": vendor.name,
        "phone": vendor.phone,
        "email": vendor.email,
        "address": vendor.address,
        "service_category": vendor.service_category,
        "balance": str(q2(vendor.balance)),
        "total_services_provided": vendor.total_services_provided,
    }


def serialize_template(template: VendorServiceTemplate) -> dict:
    return {
        "id": template.pk,
        "vendor_id": template.vendor_id,
        "name": template.name,
        "service_type": template.service_type,
        "category": template.category,
        "default_price": str(q2(template.default_price)),
        "default_cost": str(q2(template.default_cost)),
    }


def _save(instance) -> None:
    try:
        instance.save()
    except ValidationError as exc:
        raise from_django_validation(exc) from exc


@transaction.atomic
def create_vendor(*, name, **details) -> dict:
    vendor = Vendor(
        name=require_text(name, field="name"),
        **{k: (details.get(k) or "").strip() for k in EDITABLE_FIELDS[1:]},
    )
    _save(vendor)
    logger.info("Vendor created", extra={"vendor_id": vendor.pk})
    return serialize_vendor(vendor)


@transaction.atomic
def update_vendor(*, vendor_id, **changes) -> dict:
    vendor = get_or_not_found(Vendor, vendor_id, queryset=Vendor.objects.select_for_update())
    for field in EDITABLE_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(vendor, field, str(changes[field]).strip())
    _save(vendor)
    return serialize_vendor(vendor)


# ============================================================
# SERVICE TEMPLATES (vendor price list)
# ============================================================


def _template_prices(default_price, default_cost):
    return (
        parse_money(default_price, field="default_price"),
        parse_money(default_cost, field="default_cost"),
    )


def _find_template(vendor: Vendor, name: str) -> VendorServiceTemplate | None:
    return (
        VendorServiceTemplate.objects.select_for_update()
        .filter(vendor=vendor, name__iexact=name)
        .first()
    )


@transaction.atomic
def add_vendor_service_template(*, vendor_id, name, default_price, default_cost=None) -> dict:
    """
    Add a listed service, or re-price the existing one with the same name.

    Names match case-insensitively; the stored spelling of an existing
    template is kept. The result carries `updated` to tell the two apart.
    """
    name = require_text(name, field="name")
    price, cost = _template_prices(default_price, default_cost)

    # vendor row lock serialises concurrent upserts of the same name
    vendor = get_or_not_found(Vendor, vendor_id, queryset=Vendor.objects.select_for_update())
    template = _find_template(vendor, name)
    updated = template is not None

    if template is None:
        template = VendorServiceTemplate(vendor=vendor, name=name, category=name)
    template.default_price = price
    template.default_cost = cost
    _save(template)

    logger.info(
        "Vendor service template saved",
        extra={"vendor_id": vendor.pk, "template_id": template.pk, "updated": updated},
    )
    result = serialize_template(template)
    result["updated"] = updated
    return result


@transaction.atomic
def update_vendor_service_template_price(*, vendor_id, name, default_price, default_cost=None) -> dict:
    name = require_text(name, field="name")
    price = parse_money(default_price, field="default_price")

    vendor = get_or_not_found(Vendor, vendor_id)
    template = _find_template(vendor, name)
    if template is None:
        raise NotFoundError("Vendor listed service not found")

    template.default_price = price
    # omitted cost keeps the listed one
    if default_cost is not None:
        template.default_cost = parse_money(default_cost, field="default_cost")
    _save(template)
    return serialize_template(template)


@transaction.atomic
def delete_vendor_service_template(*, vendor_id, name) -> dict:
    name = require_text(name, field="name")

    vendor = get_or_not_found(Vendor, vendor_id)
    template = _find_template(vendor, name)
    if template is None:
        raise NotFoundError("Vendor listed service not found")

    template_id = template.pk
    template.delete()

    logger.info(
        "Vendor service template deleted",
        extra={"vendor_id": vendor.pk, "template_id": template_id},
    )
    return {"vendor_id": vendor.pk, "template_id": template_id, "deleted": True}


def get_vendor_ledger(*, vendor_id) -> dict:
    """Vendor statement: bills, delivered services and payments. READ-ONLY."""
    from orders.models import Service

    vendor = get_or_not_found(Vendor, vendor_id)

    payables = list(Payable.objects.filter(vendor=vendor).order_by("due_date", "id"))
    services = list(
        Service.objects.filter(vendor=vendor, status=Service.STATUS_DELIVERED).order_by(
            "-delivery_date", "-id"
        )
    )
    payments = Transaction.objects.filter(vendor=vendor, type=Transaction.EXPENSE).order_by(
        "-date", "-id"
    )

    return {
        "vendor": serialize_vendor(vendor),
        "service_templates": [serialize_template(t) for t in vendor.service_templates.order_by("name")],
        "payables": [
            {
                "id": p.pk,
                "date": str(p.date),
                "due_date": str(p.due_date),
                "business": p.business,
                "description": p.description,
                "amount": str(q2(p.amount)),
                "paid_amount": str(q2(p.paid_amount)),
                "due_amount": str(p.remaining),
                "status": p.status,
            }
            for p in payables
        ],
        "services": [
            {
                "id": s.pk,
                "name": s.name,
                "customer_id": s.customer_id,
                "delivery_date": str(s.delivery_date) if s.delivery_date else None,
                "cost": str(q2(s.cost)),
            }
            for s in services
        ],
        "payments": [
            {
                "id": t.pk,
                "date": str(t.date),
                "amount": str(q2(t.amount)),
                "reference_id": t.reference_id,
                "description": t.description,
            }
            for t in payments
        ],
        "total_billed": str(sum((q2(p.amount) for p in payables), ZERO)),
        "total_paid": str(sum((q2(p.paid_amount) for p in payables), ZERO)),
        "total_due": str(sum((p.remaining for p in payables), ZERO)),
        "total_vendor_cost": str(sum((q2(s.cost) for s in services), ZERO)),
    }
