# payroll/services/salary_service.py

"""
======================================================
PATH: payroll/services/salary_service.py
======================================================
SALARY SERVICE

- create_employee / update_employee : staff master data
- generate_monthly_salaries         : one unpaid line per active employee
                                      and period; unpaid lines are refreshed
                                      to the current base salary
- pay_salary                        : expense from an account, via the
                                      posting protocol (funds checked)

Paid salaries are never regenerated or re-paid.
"""

from __future__ import annotations

import logging
import re

from django.core.exceptions import ValidationError
from django.db import transaction

from accounting.models.transaction import Transaction
from accounting.money import parse_date, parse_money, q2, require_business, require_text
from accounting.services.exceptions import (
    ConflictError,
    LedgerValidationError,
    from_django_validation,
)
from accounting.services.posting import (
    get_or_not_found,
    ledger_unit,
    lock_account,
    lock_row,
    record_transaction,
    require_funds,
)
from payroll.models import Employee, Salary

logger = logging.getLogger(__name__)

PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")

EMPLOYEE_TEXT_FIELDS = ("role", "phone")


def serialize_employee(employee: Employee) -> dict:
    return {
        "id": employee.pk,
        "name": employee.name,
        "role": employee.role,
        "phone": employee.phone,
        "base_salary": str(q2(employee.base_salary)),
        "business": employee.business,
        "is_active": employee.is_active,
    }


def serialize_salary(salary: Salary) -> dict:
    return {
        "id": salary.pk,
        "employee_id": salary.employee_id,
        "period": salary.period,
        "year": salary.year,
        "month": salary.month,
        "amount": str(q2(salary.amount)),
        "business": salary.business,
        "status": salary.status,
        "paid_date": str(salary.paid_date) if salary.paid_date else None,
        "account_id": salary.account_id,
    }


def _save(instance) -> None:
    try:
        instance.save()
    except ValidationError as exc:
        raise from_django_validation(exc) from exc


# ============================================================
# EMPLOYEES
# ============================================================


@transaction.atomic
def create_employee(*, name, base_salary, business, role: str = "", phone: str = "") -> dict:
    employee = Employee(
        name=require_text(name, field="name"),
        base_salary=parse_money(base_salary, field="base_salary", positive=True),
        business=require_business(business),
        role=(role or "").strip(),
        phone=(phone or "").strip(),
    )
    _save(employee)

    logger.info("Employee created", extra={"employee_id": employee.pk})
    return serialize_employee(employee)


@transaction.atomic
def update_employee(*, employee_id, **changes) -> dict:
    employee = get_or_not_found(
        Employee, employee_id, queryset=Employee.objects.select_for_update()
    )

    if changes.get("name") is not None:
        employee.name = require_text(changes["name"], field="name")
    if changes.get("base_salary") is not None:
        employee.base_salary = parse_money(
            changes["base_salary"], field="base_salary", positive=True
        )
    if changes.get("business") is not None:
        employee.business = require_business(changes["business"])
    if changes.get("is_active") is not None:
        employee.is_active = bool(changes["is_active"])
    for field in EMPLOYEE_TEXT_FIELDS:
        if changes.get(field) is not None:
            setattr(employee, field, str(changes[field]).strip())

    _save(employee)
    return serialize_employee(employee)


# ============================================================
# GENERATION
# ============================================================


def parse_period(period=None, *, year=None, month=None) -> tuple[int, int]:
    """Accepts "YYYY-MM" or explicit year / month."""
    if period:
        match = PERIOD_RE.match(str(period).strip())
        if not match:
            raise LedgerValidationError("Period must be in YYYY-MM format")
        year, month = int(match.group(1)), int(match.group(2))

    try:
        year = int(year)
        month = int(month)
    except (TypeError, ValueError) as exc:
        raise LedgerValidationError("Valid year and month are required") from exc

    if not 2000 <= year <= 3000:
        raise LedgerValidationError("Year must be between 2000 and 3000")
    if not 1 <= month <= 12:
        raise LedgerValidationError("Month must be between 1 and 12")

    return year, month


def generate_monthly_salaries(*, business, period=None, year=None, month=None) -> dict:
    """
    Create unpaid salaries for every active employee of `business`.

    Existing unpaid lines for the period are refreshed to the employee's
    current base salary; paid lines are left alone.
    """
    business = require_business(business)
    year, month = parse_period(period, year=year, month=month)

    created = 0
    updated = 0

    with ledger_unit("generate_monthly_salaries", lock_keys=[f"payroll:{business}"]):
        employees = Employee.objects.filter(business=business, is_active=True).order_by("id")
        existing = {
            s.employee_id: s
            for s in Salary.objects.select_for_update().filter(
                employee__in=employees, year=year, month=month
            )
        }

        for employee in employees:
            salary = existing.get(employee.pk)

            if salary is None:
                _save(
                    Salary(
                        employee=employee,
                        amount=q2(employee.base_salary),
                        year=year,
                        month=month,
                        business=business,
                    )
                )
                created += 1
                continue

            if salary.is_paid or q2(salary.amount) == q2(employee.base_salary):
                continue

            salary.amount = q2(employee.base_salary)
            _save(salary)
            updated += 1

    logger.info(
        "Monthly salaries generated",
        extra={
            "business": business,
            "period": f"{year:04d}-{month:02d}",
            "created": created,
            "updated": updated,
        },
    )
    return {
        "period": f"{year:04d}-{month:02d}",
        "business": business,
        "created": created,
        "updated": updated,
    }


# ============================================================
# PAYMENT
# ============================================================


def pay_salary(*, salary_id, account_id, paid_date=None) -> dict:
    pay_date = parse_date(paid_date, field="paid_date")

    with ledger_unit("pay_salary", lock_keys=[f"salary:{salary_id}"]):
        salary = lock_row(Salary, salary_id)
        if salary.is_paid:
            raise ConflictError("This salary is already paid")

        account = lock_account(account_id)
        require_funds(
            account,
            salary.amount,
            message="Insufficient account balance for salary payment",
        )

        salary.status = Salary.STATUS_PAID
        salary.paid_date = pay_date
        salary.account = account
        _save(salary)

        txn = record_transaction(
            account=account,
            type=Transaction.EXPENSE,
            amount=salary.amount,
            category=Transaction.CATEGORY_SALARY,
            business=salary.business,
            date=pay_date,
            description=f"Salary payment for {salary.employee.name} ({salary.period})",
            reference_model=Transaction.REF_SALARY,
            reference_id=salary.pk,
        )

    logger.info(
        "Salary paid",
        extra={
            "salary_id": salary.pk,
            "account_id": account.pk,
            "amount": str(salary.amount),
            "transaction_id": txn.pk,
        },
    )
    result = serialize_salary(salary)
    result["transaction_id"] = txn.pk
    return result
