# payroll/tests/test_salaries.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.services.exceptions import ConflictError, LedgerValidationError
from payroll.models import Employee, Salary
from payroll.services.salary_service import (
    create_employee,
    generate_monthly_salaries,
    parse_period,
    pay_salary,
    update_employee,
)


class ParsePeriodTests(SimpleTestCase):
    def test_period_string(self):
        self.assertEqual(parse_period("2024-03"), (2024, 3))

    def test_year_and_month(self):
        self.assertEqual(parse_period(year="2024", month=12), (2024, 12))

    def test_rejects_bad_input(self):
        for kwargs in (
            {"period": "2024/03"},
            {"period": "2024-13"},
            {"year": 1999, "month": 1},
            {"year": None, "month": None},
        ):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(LedgerValidationError):
                    parse_period(**kwargs)


class SalaryGenerationTests(TestCase):
    def setUp(self):
        self.alice = create_employee(name="Alice", base_salary="30000", business="isp", role="Technician")
        self.bob = create_employee(name="Bob", base_salary="25000", business="isp")
        create_employee(name="Travel Clerk", base_salary="20000", business="travel")

        inactive = create_employee(name="Gone", base_salary="10000", business="isp")
        update_employee(employee_id=inactive["id"], is_active=False)

    def test_one_line_per_active_employee(self):
        result = generate_monthly_salaries(business="isp", period="2024-03")

        self.assertEqual(result, {"period": "2024-03", "business": "isp", "created": 2, "updated": 0})
        self.assertEqual(Salary.objects.filter(year=2024, month=3).count(), 2)

    def test_regeneration_refreshes_unpaid_only(self):
        generate_monthly_salaries(business="isp", year=2024, month=3)
        account = Account.objects.create(name="Cash", balance=Decimal("100000.00"))
        paid = Salary.objects.get(employee_id=self.alice["id"])
        pay_salary(salary_id=paid.pk, account_id=account.pk, paid_date="2024-03-31")

        Employee.objects.filter(pk__in=[self.alice["id"], self.bob["id"]]).update(base_salary=Decimal("40000.00"))

        result = generate_monthly_salaries(business="isp", period="2024-03")

        self.assertEqual(result["created"], 0)
        self.assertEqual(result["updated"], 1)
        self.assertEqual(Salary.objects.get(employee_id=self.alice["id"]).amount, Decimal("30000.00"))
        self.assertEqual(Salary.objects.get(employee_id=self.bob["id"]).amount, Decimal("40000.00"))

    def test_employee_validation(self):
        with self.assertRaises(LedgerValidationError):
            create_employee(name="Zero", base_salary="0", business="isp")
        with self.assertRaises(LedgerValidationError):
            create_employee(name="Nowhere", base_salary="100", business="grocery")


class SalaryPaymentTests(TestCase):
    def setUp(self):
        employee = create_employee(name="Karim", base_salary="15000", business="travel")
        generate_monthly_salaries(business="travel", period="2024-04")
        self.salary = Salary.objects.get(employee_id=employee["id"])
        self.account = Account.objects.create(name="Bank", account_type=Account.BANK, bank_name="DBBL", balance=Decimal("20000.00"))

    def test_pay_records_expense(self):
        result = pay_salary(salary_id=self.salary.pk, account_id=self.account.pk, paid_date="2024-04-30")

        self.assertEqual(result["status"], Salary.STATUS_PAID)
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("5000.00"))

        txn = Transaction.objects.get(pk=result["transaction_id"])
        self.assertEqual(txn.type, Transaction.EXPENSE)
        self.assertEqual(txn.category, Transaction.CATEGORY_SALARY)
        self.assertEqual(txn.reference_model, Transaction.REF_SALARY)
        self.assertEqual(txn.reference_id, str(self.salary.pk))
        self.assertEqual(txn.date, date(2024, 4, 30))
        self.assertEqual(txn.business, "travel")

    def test_cannot_pay_twice(self):
        pay_salary(salary_id=self.salary.pk, account_id=self.account.pk)

        with self.assertRaisesMessage(ConflictError, "already paid"):
            pay_salary(salary_id=self.salary.pk, account_id=self.account.pk)

        self.assertEqual(Transaction.objects.count(), 1)

    def test_insufficient_funds(self):
        Account.objects.filter(pk=self.account.pk).update(balance=Decimal("100.00"))

        with self.assertRaisesMessage(ConflictError, "Insufficient account balance for salary payment"):
            pay_salary(salary_id=self.salary.pk, account_id=self.account.pk)

        self.salary.refresh_from_db()
        self.assertEqual(self.salary.status, Salary.STATUS_UNPAID)
        self.assertFalse(Transaction.objects.exists())
