# payroll/models/__init__.py

from payroll.models.employee import Employee
from payroll.models.salary import Salary

__all__ = [
    "Employee",
    "Salary",
]
