# payroll/api/filters.py

import django_filters as filters

from payroll.models import Employee, Salary


class EmployeeFilter(filters.FilterSet):
    class Meta:
        model = Employee
        fields = ["business", "is_active"]


class SalaryFilter(filters.FilterSet):
    class Meta:
        model = Salary
        fields = ["employee", "year", "month", "business", "status"]
