# payroll/api/urls.py

from django.urls import path

from payroll.api.views import (
    EmployeeDetailView,
    EmployeeListCreateView,
    SalaryGenerateView,
    SalaryListView,
    SalaryPayView,
)

urlpatterns = [
    path("employees/", EmployeeListCreateView.as_view(), name="employees"),
    path("employees/<int:employee_id>/", EmployeeDetailView.as_view(), name="employee-detail"),
    path("salaries/", SalaryListView.as_view(), name="salaries"),
    path("salaries/generate/", SalaryGenerateView.as_view(), name="salaries-generate"),
    path("salaries/<int:salary_id>/pay/", SalaryPayView.as_view(), name="salary-pay"),
]
