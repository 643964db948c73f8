# payroll/api/views.py

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import ledger_error_response
from accounting.services.exceptions import LedgerError
from payroll.api.filters import EmployeeFilter, SalaryFilter
from payroll.api.serializers import (
    EmployeeCreateSerializer,
    EmployeeSerializer,
    EmployeeUpdateSerializer,
    SalaryGenerateSerializer,
    SalaryPaySerializer,
    SalarySerializer,
)
from payroll.models import Employee, Salary
from payroll.services.salary_service import (
    create_employee,
    generate_monthly_salaries,
    pay_salary,
    update_employee,
)


# ------------------ EMPLOYEES ------------------


class EmployeeListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = EmployeeSerializer
    filterset_class = EmployeeFilter
    queryset = Employee.objects.all()

    @extend_schema(tags=["payroll"], responses=EmployeeSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset()).order_by("name", "id")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(EmployeeSerializer(page, many=True).data)
        return Response(EmployeeSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["payroll"], request=EmployeeCreateSerializer, responses={201: OpenApiTypes.OBJECT})
    def post(self, request):
        s = EmployeeCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = create_employee(**s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class EmployeeDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = EmployeeSerializer

    @extend_schema(tags=["payroll"], request=EmployeeUpdateSerializer)
    def patch(self, request, employee_id):
        s = EmployeeUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = update_employee(employee_id=employee_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


# ------------------ SALARIES ------------------


class SalaryListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SalarySerializer
    filterset_class = SalaryFilter
    queryset = Salary.objects.select_related("employee")

    @extend_schema(tags=["payroll"], responses=SalarySerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset()).order_by("-year", "-month", "employee__name")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(SalarySerializer(page, many=True).data)
        return Response(SalarySerializer(qs, many=True).data, status=status.HTTP_200_OK)


class SalaryGenerateView(GenericAPIView):
    """Create (or refresh) the month's unpaid salary lines for one business."""

    permission_classes = [IsAuthenticated]
    serializer_class = SalaryGenerateSerializer

    @extend_schema(tags=["payroll"], request=SalaryGenerateSerializer, responses={200: OpenApiTypes.OBJECT})
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = generate_monthly_salaries(**s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class SalaryPayView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SalaryPaySerializer

    @extend_schema(tags=["payroll"], request=SalaryPaySerializer)
    def post(self, request, salary_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = pay_salary(salary_id=salary_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)
