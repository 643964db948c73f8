# payroll/api/serializers.py

from rest_framework import serializers

from accounting.money import BUSINESSES
from payroll.models import Employee, Salary

BUSINESS_CHOICES = [code for code, _ in BUSINESSES]


class EmployeeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = (
            "id",
            "name",
            "role",
            "phone",
            "base_salary",
            "business",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class EmployeeCreateSerializer(serializers.Serializer):
    name = serializers.CharField()
    base_salary = serializers.DecimalField(max_digits=14, decimal_places=2)
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES)
    role = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")


class EmployeeUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False)
    base_salary = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES, required=False)
    role = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)


class SalarySerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.name", read_only=True)
    period = serializers.CharField(read_only=True)

    class Meta:
        model = Salary
        fields = (
            "id",
            "employee",
            "employee_name",
            "period",
            "year",
            "month",
            "amount",
            "business",
            "status",
            "paid_date",
            "account",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class SalaryGenerateSerializer(serializers.Serializer):
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES)
    period = serializers.CharField(required=False, allow_blank=True)
    year = serializers.IntegerField(required=False)
    month = serializers.IntegerField(required=False)


class SalaryPaySerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    paid_date = serializers.DateField(required=False, allow_null=True)
