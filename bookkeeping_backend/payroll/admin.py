# payroll/admin.py

from django.contrib import admin

from payroll.models import Employee, Salary


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("name", "role", "business", "base_salary", "is_active")
    list_filter = ("business", "is_active")
    search_fields = ("name", "phone", "role")
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(Salary)
class SalaryAdmin(admin.ModelAdmin):
    list_display = ("employee", "year", "month", "amount", "business", "status", "paid_date", "account")
    list_filter = ("status", "business", "year", "month")
    search_fields = ("employee__name",)
    ordering = ("-year", "-month")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
