# orders/admin.py

from django.contrib import admin

from orders.models import Service


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    """Read-only: status changes must run through the lifecycle service."""

    list_display = (
        "id",
        "name",
        "service_type",
        "customer",
        "vendor",
        "price",
        "cost",
        "profit",
        "status",
        "delivery_date",
    )
    list_filter = ("status", "service_type", "business")
    search_fields = ("name", "customer__name", "vendor__name")
    ordering = ("-created_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
