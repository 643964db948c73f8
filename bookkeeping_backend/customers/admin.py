# customers/admin.py

from django.contrib import admin

from customers.models import Customer, Receivable


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "balance", "total_services", "created_at")
    search_fields = ("name", "phone", "passport_number")
    ordering = ("name",)
    readonly_fields = ("balance", "total_services", "created_at", "updated_at")


# Amounts move only through the receivable services.
@admin.register(Receivable)
class ReceivableAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer",
        "business",
        "due_date",
        "amount",
        "paid_amount",
        "status",
    )
    list_filter = ("status", "business")
    search_fields = ("customer__name", "description")
    ordering = ("due_date",)
    readonly_fields = (
        "customer",
        "business",
        "date",
        "due_date",
        "amount",
        "paid_amount",
        "status",
        "description",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
