# vendors/admin.py

from django.contrib import admin

from vendors.models import Payable, Vendor, VendorServiceTemplate


class VendorServiceTemplateInline(admin.TabularInline):
    model = VendorServiceTemplate
    extra = 0
    fields = ("name", "service_type", "category", "default_price", "default_cost")


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("name", "service_category", "phone", "balance", "total_services_provided")
    search_fields = ("name", "phone", "service_category")
    ordering = ("name",)
    readonly_fields = ("balance", "total_services_provided", "created_at", "updated_at")
    inlines = [VendorServiceTemplateInline]


@admin.register(Payable)
class PayableAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "vendor",
        "business",
        "due_date",
        "amount",
        "paid_amount",
        "status",
    )
    list_filter = ("status", "business")
    search_fields = ("vendor__name", "description")
    ordering = ("due_date",)
    readonly_fields = (
        "vendor",
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
