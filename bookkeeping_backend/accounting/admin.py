# accounting/admin.py

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.transaction import Transaction

# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "account_type",
        "balance",
        "bank_name",
        "is_active",
    )
    list_filter = ("account_type", "is_active")
    search_fields = ("name", "bank_name", "account_number")
    ordering = ("name",)
    readonly_fields = ("balance", "created_at", "updated_at")

    fieldsets = (
        (
            "Account Identity",
            {
                "fields": ("name", "account_type", "bank_name", "account_number"),
            },
        ),
        (
            "Status",
            {
                "fields": ("is_active", "balance"),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )


# ============================================================
# TRANSACTION (STRICTLY IMMUTABLE)
# ============================================================


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "date",
        "type",
        "category",
        "amount",
        "account",
        "business",
        "reference_model",
        "reference_id",
    )
    list_filter = ("type", "business", "reference_model", "account")
    search_fields = ("category", "description", "reference_id")
    ordering = ("-date", "-created_at")

    readonly_fields = (
        "date",
        "type",
        "category",
        "amount",
        "business",
        "account",
        "customer",
        "vendor",
        "reference_model",
        "reference_id",
        "description",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
