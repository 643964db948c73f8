# accounting/api/serializers.py

from rest_framework import serializers

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.money import BUSINESSES

BUSINESS_CHOICES = [code for code, _ in BUSINESSES]


# ------------------ OUTPUT ------------------


class AccountSerializer(serializers.ModelSerializer):
    class Meta:
        model = Account
        fields = (
            "id",
            "name",
            "account_type",
            "balance",
            "bank_name",
            "account_number",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class TransactionSerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source="account.name", read_only=True)
    customer_name = serializers.CharField(source="customer.name", read_only=True, default=None)
    vendor_name = serializers.CharField(source="vendor.name", read_only=True, default=None)

    class Meta:
        model = Transaction
        fields = (
            "id",
            "date",
            "type",
            "amount",
            "category",
            "business",
            "account",
            "account_name",
            "customer",
            "customer_name",
            "vendor",
            "vendor_name",
            "reference_model",
            "reference_id",
            "description",
            "created_at",
        )
        read_only_fields = fields


# ------------------ INPUT ------------------


class AccountCreateSerializer(serializers.Serializer):
    name = serializers.CharField()
    account_type = serializers.ChoiceField(choices=[c for c, _ in Account.ACCOUNT_TYPES], default=Account.CASH)
    opening_balance = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    bank_name = serializers.CharField(required=False, allow_blank=True, default="")
    account_number = serializers.CharField(required=False, allow_blank=True, default="")


class AccountUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False)
    account_type = serializers.ChoiceField(choices=[c for c, _ in Account.ACCOUNT_TYPES], required=False)
    bank_name = serializers.CharField(required=False, allow_blank=True)
    account_number = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)


class ManualEntryCreateSerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    category = serializers.CharField()
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES)
    date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    vendor_id = serializers.IntegerField(required=False, allow_null=True)


class ReportSnapshotQuerySerializer(serializers.Serializer):
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    business = serializers.ChoiceField(choices=["all", *BUSINESS_CHOICES], required=False, default="all")
    trend_window = serializers.ChoiceField(choices=["6m", "12m"], required=False, default="6m")


class AgingQuerySerializer(serializers.Serializer):
    as_of = serializers.DateField(required=False)
    business = serializers.ChoiceField(choices=["all", *BUSINESS_CHOICES], required=False, default="all")


class SettlementHistoryQuerySerializer(serializers.Serializer):
    reference_model = serializers.ChoiceField(choices=[c for c, _ in Transaction.REFERENCE_MODELS])
    reference_id = serializers.CharField()


class SettlementCreateSerializer(serializers.Serializer):
    """Single-document settlement (receivable or payable)."""

    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    account_id = serializers.IntegerField()
    discount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    surcharge = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    date = serializers.DateField(required=False, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, default="")
