# customers/api/serializers.py

from rest_framework import serializers

from accounting.money import BUSINESSES
from customers.models import Customer, Receivable

BUSINESS_CHOICES = [code for code, _ in BUSINESSES]


class CustomerSerializer(serializers.ModelSerializer):
    advance_credit = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Customer
        fields = (
            "id",
            "name",
            "phone",
            "email",
            "address",
            "passport_number",
            "nationality",
            "balance",
            "advance_credit",
            "total_services",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class CustomerCreateSerializer(serializers.Serializer):
    name = serializers.CharField()
    phone = serializers.CharField()
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
    passport_number = serializers.CharField(required=False, allow_blank=True, default="")
    nationality = serializers.CharField(required=False, allow_blank=True, default="")


class CustomerUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False)
    phone = serializers.CharField(required=False)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    passport_number = serializers.CharField(required=False, allow_blank=True)
    nationality = serializers.CharField(required=False, allow_blank=True)


class ReceivableSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    remaining = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Receivable
        fields = (
            "id",
            "customer",
            "customer_name",
            "business",
            "date",
            "due_date",
            "amount",
            "paid_amount",
            "remaining",
            "status",
            "description",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class ReceivableCreateSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    due_date = serializers.DateField()
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES)
    date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class ReceivableUpdateSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField(required=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    due_date = serializers.DateField(required=False)
    date = serializers.DateField(required=False)
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES, required=False)
    description = serializers.CharField(required=False, allow_blank=True)

    payment_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    account_id = serializers.IntegerField(required=False, allow_null=True)
    payment_date = serializers.DateField(required=False, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class CustomerPaymentCreateSerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    discount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    surcharge = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    date = serializers.DateField(required=False, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, default="")
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES, required=False, allow_null=True)
