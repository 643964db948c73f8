# vendors/api/serializers.py

from rest_framework import serializers

from accounting.money import BUSINESSES
from vendors.models import Payable, Vendor, VendorServiceTemplate

BUSINESS_CHOICES = [code for code, _ in BUSINESSES]


class VendorServiceTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = VendorServiceTemplate
        fields = (
            "id",
            "vendor",
            "name",
            "service_type",
            "category",
            "default_price",
            "default_cost",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class VendorSerializer(serializers.ModelSerializer):
    service_templates = VendorServiceTemplateSerializer(many=True, read_only=True)

    class Meta:
        model = Vendor
        fields = (
            "id",
            "name",
            "phone",
            "email",
            "address",
            "service_category",
            "balance",
            "total_services_provided",
            "service_templates",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class VendorCreateSerializer(serializers.Serializer):
    name = serializers.CharField()
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
    service_category = serializers.CharField(required=False, allow_blank=True, default="")


class VendorServiceTemplateUpsertSerializer(serializers.Serializer):
    name = serializers.CharField()
    default_price = serializers.DecimalField(max_digits=14, decimal_places=2)
    default_cost = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)


class VendorServiceTemplateDeleteSerializer(serializers.Serializer):
    name = serializers.CharField()


class VendorUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False)
    phone = serializers.CharField(required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    service_category = serializers.CharField(required=False, allow_blank=True)


class PayableSerializer(serializers.ModelSerializer):
    vendor_name = serializers.CharField(source="vendor.name", read_only=True)
    remaining = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Payable
        fields = (
            "id",
            "vendor",
            "vendor_name",
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


class PayableCreateSerializer(serializers.Serializer):
    vendor_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    due_date = serializers.DateField()
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES)
    date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class PayableUpdateSerializer(serializers.Serializer):
    vendor_id = serializers.IntegerField(required=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    due_date = serializers.DateField(required=False)
    date = serializers.DateField(required=False)
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES, required=False)
    description = serializers.CharField(required=False, allow_blank=True)

    payment_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    account_id = serializers.IntegerField(required=False, allow_null=True)
    payment_date = serializers.DateField(required=False, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class VendorBillPaymentSerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    date = serializers.DateField(required=False, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, default="")
