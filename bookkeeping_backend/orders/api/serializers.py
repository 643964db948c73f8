# orders/api/serializers.py

from rest_framework import serializers

from accounting.money import BUSINESSES
from orders.models import Service

BUSINESS_CHOICES = [code for code, _ in BUSINESSES]
STATUS_CHOICES = [code for code, _ in Service.STATUSES]
TYPE_CHOICES = [code for code, _ in Service.SERVICE_TYPES]


class ServiceSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    vendor_name = serializers.CharField(source="vendor.name", read_only=True, default=None)

    class Meta:
        model = Service
        fields = (
            "id",
            "name",
            "description",
            "service_type",
            "business",
            "customer",
            "customer_name",
            "vendor",
            "vendor_name",
            "price",
            "cost",
            "profit",
            "status",
            "delivery_date",
            "receivable",
            "payable",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class ServiceCreateSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField()
    vendor_id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, default="")
    service_type = serializers.ChoiceField(choices=TYPE_CHOICES, default=Service.TYPE_OTHER)
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES)
    price = serializers.DecimalField(max_digits=14, decimal_places=2)
    cost = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, default=Service.STATUS_PENDING)
    delivery_date = serializers.DateField(required=False, allow_null=True)


class ServiceUpdateSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField(required=False)
    vendor_id = serializers.IntegerField(required=False)
    name = serializers.CharField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    service_type = serializers.ChoiceField(choices=TYPE_CHOICES, required=False)
    business = serializers.ChoiceField(choices=BUSINESS_CHOICES, required=False)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    cost = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    delivery_date = serializers.DateField(required=False, allow_null=True)


class ServiceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUS_CHOICES)
    delivery_date = serializers.DateField(required=False, allow_null=True)


class ServiceDeliverSerializer(serializers.Serializer):
    delivery_date = serializers.DateField(required=False, allow_null=True)
