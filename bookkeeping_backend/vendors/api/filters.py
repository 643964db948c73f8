# vendors/api/filters.py

import django_filters as filters
from django.db.models import Q

from accounting.money import STATUS_PAID
from vendors.models import Payable, Vendor


class VendorFilter(filters.FilterSet):
    search = filters.CharFilter(method="filter_search")

    class Meta:
        model = Vendor
        fields = ["search"]

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(phone__icontains=value) | Q(service_category__icontains=value))


class PayableFilter(filters.FilterSet):
    due_from = filters.DateFilter(field_name="due_date", lookup_expr="gte")
    due_to = filters.DateFilter(field_name="due_date", lookup_expr="lte")
    open = filters.BooleanFilter(method="filter_open")

    class Meta:
        model = Payable
        fields = ["vendor", "status", "business", "due_from", "due_to", "open"]

    def filter_open(self, queryset, name, value):
        if value is None:
            return queryset
        if value:
            return queryset.exclude(status=STATUS_PAID)
        return queryset.filter(status=STATUS_PAID)
