# customers/api/filters.py

import django_filters as filters
from django.db.models import Q

from accounting.money import STATUS_PAID
from customers.models import Customer, Receivable


class CustomerFilter(filters.FilterSet):
    search = filters.CharFilter(method="filter_search")

    class Meta:
        model = Customer
        fields = ["search"]

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(phone__icontains=value))


class ReceivableFilter(filters.FilterSet):
    due_from = filters.DateFilter(field_name="due_date", lookup_expr="gte")
    due_to = filters.DateFilter(field_name="due_date", lookup_expr="lte")
    open = filters.BooleanFilter(method="filter_open")

    class Meta:
        model = Receivable
        fields = ["customer", "status", "business", "due_from", "due_to", "open"]

    def filter_open(self, queryset, name, value):
        if value is None:
            return queryset
        if value:
            return queryset.exclude(status=STATUS_PAID)
        return queryset.filter(status=STATUS_PAID)
