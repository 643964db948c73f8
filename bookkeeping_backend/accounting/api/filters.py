# accounting/api/filters.py

import django_filters as filters

from accounting.models.transaction import Transaction


class TransactionFilter(filters.FilterSet):
    date_from = filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = filters.DateFilter(field_name="date", lookup_expr="lte")
    category = filters.CharFilter(field_name="category", lookup_expr="iexact")

    class Meta:
        model = Transaction
        fields = [
            "type",
            "business",
            "account",
            "customer",
            "vendor",
            "reference_model",
            "reference_id",
            "category",
            "date_from",
            "date_to",
        ]
