# customers/api/urls.py

from django.urls import path

from customers.api.views import (
    CustomerDetailView,
    CustomerLedgerView,
    CustomerListCreateView,
    CustomerPaymentView,
    ReceivableDetailView,
    ReceivableListCreateView,
    ReceivableSettleView,
)

urlpatterns = [
    path("", CustomerListCreateView.as_view(), name="customers"),
    path("<int:customer_id>/", CustomerDetailView.as_view(), name="customer-detail"),
    path("<int:customer_id>/ledger/", CustomerLedgerView.as_view(), name="customer-ledger"),
    path(
        "<int:customer_id>/payments/",
        CustomerPaymentView.as_view(),
        name="customer-payments",
    ),
    path("receivables/", ReceivableListCreateView.as_view(), name="receivables"),
    path(
        "receivables/<int:receivable_id>/",
        ReceivableDetailView.as_view(),
        name="receivable-detail",
    ),
    path(
        "receivables/<int:receivable_id>/settle/",
        ReceivableSettleView.as_view(),
        name="receivable-settle",
    ),
]
