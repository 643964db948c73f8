# vendors/api/urls.py

from django.urls import path

from vendors.api.views import (
    PayableDetailView,
    PayableListCreateView,
    PayableSettleView,
    VendorBillPaymentView,
    VendorDetailView,
    VendorLedgerView,
    VendorListCreateView,
    VendorServiceTemplateView,
)

urlpatterns = [
    path("", VendorListCreateView.as_view(), name="vendors"),
    path("<int:vendor_id>/", VendorDetailView.as_view(), name="vendor-detail"),
    path("<int:vendor_id>/ledger/", VendorLedgerView.as_view(), name="vendor-ledger"),
    path("<int:vendor_id>/payments/", VendorBillPaymentView.as_view(), name="vendor-payments"),
    path(
        "<int:vendor_id>/templates/",
        VendorServiceTemplateView.as_view(),
        name="vendor-templates",
    ),
    path("payables/", PayableListCreateView.as_view(), name="payables"),
    path("payables/<int:payable_id>/", PayableDetailView.as_view(), name="payable-detail"),
    path(
        "payables/<int:payable_id>/settle/",
        PayableSettleView.as_view(),
        name="payable-settle",
    ),
]
