# accounting/api/urls.py

from django.urls import path

from accounting.api.views import (
    AccountDetailView,
    AccountListCreateView,
    AgingReportView,
    ExpenseCreateView,
    IncomeCreateView,
    ReportSnapshotView,
    SettlementHistoryView,
    TransactionDetailView,
    TransactionListView,
)

urlpatterns = [
    path("accounts/", AccountListCreateView.as_view(), name="accounting-accounts"),
    path(
        "accounts/<int:account_id>/",
        AccountDetailView.as_view(),
        name="accounting-account-detail",
    ),
    path("transactions/", TransactionListView.as_view(), name="accounting-transactions"),
    path(
        "transactions/<int:transaction_id>/",
        TransactionDetailView.as_view(),
        name="accounting-transaction-detail",
    ),
    path("income/", IncomeCreateView.as_view(), name="accounting-income"),
    path("expense/", ExpenseCreateView.as_view(), name="accounting-expense"),
    path("reports/snapshot/", ReportSnapshotView.as_view(), name="reports-snapshot"),
    path("reports/aging/", AgingReportView.as_view(), name="reports-aging"),
    path(
        "reports/settlements/",
        SettlementHistoryView.as_view(),
        name="reports-settlement-history",
    ),
]
