# accounting/api/views.py

"""
======================================================
PATH: accounting/api/views.py
======================================================
CASHBOOK + REPORTS API

Thin HTTP layer over accounting.services:
- accounts        : list / create / update (balance is read-only)
- transactions    : filtered list, manual income / expense, delete manual
- reports         : snapshot, aging, settlement history
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import ledger_error_response
from accounting.api.filters import TransactionFilter
from accounting.api.serializers import (
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
    AgingQuerySerializer,
    ManualEntryCreateSerializer,
    ReportSnapshotQuerySerializer,
    SettlementHistoryQuerySerializer,
    TransactionSerializer,
)
from accounting.models.account import Account
from accounting.models.transaction import Transaction
from accounting.services.cashbook_service import (
    create_account,
    delete_manual_entry,
    record_expense,
    record_income,
    update_account,
)
from accounting.services.exceptions import LedgerError
from accounting.services.report_service import (
    get_aging_report,
    get_report_snapshot,
    get_settlement_history,
)


# ------------------ ACCOUNTS ------------------


class AccountListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountSerializer

    @extend_schema(tags=["accounting"], responses=AccountSerializer(many=True))
    def get(self, request):
        qs = Account.objects.all().order_by("name")
        if request.query_params.get("active") in ("1", "true", "True"):
            qs = qs.filter(is_active=True)
        return Response(AccountSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=AccountCreateSerializer,
        responses={201: AccountSerializer},
    )
    def post(self, request):
        s = AccountCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = create_account(**s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class AccountDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountSerializer

    @extend_schema(tags=["accounting"], responses=AccountSerializer)
    def get(self, request, account_id):
        account = Account.objects.filter(pk=account_id).first()
        if account is None:
            return Response({"detail": "Account not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["accounting"], request=AccountUpdateSerializer)
    def patch(self, request, account_id):
        s = AccountUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            result = update_account(account_id=account_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


# ------------------ TRANSACTIONS ------------------


class TransactionListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = TransactionSerializer
    filterset_class = TransactionFilter
    queryset = Transaction.objects.select_related("account", "customer", "vendor")

    @extend_schema(tags=["accounting"], responses=TransactionSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset()).order_by("-date", "-created_at", "-id")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(TransactionSerializer(page, many=True).data)
        return Response(TransactionSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class IncomeCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ManualEntryCreateSerializer

    @extend_schema(tags=["accounting"], request=ManualEntryCreateSerializer)
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        data.pop("vendor_id", None)

        try:
            result = record_income(**data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class ExpenseCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ManualEntryCreateSerializer

    @extend_schema(tags=["accounting"], request=ManualEntryCreateSerializer)
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = record_expense(**s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class TransactionDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = TransactionSerializer

    @extend_schema(tags=["accounting"], responses=TransactionSerializer)
    def get(self, request, transaction_id):
        txn = (
            Transaction.objects.select_related("account", "customer", "vendor")
            .filter(pk=transaction_id)
            .first()
        )
        if txn is None:
            return Response({"detail": "Transaction not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(TransactionSerializer(txn).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["accounting"], responses={200: OpenApiTypes.OBJECT})
    def delete(self, request, transaction_id):
        try:
            result = delete_manual_entry(transaction_id=transaction_id)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


# ------------------ REPORTS ------------------


class ReportSnapshotView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ReportSnapshotQuerySerializer

    @extend_schema(tags=["reports"], parameters=[ReportSnapshotQuerySerializer])
    def get(self, request):
        q = ReportSnapshotQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        try:
            result = get_report_snapshot(**q.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class AgingReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AgingQuerySerializer

    @extend_schema(tags=["reports"], parameters=[AgingQuerySerializer])
    def get(self, request):
        q = AgingQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        try:
            result = get_aging_report(**q.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class SettlementHistoryView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SettlementHistoryQuerySerializer

    @extend_schema(tags=["reports"], parameters=[SettlementHistoryQuerySerializer])
    def get(self, request):
        q = SettlementHistoryQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        try:
            result = get_settlement_history(**q.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)
