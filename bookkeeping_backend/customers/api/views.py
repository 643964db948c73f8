# customers/api/views.py

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import ledger_error_response
from accounting.api.serializers import SettlementCreateSerializer
from accounting.services.exceptions import LedgerError
from customers.api.filters import CustomerFilter, ReceivableFilter
from customers.api.serializers import (
    CustomerCreateSerializer,
    CustomerPaymentCreateSerializer,
    CustomerSerializer,
    CustomerUpdateSerializer,
    ReceivableCreateSerializer,
    ReceivableSerializer,
    ReceivableUpdateSerializer,
)
from customers.models import Customer, Receivable
from customers.services.customer_payment_service import record_customer_payment
from customers.services.customer_service import (
    create_customer,
    get_customer_ledger,
    update_customer,
)
from customers.services.receivable_service import (
    create_receivable,
    delete_receivable,
    settle_receivable,
    update_receivable,
)


# ------------------ CUSTOMERS ------------------


class CustomerListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CustomerSerializer
    filterset_class = CustomerFilter
    queryset = Customer.objects.all()

    @extend_schema(tags=["customers"], responses=CustomerSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset()).order_by("name", "id")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(CustomerSerializer(page, many=True).data)
        return Response(CustomerSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["customers"],
        request=CustomerCreateSerializer,
        responses={201: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        s = CustomerCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = create_customer(**s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class CustomerDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CustomerSerializer

    @extend_schema(tags=["customers"], responses=CustomerSerializer)
    def get(self, request, customer_id):
        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            return Response({"detail": "Customer not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(CustomerSerializer(customer).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["customers"], request=CustomerUpdateSerializer)
    def patch(self, request, customer_id):
        s = CustomerUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = update_customer(customer_id=customer_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class CustomerLedgerView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["customers"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request, customer_id):
        try:
            result = get_customer_ledger(customer_id=customer_id)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class CustomerPaymentView(GenericAPIView):
    """Pay against everything the customer owes, oldest due first."""

    permission_classes = [IsAuthenticated]
    serializer_class = CustomerPaymentCreateSerializer

    @extend_schema(tags=["customers"], request=CustomerPaymentCreateSerializer)
    def post(self, request, customer_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = record_customer_payment(customer_id=customer_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


# ------------------ RECEIVABLES ------------------


class ReceivableListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ReceivableSerializer
    filterset_class = ReceivableFilter
    queryset = Receivable.objects.select_related("customer")

    @extend_schema(tags=["receivables"], responses=ReceivableSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset()).order_by("due_date", "created_at", "id")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(ReceivableSerializer(page, many=True).data)
        return Response(ReceivableSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["receivables"],
        request=ReceivableCreateSerializer,
        responses={201: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        s = ReceivableCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = create_receivable(**s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class ReceivableDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ReceivableSerializer

    @extend_schema(tags=["receivables"], responses=ReceivableSerializer)
    def get(self, request, receivable_id):
        receivable = Receivable.objects.select_related("customer").filter(pk=receivable_id).first()
        if receivable is None:
            return Response({"detail": "Receivable not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(ReceivableSerializer(receivable).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["receivables"], request=ReceivableUpdateSerializer)
    def patch(self, request, receivable_id):
        s = ReceivableUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = update_receivable(receivable_id=receivable_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)

    @extend_schema(tags=["receivables"], responses={200: OpenApiTypes.OBJECT})
    def delete(self, request, receivable_id):
        try:
            result = delete_receivable(receivable_id=receivable_id)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class ReceivableSettleView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SettlementCreateSerializer

    @extend_schema(tags=["receivables"], request=SettlementCreateSerializer)
    def post(self, request, receivable_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = settle_receivable(receivable_id=receivable_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)
