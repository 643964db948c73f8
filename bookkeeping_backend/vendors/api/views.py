# vendors/api/views.py

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import ledger_error_response
from accounting.api.serializers import SettlementCreateSerializer
from accounting.services.exceptions import LedgerError
from vendors.api.filters import PayableFilter, VendorFilter
from vendors.api.serializers import (
    PayableCreateSerializer,
    PayableSerializer,
    PayableUpdateSerializer,
    VendorBillPaymentSerializer,
    VendorCreateSerializer,
    VendorSerializer,
    VendorServiceTemplateDeleteSerializer,
    VendorServiceTemplateSerializer,
    VendorServiceTemplateUpsertSerializer,
    VendorUpdateSerializer,
)
from vendors.models import Payable, Vendor, VendorServiceTemplate
from vendors.services.bill_payment_service import pay_vendor_bill
from vendors.services.payable_service import (
    create_payable,
    delete_payable,
    settle_payable,
    update_payable,
)
from vendors.services.vendor_service import (
    add_vendor_service_template,
    create_vendor,
    delete_vendor_service_template,
    get_vendor_ledger,
    update_vendor,
    update_vendor_service_template_price,
)


# ------------------ VENDORS ------------------


class VendorListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = VendorSerializer
    filterset_class = VendorFilter
    queryset = Vendor.objects.prefetch_related("service_templates")

    @extend_schema(tags=["vendors"], responses=VendorSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset()).order_by("name", "id")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(VendorSerializer(page, many=True).data)
        return Response(VendorSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["vendors"], request=VendorCreateSerializer, responses={201: OpenApiTypes.OBJECT})
    def post(self, request):
        s = VendorCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = create_vendor(**s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class VendorDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = VendorSerializer

    @extend_schema(tags=["vendors"], responses=VendorSerializer)
    def get(self, request, vendor_id):
        vendor = Vendor.objects.prefetch_related("service_templates").filter(pk=vendor_id).first()
        if vendor is None:
            return Response({"detail": "Vendor not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(VendorSerializer(vendor).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["vendors"], request=VendorUpdateSerializer)
    def patch(self, request, vendor_id):
        s = VendorUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = update_vendor(vendor_id=vendor_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class VendorLedgerView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["vendors"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request, vendor_id):
        try:
            result = get_vendor_ledger(vendor_id=vendor_id)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)

class VendorServiceTemplateView(GenericAPIView):
    """
    A vendor's listed services. POST adds or re-prices by name,
    PATCH re-prices an existing one, DELETE removes it.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = VendorServiceTemplateSerializer

    @extend_schema(tags=["vendors"], responses=VendorServiceTemplateSerializer(many=True))
    def get(self, request, vendor_id):
        if not Vendor.objects.filter(pk=vendor_id).exists():
            return Response({"detail": "Vendor not found"}, status=status.HTTP_404_NOT_FOUND)
        qs = VendorServiceTemplate.objects.filter(vendor_id=vendor_id).order_by("name")
        return Response(VendorServiceTemplateSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["vendors"], request=VendorServiceTemplateUpsertSerializer, responses={201: OpenApiTypes.OBJECT})
    def post(self, request, vendor_id):
        s = VendorServiceTemplateUpsertSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = add_vendor_service_template(vendor_id=vendor_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        code = status.HTTP_200_OK if result["updated"] else status.HTTP_201_CREATED
        return Response(result, status=code)

    @extend_schema(tags=["vendors"], request=VendorServiceTemplateUpsertSerializer)
    def patch(self, request, vendor_id):
        s = VendorServiceTemplateUpsertSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = update_vendor_service_template_price(vendor_id=vendor_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)

    @extend_schema(tags=["vendors"], request=VendorServiceTemplateDeleteSerializer)
    def delete(self, request, vendor_id):
        s = VendorServiceTemplateDeleteSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = delete_vendor_service_template(vendor_id=vendor_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)



class VendorBillPaymentView(GenericAPIView):
    """Pay a vendor's open bills, oldest due first."""

    permission_classes = [IsAuthenticated]
    serializer_class = VendorBillPaymentSerializer

    @extend_schema(tags=["vendors"], request=VendorBillPaymentSerializer)
    def post(self, request, vendor_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = pay_vendor_bill(vendor_id=vendor_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


# ------------------ PAYABLES ------------------


class PayableListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PayableSerializer
    filterset_class = PayableFilter
    queryset = Payable.objects.select_related("vendor")

    @extend_schema(tags=["payables"], responses=PayableSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset()).order_by("due_date", "created_at", "id")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(PayableSerializer(page, many=True).data)
        return Response(PayableSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["payables"], request=PayableCreateSerializer, responses={201: OpenApiTypes.OBJECT})
    def post(self, request):
        s = PayableCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = create_payable(**s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class PayableDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PayableSerializer

    @extend_schema(tags=["payables"], responses=PayableSerializer)
    def get(self, request, payable_id):
        payable = Payable.objects.select_related("vendor").filter(pk=payable_id).first()
        if payable is None:
            return Response({"detail": "Payable not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(PayableSerializer(payable).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["payables"], request=PayableUpdateSerializer)
    def patch(self, request, payable_id):
        s = PayableUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = update_payable(payable_id=payable_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)

    @extend_schema(tags=["payables"], responses={200: OpenApiTypes.OBJECT})
    def delete(self, request, payable_id):
        try:
            result = delete_payable(payable_id=payable_id)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class PayableSettleView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SettlementCreateSerializer

    @extend_schema(tags=["payables"], request=SettlementCreateSerializer)
    def post(self, request, payable_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = settle_payable(payable_id=payable_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)
