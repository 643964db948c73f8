# orders/api/views.py

"""
======================================================
PATH: orders/api/views.py
======================================================
SERVICE ORDER API

All ledger effects (receivable / payable / counters) happen in
orders.services.service_order_service; views only validate input shape.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import ledger_error_response
from accounting.services.exceptions import LedgerError
from orders.api.filters import ServiceFilter
from orders.api.serializers import (
    ServiceCreateSerializer,
    ServiceDeliverSerializer,
    ServiceSerializer,
    ServiceStatusSerializer,
    ServiceUpdateSerializer,
)
from orders.models import Service
from orders.services.service_order_service import (
    create_service,
    delete_service,
    deliver_service,
    transition_service_status,
    update_service,
)


class ServiceListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ServiceSerializer
    filterset_class = ServiceFilter
    queryset = Service.objects.select_related("customer", "vendor")

    @extend_schema(tags=["services"], responses=ServiceSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset()).order_by("-created_at", "-id")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(ServiceSerializer(page, many=True).data)
        return Response(ServiceSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["services"], request=ServiceCreateSerializer, responses={201: OpenApiTypes.OBJECT})
    def post(self, request):
        s = ServiceCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = create_service(**s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class ServiceDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ServiceSerializer

    @extend_schema(tags=["services"], responses=ServiceSerializer)
    def get(self, request, service_id):
        service = Service.objects.select_related("customer", "vendor").filter(pk=service_id).first()
        if service is None:
            return Response({"detail": "Service not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(ServiceSerializer(service).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["services"], request=ServiceUpdateSerializer)
    def patch(self, request, service_id):
        s = ServiceUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = update_service(service_id=service_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)

    @extend_schema(tags=["services"], responses={200: OpenApiTypes.OBJECT})
    def delete(self, request, service_id):
        try:
            result = delete_service(service_id=service_id)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class ServiceStatusView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ServiceStatusSerializer

    @extend_schema(tags=["services"], request=ServiceStatusSerializer)
    def post(self, request, service_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = transition_service_status(
                service_id=service_id,
                new_status=s.validated_data["status"],
                delivery_date=s.validated_data.get("delivery_date"),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class ServiceDeliverView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ServiceDeliverSerializer

    @extend_schema(tags=["services"], request=ServiceDeliverSerializer)
    def post(self, request, service_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = deliver_service(service_id=service_id, **s.validated_data)
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_200_OK)
