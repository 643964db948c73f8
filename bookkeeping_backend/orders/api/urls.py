# orders/api/urls.py

from django.urls import path

from orders.api.views import (
    ServiceDeliverView,
    ServiceDetailView,
    ServiceListCreateView,
    ServiceStatusView,
)

urlpatterns = [
    path("", ServiceListCreateView.as_view(), name="services"),
    path("<int:service_id>/", ServiceDetailView.as_view(), name="service-detail"),
    path("<int:service_id>/status/", ServiceStatusView.as_view(), name="service-status"),
    path("<int:service_id>/deliver/", ServiceDeliverView.as_view(), name="service-deliver"),
]
