from django.apps import apps
from django.urls import path

from .views import PaymentDetailView, SettlementView

app_name = "payments"

hub = apps.get_app_config("realtime").hub

urlpatterns = [
    path("", SettlementView.as_view(hub=hub), name="settle"),
    path("<uuid:pk>/", PaymentDetailView.as_view(), name="payment-detail"),
]
