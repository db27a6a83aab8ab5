from django.apps import apps
from django.urls import path

from .views import OrderViewSet

app_name = "orders"

hub = apps.get_app_config("realtime").hub

urlpatterns = [
    path(
        "",
        OrderViewSet.as_view({"get": "list", "post": "create"}, hub=hub),
        name="order-list",
    ),
    path("batch/", OrderViewSet.as_view({"post": "batch"}, hub=hub), name="order-batch"),
    path(
        "table/<str:table_ids>/",
        OrderViewSet.as_view({"get": "by_tables"}, hub=hub),
        name="order-by-tables",
    ),
    path(
        "<uuid:pk>/",
        OrderViewSet.as_view(
            {"get": "retrieve", "put": "update", "patch": "update", "delete": "destroy"},
            hub=hub,
        ),
        name="order-detail",
    ),
]
