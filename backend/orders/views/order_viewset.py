import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.response import Response

from core_backend.exceptions import ValidationError
from orders.filters import OrderFilter
from orders.serializers import OrderSerializer
from orders.services import OrderService, order_queryset
from realtime.rooms import parse_entity_id
from users.permissions import CanDeleteOrders

logger = logging.getLogger(__name__)


class OrderViewSet(viewsets.GenericViewSet):
    """
    Staff order endpoints.

    The event hub is handed in through ``as_view(..., hub=hub)`` by the URL
    configuration; every mutation goes through OrderService built on it.
    """

    hub = None
    serializer_class = OrderSerializer
    permission_classes = viewsets.GenericViewSet.permission_classes + [CanDeleteOrders]
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter
    pagination_class = None

    def get_queryset(self):
        return order_queryset().order_by("-created_at")

    def get_service(self):
        return OrderService(self.hub)

    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        return Response(self.get_serializer(queryset, many=True).data)

    def retrieve(self, request, pk=None):
        order = self.get_service().get_order(pk)
        return Response(self.get_serializer(order).data)

    def create(self, request):
        order = self.get_service().create_order(request.data, actor=request.user)
        return Response(self.get_serializer(order).data, status=status.HTTP_201_CREATED)

    def batch(self, request):
        """Accepts a bare list of order specs or ``{"orders": [...]}``."""
        specs = request.data
        if isinstance(specs, dict):
            specs = specs.get("orders")
        orders = self.get_service().create_orders(specs, actor=request.user)
        return Response(self.get_serializer(orders, many=True).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        order = self.get_service().update_order(pk, request.data, actor=request.user)
        return Response(self.get_serializer(order).data)

    def destroy(self, request, pk=None):
        self.get_service().delete_order(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def by_tables(self, request, table_ids=None):
        """Orders referencing any of a comma separated list of table ids."""
        raw_ids = [part for part in (table_ids or "").split(",") if part.strip()]
        parsed = [parse_entity_id(raw) for raw in raw_ids]
        if not parsed or None in parsed:
            raise ValidationError(
                "table_ids must be a comma separated list of table ids.",
                details={"table_ids": raw_ids},
            )
        orders = self.get_service().orders_for_tables(parsed)
        return Response(self.get_serializer(orders, many=True).data)
