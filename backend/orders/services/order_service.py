import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from menu.services import get_menu_items
from orders.models import Order, OrderTable
from orders.serializers import OrderSerializer, OrderSpecSerializer, OrderUpdateSerializer
from realtime.emitters import ClientEmitters
from tables.serializers import TableSerializer
from tables.services import TableService

logger = logging.getLogger(__name__)


def order_queryset():
    return Order.objects.select_related(
        "menu_item",
        "created_by",
        "accepted_by",
        "prepared_by",
        "dispatched_by",
        "delivered_by",
    ).prefetch_related("table_links")


def validate_input(serializer_class, data, many=False):
    """Runs a DRF input serializer and raises ValidationError with its field errors."""
    serializer = serializer_class(data=data, many=many)
    if not serializer.is_valid():
        raise ValidationError("Invalid input.", details=serializer.errors)
    return serializer.validated_data


class OrderService:
    """
    Order lifecycle: create (single and batch), update, delete and reads.

    Every mutation runs in one transaction and publishes its events through
    the hub once that transaction commits.
    """

    # Tracked stages in lifecycle order, with the field prefix for each.
    TRACKED_STAGES = (
        (Order.Status.ACCEPTED, "accepted"),
        (Order.Status.READY, "prepared"),
        (Order.Status.OUT_FOR_DELIVERY, "dispatched"),
        (Order.Status.DELIVERED, "delivered"),
    )

    def __init__(self, hub):
        self.emitters = ClientEmitters(hub)

    # Reads

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return order_queryset().get(pk=order_id)
        except (Order.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFoundError(f"Order {order_id} not found.", code="order_not_found")

    @staticmethod
    def orders_for_tables(table_ids):
        """Orders referencing any of the given tables, newest first."""
        return order_queryset().filter(tables__in=table_ids).distinct().order_by("-created_at")

    # Mutations

    def create_order(self, data, actor=None) -> Order:
        return self.create_orders([data], actor=actor)[0]

    def create_orders(self, specs, actor=None) -> list:
        """
        All-or-nothing creation. Every order spec is validated before the first
        insert; any failure afterwards rolls the whole batch back and
        nothing is published.
        """
        if not isinstance(specs, list) or not specs:
            raise ValidationError("Expected a non-empty list of orders.")

        validated = validate_input(OrderSpecSerializer, specs, many=True)

        with transaction.atomic():
            menu_items = get_menu_items(spec["menu_item_id"] for spec in validated)
            orders = []
            for position, spec in enumerate(validated):
                orders.append(self._insert(spec, menu_items, actor, position))

            touched = {table_id for order in orders for table_id in order.table_ids}
            changed_tables = TableService.recompute_occupancy(touched)

            created_ids = [order.pk for order in orders]
            by_id = order_queryset().in_bulk(created_ids)
            orders = [by_id[pk] for pk in created_ids]
            for order in orders:
                self.emitters.order_created(OrderSerializer(order).data)
            self._publish_tables(changed_tables)

        logger.info(f"Created {len(orders)} order(s) for tables {sorted(map(str, touched))}")
        return orders

    def update_order(self, order_id, data, actor=None) -> Order:
        validated = validate_input(OrderUpdateSerializer, data)

        with transaction.atomic():
            order = self._lock(order_id)

            if order.is_paid and ("status" in validated or "price" in validated):
                raise ConflictError(
                    "Order is already paid; its price and status can no longer change.",
                    code="order_paid",
                )

            fields = ["updated_at"]
            if "status" in validated and validated["status"] != order.status:
                fields += self.apply_status(order, validated["status"], actor)
            if "notes" in validated:
                order.notes = validated["notes"]
                fields.append("notes")
            if "price" in validated:
                order.price = validated["price"]
                fields.append("price")

            order.save(update_fields=fields)

            order = order_queryset().get(pk=order.pk)
            self.emitters.order_updated(OrderSerializer(order).data)

        logger.info(f"Order {order.id} updated ({', '.join(fields)}), status={order.status}")
        return order

    def delete_order(self, order_id) -> None:
        """Deletes an order in any status and frees its tables if nothing else holds them."""
        with transaction.atomic():
            order = self._lock(order_id)
            deleted_id = order.pk
            table_ids = order.table_ids

            order.delete()
            changed_tables = TableService.recompute_occupancy(table_ids)

            self.emitters.order_deleted(deleted_id)
            self._publish_tables(changed_tables)

        logger.info(f"Order {deleted_id} deleted")

    @classmethod
    def apply_status(cls, order, status, actor=None, now=None) -> list:
        """
        Sets ``status`` and maintains per-stage staff tracking: entering a
        tracked stage stamps who and when, and clears every later stage.
        Moving back to PENDING clears all stages; COMPLETED and CANCELLED
        keep what is recorded. Returns the model fields touched.
        """
        now = now or timezone.now()
        order.status = status
        touched = ["status"]

        stages = [stage for stage, _ in cls.TRACKED_STAGES]
        if status == Order.Status.PENDING:
            first_cleared = 0
        elif status in stages:
            index = stages.index(status)
            prefix = cls.TRACKED_STAGES[index][1]
            setattr(order, f"{prefix}_by", actor if getattr(actor, "pk", None) else None)
            setattr(order, f"{prefix}_at", now)
            touched += [f"{prefix}_by", f"{prefix}_at"]
            first_cleared = index + 1
        else:
            return touched

        for _, prefix in cls.TRACKED_STAGES[first_cleared:]:
            setattr(order, f"{prefix}_by", None)
            setattr(order, f"{prefix}_at", None)
            touched += [f"{prefix}_by", f"{prefix}_at"]
        return touched

    # Helpers

    @staticmethod
    def _insert(spec, menu_items, actor, position) -> Order:
        menu_item = menu_items.get(spec["menu_item_id"])
        if menu_item is None:
            raise NotFoundError(
                f"Menu item {spec['menu_item_id']} not found.",
                code="menu_item_not_found",
                details={"index": position, "menu_item_id": str(spec["menu_item_id"])},
            )
        tables = TableService.get_tables(spec["table_ids"])

        order = Order.objects.create(
            menu_item=menu_item,
            price=spec["price"],
            notes=spec.get("notes", ""),
            status=Order.Status.PENDING,
            created_by=actor if getattr(actor, "pk", None) else None,
        )
        OrderTable.objects.bulk_create(
            [
                OrderTable(order=order, table=table, position=index)
                for index, table in enumerate(tables)
            ]
        )
        return order

    @staticmethod
    def _lock(order_id) -> Order:
        try:
            return Order.objects.select_for_update().get(pk=order_id)
        except (Order.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFoundError(f"Order {order_id} not found.", code="order_not_found")

    def _publish_tables(self, tables):
        for table in tables:
            self.emitters.table_updated(TableSerializer(table).data)
