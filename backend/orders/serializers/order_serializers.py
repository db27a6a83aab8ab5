from django.conf import settings
from rest_framework import serializers

from menu.serializers import MenuItemSummarySerializer
from orders.models import Order
from payments.money import quantize
from users.serializers import StaffSummarySerializer


def price_in_cents(value):
    """Rounds to cents (half up). The rounded price must stay positive."""
    value = quantize(settings.RESTAURANT["CURRENCY"], value)
    if value <= 0:
        raise serializers.ValidationError("Price must be a positive amount.")
    return value


class OrderSpecSerializer(serializers.Serializer):
    """
    Input for one order. Used on its own for single creation and with
    ``many=True`` for batches, where every order spec is validated before any
    insert begins.
    """

    table_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    menu_item_id = serializers.UUIDField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    price = serializers.DecimalField(max_digits=None, decimal_places=None)

    def validate_table_ids(self, value):
        # Ordered set: keep the first occurrence of each id.
        return list(dict.fromkeys(value))

    def validate_notes(self, value):
        return value or ""

    def validate_price(self, value):
        return price_in_cents(value)


class OrderUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.UPDATABLE_STATUSES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    price = serializers.DecimalField(max_digits=None, decimal_places=None, required=False)

    def validate_notes(self, value):
        return value or ""

    def validate_price(self, value):
        return price_in_cents(value)


class OrderSerializer(serializers.ModelSerializer):
    """Read representation used in responses and event payloads."""

    table_ids = serializers.ListField(child=serializers.UUIDField(), read_only=True)
    menu_item_id = serializers.UUIDField(read_only=True)
    menu_item = MenuItemSummarySerializer(read_only=True)
    payment_id = serializers.UUIDField(read_only=True, allow_null=True)
    is_paid = serializers.BooleanField(read_only=True)

    created_by = StaffSummarySerializer(read_only=True)
    accepted_by = StaffSummarySerializer(read_only=True)
    prepared_by = StaffSummarySerializer(read_only=True)
    dispatched_by = StaffSummarySerializer(read_only=True)
    delivered_by = StaffSummarySerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "table_ids",
            "menu_item_id",
            "menu_item",
            "status",
            "notes",
            "price",
            "is_paid",
            "payment_id",
            "paid_at",
            "created_by",
            "accepted_by",
            "accepted_at",
            "prepared_by",
            "prepared_at",
            "dispatched_by",
            "dispatched_at",
            "delivered_by",
            "delivered_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
