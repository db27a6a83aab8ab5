from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from .models import Payment

ZERO = Decimal("0")


class PaymentMethodSerializer(serializers.Serializer):
    method = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=ZERO)

    def validate_method(self, value):
        value = value.strip().lower()
        accepted = settings.RESTAURANT["PAYMENT_METHODS"]
        if value not in accepted:
            raise serializers.ValidationError(
                f"Unsupported payment method '{value}'. Accepted: {', '.join(accepted)}."
            )
        return value


class DiscountSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Payment.DiscountType.choices)
    value = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=ZERO)
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")


class SettlementRequestSerializer(serializers.Serializer):
    order_item_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    payment_methods = PaymentMethodSerializer(many=True)
    cash_received = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=ZERO, required=False, allow_null=True
    )
    tip_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=ZERO, required=False, default=ZERO
    )
    discount = DiscountSerializer(required=False, allow_null=True)
    customer_name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255, default=""
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")

    def validate_order_item_ids(self, value):
        return list(dict.fromkeys(value))

    def validate(self, attrs):
        attrs["customer_name"] = attrs.get("customer_name") or ""
        attrs["notes"] = attrs.get("notes") or ""
        if attrs.get("tip_amount") is None:
            attrs["tip_amount"] = ZERO
        return attrs


class PaymentSerializer(serializers.ModelSerializer):
    order_item_ids = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            "id",
            "order_item_ids",
            "table_ids",
            "subtotal",
            "discount_type",
            "discount_value",
            "discount_reason",
            "discount_amount",
            "total",
            "tip_amount",
            "methods",
            "cash_received",
            "change_amount",
            "change_breakdown",
            "customer_name",
            "notes",
            "processed_by",
            "created_at",
        ]
        read_only_fields = fields

    def get_order_item_ids(self, obj):
        return [str(pk) for pk in obj.orders.values_list("pk", flat=True)]
