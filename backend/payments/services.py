import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from orders.models import Order, OrderTable
from realtime.emitters import ClientEmitters
from realtime.hub import to_primitive
from tables.serializers import TableSerializer
from tables.services import TableService

from . import money
from .models import Payment
from .serializers import SettlementRequestSerializer

logger = logging.getLogger(__name__)

CASH = "cash"


def quote_settlement(subtotal, discount, payment_methods, cash_received, currency, tolerance):
    """
    Pure settlement arithmetic, performed before anything is written.

    Returns the discount, total, change and change breakdown, or raises
    ValidationError when the tendered amounts do not add up.
    """
    discount = discount or {}
    discount_amount = money.discount_amount(
        currency, subtotal, discount.get("type"), discount.get("value")
    )
    total = money.settlement_total(currency, subtotal, discount_amount)

    tendered = sum((entry["amount"] for entry in payment_methods), Decimal("0"))
    if not money.within_tolerance(tendered, total, tolerance):
        raise ValidationError(
            f"Payment amounts ({tendered}) do not match the total ({total}).",
            code="amount_mismatch",
            details={"total": str(total), "tendered": str(tendered)},
        )

    # cash_received at or below the total (a blank till field arrives as 0)
    # settles with no change.
    change = Decimal("0")
    if any(entry["method"] == CASH for entry in payment_methods):
        change = money.change_due(currency, cash_received, total)

    breakdown = money.change_breakdown(change, currency)
    return {
        "subtotal": money.quantize(currency, subtotal),
        "discount_amount": discount_amount,
        "total": total,
        "change": change,
        "change_breakdown": breakdown,
    }


class SettlementService:
    """
    Settles a set of orders in one transaction: marks them paid, stores the
    Payment receipt and restores table occupancy. Events go out after commit.
    """

    def __init__(self, hub):
        self.emitters = ClientEmitters(hub)

    def settle(self, data, actor=None) -> dict:
        serializer = SettlementRequestSerializer(data=data)
        if not serializer.is_valid():
            raise ValidationError("Invalid input.", details=serializer.errors)
        request = serializer.validated_data

        config = settings.RESTAURANT
        currency = config["CURRENCY"]
        order_ids = request["order_item_ids"]

        with transaction.atomic():
            orders = self._lock_orders(order_ids)

            subtotal = sum((order.price for order in orders), Decimal("0"))
            quote = quote_settlement(
                subtotal,
                request.get("discount"),
                request["payment_methods"],
                request.get("cash_received"),
                currency,
                config.get("AMOUNT_TOLERANCE", "0.01"),
            )

            table_ids = self._table_ids(order_ids)
            discount = request.get("discount") or {}
            payment = Payment.objects.create(
                subtotal=quote["subtotal"],
                discount_type=discount.get("type", ""),
                discount_value=discount.get("value"),
                discount_reason=discount.get("reason") or "",
                discount_amount=quote["discount_amount"],
                total=quote["total"],
                tip_amount=money.quantize(currency, request["tip_amount"]),
                methods=to_primitive(request["payment_methods"]),
                cash_received=request.get("cash_received"),
                change_amount=quote["change"],
                change_breakdown=to_primitive(quote["change_breakdown"]),
                table_ids=[str(table_id) for table_id in table_ids],
                customer_name=request["customer_name"],
                notes=request["notes"],
                processed_by=actor if getattr(actor, "pk", None) else None,
            )

            now = timezone.now()
            Order.objects.filter(pk__in=order_ids).update(
                status=Order.Status.PAID, payment=payment, paid_at=now, updated_at=now
            )

            changed_tables = TableService.recompute_occupancy(table_ids)

            result = self._result(payment, order_ids, table_ids, quote, changed_tables, now)
            self.emitters.orders_paid(result)
            for table in changed_tables:
                self.emitters.table_updated(TableSerializer(table).data)

        logger.info(
            f"Settled {len(order_ids)} order(s): total={quote['total']} {currency}, "
            f"change={quote['change']}, tables freed={len(result['freed_table_ids'])}"
        )
        return result

    @staticmethod
    def _lock_orders(order_ids):
        orders = list(Order.objects.select_for_update().filter(pk__in=order_ids))
        found = {order.pk for order in orders}
        missing = [str(order_id) for order_id in order_ids if order_id not in found]
        if missing:
            raise NotFoundError(
                f"Order {missing[0]} not found.",
                code="order_not_found",
                details={"order_item_ids": missing},
            )

        already_paid = [str(order.pk) for order in orders if order.is_paid]
        if already_paid:
            raise ConflictError(
                "Some orders are already paid.",
                code="order_already_paid",
                details={"order_item_ids": already_paid},
            )
        return orders

    @staticmethod
    def _table_ids(order_ids):
        """Union of the settled orders' tables, in first-seen order."""
        links = (
            OrderTable.objects.filter(order_id__in=order_ids)
            .order_by("order__created_at", "position")
            .values_list("table_id", flat=True)
        )
        return list(dict.fromkeys(links))

    @staticmethod
    def _result(payment, order_ids, table_ids, quote, changed_tables, paid_at):
        breakdown = quote["change_breakdown"]
        split = money.split_breakdown(breakdown)
        return to_primitive(
            {
                "payment_id": payment.pk,
                "order_item_ids": order_ids,
                "table_ids": table_ids,
                "subtotal": quote["subtotal"],
                "discount_amount": quote["discount_amount"],
                "total": quote["total"],
                "tip_amount": payment.tip_amount,
                "payment_methods": payment.methods,
                "cash_received": payment.cash_received,
                "change": quote["change"],
                "change_breakdown": breakdown,
                "change_notes": split["notes"],
                "change_coins": split["coins"],
                "freed_table_ids": [
                    table.pk for table in changed_tables if table.status == table.Status.FREE
                ],
                "paid_at": paid_at,
            }
        )
