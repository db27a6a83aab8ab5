from .order_serializers import (
    OrderSerializer,
    OrderSpecSerializer,
    OrderUpdateSerializer,
)

__all__ = [
    "OrderSerializer",
    "OrderSpecSerializer",
    "OrderUpdateSerializer",
]
