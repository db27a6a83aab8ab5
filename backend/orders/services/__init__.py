"""
Orders services package.

- OrderService: order lifecycle (create, batch create, update, delete, reads)
"""

from .order_service import OrderService, order_queryset

__all__ = [
    "OrderService",
    "order_queryset",
]
