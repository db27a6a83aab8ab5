"""
Client reconciliation contract.

Every component that mutates shared floor state publishes through these
helpers so clients can rely on one event vocabulary and one room layout.
Payloads are the serialized entity (or ``{"id": ...}`` for deletions);
clients either merge the payload or refetch.
"""
from . import rooms


def _table_rooms(table_ids):
    return [rooms.table_room(table_id) for table_id in table_ids or []]


class ClientEmitters:
    def __init__(self, hub):
        self.hub = hub

    # Orders

    def order_created(self, order):
        self.hub.publish(
            "order:created", order, [rooms.ORDERS, *_table_rooms(order.get("table_ids"))]
        )

    def order_updated(self, order):
        self.hub.publish(
            "order:updated", order, [rooms.ORDERS, *_table_rooms(order.get("table_ids"))]
        )

    def order_deleted(self, order_id):
        self.hub.publish("order:deleted", {"id": order_id}, [rooms.ORDERS])

    def orders_paid(self, settlement):
        self.hub.publish(
            "order:paid",
            settlement,
            [rooms.ORDERS, *_table_rooms(settlement.get("table_ids"))],
        )

    # Tables

    def table_created(self, table):
        targets = [rooms.TABLES]
        if table.get("layout_id"):
            targets.append(rooms.layout_room(table["layout_id"]))
        self.hub.publish("table:created", table, targets)

    def table_updated(self, table):
        targets = [rooms.TABLES, rooms.table_room(table["id"])]
        if table.get("layout_id"):
            targets.append(rooms.layout_room(table["layout_id"]))
        self.hub.publish("table:updated", table, targets)

    def table_deleted(self, table_id, layout_id=None):
        targets = [rooms.TABLES]
        if layout_id:
            targets.append(rooms.layout_room(layout_id))
        self.hub.publish("table:deleted", {"id": table_id}, targets)

    # Layouts

    def layout_created(self, layout):
        self.hub.publish("layout:created", layout, [rooms.MANAGERS])

    def layout_updated(self, layout):
        self.hub.publish(
            "layout:updated", layout, [rooms.TABLES, rooms.layout_room(layout["id"])]
        )

    def layout_deleted(self, layout_id):
        self.hub.publish("layout:deleted", {"id": layout_id}, [rooms.TABLES])

    # Menu

    def menu_item_created(self, item):
        self.hub.publish("menu:created", item, [rooms.MENU])

    def menu_item_updated(self, item):
        self.hub.publish("menu:updated", item, [rooms.MENU])

    def menu_item_deleted(self, item_id):
        self.hub.publish("menu:deleted", {"id": item_id}, [rooms.MENU])

    # Stock (items, categories, suppliers, locations)

    def stock_changed(self, entity, action, payload):
        """
        Publishes ``stock:<entity>:<action>``. ``entity`` is one of item,
        category, supplier or location; ``action`` created, updated or deleted.
        """
        self.hub.publish(f"stock:{entity}:{action}", payload, [rooms.STOCK])

    def stock_alert_created(self, alert):
        self.hub.publish("stock:alert:created", alert, [rooms.STOCK, rooms.MANAGERS])

    # Users

    def user_changed(self, action, payload):
        self.hub.publish(f"user:{action}", payload, [rooms.USERS])
