"""
Room names used by the event hub.

Rooms are the public vocabulary (``orders``, ``table:<id>``, ...). Channel
layer group names only allow ASCII letters, digits, hyphens, underscores
and periods, so every room maps onto a ``room.``-prefixed group.
"""
import re
import uuid

ORDERS = "orders"
TABLES = "tables"
MENU = "menu"
STOCK = "stock"
USERS = "users"
MANAGERS = "managers"

GLOBAL_ROOMS = (ORDERS, TABLES, MENU, STOCK, USERS)

TABLE_PREFIX = "table"
LAYOUT_PREFIX = "layout"

_GROUP_NAME_RE = re.compile(r"^[a-zA-Z0-9\-_.]{1,99}$")


def parse_entity_id(value):
    """Returns the canonical id string, or None when the value is not a UUID."""
    if isinstance(value, uuid.UUID):
        return str(value)
    if not isinstance(value, str):
        return None
    try:
        return str(uuid.UUID(value.strip()))
    except ValueError:
        return None


def table_room(table_id):
    return f"{TABLE_PREFIX}:{table_id}"


def layout_room(layout_id):
    return f"{LAYOUT_PREFIX}:{layout_id}"


def group_name(room):
    name = "room." + room.replace(":", ".")
    if not _GROUP_NAME_RE.match(name):
        raise ValueError(f"Invalid room name: {room!r}")
    return name
