"""
Event distribution hub.

One EventHub is built at startup (see RealtimeConfig.ready) and handed to
every service and consumer that publishes or manages room membership.
Delivery is fire-and-forget: no queue, retry or acknowledgement, and a
client that is not connected simply misses the event.
"""
import logging
from decimal import Decimal
from functools import partial
from uuid import UUID

from asgiref.sync import async_to_sync
from django.db import transaction

from users.capabilities import Capability, can
from . import rooms

logger = logging.getLogger(__name__)

EVENT_MESSAGE_TYPE = "room.event"


def to_primitive(data):
    """
    Recursively converts UUID, Decimal and datetime values so payloads
    survive any channel layer serialisation.
    """
    if isinstance(data, dict):
        return {str(k): to_primitive(v) for k, v in data.items()}
    if isinstance(data, (list, tuple, set)):
        return [to_primitive(v) for v in data]
    if isinstance(data, (UUID, Decimal)):
        return str(data)
    if hasattr(data, "isoformat"):
        return data.isoformat()
    return data


def admission_rooms(principal):
    """Rooms a freshly admitted connection joins automatically."""
    joined = list(rooms.GLOBAL_ROOMS)
    if can(principal, Capability.JOIN_MANAGER_ROOM):
        joined.append(rooms.MANAGERS)
    return joined


class EventHub:
    def __init__(self, channel_layer):
        self.channel_layer = channel_layer

    def publish(self, event, payload, room_names):
        """
        Schedules ``event`` for delivery to each room once the surrounding
        transaction commits. Outside a transaction it is sent immediately.
        A rolled back transaction publishes nothing.
        """
        targets = list(dict.fromkeys(room_names))
        data = to_primitive(payload)
        transaction.on_commit(partial(self._send, event, data, targets))

    def _send(self, event, data, targets):
        if self.channel_layer is None:
            logger.warning(f"Channel layer not available. Dropping {event}.")
            return

        for room in targets:
            try:
                async_to_sync(self.channel_layer.group_send)(
                    rooms.group_name(room), self._message(event, data, room)
                )
            except Exception as e:
                logger.warning(f"Failed to publish {event} to room {room}: {e}")

        logger.debug(f"Published {event} to rooms {targets}")

    async def apublish(self, event, payload, room_names):
        """Async variant for callers already running in the event loop."""
        if self.channel_layer is None:
            logger.warning(f"Channel layer not available. Dropping {event}.")
            return

        data = to_primitive(payload)
        for room in dict.fromkeys(room_names):
            try:
                await self.channel_layer.group_send(
                    rooms.group_name(room), self._message(event, data, room)
                )
            except Exception as e:
                logger.warning(f"Failed to publish {event} to room {room}: {e}")

    async def join(self, room, channel_name):
        await self.channel_layer.group_add(rooms.group_name(room), channel_name)

    async def leave(self, room, channel_name):
        await self.channel_layer.group_discard(rooms.group_name(room), channel_name)

    @staticmethod
    def _message(event, data, room):
        return {"type": EVENT_MESSAGE_TYPE, "event": event, "room": room, "data": data}
