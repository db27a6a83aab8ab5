import json
import logging
from datetime import datetime

from channels.generic.websocket import AsyncWebsocketConsumer

from core_backend.jwt_websocket_middleware import AdmissionRefused
from . import rooms
from .hub import admission_rooms

logger = logging.getLogger(__name__)


class StaffConsumer(AsyncWebsocketConsumer):
    """
    Websocket endpoint for staff terminals.

    Admission happens in JWTAuthMiddleware; this consumer refuses
    unauthenticated scopes, joins the global rooms (plus the manager room
    for managers) and lets the client subscribe to table and layout rooms.
    Membership is dropped on disconnect.
    """

    def __init__(self, *args, hub=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.hub = hub
        self.principal = None
        self.rooms = set()

    async def connect(self):
        principal = self.scope.get("principal")
        if principal is None:
            refusal = self.scope.get("auth_error") or AdmissionRefused(
                "Authentication token required", AdmissionRefused.MISSING_TOKEN
            )
            await self._refuse(refusal)
            return

        self.principal = principal
        await self.accept()

        for room in admission_rooms(principal):
            await self._join(room)

        logger.info(f"Staff {principal.username} connected ({self.channel_name})")

        await self.send_event(
            "connection:established",
            {
                "user": principal.as_dict(),
                "rooms": sorted(self.rooms),
                "timestamp": self.get_timestamp(),
            },
        )

    async def disconnect(self, close_code):
        for room in list(self.rooms):
            await self.hub.leave(room, self.channel_name)
        self.rooms.clear()

        if self.principal is not None:
            logger.info(f"Staff {self.principal.username} disconnected (code={close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except json.JSONDecodeError:
            logger.warning(f"Invalid JSON received from {self._who()}")
            return

        if not isinstance(data, dict):
            return

        message_type = data.get("type")
        handler = self.MESSAGE_HANDLERS.get(message_type)
        if handler is None:
            logger.warning(f"Unknown message type from {self._who()}: {message_type}")
            return

        await handler(self, data.get("id"))

    async def subscribe_table(self, table_id):
        await self._join_entity_room(rooms.table_room, table_id)

    async def unsubscribe_table(self, table_id):
        await self._leave_entity_room(rooms.table_room, table_id)

    async def subscribe_layout(self, layout_id):
        await self._join_entity_room(rooms.layout_room, layout_id)

    async def unsubscribe_layout(self, layout_id):
        await self._leave_entity_room(rooms.layout_room, layout_id)

    async def ping(self, _unused=None):
        await self.send_event("pong", {"timestamp": self.get_timestamp()})

    MESSAGE_HANDLERS = {
        "subscribe:table": subscribe_table,
        "unsubscribe:table": unsubscribe_table,
        "subscribe:layout": subscribe_layout,
        "unsubscribe:layout": unsubscribe_layout,
        "ping": ping,
    }

    # Channel layer handlers

    async def room_event(self, event):
        await self.send_event(event["event"], event["data"], room=event.get("room"))

    # Helpers

    async def send_event(self, name, data, room=None):
        message = {"type": name, "data": data}
        if room is not None:
            message["room"] = room
        await self.send(text_data=json.dumps(message))

    async def _join_entity_room(self, room_for, entity_id):
        canonical = rooms.parse_entity_id(entity_id)
        if canonical is None:
            logger.debug(f"Ignoring malformed id {entity_id!r} from {self._who()}")
            return
        await self._join(room_for(canonical))

    async def _leave_entity_room(self, room_for, entity_id):
        canonical = rooms.parse_entity_id(entity_id)
        if canonical is None:
            return
        room = room_for(canonical)
        if room in self.rooms:
            await self.hub.leave(room, self.channel_name)
            self.rooms.discard(room)

    async def _join(self, room):
        await self.hub.join(room, self.channel_name)
        self.rooms.add(room)

    async def _refuse(self, refusal):
        logger.warning(f"Refusing websocket connection: {refusal.reason}")
        # Closing before accept() rejects the handshake; the reason travels
        # in the ASGI close message.
        await self.base_send(
            {"type": "websocket.close", "code": refusal.close_code, "reason": refusal.reason}
        )

    def _who(self):
        return self.principal.username if self.principal else self.channel_name

    @staticmethod
    def get_timestamp():
        return datetime.now().isoformat()
