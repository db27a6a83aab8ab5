"""
Role labels, the authenticated principal record and capability checks.

A Principal is what admission (HTTP or websocket) produces for a staff
member. Callers never inspect role labels directly; they ask can().
"""
from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    MANAGER = "manager"
    WAITER = "waiter"
    KITCHEN = "kitchen"
    CASHIER = "cashier"


class Capability(str, Enum):
    JOIN_MANAGER_ROOM = "join_manager_room"
    DELETE_ORDERS = "delete_orders"


CAPABILITY_ROLES = {
    Capability.JOIN_MANAGER_ROOM: frozenset({Role.MANAGER}),
    Capability.DELETE_ORDERS: frozenset({Role.MANAGER}),
}


def parse_roles(labels):
    """Map stored labels onto known roles, ignoring anything unrecognised."""
    roles = set()
    for label in labels or []:
        try:
            roles.add(Role(str(label).strip().lower()))
        except ValueError:
            continue
    return frozenset(roles)


@dataclass(frozen=True)
class Principal:
    subject: str
    username: str = ""
    roles: frozenset = field(default_factory=frozenset)

    @classmethod
    def for_user(cls, user):
        return cls(
            subject=str(user.pk),
            username=user.get_username(),
            roles=parse_roles(getattr(user, "labels", [])),
        )

    def as_dict(self):
        return {
            "subject": self.subject,
            "username": self.username,
            "roles": sorted(role.value for role in self.roles),
        }


def can(principal, capability):
    if principal is None:
        return False
    allowed = CAPABILITY_ROLES.get(Capability(capability), frozenset())
    return bool(principal.roles & allowed)
