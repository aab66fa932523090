from datetime import datetime, timezone

from models.busy_slot import BusySlot
from models.user import User


def isoformat_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def busy_slot_view(slot: BusySlot) -> dict:
    return {
        "id": slot.id,
        "from": isoformat_utc(slot.starts_at),
        "to": isoformat_utc(slot.ends_at),
        "reason": slot.reason,
    }


def user_view(user: User) -> dict:
    """Flat projection of a user with its tags and every busy slot it owns.

    Expects ``tag_links__tag`` and ``busy_slots`` to be prefetched.
    """
    links = sorted(user.tag_links, key=lambda link: link.id)
    slots = sorted(user.busy_slots, key=lambda slot: (slot.starts_at, slot.id))
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "tags": [link.tag.name for link in links],
        "busy": [busy_slot_view(slot) for slot in slots],
        "created_at": isoformat_utc(user.created_at),
        "updated_at": isoformat_utc(user.updated_at),
    }
