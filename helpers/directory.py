"""Users, their tags and their busy slots.

Every write that touches more than one row runs inside a single transaction,
and all input is validated before the first write.
"""
import logging
from typing import List, Optional, Sequence

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from helpers import settings
from helpers.availability import USER_RELATIONS, RawTimestamp, normalize_tags, parse_window
from helpers.errors import Conflict, InvalidInput, NotFound
from helpers.views import busy_slot_view, user_view
from models.busy_slot import BusySlot
from models.tag import Tag, UserTag
from models.user import User


logger = logging.getLogger(__name__)


def _required(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise InvalidInput(f"{field} is required")
    return value.strip()


def _not_empty(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise InvalidInput(f"{field} cannot be empty")
    return value.strip()


async def _get_or_404(user_id: str, conn=None) -> User:
    user = await User.get_or_none(id=user_id, using_db=conn)
    if not user:
        raise NotFound("user not found")
    return user


async def _attach_tags(user: User, names: Sequence[str], conn) -> None:
    for name in names:
        tag, _ = await Tag.get_or_create(name=name, using_db=conn)
        await UserTag.get_or_create(user=user, tag=tag, using_db=conn)


async def _detach_tags(user: User, names: Sequence[str], conn) -> None:
    if not names:
        return
    tag_ids = await Tag.filter(name__in=list(names)).using_db(conn).values_list("id", flat=True)
    if tag_ids:
        await UserTag.filter(user_id=user.id, tag_id__in=tag_ids).using_db(conn).delete()


async def _load(user_id: str) -> dict:
    user = await User.filter(id=user_id).prefetch_related(*USER_RELATIONS).first()
    if not user:
        raise NotFound("user not found")
    return user_view(user)


async def create_user(
    name: Optional[str],
    email: Optional[str],
    phone: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
    policy: Optional[str] = None,
) -> dict:
    name = _required(name, "name")
    email = _required(email, "email")
    tag_names = normalize_tags(tags or [])
    policy = policy or settings.DUPLICATE_EMAIL_POLICY

    existing = await User.get_or_none(email=email)
    if existing:
        if policy != "reset":
            logger.warning("Rejected user creation, email %s already in use", email)
            raise Conflict("email already in use")
        return await _reset_user(existing, name, phone, tag_names)

    try:
        async with in_transaction() as conn:
            user = await User.create(name=name, email=email, phone=phone, using_db=conn)
            await _attach_tags(user, tag_names, conn)
    except IntegrityError:
        # another request registered the same email in between
        existing = await User.get_or_none(email=email)
        if existing is None or policy != "reset":
            raise Conflict("email already in use") from None
        return await _reset_user(existing, name, phone, tag_names)

    logger.info("Created user %s with tags %s", user.id, tag_names)
    return await _load(user.id)


async def _reset_user(user: User, name: str, phone: Optional[str], tag_names: List[str]) -> dict:
    logger.warning("Resetting existing user %s on duplicate email registration", user.id)
    async with in_transaction() as conn:
        await BusySlot.filter(user_id=user.id).using_db(conn).delete()
        await UserTag.filter(user_id=user.id).using_db(conn).delete()
        await _attach_tags(user, tag_names, conn)
        user.name = name
        if phone is not None:
            user.phone = phone
        await user.save(using_db=conn)
    return await _load(user.id)


async def get_user(user_id: str) -> dict:
    return await _load(user_id)


async def list_users() -> List[dict]:
    users = await User.all().order_by("created_at", "id").prefetch_related(*USER_RELATIONS)
    return [user_view(user) for user in users]


async def update_user(user_id: str, changes: dict) -> dict:
    """Apply a partial update. ``changes`` holds only the fields the caller
    sent; a ``tags`` entry replaces the user's whole tag set."""
    changes = dict(changes)
    if "name" in changes:
        changes["name"] = _not_empty(changes["name"], "name")
    if "email" in changes:
        changes["email"] = _not_empty(changes["email"], "email")
    tag_names = normalize_tags(changes["tags"]) if changes.get("tags") is not None else None

    try:
        async with in_transaction() as conn:
            user = await _get_or_404(user_id, conn)

            email = changes.get("email")
            if email and email != user.email:
                taken = await User.filter(email=email).exclude(id=user.id).using_db(conn).exists()
                if taken:
                    logger.warning("Rejected email change for user %s, %s already in use", user.id, email)
                    raise Conflict("email already in use")

            if tag_names is not None:
                await UserTag.filter(user_id=user.id).using_db(conn).delete()
                await _attach_tags(user, tag_names, conn)

            for field in ("name", "email", "phone"):
                if field in changes:
                    setattr(user, field, changes[field])
            await user.save(using_db=conn)
    except IntegrityError:
        raise Conflict("email already in use") from None

    logger.info("Updated user %s (%s)", user_id, ", ".join(sorted(changes)) or "no fields")
    return await _load(user_id)


async def delete_user(user_id: str) -> None:
    async with in_transaction() as conn:
        user = await _get_or_404(user_id, conn)
        await BusySlot.filter(user_id=user.id).using_db(conn).delete()
        await UserTag.filter(user_id=user.id).using_db(conn).delete()
        await user.delete(using_db=conn)
    logger.info("Deleted user %s", user_id)


async def update_tags(
    user_id: str,
    add: Optional[Sequence[str]] = None,
    remove: Optional[Sequence[str]] = None,
) -> dict:
    to_add = normalize_tags(add or [])
    to_remove = normalize_tags(remove or [])

    async with in_transaction() as conn:
        user = await _get_or_404(user_id, conn)
        await _attach_tags(user, to_add, conn)
        await _detach_tags(user, to_remove, conn)

    logger.info("Updated tags of user %s: +%s -%s", user_id, to_add, to_remove)
    return await _load(user_id)


async def mark_busy(
    user_id: str,
    from_value: RawTimestamp,
    to_value: RawTimestamp,
    reason: Optional[str] = None,
) -> dict:
    window = parse_window(from_value, to_value)
    user = await _get_or_404(user_id)
    slot = await BusySlot.create(
        user=user,
        starts_at=window.starts_at,
        ends_at=window.ends_at,
        reason=reason,
    )
    logger.info("Marked user %s busy %s..%s", user_id, window.starts_at.isoformat(), window.ends_at.isoformat())
    return busy_slot_view(slot)


async def list_busy_slots(user_id: str) -> List[dict]:
    user = await _get_or_404(user_id)
    slots = await BusySlot.filter(user_id=user.id).order_by("starts_at", "id")
    return [busy_slot_view(slot) for slot in slots]
