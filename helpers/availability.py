"""Free-user resolution: who holds every required tag and has no busy slot
overlapping a time window.

Both conditions are expressed as filters that can either be pushed into the
``User`` query or evaluated against already loaded users. The two forms must
select the same users.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from tortoise.expressions import Subquery
from tortoise.queryset import QuerySet

from helpers.errors import InvalidInput
from helpers.views import user_view
from models.busy_slot import BusySlot
from models.tag import UserTag
from models.user import User


logger = logging.getLogger(__name__)

RawTags = Union[None, str, Sequence[Optional[str]]]
RawTimestamp = Union[None, str, datetime]

USER_RELATIONS = ("tag_links__tag", "busy_slots")


@dataclass(frozen=True)
class TimeWindow:
    starts_at: datetime
    ends_at: datetime


def parse_timestamp(value: RawTimestamp, field: str) -> datetime:
    """Parse an ISO-8601 value into an aware UTC datetime.

    A trailing ``Z`` means UTC and naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip() if isinstance(value, str) else ""
        if not text:
            raise InvalidInput(f"{field} is required")
        if text[-1] in "Zz":
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidInput(f"{field} must be a valid ISO datetime") from None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        # e.g. 0001-01-01T00:00:00+01:00 has no UTC representation
        raise InvalidInput(f"{field} must be a valid ISO datetime") from None


def parse_window(from_value: RawTimestamp, to_value: RawTimestamp) -> TimeWindow:
    starts_at = parse_timestamp(from_value, "from")
    ends_at = parse_timestamp(to_value, "to")
    if starts_at >= ends_at:
        raise InvalidInput("from must be before to")
    return TimeWindow(starts_at, ends_at)


def normalize_tags(raw: RawTags) -> List[str]:
    """Turn a tag query into an ordered list of distinct, trimmed names.

    A single string is split on commas; a list is taken item by item.
    """
    if raw is None:
        candidates: Iterable[Optional[str]] = []
    elif isinstance(raw, str):
        candidates = raw.split(",")
    else:
        candidates = raw

    names: List[str] = []
    seen = set()
    for candidate in candidates:
        name = ("" if candidate is None else str(candidate)).strip()
        if not name or name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names


def overlaps(a_from: datetime, a_to: datetime, b_from: datetime, b_to: datetime) -> bool:
    # half-open: touching intervals do not overlap
    return a_from < b_to and b_from < a_to


@dataclass(frozen=True)
class TagFilter:
    names: Tuple[str, ...]

    def matches(self, user) -> bool:
        held = {link.tag.name for link in user.tag_links}
        return all(name in held for name in self.names)

    def apply(self, queryset: QuerySet) -> QuerySet:
        for name in self.names:
            holders = UserTag.filter(tag__name=name).values("user_id")
            queryset = queryset.filter(id__in=Subquery(holders))
        return queryset


@dataclass(frozen=True)
class FreeDuringFilter:
    window: TimeWindow

    def matches(self, user) -> bool:
        return not any(
            overlaps(slot.starts_at, slot.ends_at, self.window.starts_at, self.window.ends_at)
            for slot in user.busy_slots
        )

    def apply(self, queryset: QuerySet) -> QuerySet:
        busy = BusySlot.filter(
            starts_at__lt=self.window.ends_at,
            ends_at__gt=self.window.starts_at,
        ).values("user_id")
        return queryset.exclude(id__in=Subquery(busy))


def build_filters(window: TimeWindow, tags: Sequence[str]) -> list:
    return [TagFilter(tuple(tags)), FreeDuringFilter(window)]


def filter_free_users(users: Iterable[User], window: TimeWindow, tags: Sequence[str]) -> List[User]:
    """Evaluate the availability filters against users loaded with their
    tags and busy slots."""
    filters = build_filters(window, tags)
    return [user for user in users if all(f.matches(user) for f in filters)]


async def resolve_free_users(from_value: RawTimestamp, to_value: RawTimestamp, tags: RawTags = None) -> List[dict]:
    window = parse_window(from_value, to_value)
    required_tags = normalize_tags(tags)

    queryset = User.all()
    for availability_filter in build_filters(window, required_tags):
        queryset = availability_filter.apply(queryset)

    users = await queryset.order_by("created_at", "id").prefetch_related(*USER_RELATIONS)
    logger.debug(
        "Resolved %d free users for %s..%s tags=%s",
        len(users), window.starts_at.isoformat(), window.ends_at.isoformat(), required_tags,
    )
    return [user_view(user) for user in users]
