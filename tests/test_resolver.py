"""
Free-user resolution against a real (in-memory SQLite) directory.
"""

import pytest

from helpers import directory
from helpers.availability import (
    USER_RELATIONS,
    filter_free_users,
    normalize_tags,
    parse_window,
    resolve_free_users,
)
from helpers.errors import InvalidInput
from models.user import User

DAY = "2026-02-06"


def ts(clock: str) -> str:
    return f"{DAY}T{clock}:00Z"


def ids(users) -> set:
    return {u["id"] for u in users}


@pytest.fixture
async def team(db):
    u1 = await directory.create_user("Ada", "ada@example.com", tags=["backend"])
    u2 = await directory.create_user("Brian", "brian@example.com", tags=["frontend"])
    u3 = await directory.create_user("Cleo", "cleo@example.com", tags=["backend"])
    await directory.mark_busy(u1["id"], ts("11:00"), ts("12:30"))
    await directory.mark_busy(u2["id"], ts("11:15"), ts("11:45"))
    await directory.mark_busy(u3["id"], ts("12:00"), ts("13:00"))
    return {"U1": u1["id"], "U2": u2["id"], "U3": u3["id"]}


@pytest.mark.parametrize("start, end, tags, expected", [
    ("11:00", "12:00", "backend", {"U3"}),
    ("12:30", "13:00", "backend", {"U1"}),
    ("11:00", "12:00", "frontend", set()),
    ("11:45", "12:30", "frontend", {"U2"}),
])
async def test_scenario(team, start, end, tags, expected):
    result = await resolve_free_users(ts(start), ts(end), tags)
    assert ids(result) == {team[name] for name in expected}


async def test_empty_tag_filter_returns_all_free_users(team):
    result = await resolve_free_users(ts("11:45"), ts("12:00"))
    assert ids(result) == {team["U2"], team["U3"]}
    result = await resolve_free_users(ts("14:00"), ts("15:00"), [])
    assert ids(result) == set(team.values())


async def test_user_without_busy_slots_is_always_free(team):
    idle = await directory.create_user("Dev", "dev@example.com")
    for start, end in [("00:00", "23:59"), ("11:00", "12:00"), ("12:15", "12:20")]:
        assert idle["id"] in ids(await resolve_free_users(ts(start), ts(end)))


async def test_adding_a_tag_never_grows_the_result(team):
    await directory.update_tags(team["U3"], add=["python"])
    window = (ts("09:00"), ts("10:00"))
    broad = ids(await resolve_free_users(*window, "backend"))
    narrow = ids(await resolve_free_users(*window, "backend,python"))
    assert narrow <= broad
    assert narrow == {team["U3"]}


async def test_unknown_tag_yields_nothing(team):
    assert await resolve_free_users(ts("09:00"), ts("10:00"), "does-not-exist") == []


async def test_tags_are_case_sensitive(team):
    assert await resolve_free_users(ts("09:00"), ts("10:00"), "Backend") == []


async def test_repeated_calls_are_identical(team):
    first = await resolve_free_users(ts("12:30"), ts("13:00"), ["backend"])
    second = await resolve_free_users(ts("12:30"), ts("13:00"), ["backend"])
    assert first == second


async def test_overlapping_slots_of_one_user(team):
    await directory.mark_busy(team["U3"], ts("08:00"), ts("10:00"))
    await directory.mark_busy(team["U3"], ts("09:00"), ts("09:30"))
    result = await resolve_free_users(ts("09:15"), ts("09:20"), "backend")
    assert ids(result) == {team["U1"]}


async def test_result_shows_every_busy_slot(team):
    result = await resolve_free_users(ts("12:30"), ts("13:00"), "backend")
    (u1,) = result
    assert u1["tags"] == ["backend"]
    assert u1["busy"][0]["from"] == ts("11:00")
    assert u1["busy"][0]["to"] == ts("12:30")
    await directory.mark_busy(team["U1"], ts("20:00"), ts("21:00"), reason="gym")
    (u1,) = await resolve_free_users(ts("12:30"), ts("13:00"), "backend")
    assert [slot["reason"] for slot in u1["busy"]] == [None, "gym"]


@pytest.mark.parametrize("start, end, tags", [
    ("11:00", "12:00", ""),
    ("11:00", "12:00", "backend"),
    ("12:30", "13:00", "backend"),
    ("11:45", "12:30", "frontend"),
    ("10:00", "14:00", ""),
    ("12:00", "12:30", "backend,frontend"),
])
async def test_in_memory_evaluation_agrees_with_query(team, start, end, tags):
    window = parse_window(ts(start), ts(end))
    everyone = await User.all().prefetch_related(*USER_RELATIONS)
    in_memory = {u.id for u in filter_free_users(everyone, window, normalize_tags(tags))}
    assert ids(await resolve_free_users(ts(start), ts(end), tags)) == in_memory


async def test_invalid_from_fails_before_data_access():
    # no db fixture: touching the ORM here would raise
    with pytest.raises(InvalidInput, match="from"):
        await resolve_free_users("not-a-date", ts("12:00"))


async def test_empty_window_fails_before_data_access():
    with pytest.raises(InvalidInput, match="from must be before to"):
        await resolve_free_users(ts("12:00"), ts("12:00"))
