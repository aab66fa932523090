from fastapi import APIRouter, Query
from typing import Annotated, List, Optional
from helpers.availability import resolve_free_users


availability_router = APIRouter()


@availability_router.get("/availability/free-users")
async def get_free_users(
    from_: Annotated[Optional[str], Query(alias="from")] = None,
    to: Optional[str] = None,
    tags: Annotated[Optional[List[str]], Query()] = None,
):
    # ?tags=a,b arrives as one item and is split; repeated ?tags= are kept as given
    raw_tags = tags[0] if tags and len(tags) == 1 else tags
    return await resolve_free_users(from_, to, raw_tags)
