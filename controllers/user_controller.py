from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from helpers import directory


user_router = APIRouter()


class CreateUserPayload(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    tags: Optional[List[str]] = None


class UpdateUserPayload(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    tags: Optional[List[str]] = None


class UpdateTagsPayload(BaseModel):
    add: Optional[List[str]] = None
    remove: Optional[List[str]] = None


class MarkBusyPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    reason: Optional[str] = None


@user_router.post("/users", status_code=201)
async def create_user(payload: CreateUserPayload):
    return await directory.create_user(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        tags=payload.tags,
    )


@user_router.get("/users")
async def list_users():
    return await directory.list_users()


@user_router.get("/users/{user_id}")
async def get_user(user_id: str):
    return await directory.get_user(user_id)


@user_router.patch("/users/{user_id}")
async def update_user(user_id: str, payload: UpdateUserPayload):
    return await directory.update_user(user_id, payload.model_dump(exclude_unset=True))


@user_router.delete("/users/{user_id}")
async def delete_user(user_id: str):
    await directory.delete_user(user_id)
    return {"deleted": True}


@user_router.put("/users/{user_id}/tags")
async def update_user_tags(user_id: str, payload: UpdateTagsPayload):
    return await directory.update_tags(user_id, add=payload.add, remove=payload.remove)


@user_router.post("/users/{user_id}/busy", status_code=201)
async def mark_user_busy(user_id: str, payload: MarkBusyPayload):
    return await directory.mark_busy(user_id, payload.from_, payload.to, payload.reason)


@user_router.get("/users/{user_id}/busy")
async def list_user_busy_slots(user_id: str):
    return await directory.list_busy_slots(user_id)
