"""
Users Router — Account administration (roles and channel assignments).

Every endpoint is admin-only. Self-targeting guards (changing your own role,
deleting yourself) are explicit checks inside the handlers.
"""

from datetime import datetime
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db, require_role
from db.models import User, UserRole

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"],
    dependencies=[Depends(require_role(UserRole.ADMIN.value))],
)
logger = structlog.get_logger()

VALID_ROLES = {role.value for role in UserRole}


# ─── Schemas ────────────────────────────────────────────────────────────────


class RoleUpdate(BaseModel):
    # Validated by hand so unknown roles get a 400 "Invalid role", not a 422.
    role: Any = None


class ChannelsUpdate(BaseModel):
    assigned_channels: Any = None


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str
    assigned_channels: list[str] = Field(default_factory=list, alias="assignedChannels")
    created_at: datetime | None = Field(None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.get("/", response_model=list[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    """List all users, newest first."""
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.user_id.desc()))
    return [serialize_user(user) for user in result.scalars().all()]


@router.patch("/{user_id}/role", response_model=UserResponse)
async def set_user_role(
    user_id: int,
    body: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    caller: dict = Depends(get_current_user),
):
    """Change another user's role."""
    if not isinstance(body.role, str) or body.role not in VALID_ROLES:
        raise HTTPException(status_code=400, detail="Invalid role")
    if user_id == caller["id"]:
        raise HTTPException(status_code=400, detail="Cannot change your own role")

    user = await _get_user_or_404(db, user_id)
    old_role = user.role
    user.role = body.role
    await db.commit()
    await db.refresh(user)

    logger.info(
        "users.role_changed",
        user_id=user_id,
        old_role=old_role,
        new_role=user.role,
        changed_by=caller["id"],
    )
    return serialize_user(user)


@router.patch("/{user_id}/channels", response_model=UserResponse)
async def set_user_channels(
    user_id: int,
    body: ChannelsUpdate,
    db: AsyncSession = Depends(get_db),
    caller: dict = Depends(get_current_user),
):
    """Replace the list of sales channels assigned to a user."""
    channels = body.assigned_channels
    if not isinstance(channels, list) or not all(isinstance(c, str) for c in channels):
        raise HTTPException(status_code=400, detail="assigned_channels must be an array")

    user = await _get_user_or_404(db, user_id)
    user.assigned_channels = list(channels)
    await db.commit()
    await db.refresh(user)

    logger.info("users.channels_changed", user_id=user_id, channels=channels, changed_by=caller["id"])
    return serialize_user(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    caller: dict = Depends(get_current_user),
):
    """Delete a user account. Admins cannot delete themselves."""
    if user_id == caller["id"]:
        raise HTTPException(status_code=400, detail="Cannot delete yourself")

    user = await _get_user_or_404(db, user_id)
    await db.delete(user)
    await db.commit()

    logger.info("users.deleted", user_id=user_id, deleted_by=caller["id"])
    return MessageResponse(message="User deleted")


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.user_id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def serialize_user(user: User) -> UserResponse:
    return UserResponse(
        id=user.user_id,
        email=user.email,
        name=user.full_name,
        role=user.role,
        assigned_channels=list(user.assigned_channels or []),
        created_at=user.created_at,
    )
