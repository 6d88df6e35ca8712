"""
Auth Router — Email/password registration and login.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db
from api.v1.routers.users import UserResponse, serialize_user
from core.security import create_user_token, hash_password, verify_password
from db.models import User, UserRole

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])
logger = structlog.get_logger()


# ─── Schemas ────────────────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=72)
    name: str = Field(..., min_length=1, max_length=255)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
    user: UserResponse


class CurrentUserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str


class MeResponse(BaseModel):
    user: CurrentUserResponse


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register an account. The very first account becomes an admin."""
    email = body.email.strip().lower()
    existing = await db.execute(select(User.user_id).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=400, detail="Email already registered")

    user_count = (await db.execute(select(func.count()).select_from(User))).scalar_one()
    role = UserRole.ADMIN if user_count == 0 else UserRole.VIEWER

    user = User(
        email=email,
        password_hash=hash_password(body.password),
        full_name=body.name.strip(),
        role=role.value,
        assigned_channels=[],
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("auth.registered", user_id=user.user_id, role=user.role)
    return TokenResponse(token=create_user_token(user.user_id), user=serialize_user(user))


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Exchange email/password for an access token."""
    result = await db.execute(select(User).where(User.email == body.email.strip().lower()))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(body.password, user.password_hash):
        logger.warning("auth.login_failed", email=body.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info("auth.login", user_id=user.user_id)
    return TokenResponse(token=create_user_token(user.user_id), user=serialize_user(user))


@router.get("/me", response_model=MeResponse)
async def me(user: dict = Depends(get_current_user)):
    """Return the authenticated caller under a ``user`` key."""
    return {"user": user}
