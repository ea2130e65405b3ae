"""Authentication API endpoints"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.config import settings
from tableside.database import get_db
from tableside.models.staff import AdminComponent, StaffProfile
from tableside.models.user import User
from tableside.schemas.auth import Token, RefreshRequest
from tableside.schemas.staff import StaffProfileResponse
from tableside.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from tableside.services import staff as staff_service
from tableside.services.access import AccessControl

router = APIRouter()
logger = structlog.get_logger()

# OAuth2 scheme
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


async def user_from_token(token: Optional[str], db: AsyncSession) -> Optional[User]:
    """Active user behind an access token, or None"""
    if not token:
        return None
    user_id = decode_token(token, "access")
    if user_id is None:
        return None
    try:
        user_uuid = UUID(user_id)
    except ValueError:
        return None

    result = await db.execute(select(User).where(User.id == user_uuid))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from token"""
    user = await user_from_token(token, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Authenticated user when a valid token is sent; anonymous otherwise"""
    return await user_from_token(token, db)


async def get_current_staff(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> StaffProfile:
    """Staff profile linked to the caller's credential"""
    profile = await staff_service.get_profile_for_user(db, current_user.id)
    if profile is None or not profile.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No active staff profile for this account",
        )
    return profile


async def access_for_user(db: AsyncSession, user: Optional[User]) -> AccessControl:
    if user is None:
        return AccessControl()
    return AccessControl(await staff_service.get_profile_for_user(db, user.id))


def require_permission(component: AdminComponent, manage: bool = False):
    """Dependency factory gating a route on one component's view/manage flag"""
    async def permission_checker(
        profile: StaffProfile = Depends(get_current_staff),
    ) -> StaffProfile:
        access = AccessControl(profile)
        allowed = access.can_manage(component) if manage else access.can_view(component)
        if not allowed:
            logger.info(
                "Permission denied",
                staff_id=str(profile.id),
                component=component.value,
                manage=manage,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return profile
    return permission_checker


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Authenticate user and return tokens"""
    email = form_data.username.strip().lower()
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is disabled",
        )

    user.last_login = datetime.utcnow()

    access_token = create_access_token(user)
    refresh_token = create_refresh_token(user)

    # Store refresh token
    user.refresh_token = refresh_token
    await db.commit()

    logger.info("User logged in", user_id=str(user.id))
    return Token(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.access_token_expire_minutes * 60,
    )


@router.post("/refresh", response_model=Token)
async def refresh_token(
    request: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    """Refresh access token using refresh token"""
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid refresh token",
    )

    user_id = decode_token(request.refresh_token, "refresh")
    if user_id is None:
        raise invalid

    result = await db.execute(select(User).where(User.id == UUID(user_id)))
    user = result.scalar_one_or_none()

    if not user or user.refresh_token != request.refresh_token:
        raise invalid

    access_token = create_access_token(user)
    new_refresh_token = create_refresh_token(user)

    # Rotation: the old refresh token stops working
    user.refresh_token = new_refresh_token
    await db.commit()

    return Token(
        access_token=access_token,
        refresh_token=new_refresh_token,
        expires_in=settings.access_token_expire_minutes * 60,
    )


@router.get("/me", response_model=StaffProfileResponse)
async def get_current_staff_info(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Staff profile and permission matrix of the caller"""
    profile = await staff_service.get_profile_for_user(db, current_user.id)
    if profile is None:
        raise HTTPException(status_code=404, detail="No staff profile linked to this account")
    return staff_service.to_response(profile)


@router.post("/logout")
async def logout(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Logout user by invalidating refresh token"""
    current_user.refresh_token = None
    await db.commit()
    return {"message": "Successfully logged out"}
