"""Privileged staff functions, callable by the admin panel with the caller's bearer token"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.database import get_db
from tableside.schemas.staff import CreateStaffWithAuthRequest, CreateStaffWithAuthResponse
from tableside.services import staff as staff_service
from tableside.api.auth import optional_oauth2_scheme, user_from_token

router = APIRouter()
logger = structlog.get_logger()


@router.post("/create-staff-with-auth", response_model=CreateStaffWithAuthResponse)
async def create_staff_with_auth(
    request: CreateStaffWithAuthRequest,
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a login credential and its staff profile in one call.

    Checked in order: caller credential (401), caller is an active owner (403),
    then the request fields (400). A failed profile write removes the
    credential created for it.
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    caller = await user_from_token(token, db)
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        )

    caller_profile = await staff_service.get_profile_for_user(db, caller.id)
    if caller_profile is None or not caller_profile.is_owner or not caller_profile.active:
        logger.warning("Staff creation refused", user_id=str(caller.id))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only active owners can create staff accounts",
        )

    try:
        role = staff_service.StaffProvisioner.validate(
            request.email,
            request.password,
            request.displayName,
            request.role,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    provisioner = staff_service.StaffProvisioner(db)
    try:
        profile = await provisioner.provision(
            email=request.email,
            password=request.password,
            display_name=request.displayName,
            role=role,
        )
    except staff_service.ProvisioningError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("Staff account created", staff_id=str(profile.id), role=role.value)
    return CreateStaffWithAuthResponse(
        staff=staff_service.to_response(profile),
        message="Staff account created successfully",
    )
