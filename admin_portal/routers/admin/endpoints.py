import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from admin_portal.common import get_current_admin
from admin_portal.config import settings
from admin_portal.core.errors import AdminServiceError, ErrorCode
from admin_portal.init_db import get_db
from admin_portal.schemas.admin import (
    AdminAuthData,
    AdminAuthResponse,
    AdminData,
    AdminLoginRequest,
    AdminOnboardRequest,
    AdminResponse,
    AdminUpdateRequest,
    AdminUpdateResponse,
)
from admin_portal.services.admin_service import login_admin, onboard_admin, update_admin
from admin_portal.services.token_service import issue_token

# Configure logging for the module
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize router with prefix and tags for API documentation
router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/onboard", response_model=AdminAuthResponse, status_code=status.HTTP_201_CREATED)
async def onboard_admin_api(
    request: AdminOnboardRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Create an admin account with an invitation code.

    Args:
        request: Validated onboarding request
        db: Database session

    Returns:
        AdminAuthResponse with the new admin and a session token

    Raises:
        AdminServiceError: If the code is ineligible, the identity is taken,
            or the account could not be created
    """
    admin = await onboard_admin(db, request)
    token = issue_token(admin)
    return AdminAuthResponse(
        message="Admin onboarded successfully",
        data=AdminAuthData(admin=AdminResponse.model_validate(admin), token=token),
    )

@router.post("/login", response_model=AdminAuthResponse)
async def login_admin_api(
    request: AdminLoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate an admin with email and password.

    Returns:
        AdminAuthResponse with the admin and a session token

    Raises:
        AdminServiceError: UNAUTHORIZED on bad credentials
    """
    admin = await login_admin(db, request.email, request.password)
    token = issue_token(admin)
    return AdminAuthResponse(
        message="Login successful",
        data=AdminAuthData(admin=AdminResponse.model_validate(admin), token=token),
    )

@router.put("/{admin_id}", response_model=AdminUpdateResponse)
async def update_admin_api(
    admin_id: int,
    request: AdminUpdateRequest,
    current_admin: Dict[str, Any] = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Update an admin's full name, phone or password.

    Admins may update their own profile; the super admin role may update
    any profile.

    Args:
        admin_id: Admin to update
        request: Fields to change
        current_admin: Claims of the authenticated admin
        db: Database session

    Returns:
        AdminUpdateResponse with the updated admin
    """
    if admin_id <= 0:
        raise AdminServiceError(ErrorCode.INVALID_INPUT, "Invalid admin ID")

    if current_admin.get("adminID") != admin_id and current_admin.get("roleID") != settings.super_admin_role_id:
        logger.warning(f"admin_id={current_admin.get('adminID')} attempted to update admin_id={admin_id}")
        raise AdminServiceError(ErrorCode.FORBIDDEN, "You can only update your own profile")

    admin = await update_admin(db, admin_id, request.to_patch())
    return AdminUpdateResponse(
        message="Admin details updated successfully",
        data=AdminData(admin=AdminResponse.model_validate(admin)),
    )
