import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from admin_portal.core.errors import AdminServiceError, ErrorCode
from admin_portal.models import InvitationCode, Role
from admin_portal.utils.time_utils import as_utc, utc_now

# Configure logging
logger = logging.getLogger(__name__)

async def validate_invitation_code(db: AsyncSession, code: str) -> InvitationCode:
    """
    Validates an invitation code by checking, in this order, that it exists,
    is active, has not been used and has not expired.

    Each failure has its own error code, so the order of the checks is part
    of the contract.

    Args:
        db (AsyncSession): Database session
        code (str): The invitation code to validate

    Returns:
        InvitationCode: The eligible code, carrying its id and bound role id

    Raises:
        AdminServiceError: INVALID_INVITATION_CODE, INVITATION_CODE_INACTIVE,
            INVITATION_CODE_ALREADY_USED or INVITATION_CODE_EXPIRED
    """
    stmt = (
        select(InvitationCode)
        .join(Role, InvitationCode.role_id == Role.id)
        .where(InvitationCode.code == code)
    )
    try:
        result = await db.execute(stmt)
        db_code = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Error validating invitation code: {e}")
        raise AdminServiceError(ErrorCode.DATABASE_ERROR, "Error validating invitation code") from e

    if db_code is None:
        logger.warning(f"Unknown invitation code {code}")
        raise AdminServiceError(ErrorCode.INVALID_INVITATION_CODE)
    if not db_code.is_active:
        logger.warning(f"Inactive invitation code {code}")
        raise AdminServiceError(ErrorCode.INVITATION_CODE_INACTIVE)
    if db_code.is_used:
        logger.warning(f"Invitation code {code} was already used")
        raise AdminServiceError(ErrorCode.INVITATION_CODE_ALREADY_USED)
    if db_code.expires_at and as_utc(db_code.expires_at) < utc_now():
        logger.warning(f"Invitation code {code} expired at {db_code.expires_at}")
        raise AdminServiceError(ErrorCode.INVITATION_CODE_EXPIRED)

    return db_code
