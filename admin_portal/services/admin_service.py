import logging
import secrets
from typing import Any, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from admin_portal.core.errors import AdminServiceError, ErrorCode
from admin_portal.models import Admin, Branch, InvitationCode, Role
from admin_portal.schemas.admin import AdminOnboardRequest, AdminPatch
from admin_portal.services.invitation_service import validate_invitation_code
from admin_portal.services.password_service import hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"

# Verified against when the email is unknown so a failed login costs the
# same whether or not the account exists
_dummy_password_hash: Optional[str] = None

async def _get_dummy_password_hash() -> str:
    global _dummy_password_hash
    if _dummy_password_hash is None:
        _dummy_password_hash = await hash_password(secrets.token_urlsafe(16))
    return _dummy_password_hash

async def student_id_exists(db: AsyncSession, student_id: str) -> bool:
    """
    Check whether an admin with the given student ID exists.

    Args:
        db: AsyncSession - Database session for executing queries
        student_id: str - Student identifier to probe

    Returns:
        bool: True if the student ID is taken
    """
    try:
        result = await db.execute(select(Admin.id).where(Admin.student_id == student_id).limit(1))
        return result.first() is not None
    except SQLAlchemyError as e:
        logger.error(f"Error checking student ID: {e}")
        raise AdminServiceError(ErrorCode.DATABASE_ERROR, "Error checking student ID") from e

async def email_exists(db: AsyncSession, email: str) -> bool:
    """
    Check whether an admin with the given email exists.

    Args:
        db: AsyncSession - Database session for executing queries
        email: str - Email address to probe

    Returns:
        bool: True if the email is taken
    """
    try:
        result = await db.execute(select(Admin.id).where(Admin.email == email).limit(1))
        return result.first() is not None
    except SQLAlchemyError as e:
        logger.error(f"Error checking email: {e}")
        raise AdminServiceError(ErrorCode.DATABASE_ERROR, "Error checking email") from e

async def validate_role(db: AsyncSession, role_id: int) -> Role:
    try:
        role = await db.get(Role, role_id)
    except SQLAlchemyError as e:
        logger.error(f"Error validating role: {e}")
        raise AdminServiceError(ErrorCode.DATABASE_ERROR, "Error validating role") from e
    if role is None:
        raise AdminServiceError(ErrorCode.INVALID_ROLE)
    return role

async def validate_branch(db: AsyncSession, branch_id: Optional[int]) -> Optional[Branch]:
    """Return the branch, or None when no branch was requested."""
    if not branch_id:
        return None
    try:
        branch = await db.get(Branch, branch_id)
    except SQLAlchemyError as e:
        logger.error(f"Error validating branch: {e}")
        raise AdminServiceError(ErrorCode.DATABASE_ERROR, "Error validating branch") from e
    if branch is None:
        raise AdminServiceError(ErrorCode.INVALID_BRANCH)
    return branch

CONSTRAINT_CONFLICTS = {
    "uq_admins_student_id": ErrorCode.DUPLICATE_STUDENT_ID,
    "uq_admins_email": ErrorCode.DUPLICATE_EMAIL,
}

# SQLite reports the violated columns instead of the constraint name
SQLITE_COLUMN_CONSTRAINTS = {
    "admins.student_id": "uq_admins_student_id",
    "admins.email": "uq_admins_email",
}

def _violated_constraint(error: IntegrityError) -> Optional[str]:
    """Name of the unique constraint behind an IntegrityError, if it can be told."""
    diag = getattr(error.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None)
    if constraint_name:
        return constraint_name

    message = str(error.orig)
    if message.startswith("UNIQUE constraint failed:"):
        columns = [c.strip() for c in message.split(":", 1)[1].split(",")]
        for column in columns:
            if column in SQLITE_COLUMN_CONSTRAINTS:
                return SQLITE_COLUMN_CONSTRAINTS[column]
    return None

def _conflict_from_integrity_error(error: IntegrityError) -> AdminServiceError:
    """Map a unique-constraint violation raised at commit time to its conflict code."""
    code = CONSTRAINT_CONFLICTS.get(_violated_constraint(error))
    if code is not None:
        return AdminServiceError(code)
    return AdminServiceError(ErrorCode.TRANSACTION_FAILED, "Admin could not be created")

async def create_admin_with_invitation(
    db: AsyncSession,
    admin: Admin,
    invitation: InvitationCode,
) -> Admin:
    """
    Insert an admin and consume its invitation code as one transaction.

    The code is consumed with a conditional update that only matches while
    the code is still unused, so of two requests racing on the same code
    exactly one commits. Unique constraints on student ID and email are
    enforced by the database inside the same transaction.

    Args:
        db: AsyncSession - Database session for executing queries
        admin: Admin - Transient admin with its password already hashed
        invitation: InvitationCode - Code returned by validate_invitation_code

    Returns:
        Admin: The persisted admin

    Raises:
        AdminServiceError: DUPLICATE_STUDENT_ID or DUPLICATE_EMAIL when a
            unique constraint fires, TRANSACTION_FAILED for anything else,
            DATABASE_ERROR if the committed admin cannot be reloaded
    """
    invitation_id = invitation.id
    try:
        db.add(admin)
        await db.flush()
        admin_id = admin.id

        result = await db.execute(
            update(InvitationCode)
            .where(InvitationCode.id == invitation_id, InvitationCode.is_used.is_(False))
            .values(is_used=True, used_by_admin_id=admin_id, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise AdminServiceError(
                ErrorCode.TRANSACTION_FAILED,
                "Invitation code was consumed by a concurrent request",
            )

        await db.commit()
    except AdminServiceError as e:
        await db.rollback()
        logger.error(f"Onboarding transaction rolled back: {e.message}")
        raise
    except IntegrityError as e:
        await db.rollback()
        logger.error(f"Onboarding transaction rolled back on constraint violation: {e.orig}")
        raise _conflict_from_integrity_error(e) from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Onboarding transaction rolled back: {e}")
        raise AdminServiceError(ErrorCode.TRANSACTION_FAILED) from e

    try:
        await db.refresh(admin)
    except SQLAlchemyError as e:
        logger.error(f"Admin {admin_id} was committed but could not be reloaded: {e}")
        raise AdminServiceError(
            ErrorCode.DATABASE_ERROR,
            "Admin was created but could not be loaded",
            details={"adminID": admin_id},
        ) from e
    return admin

async def onboard_admin(db: AsyncSession, candidate: AdminOnboardRequest) -> Admin:
    """
    Onboard a new admin with an invitation code.

    Every step before the final write is a read, and the first failing step
    ends the flow.

    Args:
        db: AsyncSession - Database session for executing queries
        candidate: AdminOnboardRequest - Shape-validated onboarding request

    Returns:
        Admin: The newly created admin
    """
    invitation = await validate_invitation_code(db, candidate.invitation_code)

    # The code decides which role may be onboarded with it
    if candidate.role_id != invitation.role_id:
        raise AdminServiceError(
            ErrorCode.INVALID_ROLE,
            f"RoleID must match invitation code (expected: {invitation.role_id})",
        )

    if await student_id_exists(db, candidate.student_id):
        logger.warning(f"Onboarding rejected, student ID {candidate.student_id} already exists")
        raise AdminServiceError(ErrorCode.DUPLICATE_STUDENT_ID)

    if await email_exists(db, candidate.email):
        logger.warning("Onboarding rejected, email already registered")
        raise AdminServiceError(ErrorCode.DUPLICATE_EMAIL)

    await validate_role(db, candidate.role_id)
    await validate_branch(db, candidate.branch_id)

    password_hash = await hash_password(candidate.password)

    admin = Admin(
        student_id=candidate.student_id,
        full_name=candidate.full_name,
        email=candidate.email,
        password_hash=password_hash,
        phone=candidate.phone,
        role_id=candidate.role_id,
        branch_id=candidate.branch_id,
        graduation_year=candidate.graduation_year,
        invitation_code=candidate.invitation_code,
    )
    admin = await create_admin_with_invitation(db, admin, invitation)

    logger.info(f"Admin onboarded: admin_id={admin.id}, student_id={admin.student_id}")
    return admin

async def login_admin(db: AsyncSession, email: str, password: str) -> Admin:
    """
    Authenticate an admin with email and password.

    An unknown email and a wrong password fail identically so callers
    cannot probe which accounts exist.

    Raises:
        AdminServiceError: UNAUTHORIZED on bad credentials
    """
    try:
        result = await db.execute(select(Admin).where(Admin.email == email))
        admin = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Error during login: {e}")
        raise AdminServiceError(ErrorCode.DATABASE_ERROR, "Error during login") from e

    if admin is None:
        await verify_password(password, await _get_dummy_password_hash())
        logger.warning("Login failed: unknown email")
        raise AdminServiceError(ErrorCode.UNAUTHORIZED, INVALID_CREDENTIALS_MESSAGE)

    if not await verify_password(password, admin.password_hash):
        logger.warning(f"Login failed: wrong password for admin_id={admin.id}")
        raise AdminServiceError(ErrorCode.UNAUTHORIZED, INVALID_CREDENTIALS_MESSAGE)

    logger.info(f"Admin logged in: admin_id={admin.id}")
    return admin

async def get_admin_by_id(db: AsyncSession, admin_id: int) -> Optional[Admin]:
    """
    Retrieve an admin by id.

    Args:
        db: AsyncSession - Database session for executing queries
        admin_id: int - Admin identifier

    Returns:
        Optional[Admin]: Admin if found, None otherwise
    """
    query = select(Admin).where(Admin.id == admin_id).execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()

def build_update_values(patch: AdminPatch, password_hash: Optional[str] = None) -> Dict[str, Any]:
    """
    Map a profile patch to the columns it changes.

    Only supplied, non-empty fields are included; values are bound as
    statement parameters whichever fields are present.

    Args:
        patch: AdminPatch - Requested changes
        password_hash: Optional[str] - Hash of the new password, if one was set

    Returns:
        Dict[str, Any]: column name to new value
    """
    values: Dict[str, Any] = {}
    if patch.full_name:
        values["full_name"] = patch.full_name
    if patch.phone:
        values["phone"] = patch.phone
    if password_hash:
        values["password_hash"] = password_hash
    return values

async def update_admin(db: AsyncSession, admin_id: int, patch: AdminPatch) -> Admin:
    """
    Update an admin's own profile.

    Args:
        db: AsyncSession - Database session for executing queries
        admin_id: int - Admin to update
        patch: AdminPatch - Fields to change; a new password requires the
            current one

    Returns:
        Admin: The updated admin

    Raises:
        AdminServiceError: INVALID_INPUT for an empty patch or a wrong
            current password, MISSING_FIELD for a new password without the
            current one, NOT_FOUND if the admin does not exist
    """
    if patch.is_empty():
        raise AdminServiceError(
            ErrorCode.INVALID_INPUT,
            "At least one field (fullName, phone, or password) must be provided",
        )
    if patch.password and not patch.old_password:
        raise AdminServiceError(ErrorCode.MISSING_FIELD, "Old password is required to set new password")

    try:
        admin = await get_admin_by_id(db, admin_id)
    except SQLAlchemyError as e:
        logger.error(f"Error loading admin {admin_id}: {e}")
        raise AdminServiceError(ErrorCode.DATABASE_ERROR, "Error updating admin details") from e
    if admin is None:
        raise AdminServiceError(ErrorCode.NOT_FOUND, "Admin not found")

    new_password_hash = None
    if patch.password:
        if not await verify_password(patch.old_password, admin.password_hash):
            logger.warning(f"Password change rejected for admin_id={admin_id}: current password incorrect")
            raise AdminServiceError(ErrorCode.INVALID_INPUT, "Current password is incorrect")
        new_password_hash = await hash_password(patch.password)

    values = build_update_values(patch, new_password_hash)
    try:
        await db.execute(
            update(Admin)
            .where(Admin.id == admin_id)
            .values(**values, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error updating admin {admin_id}: {e}")
        raise AdminServiceError(ErrorCode.DATABASE_ERROR, "Error updating admin details") from e

    updated = await get_admin_by_id(db, admin_id)
    if updated is None:
        raise AdminServiceError(ErrorCode.NOT_FOUND, "Admin not found")

    logger.info(f"Admin updated: admin_id={admin_id}, fields={sorted(values)}")
    return updated
