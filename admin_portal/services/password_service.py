import asyncio
import logging

import bcrypt

from admin_portal.config import settings
from admin_portal.core.errors import AdminServiceError, ErrorCode

logger = logging.getLogger(__name__)

def _hash(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

def _check(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed or foreign hash
        logger.warning("Stored password hash could not be parsed")
        return False

async def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt using the configured cost factor.

    Hashing is CPU-bound, so it runs in a worker thread to keep the event
    loop responsive.

    Args:
        password: Plain text password (at most 72 bytes, enforced upstream)

    Returns:
        str: bcrypt hash string

    Raises:
        AdminServiceError: INTERNAL_ERROR if hashing fails
    """
    try:
        return await asyncio.to_thread(_hash, password, settings.bcrypt_rounds)
    except Exception as e:
        logger.error(f"Error hashing password: {e}")
        raise AdminServiceError(ErrorCode.INTERNAL_ERROR, "Error hashing password") from e

async def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plain text password against a stored bcrypt hash.

    Args:
        password: Plain text password to verify
        password_hash: bcrypt hash to verify against

    Returns:
        bool: True if the password matches
    """
    return await asyncio.to_thread(_check, password, password_hash)
