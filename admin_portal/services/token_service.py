"""
Session tokens for authenticated admins.

Tokens are stateless HS256 JWTs. There is no revocation list; a leaked
token stays valid until it expires.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from admin_portal.config import settings
from admin_portal.core.errors import AdminServiceError, ErrorCode
from admin_portal.models import Admin
from admin_portal.schemas.admin import TokenResponse

logger = logging.getLogger(__name__)

TOKEN_TYPE = "Bearer"

def _secret() -> str:
    secret = settings.jwt_secret.get_secret_value()
    if not secret:
        raise AdminServiceError(ErrorCode.INTERNAL_ERROR, "JWT secret is not configured")
    return secret

def issue_token(admin: Admin) -> TokenResponse:
    """
    Mint a signed session token for an admin.

    Args:
        admin: Persisted admin the token is issued for

    Returns:
        TokenResponse: raw token, token type and absolute expiry

    Raises:
        AdminServiceError: INTERNAL_ERROR if the token cannot be signed
    """
    issued_at = datetime.now(timezone.utc).replace(microsecond=0)
    expires_at = issued_at + timedelta(hours=settings.jwt_expiry_hours)
    claims = {
        "adminID": admin.id,
        "studentID": admin.student_id,
        "email": admin.email,
        "roleID": admin.role_id,
        "fullName": admin.full_name,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "sub": f"admin-{admin.id}",
        "iat": issued_at,
        "exp": expires_at,
    }
    try:
        token = jwt.encode(claims, _secret(), algorithm=settings.jwt_algorithm)
    except AdminServiceError:
        raise
    except JWTError as e:
        logger.error(f"Error generating JWT token: {e}")
        raise AdminServiceError(ErrorCode.INTERNAL_ERROR, "Error generating JWT token") from e

    return TokenResponse(token=token, type=TOKEN_TYPE, expires_at=expires_at)

def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify a session token and return its claims.

    Raises:
        AdminServiceError: UNAUTHORIZED if the signature is invalid, the token
            has expired, or the issuer or audience do not match
    """
    try:
        return jwt.decode(
            token,
            _secret(),
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError as e:
        logger.info(f"Rejected token {token[:10]}... (truncated): {e}")
        raise AdminServiceError(ErrorCode.UNAUTHORIZED, "Invalid or expired token") from e
